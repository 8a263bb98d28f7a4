"""
Heuristic Evaluator - Scores game states for the search.

The evaluator assigns a numeric score to a game state based on:
- Territory (tiles held)
- Reach (how close a player's tiles are to opponent towns and artifacts)
- Safety (whether a player's tiles spell words known to be valid)
- Exposure (opponent progress, subtracted via opponent_penalty)

Weights can be adjusted to create different play styles. Evaluation
never mutates the game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.board import Coordinate, SquareValidity

if TYPE_CHECKING:
    from ..engine_core.board import Board
    from ..engine_core.game import Game

# Score for a won (or lost) game; larger than any heuristic total
WIN_SCORE = 1_000_000.0


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    # Territory
    tile_count: float = 1.0

    # Reach
    town_proximity: float = 4.0  # Per square closer to the nearest opponent town
    artifact_proximity: float = 6.0  # Per square closer to the nearest opponent artifact

    # Safety
    valid_tile: float = 1.5
    invalid_tile: float = -2.0

    # Hand
    hand_size: float = 0.0

    # Opponent-related
    opponent_penalty: float = -1.0  # Multiply opponent's score by this


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total_score: float
    player_scores: dict[int, float] = field(default_factory=dict)
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used by the Arborist at the depth limit, or once its node budget
    runs out.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, game: Game, for_player: int) -> StateEvaluation:
        """
        Evaluate a game from a player's perspective.

        Returns a positive score if the position is good for the player,
        negative if bad.
        """
        if game.winner is not None:
            score = WIN_SCORE if game.winner == for_player else -WIN_SCORE
            return StateEvaluation(total_score=score, feature_breakdown={"winner": score})

        player_scores: dict[int, float] = {}
        for player in game.players:
            player_scores[player.index] = self._evaluate_player(game, player.index)

        my_score = player_scores.get(for_player, 0.0)
        opponent_scores = [s for index, s in player_scores.items() if index != for_player]

        if opponent_scores:
            avg_opponent = sum(opponent_scores) / len(opponent_scores)
            relative_score = my_score + (self.weights.opponent_penalty * avg_opponent)
        else:
            relative_score = my_score

        return StateEvaluation(
            total_score=relative_score,
            player_scores=player_scores,
            feature_breakdown={"own": my_score, "relative_score": relative_score},
        )

    def _evaluate_player(self, game: Game, player: int) -> float:
        """Evaluate a single player's position."""
        board = game.board
        tiles = board.squares_owned_by(player)

        score = len(tiles) * self.weights.tile_count
        score += self._evaluate_safety(board, tiles)
        score += self._evaluate_reach(board, player, tiles)
        score += game.players[player].hand.count * self.weights.hand_size
        return score

    def _evaluate_safety(self, board: Board, tiles: list[Coordinate]) -> float:
        score = 0.0
        for coord in tiles:
            validity = board.get(coord).validity
            if validity == SquareValidity.VALID:
                score += self.weights.valid_tile
            elif validity == SquareValidity.INVALID:
                score += self.weights.invalid_tile
        return score

    def _evaluate_reach(self, board: Board, player: int, tiles: list[Coordinate]) -> float:
        """Reward being close to opponent objectives."""
        sources = tiles + [
            coord for coord in board.artifacts()
            if board.get(coord).player == player
        ]
        if not sources:
            return 0.0

        span = board.width + board.height
        score = 0.0

        towns = [
            coord for coord in board.towns()
            if board.get(coord).player != player
        ]
        if towns:
            nearest = min(s.distance(t) for s in sources for t in towns)
            score += (span - nearest) * self.weights.town_proximity

        artifacts = [
            coord for coord in board.artifacts()
            if board.get(coord).player != player and not board.get(coord).defeated
        ]
        if artifacts:
            nearest = min(s.distance(a) for s in sources for a in artifacts)
            score += (span - nearest) * self.weights.artifact_proximity

        return score
