"""
Arborist - Bounded adversarial search over cloned games.

best_move() runs minimax from the player to move: levels where that
player moves maximise, every other level minimises. Each candidate move
is played on an independent clone of the game, which is dropped as soon
as its score is known.

Two limits bound the work:
- max_depth, in plies
- the Arborist's node budget, shared across the whole call. Once it is
  spent, every remaining move is still played on a clone and checked
  for a win, but scored by the static evaluator instead of expanded.

Ties go to the first move generated; the enumeration order is fixed.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field

from ..engine_core.action_generator import legal_moves
from ..engine_core.errors import GameNotInProgressError
from ..engine_core.game import Game
from ..engine_core.judge import WordDict
from ..engine_core.moves import Move, PlayerMessage
from ..engine_core.state import GamePhase
from .evaluator import EvaluationWeights, HeuristicEvaluator, WIN_SCORE

log = logging.getLogger("truncate.search")


@dataclass
class Arborist:
    """
    The node budget for one search.

    Pass the same Arborist down the whole recursion; it is the only
    state shared between branches.
    """
    cap: int | None = None
    prune: bool = False
    assessed: int = 0

    @classmethod
    def pruning(cls) -> Arborist:
        """An unbounded Arborist with alpha-beta pruning switched on."""
        return cls(prune=True)

    def capped(self, cap: int) -> Arborist:
        self.cap = cap
        return self

    def tick(self) -> None:
        self.assessed += 1

    @property
    def exhausted(self) -> bool:
        return self.cap is not None and self.assessed >= self.cap

    def reset(self) -> None:
        self.assessed = 0


@dataclass
class SearchParams:
    max_depth: int = 3
    evaluation_cap: int | None = 5000
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)
    pruning: bool = True

    def arborist(self) -> Arborist:
        return Arborist(cap=self.evaluation_cap, prune=self.pruning)


@dataclass
class _Search:
    root_player: int
    attacker_dictionary: WordDict | None
    defender_dictionary: WordDict | None
    arborist: Arborist
    evaluator: HeuristicEvaluator

    def score_move(self, game: Game, move: Move, depth: int, ply: int,
                   alpha: float, beta: float) -> float:
        """Play a move on a clone and score the resulting position."""
        child = game.clone()
        self.arborist.tick()
        winner = child.play_turn(move, self.attacker_dictionary, self.defender_dictionary)

        if winner is not None:
            # Prefer quicker wins and slower losses
            return WIN_SCORE - ply if winner == self.root_player else -(WIN_SCORE - ply)

        if depth <= 0 or self.arborist.exhausted:
            return self.evaluator.evaluate(child, self.root_player).total_score

        return self.search(child, depth, ply, alpha, beta)

    def search(self, game: Game, depth: int, ply: int, alpha: float, beta: float) -> float:
        """Minimax value of a position with depth plies left to search."""
        moves = legal_moves(game)
        if not moves:
            return self.evaluator.evaluate(game, self.root_player).total_score

        maximizing = game.next_player == self.root_player
        best = -math.inf if maximizing else math.inf

        for move in moves:
            score = self.score_move(game, move, depth - 1, ply + 1, alpha, beta)
            if maximizing:
                best = max(best, score)
                alpha = max(alpha, best)
            else:
                best = min(best, score)
                beta = min(beta, best)

            if self.arborist.prune and alpha >= beta:
                break

        return best


def best_move(
    game: Game,
    attacker_dictionary: WordDict | None,
    defender_dictionary: WordDict | None,
    max_depth: int,
    arborist: Arborist | None = None,
    weights: EvaluationWeights | None = None,
) -> tuple[PlayerMessage, float]:
    """
    Choose the strongest move for the player to move.

    Returns the move as a player-facing message and its score. The
    caller applies it through Game.play_turn like any other move.
    """
    if game.phase != GamePhase.IN_PROGRESS or game.next_player is None:
        raise GameNotInProgressError("There is no player to move")
    if max_depth < 1:
        raise ValueError("max_depth must be at least 1")

    arborist = arborist if arborist is not None else Arborist()
    search = _Search(
        root_player=game.next_player,
        attacker_dictionary=attacker_dictionary,
        defender_dictionary=defender_dictionary,
        arborist=arborist,
        evaluator=HeuristicEvaluator(weights),
    )

    moves = legal_moves(game)
    if not moves:
        raise GameNotInProgressError(f"Player {game.next_player} has no legal moves")

    chosen: Move | None = None
    best_score = -math.inf
    alpha = -math.inf

    for move in moves:
        score = search.score_move(game, move, max_depth - 1, 1, alpha, math.inf)
        if chosen is None or score > best_score:
            chosen, best_score = move, score
            if arborist.prune:
                alpha = max(alpha, best_score)

    log.debug(
        "Player %d: %s scored %.2f after assessing %d nodes",
        search.root_player, chosen, best_score, arborist.assessed,
    )
    return chosen.to_message(), best_score
