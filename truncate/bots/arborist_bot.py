"""
ArboristBot - The NPC opponent.

Wraps best_move() with a personality. The bot searches from its own
seat and returns the move; the caller applies it with Game.play_turn,
the same path a human move takes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from ..engine_core.action_generator import legal_moves
from ..engine_core.errors import NotYourTurnError
from .arborist import best_move
from .personality import BALANCED, Personality
from .policy import BotDecision, BotPolicy

log = logging.getLogger("truncate.bots")


@dataclass
class ArboristBot(BotPolicy):
    """
    A searching bot bound to one seat.

    Each call to select_move gets a fresh Arborist from the
    personality's SearchParams, so node budgets never leak between turns.
    """
    player: int
    personality: Personality = field(default_factory=lambda: BALANCED)
    rng: random.Random = field(default_factory=random.Random)

    def select_move(self, game, attacker_dictionary=None, defender_dictionary=None) -> BotDecision:
        if game.next_player != self.player:
            raise NotYourTurnError(
                f"{self.get_name()} cannot move; it is player {game.next_player}'s turn"
            )

        if self.personality.randomness > 0 and self.rng.random() < self.personality.randomness:
            moves = legal_moves(game)
            if moves:
                move = self.rng.choice(moves)
                return BotDecision(
                    move=move,
                    explanation=f"Random move ({self.personality.name})",
                    evaluated_nodes=len(moves),
                )

        params = self.personality.search
        arborist = params.arborist()
        message, score = best_move(
            game,
            attacker_dictionary,
            defender_dictionary,
            params.max_depth,
            arborist=arborist,
            weights=params.weights,
        )
        move = message.to_move(self.player)
        log.debug("%s chose %s (score %.2f)", self.get_name(), move, score)

        return BotDecision(
            move=move,
            explanation=f"{message} (score: {score:.1f}, personality: {self.personality.name})",
            score=score,
            evaluated_nodes=arborist.assessed,
            details={"depth": params.max_depth, "cap": params.evaluation_cap},
        )

    def get_name(self) -> str:
        return f"ArboristBot({self.player}, {self.personality.name})"
