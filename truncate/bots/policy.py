"""
Bot Policy - Interface for computer-controlled players.

A BotPolicy takes a game and returns a decision: the move to play, plus
an explanation and the score that led to it. The driver applies the
move through Game.play_turn exactly like a human move.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.action_generator import legal_moves

if TYPE_CHECKING:
    from ..engine_core.game import Game
    from ..engine_core.judge import WordDict
    from ..engine_core.moves import Move, PlayerMessage


@dataclass
class BotDecision:
    """The move a policy chose, with the score and node count behind it."""
    move: Move
    explanation: str = ""
    score: float = 0.0
    evaluated_nodes: int = 0
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> PlayerMessage:
        return self.move.to_message()


class BotPolicy(ABC):
    """
    Picks a move for whoever is to play. Subclasses range from the random
    baseline to the Arborist search.
    """

    @abstractmethod
    def select_move(
        self,
        game: Game,
        attacker_dictionary: WordDict | None = None,
        defender_dictionary: WordDict | None = None,
    ) -> BotDecision:
        """
        Select a move for the player whose turn it is.

        Args:
            game: Current game (not modified)
            attacker_dictionary: Words the bot believes it can attack with
            defender_dictionary: Words the bot believes defend

        Returns:
            BotDecision with the selected move
        """

    def get_name(self) -> str:
        return self.__class__.__name__


class RandomPolicy(BotPolicy):
    """Uniformly random legal move. Useful as an opponent that never plans."""

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_move(self, game, attacker_dictionary=None, defender_dictionary=None):
        moves = legal_moves(game)
        if not moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=self.rng.choice(moves),
            explanation="Selected randomly",
            evaluated_nodes=len(moves),
        )


class FirstLegalPolicy(BotPolicy):
    """Always the first move legal_moves() yields, so scripted games repeat exactly."""

    def select_move(self, game, attacker_dictionary=None, defender_dictionary=None):
        moves = legal_moves(game)
        if not moves:
            raise ValueError("No legal moves available")

        return BotDecision(
            move=moves[0],
            explanation="Selected first legal move",
            evaluated_nodes=1,
        )
