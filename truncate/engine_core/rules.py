"""
Rules - Tunable parameters for a game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class BoardOrientation(Enum):
    """How the board is presented to each player."""
    FIXED = "fixed"  # Everyone sees the stored board
    FACE_OPPONENT = "face_opponent"  # Each player sees themselves attacking north


@dataclass(frozen=True)
class BattleRules:
    """
    length_delta is the defender's advantage: a valid defending word
    survives unless the longest attacker is at least length_delta
    letters longer.
    """
    length_delta: int = 2


@dataclass
class GameRules:
    battle_rules: BattleRules = field(default_factory=BattleRules)

    # Turns a battle stays in a player's visible log
    battle_delay: int = 2

    board_orientation: BoardOrientation = BoardOrientation.FACE_OPPONENT
    hand_size: int = 7

    # Remove tiles cut off from their artifact after a battle
    truncation: bool = True

    @classmethod
    def generation(cls, generation: int) -> GameRules:
        """Rule presets by generation."""
        if generation == 0:
            return cls(
                battle_rules=BattleRules(length_delta=1),
                battle_delay=0,
                board_orientation=BoardOrientation.FIXED,
                truncation=False,
            )
        if generation == 1:
            return cls(
                battle_rules=BattleRules(length_delta=2),
                battle_delay=0,
                truncation=False,
            )
        if generation == 2:
            return cls(battle_rules=BattleRules(length_delta=2), battle_delay=2)
        raise ValueError(f"Unknown rules generation: {generation}")

    @property
    def length_delta(self) -> int:
        return self.battle_rules.length_delta
