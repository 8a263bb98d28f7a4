"""
Reporting - What happened during a turn.

play_turn() records a list of Change events in Game.recent_changes so
that renderers can animate battles and territory changes. Battles are
reported in the order they were resolved.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .board import Coordinate, Square


# ============================================================================
# Battles
# ============================================================================

@dataclass(frozen=True)
class AttackerWins:
    """The attacker won; `defeated` lists the indices of the losing defenders."""
    defeated: list[int] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Attacker wins against {self.defeated}"


@dataclass(frozen=True)
class DefenderWins:
    def __str__(self) -> str:
        return "Defender wins"


Outcome = Union[AttackerWins, DefenderWins]


@dataclass
class BattleWord:
    """
    One word in a battle.

    `word` is the resolved spelling when the word was valid (wildcards
    filled in, upper-cased). `valid` is None when the word was never
    judged.
    """
    original_word: str
    word: str
    valid: bool | None = None
    meanings: list[str] | None = None


@dataclass
class BattleReport:
    attackers: list[BattleWord]
    defenders: list[BattleWord]
    outcome: Outcome
    battle_number: int | None = None

    def __str__(self) -> str:
        attacking = ", ".join(w.word for w in self.attackers)
        defending = ", ".join(w.word for w in self.defenders)
        return f"[{attacking}] vs [{defending}]: {self.outcome}"


# ============================================================================
# Changes
# ============================================================================

class BoardChangeKind(Enum):
    ADDED = "added"
    REMOVED = "removed"
    SWAPPED = "swapped"
    TRUNCATED = "truncated"  # Cut off from its artifact after a battle
    DEFEATED = "defeated"  # A town or artifact was captured


@dataclass
class BoardChange:
    kind: BoardChangeKind
    coordinate: Coordinate
    square: Square


@dataclass
class HandChange:
    player: int
    removed: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)


@dataclass
class BattleChange:
    report: BattleReport
    turn: int = 0


Change = Union[BoardChange, HandChange, BattleChange]
