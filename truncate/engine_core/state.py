"""
Player state - Phases, hands and the tile bag.

Hands are mutated only by the Game state machine: a placed tile is
removed and a replacement is drawn from the bag.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import random

from .errors import TileNotInHandError


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    OVER = "over"


# Relative letter frequencies for the bag
LETTER_WEIGHTS: dict[str, int] = {
    "A": 9, "B": 2, "C": 2, "D": 4, "E": 12, "F": 2, "G": 3, "H": 2, "I": 9,
    "J": 1, "K": 1, "L": 4, "M": 2, "N": 6, "O": 8, "P": 2, "Q": 1, "R": 6,
    "S": 4, "T": 6, "U": 4, "V": 2, "W": 2, "X": 1, "Y": 2, "Z": 1,
}


@dataclass
class Hand:
    """A player's unplayed tiles, in order."""
    letters: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.letters)

    def __len__(self) -> int:
        return len(self.letters)

    def __contains__(self, letter: str) -> bool:
        return letter in self.letters

    def __iter__(self):
        return iter(self.letters)

    def add(self, letter: str) -> None:
        self.letters.append(letter)

    def remove(self, letter: str) -> None:
        """Remove the first copy of a letter."""
        if letter not in self.letters:
            raise TileNotInHandError(f"{letter} is not in hand {self}")
        self.letters.remove(letter)

    def distinct(self) -> list[str]:
        """Each letter once, in hand order."""
        return list(dict.fromkeys(self.letters))

    def __str__(self) -> str:
        return "".join(self.letters)


@dataclass
class Player:
    name: str
    index: int
    hand: Hand = field(default_factory=Hand)
    # turn_count at the start of each of this player's turns
    turn_starts: list[int] = field(default_factory=list)


@dataclass
class TileBag:
    """
    An endless bag drawing letters by weight.

    Draws take an explicit RNG so that cloned games draw reproducibly.
    """
    weights: dict[str, int] = field(default_factory=lambda: dict(LETTER_WEIGHTS))

    def draw(self, rng: random.Random) -> str:
        letters = list(self.weights)
        return rng.choices(letters, weights=[self.weights[l] for l in letters])[0]

    def draw_hand(self, rng: random.Random, size: int) -> Hand:
        return Hand(letters=[self.draw(rng) for _ in range(size)])
