"""
Moves - What a player can do on their turn.

Move is what the state machine executes; PlayerMessage is the
player-facing shape (no player id) that the search hands back and that
a client submits.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .board import Coordinate


@dataclass(frozen=True)
class Place:
    player: int
    tile: str
    position: Coordinate

    def to_message(self) -> PlaceMessage:
        return PlaceMessage(position=self.position, tile=self.tile)

    def __str__(self) -> str:
        return f"Player {self.player} places {self.tile} at {self.position}"


@dataclass(frozen=True)
class Swap:
    player: int
    positions: tuple[Coordinate, Coordinate]

    def to_message(self) -> SwapMessage:
        return SwapMessage(from_=self.positions[0], to=self.positions[1])

    def __str__(self) -> str:
        first, second = self.positions
        return f"Player {self.player} swaps {first} and {second}"


Move = Union[Place, Swap]


@dataclass(frozen=True)
class PlaceMessage:
    position: Coordinate
    tile: str

    def to_move(self, player: int) -> Place:
        return Place(player=player, tile=self.tile, position=self.position)

    def __str__(self) -> str:
        return f"Place {self.tile} at {self.position}"


@dataclass(frozen=True)
class SwapMessage:
    from_: Coordinate
    to: Coordinate

    def to_move(self, player: int) -> Swap:
        return Swap(player=player, positions=(self.from_, self.to))

    def __str__(self) -> str:
        return f"Swap {self.from_} with {self.to}"


PlayerMessage = Union[PlaceMessage, SwapMessage]
