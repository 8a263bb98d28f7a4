"""
Move Generator - Enumerates every legal move for the player to move.

Used by:
1. The Arborist search, as the branching set at each node
2. Bots that pick among legal moves
3. Validation (is this move in legal_moves?)

The enumeration order is fixed so that search ties break
deterministically: placements first, row by row over the board, each
square crossed with the distinct letters in hand order; then swaps of
orthogonally adjacent tiles, row by row.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .board import Coordinate, Occupied
from .moves import Move, Place, Swap
from .state import GamePhase

if TYPE_CHECKING:
    from .game import Game


@dataclass
class MoveGenerator:
    """
    Generates legal moves for the current game state.

    A swap of two equal letters leaves the board as it was but still
    fights its battles again, so it is generated like any other.
    """
    include_swaps: bool = True

    def generate(self, game: Game) -> list[Move]:
        if game.phase != GamePhase.IN_PROGRESS or game.next_player is None:
            return []

        player = game.next_player
        moves: list[Move] = []
        moves.extend(self._generate_places(game, player))
        if self.include_swaps:
            moves.extend(self._generate_swaps(game, player))
        return moves

    def _generate_places(self, game: Game, player: int) -> list[Move]:
        letters = game.players[player].hand.distinct()
        return [
            Place(player=player, tile=letter, position=coord)
            for coord in game.board.playable_squares(player)
            for letter in letters
        ]

    def _generate_swaps(self, game: Game, player: int) -> list[Move]:
        board = game.board
        moves: list[Move] = []
        for coord in board.squares_owned_by(player):
            # East and south only, so each pair appears once
            for other in (Coordinate(coord.x + 1, coord.y), Coordinate(coord.x, coord.y + 1)):
                if not board.in_bounds(other):
                    continue
                square = board.get(other)
                if isinstance(square, Occupied) and square.player == player:
                    moves.append(Swap(player=player, positions=(coord, other)))
        return moves


def legal_moves(game: Game, include_swaps: bool = True) -> list[Move]:
    """
    Convenience function to get legal moves.

    Creates a MoveGenerator and generates moves.
    """
    return MoveGenerator(include_swaps=include_swaps).generate(game)


def is_legal(game: Game, move: Move) -> bool:
    """Check if a specific move is among the generated legal moves."""
    if isinstance(move, Swap):
        first, second = sorted(move.positions)
        move = Swap(player=move.player, positions=(first, second))
    return move in legal_moves(game)
