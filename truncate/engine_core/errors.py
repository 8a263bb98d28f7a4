"""
Errors raised by the engine core.

MoveError and its subclasses are recoverable: they are reported to the
player who submitted the move, and the game state is left untouched.
Lost battles and unknown words are not errors; they are ordinary game
outcomes carried in BattleReport.

BoardInvariantError signals a programming error (e.g. a stale special
square cache) and is never caught by the engine.
"""

from __future__ import annotations


class TruncateError(Exception):
    """Base class for all engine errors."""

    error_code: str = "TRUNCATE_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        if error_code is not None:
            self.error_code = error_code


class GameSetupError(TruncateError):
    """The game could not be set up (too few players, missing orientations)."""

    error_code = "GAME_SETUP"


class AliasLimitError(TruncateError):
    """Every alias marker is already registered on this judge."""

    error_code = "ALIAS_LIMIT"


class MoveError(TruncateError):
    """A submitted move could not be applied."""

    error_code = "INVALID_MOVE"


class GameNotInProgressError(MoveError):
    error_code = "GAME_NOT_IN_PROGRESS"


class NotYourTurnError(MoveError):
    error_code = "NOT_YOUR_TURN"


class TileNotInHandError(MoveError):
    error_code = "TILE_NOT_IN_HAND"


class InvalidPlacementError(MoveError):
    error_code = "INVALID_PLACEMENT"


class InvalidSwapError(MoveError):
    error_code = "INVALID_SWAP"


class OutOfBoundsError(MoveError):
    """A coordinate lies outside the board."""

    error_code = "OUT_OF_BOUNDS"


class BoardInvariantError(RuntimeError):
    """The board's cached special squares disagree with the grid."""
