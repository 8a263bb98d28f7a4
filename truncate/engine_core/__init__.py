"""
Engine Core - The rules of Truncate.

The engine is the runtime that:
1. Stores the board and answers spatial queries
2. Judges words and battles against a dictionary
3. Generates legal moves
4. Applies moves via Game.play_turn and detects the winner

It performs no I/O; dictionaries are supplied by the caller.
"""

from .board import (
    Board, Coordinate, Direction, SquareValidity,
    Water, Land, Town, Artifact, Occupied, Fog, Square,
)
from .errors import (
    TruncateError, GameSetupError, AliasLimitError, MoveError,
    GameNotInProgressError, NotYourTurnError, TileNotInHandError,
    InvalidPlacementError, InvalidSwapError, OutOfBoundsError, BoardInvariantError,
)
from .judge import Judge, WordData, WordDict, INSTANT_WIN, WILDCARD
from .rules import BattleRules, GameRules, BoardOrientation
from .moves import Move, Place, Swap, PlayerMessage, PlaceMessage, SwapMessage
from .reporting import (
    AttackerWins, DefenderWins, Outcome, BattleWord, BattleReport,
    BoardChange, BoardChangeKind, HandChange, BattleChange, Change,
)
from .state import GamePhase, Hand, Player, TileBag
from .game import Game
from .action_generator import MoveGenerator, legal_moves, is_legal

__all__ = [
    "Board",
    "Coordinate",
    "Direction",
    "SquareValidity",
    "Water",
    "Land",
    "Town",
    "Artifact",
    "Occupied",
    "Fog",
    "Square",
    "TruncateError",
    "GameSetupError",
    "AliasLimitError",
    "MoveError",
    "GameNotInProgressError",
    "NotYourTurnError",
    "TileNotInHandError",
    "InvalidPlacementError",
    "InvalidSwapError",
    "OutOfBoundsError",
    "BoardInvariantError",
    "Judge",
    "WordData",
    "WordDict",
    "INSTANT_WIN",
    "WILDCARD",
    "BattleRules",
    "GameRules",
    "BoardOrientation",
    "Move",
    "Place",
    "Swap",
    "PlayerMessage",
    "PlaceMessage",
    "SwapMessage",
    "AttackerWins",
    "DefenderWins",
    "Outcome",
    "BattleWord",
    "BattleReport",
    "BoardChange",
    "BoardChangeKind",
    "HandChange",
    "BattleChange",
    "Change",
    "GamePhase",
    "Hand",
    "Player",
    "TileBag",
    "Game",
    "MoveGenerator",
    "legal_moves",
    "is_legal",
]
