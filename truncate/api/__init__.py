"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a game (human and NPC seats)
2. Submits moves for its human seats
3. Receives the battles, NPC replies and the new game state

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    SubmitMoveRequest,
    PlaceMoveRequest,
    SwapMoveRequest,
    # Responses
    GameStateResponse,
    TurnResponse,
    ErrorResponse,
    ErrorCode,
    # Shared
    BoardModel,
    BattleReportModel,
    PlayerInfo,
    # Converters
    board_to_wire,
    board_from_wire,
    move_to_request,
    move_from_request,
)
from .service import GameService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "SubmitMoveRequest",
    "PlaceMoveRequest",
    "SwapMoveRequest",
    # Responses
    "GameStateResponse",
    "TurnResponse",
    "ErrorResponse",
    "ErrorCode",
    # Shared
    "BoardModel",
    "BattleReportModel",
    "PlayerInfo",
    # Converters
    "board_to_wire",
    "board_from_wire",
    "move_to_request",
    "move_from_request",
    # Service
    "GameService",
    "create_app",
]
