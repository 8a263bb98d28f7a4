"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
Boards, squares and moves are tagged with a `kind` discriminator so a
client can decode them without guessing.

The converters at the bottom map the wire models to engine values and
back. Converting a board or move to the wire and back gives an equal
value.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has ended
- NOT_YOUR_TURN / TILE_NOT_IN_HAND / INVALID_PLACEMENT / INVALID_SWAP /
  OUT_OF_BOUNDS / GAME_NOT_IN_PROGRESS / INVALID_MOVE: the move was
  rejected and the game is unchanged
- GAME_SETUP: The game could not be created
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, Field

from ..engine_core.board import (
    Artifact, Board, Coordinate, Direction, Fog, Land, Occupied, Square,
    SquareValidity, Town, Water,
)
from ..engine_core.moves import Move, Place, Swap
from ..engine_core.reporting import AttackerWins, BattleReport


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    """Session status values."""
    YOUR_TURN = "your_turn"
    NPC_TURN = "npc_turn"
    GAME_OVER = "game_over"


class ValidityName(str, Enum):
    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"
    PARTIAL = "partial"


class DirectionName(str, Enum):
    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    TILE_NOT_IN_HAND = "TILE_NOT_IN_HAND"
    INVALID_PLACEMENT = "INVALID_PLACEMENT"
    INVALID_SWAP = "INVALID_SWAP"
    OUT_OF_BOUNDS = "OUT_OF_BOUNDS"
    GAME_NOT_IN_PROGRESS = "GAME_NOT_IN_PROGRESS"
    INVALID_MOVE = "INVALID_MOVE"
    GAME_SETUP = "GAME_SETUP"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Board
# =============================================================================

class CoordinateModel(BaseModel):
    x: int
    y: int


class WaterSquare(BaseModel):
    kind: Literal["water"] = "water"
    foggy: bool = False


class LandSquare(BaseModel):
    kind: Literal["land"] = "land"
    foggy: bool = False


class TownSquare(BaseModel):
    kind: Literal["town"] = "town"
    player: int
    defeated: bool = False
    foggy: bool = False


class ArtifactSquare(BaseModel):
    kind: Literal["artifact"] = "artifact"
    player: int
    defeated: bool = False
    foggy: bool = False


class OccupiedSquare(BaseModel):
    kind: Literal["occupied"] = "occupied"
    player: int
    tile: str = Field(..., min_length=1, max_length=1)
    validity: ValidityName = ValidityName.UNKNOWN
    foggy: bool = False


class FogSquare(BaseModel):
    kind: Literal["fog"] = "fog"


SquareModel = Annotated[
    Union[WaterSquare, LandSquare, TownSquare, ArtifactSquare, OccupiedSquare, FogSquare],
    Field(discriminator="kind"),
]


class BoardModel(BaseModel):
    """A board as rows of squares, indexed squares[y][x]."""
    squares: list[list[SquareModel]]
    orientations: list[DirectionName] = Field(
        default_factory=list, description="Attack direction of each player"
    )


# =============================================================================
# Moves
# =============================================================================

class PlaceMoveRequest(BaseModel):
    """Place a tile from hand on an empty land square."""
    kind: Literal["place"] = "place"
    player: int = Field(..., ge=0)
    position: CoordinateModel
    tile: str = Field(..., min_length=1, max_length=1)


class SwapMoveRequest(BaseModel):
    """Swap two of the player's own tiles."""
    kind: Literal["swap"] = "swap"
    player: int = Field(..., ge=0)
    from_: CoordinateModel = Field(..., alias="from")
    to: CoordinateModel

    model_config = {"populate_by_name": True}


MoveRequest = Annotated[
    Union[PlaceMoveRequest, SwapMoveRequest],
    Field(discriminator="kind"),
]


# =============================================================================
# Request Models
# =============================================================================

class CreateGameRequest(BaseModel):
    """Request to create a new game session."""
    human_players: list[str] = Field(
        default_factory=lambda: ["Player"], description="Names of the human seats"
    )
    npc_players: int = Field(1, ge=0, le=3, description="Number of NPC opponents")
    personality: str = Field("balanced", description="NPC style: balanced, aggressive, defensive")
    seed: Optional[int] = Field(None, description="Seed for reproducible games")
    generation: int = Field(2, ge=0, le=2, description="Rules generation")
    width: int = Field(9, ge=5, le=25)
    height: int = Field(9, ge=5, le=25)


class SubmitMoveRequest(BaseModel):
    """A human move, optionally followed by the NPC replies."""
    move: MoveRequest
    run_npc: bool = Field(True, description="Let NPC seats answer before responding")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class BattleWordModel(BaseModel):
    original_word: str
    word: str
    valid: Optional[bool] = None
    meanings: Optional[list[str]] = None


class BattleReportModel(BaseModel):
    attackers: list[BattleWordModel]
    defenders: list[BattleWordModel]
    outcome: Literal["attacker_wins", "defender_wins"]
    defeated: list[int] = Field(default_factory=list, description="Indices of beaten defenders")
    battle_number: Optional[int] = None


class PlayerInfo(BaseModel):
    """Player information for display."""
    index: int
    name: str
    is_human: bool
    is_current_turn: bool = False
    hand: list[str] = Field(default_factory=list, description="Only shown for human seats")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: GameStatus
    turn_number: int
    players: list[PlayerInfo] = Field(default_factory=list)
    next_player: Optional[int] = None
    winner: Optional[int] = None
    board: BoardModel
    recent_battles: list[BattleReportModel] = Field(default_factory=list)
    api_version: str = "v1"


class TurnResponse(BaseModel):
    """What happened after a move, including any NPC replies."""
    session_id: str
    status: GameStatus
    moves: list[str] = Field(default_factory=list, description="Moves played, in order")
    battles: list[BattleReportModel] = Field(default_factory=list)
    learned_words: list[str] = Field(default_factory=list)
    winner: Optional[int] = None
    game_state: GameStateResponse
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


# =============================================================================
# Converters
# =============================================================================

def coordinate_to_wire(coord: Coordinate) -> CoordinateModel:
    return CoordinateModel(x=coord.x, y=coord.y)


def coordinate_from_wire(model: CoordinateModel) -> Coordinate:
    return Coordinate(model.x, model.y)


def square_to_wire(square: Square) -> BaseModel:
    if isinstance(square, Water):
        return WaterSquare(foggy=square.foggy)
    if isinstance(square, Land):
        return LandSquare(foggy=square.foggy)
    if isinstance(square, Town):
        return TownSquare(player=square.player, defeated=square.defeated, foggy=square.foggy)
    if isinstance(square, Artifact):
        return ArtifactSquare(player=square.player, defeated=square.defeated, foggy=square.foggy)
    if isinstance(square, Occupied):
        return OccupiedSquare(
            player=square.player,
            tile=square.tile,
            validity=ValidityName(square.validity.value),
            foggy=square.foggy,
        )
    if isinstance(square, Fog):
        return FogSquare()
    raise TypeError(f"Not a square: {square!r}")


def square_from_wire(model: BaseModel) -> Square:
    if isinstance(model, WaterSquare):
        return Water(foggy=model.foggy)
    if isinstance(model, LandSquare):
        return Land(foggy=model.foggy)
    if isinstance(model, TownSquare):
        return Town(player=model.player, defeated=model.defeated, foggy=model.foggy)
    if isinstance(model, ArtifactSquare):
        return Artifact(player=model.player, defeated=model.defeated, foggy=model.foggy)
    if isinstance(model, OccupiedSquare):
        return Occupied(
            player=model.player,
            tile=model.tile,
            validity=SquareValidity(model.validity.value),
            foggy=model.foggy,
        )
    if isinstance(model, FogSquare):
        return Fog()
    raise TypeError(f"Not a square model: {model!r}")


def board_to_wire(board: Board) -> BoardModel:
    return BoardModel(
        squares=[[square_to_wire(square) for square in row] for row in board.squares],
        orientations=[DirectionName(d.value) for d in board.orientations],
    )


def board_from_wire(model: BoardModel) -> Board:
    """Rebuild a board; its town and artifact caches are rebuilt too."""
    board = Board(
        squares=[[square_from_wire(square) for square in row] for row in model.squares],
        orientations=[Direction(d.value) for d in model.orientations],
    )
    board.cache_special_squares()
    return board


def move_to_request(move: Move) -> Union[PlaceMoveRequest, SwapMoveRequest]:
    if isinstance(move, Place):
        return PlaceMoveRequest(
            player=move.player,
            position=coordinate_to_wire(move.position),
            tile=move.tile,
        )
    if isinstance(move, Swap):
        first, second = move.positions
        return SwapMoveRequest(
            player=move.player,
            from_=coordinate_to_wire(first),
            to=coordinate_to_wire(second),
        )
    raise TypeError(f"Not a move: {move!r}")


def move_from_request(request: Union[PlaceMoveRequest, SwapMoveRequest]) -> Move:
    if isinstance(request, PlaceMoveRequest):
        return Place(
            player=request.player,
            tile=request.tile.upper(),
            position=coordinate_from_wire(request.position),
        )
    return Swap(
        player=request.player,
        positions=(coordinate_from_wire(request.from_), coordinate_from_wire(request.to)),
    )


def battle_report_to_wire(report: BattleReport) -> BattleReportModel:
    attacker_won = isinstance(report.outcome, AttackerWins)
    return BattleReportModel(
        attackers=[BattleWordModel(**vars(word)) for word in report.attackers],
        defenders=[BattleWordModel(**vars(word)) for word in report.defenders],
        outcome="attacker_wins" if attacker_won else "defender_wins",
        defeated=list(report.outcome.defeated) if attacker_won else [],
        battle_number=report.battle_number,
    )
