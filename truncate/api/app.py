"""
FastAPI Application - REST API for Truncate games.

Endpoints:
    POST   /api/v1/games                Create a game
    GET    /api/v1/games                List active games
    GET    /api/v1/games/{id}           Get game state
    DELETE /api/v1/games/{id}           End a game
    POST   /api/v1/games/{id}/moves     Submit a human move
    POST   /api/v1/games/{id}/npc       Run NPC turns
    GET    /api/v1/games/{id}/board     Get the board, optionally as one player sees it

Move Flow:
    1. POST /moves applies the human move
    2. If run_npc is true (the default), NPC seats reply immediately
    3. The response lists every move and battle, then the new game state

Rejected moves return 400 with an ErrorResponse; the game is unchanged.
Unknown games return 404.
"""

from typing import Annotated, Optional, Union
import logging
import os

# Environment configuration
TRUNCATE_ENV = os.getenv("TRUNCATE_ENV", "development")
TRUNCATE_DICT_PATH = os.getenv("TRUNCATE_DICT_PATH", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
TRUNCATE_SEARCH_DEPTH = os.getenv("TRUNCATE_SEARCH_DEPTH", None)
TRUNCATE_SEARCH_CAP = os.getenv("TRUNCATE_SEARCH_CAP", None)

log = logging.getLogger("truncate.api")


def create_service():
    """Build a GameService from the environment configuration."""
    from ..dictionary import load_word_dict
    from ..session import SessionManager
    from .service import GameService

    word_dict = load_word_dict(TRUNCATE_DICT_PATH) if TRUNCATE_DICT_PATH else None
    manager = SessionManager(
        word_dict=word_dict,
        max_depth=int(TRUNCATE_SEARCH_DEPTH) if TRUNCATE_SEARCH_DEPTH else None,
        evaluation_cap=int(TRUNCATE_SEARCH_CAP) if TRUNCATE_SEARCH_CAP else None,
    )
    return GameService(session_manager=manager)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService instance (built from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .schemas import (
        # Request models
        CreateGameRequest,
        SubmitMoveRequest,
        # Response models
        BoardModel,
        EndSessionResponse,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        SessionListResponse,
        TurnResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Truncate Engine API",
        description="""
Truncate word battles against NPC opponents.

## Move Flow

`POST /moves` applies a human move. Unless `run_npc` is false, the NPC
seats reply before the response is sent, and the response lists every
move and battle in order.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Game does not exist |
| `NOT_YOUR_TURN` | Another seat is to move |
| `TILE_NOT_IN_HAND` | The tile is not in the player's hand |
| `INVALID_PLACEMENT` | The square is not playable |
| `INVALID_SWAP` | The squares are not both the player's tiles |
| `OUT_OF_BOUNDS` | A coordinate is off the board |
| `GAME_NOT_IN_PROGRESS` | The game is over |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or create_service()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Turn a service error into a JSON response with the matching status."""
        status_code = 404 if error.error_code == ErrorCode.SESSION_NOT_FOUND else 400
        return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Create a new game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameStateResponse, JSONResponse]:
        """
        Create and start a game.

        Human seats are numbered first, then NPC seats.
        """
        response = api_service.create_game(request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.get(
        "/api/v1/games",
        response_model=SessionListResponse,
        tags=["Games"],
        summary="List active games",
    )
    async def list_games() -> SessionListResponse:
        return api_service.list_sessions()

    @app.get(
        "/api/v1/games/{session_id}",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get current game state",
    )
    async def get_game(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.delete(
        "/api/v1/games/{session_id}",
        response_model=EndSessionResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        return api_service.end_session(session_id, reason)

    @app.get(
        "/api/v1/games/{session_id}/board",
        response_model=BoardModel,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get the board",
    )
    async def get_board(
        session_id: str,
        player: Annotated[Optional[int], Query(ge=0, description="View the board as this player")] = None,
        radius: Annotated[Optional[int], Query(ge=0, description="Fog-of-war radius")] = None,
    ) -> Union[BoardModel, JSONResponse]:
        response = api_service.get_board(session_id, player=player, radius=radius)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Turn Endpoints
    # =========================================================================

    # Plain def: the NPC search is CPU-bound, so these run in the threadpool

    @app.post(
        "/api/v1/games/{session_id}/moves",
        response_model=TurnResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Turns"],
        summary="Submit a human move",
    )
    def submit_move(session_id: str, request: SubmitMoveRequest) -> Union[TurnResponse, JSONResponse]:
        """
        Submit a `place` or `swap` move for a human seat.

        Illegal moves are rejected with the reason and leave the game unchanged.
        """
        response = api_service.submit_move(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/games/{session_id}/npc",
        response_model=TurnResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Turns"],
        summary="Run NPC turns",
    )
    def run_npc(session_id: str) -> Union[TurnResponse, JSONResponse]:
        """Let NPC seats move until a human is next or the game ends."""
        response = api_service.run_npc_turns(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Liveness probe."""
        return HealthResponse(
            status="healthy",
            service="truncate-engine",
            version="1.0.0",
        )

    @app.get("/", tags=["System"])
    async def root():
        """Service name and where the docs live."""
        return {
            "name": "Truncate Engine API",
            "version": "1.0.0",
            "environment": TRUNCATE_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn truncate.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
