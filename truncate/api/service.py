"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions and their game loops
3. Turns engine errors into ErrorResponse models
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .schemas import (
    # Requests
    CreateGameRequest,
    SubmitMoveRequest,
    # Responses
    BoardModel,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    PlayerInfo,
    SessionListResponse,
    TurnResponse,
    # Enums
    ErrorCode,
    GameStatus,
    # Converters
    battle_report_to_wire,
    board_to_wire,
    move_from_request,
)
from ..engine_core.errors import GameSetupError, MoveError
from ..engine_core.rules import GameRules
from ..session import GameLoop, LoopState, Session, SessionManager, TurnResult

log = logging.getLogger("truncate.api")


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Session {session_id} not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
    )


def _move_error(error: MoveError) -> ErrorResponse:
    try:
        code = ErrorCode(error.error_code)
    except ValueError:
        code = ErrorCode.INVALID_MOVE
    return ErrorResponse(error=str(error), error_code=code)


@dataclass
class GameService:
    """
    Main API service.

    Usage:
        service = GameService()
        state = service.create_game(CreateGameRequest())
        turn = service.submit_move(state.session_id, SubmitMoveRequest(move=...))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # Game loops per session
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def create_game(self, request: CreateGameRequest) -> GameStateResponse | ErrorResponse:
        """
        Create a new game session and start it.
        """
        try:
            session = self.session_manager.create_session(
                human_players=request.human_players,
                npc_players=request.npc_players,
                personality=request.personality,
                seed=request.seed,
                rules=GameRules.generation(request.generation),
                width=request.width,
                height=request.height,
            )
        except (GameSetupError, ValueError) as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.GAME_SETUP)

        self._game_loops[session.session_id] = GameLoop(session)
        return self._build_game_state(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        with session.lock:
            return self._build_game_state(session)

    def get_board(
        self,
        session_id: str,
        player: int | None = None,
        radius: int | None = None,
    ) -> BoardModel | ErrorResponse:
        """
        Get the board, optionally as one player sees it.

        With a player, the board is oriented for them; with a radius as
        well, squares beyond it are hidden under fog of war.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        if player is None and radius is not None:
            return ErrorResponse(
                error="A fog-of-war radius needs a player",
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        with session.lock:
            game = session.game
            if player is None:
                return board_to_wire(game.board)

            if not 0 <= player < len(game.players):
                return ErrorResponse(
                    error=f"No player {player}",
                    error_code=ErrorCode.VALIDATION_ERROR,
                )

            board = game.board_for(player)
            if radius is not None:
                board = board.fog_of_war(player, radius)
            return board_to_wire(board)

    def submit_move(
        self,
        session_id: str,
        request: SubmitMoveRequest,
    ) -> TurnResponse | ErrorResponse:
        """
        Apply a human move, then let the NPC seats reply if asked to.

        An illegal move leaves the game unchanged and returns the
        matching error code.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        move = move_from_request(request.move)
        with session.lock:
            loop = self._loop_for(session)
            try:
                result = loop.submit_move(move)
            except MoveError as e:
                log.info("Session %s rejected %s: %s", session_id, move, e)
                return _move_error(e)

            if request.run_npc and result.loop_state == LoopState.RUNNING_NPC:
                try:
                    result.extend(loop.run_npc_turns())
                except MoveError as e:
                    log.warning("Session %s: NPC reply failed: %s", session_id, e)
                    return _move_error(e)

            return self._build_turn_response(session, result)

    def run_npc_turns(self, session_id: str) -> TurnResponse | ErrorResponse:
        """Let the NPC seats move until a human is next or the game ends."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        with session.lock:
            loop = self._loop_for(session)
            if loop.state == LoopState.GAME_OVER:
                return ErrorResponse(
                    error="The game is over",
                    error_code=ErrorCode.GAME_NOT_IN_PROGRESS,
                )
            try:
                result = loop.run_npc_turns()
            except MoveError as e:
                log.warning("Session %s: NPC turn failed: %s", session_id, e)
                return _move_error(e)
            return self._build_turn_response(session, result)

    def end_session(self, session_id: str, reason: str = "user_ended") -> EndSessionResponse:
        session = self.session_manager.end_session(session_id, reason)
        self._game_loops.pop(session_id, None)
        return EndSessionResponse(success=session is not None, session_id=session_id)

    def list_sessions(self) -> SessionListResponse:
        sessions = self.session_manager.list_active_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _loop_for(self, session: Session) -> GameLoop:
        loop = self._game_loops.get(session.session_id)
        if loop is None:
            loop = GameLoop(session)
            self._game_loops[session.session_id] = loop
        return loop

    def _status(self, session: Session) -> GameStatus:
        mapping = {
            LoopState.WAITING_HUMAN: GameStatus.YOUR_TURN,
            LoopState.RUNNING_NPC: GameStatus.NPC_TURN,
            LoopState.GAME_OVER: GameStatus.GAME_OVER,
        }
        return mapping[self._loop_for(session).state]

    def _build_game_state(self, session: Session) -> GameStateResponse:
        game = session.game
        players = [
            PlayerInfo(
                index=player.index,
                name=player.name,
                is_human=player.index not in session.bots,
                is_current_turn=player.index == game.next_player,
                hand=list(player.hand) if player.index not in session.bots else [],
            )
            for player in game.players
        ]

        return GameStateResponse(
            session_id=session.session_id,
            status=self._status(session),
            turn_number=game.turn_count,
            players=players,
            next_player=game.next_player,
            winner=game.winner,
            board=board_to_wire(game.board),
            recent_battles=[
                battle_report_to_wire(change.report) for change in game.recent_battles()
            ],
        )

    def _build_turn_response(self, session: Session, result: TurnResult) -> TurnResponse:
        return TurnResponse(
            session_id=session.session_id,
            status=self._status(session),
            moves=result.moves,
            battles=[battle_report_to_wire(report) for report in result.battles],
            learned_words=result.learned_words,
            winner=result.winner,
            game_state=self._build_game_state(session),
        )
