"""
Game Loop - Drives turns for a session.

The loop:
1. A human submits a move; it is applied with the full dictionary
2. NPC seats take their turns until a human is next or the game ends
3. After every turn, words that battles revealed as valid are taught to
   the NPC's restricted dictionary

NPC-vs-NPC games (duels) run through play_out().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.errors import GameNotInProgressError, NotYourTurnError
from ..engine_core.judge import INSTANT_WIN
from ..engine_core.reporting import BattleChange, BattleReport
from ..engine_core.state import GamePhase
from .manager import SessionState

if TYPE_CHECKING:
    from ..engine_core.moves import Move
    from .manager import Session

log = logging.getLogger("truncate.session")


class LoopState(Enum):
    """State of the game loop."""
    WAITING_HUMAN = "waiting_human"
    RUNNING_NPC = "running_npc"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of one or more turns.

    Moves are described in play order; battles are every battle those
    moves fought, in resolution order.
    """
    loop_state: LoopState
    moves: list[str] = field(default_factory=list)
    battles: list[BattleReport] = field(default_factory=list)
    learned_words: list[str] = field(default_factory=list)
    turns_played: int = 0
    winner: int | None = None

    def extend(self, other: TurnResult) -> TurnResult:
        """Fold a later result into this one."""
        self.loop_state = other.loop_state
        self.moves.extend(other.moves)
        self.battles.extend(other.battles)
        self.learned_words.extend(other.learned_words)
        self.turns_played += other.turns_played
        self.winner = other.winner if other.winner is not None else self.winner
        return self


class GameLoop:
    """
    The turn driver for a session.

    Usage:
        loop = GameLoop(session)
        result = loop.submit_move(Place(0, "A", Coordinate(4, 7)))
        result.extend(loop.run_npc_turns())
    """

    def __init__(self, session: Session, max_npc_turns: int = 50):
        self.session = session
        self.max_npc_turns = max_npc_turns

    @property
    def state(self) -> LoopState:
        game = self.session.game
        if game.phase == GamePhase.OVER:
            return LoopState.GAME_OVER
        if self.session.is_human_turn():
            return LoopState.WAITING_HUMAN
        return LoopState.RUNNING_NPC

    def submit_move(self, move: Move) -> TurnResult:
        """
        Apply a human's move.

        Raises a MoveError if the move is illegal, and NotYourTurnError
        if the seat to move belongs to an NPC.
        """
        self._require_active()
        if move.player in self.session.bots:
            raise NotYourTurnError(f"Seat {move.player} is played by an NPC")

        word_dict = self.session.word_dict
        return self._play(move, word_dict, word_dict)

    def run_npc_turns(self) -> TurnResult:
        """Let NPC seats move until a human is next or the game ends."""
        result = TurnResult(loop_state=self.state)
        while self.state == LoopState.RUNNING_NPC and result.turns_played < self.max_npc_turns:
            result.extend(self._npc_turn())
        return result

    def play_out(self, max_turns: int = 200) -> TurnResult:
        """
        Play an NPC-only game until someone wins or max_turns is reached.

        Every seat must have a bot.
        """
        self._require_active()
        humans = self.session.human_seats
        if humans:
            raise ValueError(f"Seats {humans} are not NPCs; play_out needs bots at every seat")

        result = TurnResult(loop_state=self.state)
        game = self.session.game
        while game.phase == GamePhase.IN_PROGRESS and game.turn_count < max_turns:
            result.extend(self._npc_turn())
        if game.phase == GamePhase.IN_PROGRESS:
            log.info("No winner after %d turns", game.turn_count)
        return result

    def _npc_turn(self) -> TurnResult:
        game = self.session.game
        bot = self.session.bots[game.next_player]
        npc_dictionary = self.session.npc_dictionary
        decision = bot.select_move(game, npc_dictionary, npc_dictionary)

        word_dict = self.session.word_dict
        result = self._play(decision.move, word_dict, word_dict)
        log.debug("%s: %s", bot.get_name(), decision.explanation)
        return result

    def _play(self, move: Move, attacker_dictionary, defender_dictionary) -> TurnResult:
        game = self.session.game
        winner = game.play_turn(move, attacker_dictionary, defender_dictionary)

        battles = [
            change.report for change in game.recent_changes
            if isinstance(change, BattleChange)
        ]
        result = TurnResult(
            loop_state=self.state,
            moves=[str(move)],
            battles=battles,
            learned_words=self._learn(battles),
            turns_played=1,
            winner=winner,
        )

        if winner is not None:
            self.session.state = SessionState.GAME_OVER
            log.info("Player %d (%s) wins on turn %d",
                     winner, game.players[winner].name, game.turn_count)
        return result

    def _learn(self, battles: list[BattleReport]) -> list[str]:
        """Teach the NPC every word a battle showed to be valid."""
        npc_dicts = self.session.npc_dicts
        if npc_dicts is None:
            return []

        learned = []
        for report in battles:
            for word in report.attackers + report.defenders:
                if word.valid is not True:
                    continue
                dict_word = word.original_word.replace(INSTANT_WIN, "").lower()
                if npc_dicts.remember(dict_word):
                    learned.append(dict_word)
        self.session.learned_words.extend(learned)
        return learned

    def _require_active(self) -> None:
        if self.session.game.phase != GamePhase.IN_PROGRESS:
            raise GameNotInProgressError("The game is not in progress")
