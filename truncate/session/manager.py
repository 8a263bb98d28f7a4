"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. A client creates a session: a Game is built, human seats are added
   first, then NPC seats, and the game starts
2. During the game the GameLoop applies human moves and runs NPC turns
3. The game ends (or the client leaves) and the session is dropped

PERSISTENCE RULES:
- Sessions are in-memory only
- Dictionaries are loaded once by the caller and shared, never copied
  per session; only the NPC's restricted dictionary is per session,
  because it learns
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
import logging
import random
import threading
import time
import uuid

from ..bots import ArboristBot, BotPolicy, Personality, get_personality
from ..dictionary import NpcDictionaries
from ..engine_core.errors import GameSetupError
from ..engine_core.game import Game
from ..engine_core.judge import Judge, WordDict
from ..engine_core.rules import GameRules
from ..engine_core.state import GamePhase

log = logging.getLogger("truncate.session")


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Client quit


@dataclass
class Session:
    """
    One game and everything needed to drive it.

    `bots` maps the seat index of every NPC to its policy; seats not in
    it belong to humans.
    """
    session_id: str
    game: Game
    created_at: float

    state: SessionState = SessionState.ACTIVE
    bots: dict[int, BotPolicy] = field(default_factory=dict)

    # Judges every move; None means the judge's built-in dictionary
    word_dict: WordDict | None = None
    npc_dicts: NpcDictionaries | None = None
    learned_words: list[str] = field(default_factory=list)

    metadata: dict[str, Any] = field(default_factory=dict)

    # Held while anything reads or changes the game
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def is_human_turn(self) -> bool:
        next_player = self.game.next_player
        return next_player is not None and next_player not in self.bots

    @property
    def human_seats(self) -> list[int]:
        return [p.index for p in self.game.players if p.index not in self.bots]

    @property
    def npc_dictionary(self) -> WordDict | None:
        """The vocabulary bots search with."""
        if self.npc_dicts is None:
            return self.word_dict
        return self.npc_dicts.restricted


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions (game, seats, bots, dictionaries)
    - Track active sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        word_dict: WordDict | None = None,
        judge: Judge | None = None,
        max_depth: int | None = None,
        evaluation_cap: int | None = None,
    ):
        self._sessions: dict[str, Session] = {}
        self.word_dict = word_dict
        self.judge = judge
        # Override every personality's search limits when set
        self.max_depth = max_depth
        self.evaluation_cap = evaluation_cap

    def create_session(
        self,
        human_players: list[str] | None = None,
        npc_players: int = 1,
        personality: str = "balanced",
        seed: int | None = None,
        rules: GameRules | None = None,
        width: int = 9,
        height: int = 9,
    ) -> Session:
        """
        Create and start a new game.

        Args:
            human_players: Names for the human seats, seated first
            npc_players: Number of NPC seats after them
            personality: Preset name for every NPC
            seed: Seeds the game's tile draws and the bots

        Returns:
            A Session whose game is in progress
        """
        human_players = list(human_players) if human_players is not None else ["Human"]
        if len(human_players) + npc_players < 2:
            raise GameSetupError("A game needs at least two seats")

        npc_personality = self._tune(get_personality(personality))

        game = Game(width=width, height=height, seed=seed, rules=rules, judge=self.judge)
        for name in human_players:
            game.add_player(name)

        bots: dict[int, BotPolicy] = {}
        for i in range(npc_players):
            index = game.add_player(f"NPC {i + 1}")
            bot_seed = seed + index if seed is not None else None
            bots[index] = ArboristBot(
                player=index,
                personality=npc_personality,
                rng=random.Random(bot_seed),
            )

        game.start()

        npc_dicts = None
        if npc_players and self.word_dict is not None:
            npc_dicts = NpcDictionaries.from_total(self.word_dict)

        session = Session(
            session_id=str(uuid.uuid4()),
            game=game,
            created_at=time.time(),
            bots=bots,
            word_dict=self.word_dict,
            npc_dicts=npc_dicts,
            metadata={"seed": seed, "personality": npc_personality.name},
        )
        self._sessions[session.session_id] = session
        log.info(
            "Session %s created: %d human, %d NPC seat(s)",
            session.session_id, len(human_players), npc_players,
        )
        return session

    def _tune(self, personality: Personality) -> Personality:
        search = personality.search
        if self.max_depth is not None:
            search = replace(search, max_depth=self.max_depth)
        if self.evaluation_cap is not None:
            search = replace(search, evaluation_cap=self.evaluation_cap)
        if search is personality.search:
            return personality
        return replace(personality, search=search)

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and drop it from memory.

        Returns the ended session, or None if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return None

        if reason == "completed" or session.game.phase == GamePhase.OVER:
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        log.info("Session %s ended (%s)", session_id, reason)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        End sessions older than max_age that are no longer being played.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
