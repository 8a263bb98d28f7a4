"""
Tests for sessions and the game loop.

Tests:
- Session creation, seating and lifecycle
- Human and NPC turns through the GameLoop
- NPC vocabulary learning
"""

import time

import pytest

from ..bots import BALANCED, ArboristBot, FirstLegalPolicy
from ..dictionary import NpcDictionaries
from ..engine_core.action_generator import legal_moves
from ..engine_core.board import Coordinate
from ..engine_core.errors import (
    GameNotInProgressError,
    GameSetupError,
    NotYourTurnError,
    TileNotInHandError,
)
from ..engine_core.moves import Place
from ..session import GameLoop, LoopState, Session, SessionManager, SessionState, TurnResult

TOWN_BOARD = """
~~ ~~ @1 ~~ ~~
~~ #1 __ __ ~~
~~ __ A0 __ ~~
~~ __ __ __ ~~
~~ ~~ @0 ~~ ~~
"""


@pytest.fixture
def manager(word_dict) -> SessionManager:
    """A manager whose NPCs search shallowly."""
    return SessionManager(word_dict=word_dict, max_depth=1, evaluation_cap=30)


@pytest.fixture
def scripted_session(small_game, word_dict) -> Session:
    """The battle board with a human at seat 0 and a scripted bot at seat 1."""
    return Session(
        session_id="scripted",
        game=small_game,
        created_at=time.time(),
        bots={1: FirstLegalPolicy()},
        word_dict=word_dict,
        npc_dicts=NpcDictionaries(total=word_dict),
    )


class TestSessionManager:
    def test_create_session(self, manager):
        session = manager.create_session(seed=1)

        assert session.is_active()
        assert [p.name for p in session.game.players] == ["Human", "NPC 1"]
        assert set(session.bots) == {1}
        assert session.human_seats == [0]
        assert session.is_human_turn()
        assert session.metadata == {"seed": 1, "personality": "Balanced"}
        assert manager.get_session(session.session_id) is session

    def test_npc_dictionary_is_restricted(self, manager, word_dict):
        session = manager.create_session()
        assert session.word_dict is word_dict
        assert "zyzzyva" not in session.npc_dictionary
        assert "big" in session.npc_dictionary

    def test_without_npcs_no_restricted_dictionary(self, manager, word_dict):
        session = manager.create_session(human_players=["Ada", "Bo"], npc_players=0)
        assert session.npc_dicts is None
        assert session.npc_dictionary is word_dict

    def test_search_overrides(self, manager):
        session = manager.create_session(personality="defensive")
        bot = session.bots[1]
        assert bot.personality.search.max_depth == 1
        assert bot.personality.search.evaluation_cap == 30
        assert bot.personality.name == "Defensive"

    def test_no_overrides_keeps_preset(self):
        session = SessionManager().create_session()
        assert session.bots[1].personality is BALANCED

    def test_seeded_sessions_deal_the_same(self, manager):
        first = manager.create_session(seed=9)
        second = manager.create_session(seed=9)
        assert [list(p.hand) for p in first.game.players] == \
               [list(p.hand) for p in second.game.players]

    def test_too_few_seats(self, manager):
        with pytest.raises(GameSetupError):
            manager.create_session(npc_players=0)

    def test_unknown_personality(self, manager):
        with pytest.raises(ValueError):
            manager.create_session(personality="reckless")

    def test_end_session(self, manager):
        session = manager.create_session()
        ended = manager.end_session(session.session_id, reason="user_ended")

        assert ended is session
        assert ended.state == SessionState.ABANDONED
        assert manager.get_session(session.session_id) is None
        assert manager.end_session(session.session_id) is None

    def test_end_completed_session(self, manager):
        session = manager.create_session()
        assert manager.end_session(session.session_id).state == SessionState.GAME_OVER

    def test_list_active_sessions(self, manager):
        ids = {manager.create_session().session_id for _ in range(3)}
        assert set(manager.list_active_sessions()) == ids

    def test_cleanup_only_finished_old_sessions(self, manager):
        finished = manager.create_session()
        playing = manager.create_session()
        for session in (finished, playing):
            session.created_at -= 7200
        finished.state = SessionState.GAME_OVER

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(finished.session_id) is None
        assert manager.get_session(playing.session_id) is playing


class TestGameLoop:
    def test_human_then_npc(self, manager):
        session = manager.create_session(seed=2)
        loop = GameLoop(session)
        move = legal_moves(session.game)[0]

        result = loop.submit_move(move)
        assert result.turns_played == 1
        assert result.moves == [str(move)]
        assert loop.state == LoopState.RUNNING_NPC

        npc = loop.run_npc_turns()
        assert npc.turns_played == 1
        assert npc.loop_state == LoopState.WAITING_HUMAN
        assert session.game.turn_count == 2

    def test_human_cannot_move_npc_seat(self, manager):
        session = manager.create_session(seed=2)
        loop = GameLoop(session)
        loop.submit_move(legal_moves(session.game)[0])

        npc_move = legal_moves(session.game)[0]
        with pytest.raises(NotYourTurnError):
            loop.submit_move(npc_move)

    def test_illegal_move_is_raised(self, scripted_session):
        loop = GameLoop(scripted_session)
        with pytest.raises(TileNotInHandError):
            loop.submit_move(Place(0, "Q", Coordinate(3, 1)))
        assert scripted_session.game.turn_count == 0

    def test_battles_teach_the_npc(self, scripted_session):
        loop = GameLoop(scripted_session)
        result = loop.submit_move(Place(0, "B", Coordinate(3, 1)))

        assert [str(report) for report in result.battles] == ["[BIG] vs [XYZ]: Attacker wins against [0]"]
        assert result.learned_words == ["big"]
        assert scripted_session.learned_words == ["big"]
        assert "big" in scripted_session.npc_dicts.restricted

    def test_npc_uses_its_policy(self, scripted_session):
        loop = GameLoop(scripted_session)
        loop.submit_move(Place(0, "A", Coordinate(3, 4)))
        expected = legal_moves(scripted_session.game)[0]

        result = loop.run_npc_turns()
        assert result.moves == [str(expected)]
        assert loop.state == LoopState.WAITING_HUMAN

    def test_win_ends_session(self, make_game, word_dict):
        session = Session(
            session_id="town",
            game=make_game(TOWN_BOARD),
            created_at=time.time(),
            bots={1: FirstLegalPolicy()},
            word_dict=word_dict,
        )
        loop = GameLoop(session)
        result = loop.submit_move(Place(0, "B", Coordinate(1, 2)))

        assert result.winner == 0
        assert result.loop_state == LoopState.GAME_OVER
        assert session.state == SessionState.GAME_OVER
        with pytest.raises(GameNotInProgressError):
            loop.submit_move(Place(1, "J", Coordinate(2, 1)))

    def test_play_out_needs_all_npcs(self, manager):
        loop = GameLoop(manager.create_session())
        with pytest.raises(ValueError):
            loop.play_out()

    def test_duel(self, manager):
        session = manager.create_session(human_players=[], npc_players=2, seed=4)
        assert all(isinstance(bot, ArboristBot) for bot in session.bots.values())

        result = GameLoop(session).play_out(max_turns=4)
        assert result.turns_played == session.game.turn_count
        assert 1 <= result.turns_played <= 4
        assert len(result.moves) == result.turns_played


class TestTurnResult:
    def test_extend(self):
        first = TurnResult(LoopState.RUNNING_NPC, moves=["a"], turns_played=1)
        second = TurnResult(LoopState.GAME_OVER, moves=["b"], turns_played=1, winner=1)

        combined = first.extend(second)
        assert combined is first
        assert combined.moves == ["a", "b"]
        assert combined.turns_played == 2
        assert combined.winner == 1
        assert combined.loop_state == LoopState.GAME_OVER
