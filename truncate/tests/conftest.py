"""
Pytest fixtures for Truncate tests.
"""

import pytest

from ..dictionary import parse_word_list
from ..engine_core.board import Board, Direction
from ..engine_core.game import Game
from ..engine_core.judge import Judge, WordDict
from ..engine_core.rules import GameRules
from ..engine_core.state import Hand

SHORT_DICT = ["BIG", "BAG", "FAT", "JOLLY", "AND", "SILLY", "FOLK", "ARTS"]

WORD_LIST = """\
big 4 0.9
bag 6 0.8
fat 3 0.7
jolly 1 0.4
and 12 1.0
silly 2 0.3
folk 2 0.25
arts 5 0.6
*arse 1 0.5
zyzzyva 0 0.01
"""

# Player 1 holds a vertical XYZ from their artifact, with a K hanging off it;
# player 0 holds I and G below a free square at (3, 1).
BATTLE_BOARD = """
~~ ~~ @1 ~~ ~~
~~ #1 X1 __ ~~
~~ __ Y1 I0 ~~
~~ K1 Z1 G0 ~~
~~ __ __ __ ~~
~~ #0 __ __ ~~
~~ ~~ @0 ~~ ~~
"""


@pytest.fixture
def short_dict_judge() -> Judge:
    """A judge whose built-in dictionary is the short test word list."""
    return Judge.from_words(SHORT_DICT)


@pytest.fixture
def word_dict() -> WordDict:
    """A parsed word list with frequencies and an objectionable word."""
    return parse_word_list(WORD_LIST.splitlines())


@pytest.fixture
def rules() -> GameRules:
    return GameRules.generation(2)


@pytest.fixture
def make_game(short_dict_judge, rules):
    """
    Build a started two-player game on a board drawn as text.

    Hands are replaced after dealing so tests know exactly what each
    player holds.
    """
    def _make(board_text: str, hands=("BIGFATS", "JOLLYAN"), game_rules=None) -> Game:
        board = Board.from_string(board_text, [Direction.NORTH, Direction.SOUTH])
        game = Game(seed=7, rules=game_rules or rules, judge=short_dict_judge, board=board)
        game.add_player("Ada")
        game.add_player("Bo")
        game.start()
        for player, letters in zip(game.players, hands):
            player.hand = Hand(list(letters))
        return game

    return _make


@pytest.fixture
def small_game(make_game) -> Game:
    """A game in progress on the battle board, player 0 to move."""
    return make_game(BATTLE_BOARD)
