"""
Tests for legal move generation.

Tests:
- Enumeration order (placements row by row, then swaps)
- Hand deduplication
- Swap pairs
- Legality checks
"""

from ..engine_core.action_generator import MoveGenerator, is_legal, legal_moves
from ..engine_core.board import Coordinate
from ..engine_core.moves import Place, Swap
from ..engine_core.state import Hand


class TestLegalMoves:
    """Tests for legal_moves()."""

    def test_counts(self, small_game):
        """Three playable squares times seven letters, plus one swap."""
        moves = legal_moves(small_game)
        assert len([m for m in moves if isinstance(m, Place)]) == 21
        assert len([m for m in moves if isinstance(m, Swap)]) == 1
        assert len(moves) == 22

    def test_order(self, small_game):
        moves = legal_moves(small_game)
        assert moves[0] == Place(0, "B", Coordinate(3, 1))
        assert moves[1] == Place(0, "I", Coordinate(3, 1))
        assert moves[7] == Place(0, "B", Coordinate(3, 4))
        assert moves[-1] == Swap(0, (Coordinate(3, 2), Coordinate(3, 3)))

    def test_duplicate_letters_once(self, small_game):
        small_game.players[0].hand = Hand(list("AABBA"))
        places = legal_moves(small_game, include_swaps=False)
        assert len(places) == 6
        assert [m.tile for m in places[:2]] == ["A", "B"]

    def test_swap_of_identical_letters(self, small_game):
        """Equal letters can still be swapped; the swap re-fights its battles."""
        small_game.board.set(Coordinate(3, 3), 0, "I")
        swap = Swap(0, (Coordinate(3, 2), Coordinate(3, 3)))
        assert swap in legal_moves(small_game)

        small_game.play_turn(swap)
        assert small_game.battle_history

    def test_moves_for_player_to_move_only(self, small_game):
        small_game.play_turn(Place(0, "A", Coordinate(3, 4)))
        moves = legal_moves(small_game)
        assert moves
        assert all(m.player == 1 for m in moves)

    def test_every_generated_move_plays(self, small_game):
        """No generated move raises a MoveError."""
        for move in legal_moves(small_game):
            small_game.clone().play_turn(move)

    def test_game_over_has_no_moves(self, make_game):
        game = make_game("""
        ~~ ~~ @1 ~~ ~~
        ~~ #1 __ __ ~~
        ~~ __ A0 __ ~~
        ~~ ~~ @0 ~~ ~~
        """)
        game.play_turn(Place(0, "B", Coordinate(1, 2)))
        assert legal_moves(game) == []

    def test_generator_without_swaps(self, small_game):
        moves = MoveGenerator(include_swaps=False).generate(small_game)
        assert all(isinstance(m, Place) for m in moves)


class TestIsLegal:
    def test_legal_place(self, small_game):
        assert is_legal(small_game, Place(0, "F", Coordinate(2, 5)))

    def test_illegal_place(self, small_game):
        assert not is_legal(small_game, Place(0, "Q", Coordinate(2, 5)))
        assert not is_legal(small_game, Place(1, "J", Coordinate(2, 5)))

    def test_swap_in_either_order(self, small_game):
        assert is_legal(small_game, Swap(0, (Coordinate(3, 3), Coordinate(3, 2))))
