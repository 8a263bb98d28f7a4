"""
Tests for the Judge.

Dictionary: BIG, BAG, FAT, JOLLY, AND, SILLY, FOLK, ARTS; length_delta 2.
"""

import pytest

from ..engine_core.board import Board, Coordinate, Occupied, Town
from ..engine_core.errors import AliasLimitError, BoardInvariantError
from ..engine_core.judge import Judge, WordData
from ..engine_core.reporting import AttackerWins, BattleReport, BattleWord, DefenderWins
from ..engine_core.rules import BattleRules


@pytest.fixture
def battle_rules() -> BattleRules:
    return BattleRules(length_delta=2)


class TestValid:
    def test_dictionary_word(self, short_dict_judge):
        assert short_dict_judge.valid("big") == "BIG"
        assert short_dict_judge.valid("BIG") == "BIG"

    def test_unknown_word(self, short_dict_judge):
        assert short_dict_judge.valid("XYZ") is None

    def test_wildcard_takes_first_letter_alphabetically(self, short_dict_judge):
        # BAG and BIG both match; A comes first
        assert short_dict_judge.valid("B*G") == "BAG"

    def test_wildcard_without_match(self, short_dict_judge):
        assert short_dict_judge.valid("R*G") is None

    def test_multiple_wildcards(self, short_dict_judge):
        assert short_dict_judge.valid("J*LL*") == "JOLLY"

    def test_instant_win_marker_is_always_valid(self, short_dict_judge):
        assert short_dict_judge.valid("XQ¤") == "XQ¤"

    def test_external_dictionary_replaces_builtin(self, short_dict_judge):
        external = {"zyzzyva": WordData()}
        assert short_dict_judge.valid("ZYZZYVA", external) == "ZYZZYVA"
        assert short_dict_judge.valid("BIG", external) is None

    def test_empty_external_dictionary_is_used(self, short_dict_judge):
        assert short_dict_judge.valid("BIG", {}) is None

    def test_long_wildcard_word_terminates(self, short_dict_judge):
        assert short_dict_judge.valid("***Q") is None


class TestAliases:
    def test_alias_resolves_to_candidate(self, short_dict_judge):
        a_or_b = short_dict_judge.set_alias(["a", "b"])
        b_or_c = short_dict_judge.set_alias(["b", "c"])

        assert short_dict_judge.valid(f"B{a_or_b}G") == "BAG"
        assert short_dict_judge.valid(f"B{b_or_c}G") is None
        assert short_dict_judge.valid(f"{b_or_c}{a_or_b}G") == "BAG"

    def test_alias_slot_cannot_be_reused(self, short_dict_judge):
        o_or_l = short_dict_judge.set_alias(["o", "l"])
        assert short_dict_judge.valid(f"JO{o_or_l}{o_or_l}Y") is None

    def test_alias_with_repeated_candidates(self, short_dict_judge):
        two_ls = short_dict_judge.set_alias(["l", "l"])
        assert short_dict_judge.valid(f"JO{two_ls}{two_ls}Y") == "JOLLY"

    def test_alias_different_slots(self, short_dict_judge):
        o_or_l = short_dict_judge.set_alias(["o", "l"])
        assert short_dict_judge.valid(f"J{o_or_l}L{o_or_l}Y") == "JOLLY"

    def test_alias_limit(self, short_dict_judge):
        for _ in range(9):
            short_dict_judge.set_alias(["a"])
        with pytest.raises(AliasLimitError):
            short_dict_judge.set_alias(["a"])

    def test_remove_aliases(self, short_dict_judge):
        marker = short_dict_judge.set_alias(["a", "i"])
        short_dict_judge.remove_aliases()
        assert short_dict_judge.aliases == {}
        assert short_dict_judge.valid(f"B{marker}G") is None


class TestBattle:
    def test_no_battle_without_combatants(self, short_dict_judge, battle_rules):
        assert short_dict_judge.battle(["WORD"], [], battle_rules) is None
        assert short_dict_judge.battle([], ["WORD"], battle_rules) is None
        assert short_dict_judge.battle([], [], battle_rules) is None

    @pytest.mark.parametrize("attackers", [
        ["XYZ"],
        ["XYZXYZXYZ"],
        ["XYZ", "JOLLY"],
        ["BIG", "XYZ"],
        ["XYZ", "BIG"],
    ])
    def test_invalid_attacker_loses(self, short_dict_judge, battle_rules, attackers):
        report = short_dict_judge.battle(attackers, ["BIG"], battle_rules)
        assert report.outcome == DefenderWins()

    def test_invalid_attacker_short_circuits(self, short_dict_judge, battle_rules):
        report = short_dict_judge.battle(["XYZ"], ["BIG"], battle_rules)
        assert report.defenders == [BattleWord(original_word="BIG", word="BIG", valid=None)]

    @pytest.mark.parametrize("defenders,defeated", [
        (["XYZ"], [0]),
        (["XYZXYZXYZ"], [0]),
        (["BIG", "XYZ"], [1]),
        (["XYZ", "BIG"], [0]),
    ])
    def test_invalid_defender_loses(self, short_dict_judge, battle_rules, defenders, defeated):
        report = short_dict_judge.battle(["BIG"], defenders, battle_rules)
        assert report.outcome == AttackerWins(defeated)

    def test_attacker_too_short(self, short_dict_judge, battle_rules):
        assert short_dict_judge.battle(["JOLLY"], ["FOLK"], battle_rules).outcome == DefenderWins()
        assert short_dict_judge.battle(["JOLLY", "BIG"], ["FOLK"], battle_rules).outcome == DefenderWins()

    def test_defender_too_short(self, short_dict_judge, battle_rules):
        assert short_dict_judge.battle(["JOLLY"], ["FAT"], battle_rules).outcome == AttackerWins([0])
        assert short_dict_judge.battle(["JOLLY", "BIG"], ["FAT"], battle_rules).outcome == AttackerWins([0])

    def test_only_weak_defenders_are_listed(self, short_dict_judge, battle_rules):
        report = short_dict_judge.battle(
            ["JOLLY"], ["FAT", "BIG", "JOLLY", "FOLK", "XYZXYZXYZ"], battle_rules,
        )
        assert report.outcome == AttackerWins([0, 1, 4])

    def test_length_delta_from_rules(self, short_dict_judge):
        report = short_dict_judge.battle(["JOLLY"], ["FOLK"], BattleRules(length_delta=1))
        assert report.outcome == AttackerWins([0])

    def test_wildcards_in_battle(self, short_dict_judge, battle_rules):
        assert short_dict_judge.battle(["B*G"], ["XYZ"], battle_rules).outcome == AttackerWins([0])
        assert short_dict_judge.battle(["R*G"], ["XYZ"], battle_rules).outcome == DefenderWins()
        assert short_dict_judge.battle(["ARTS"], ["JALL*"], battle_rules).outcome == AttackerWins([0])
        assert short_dict_judge.battle(["BAG"], ["JOLL*"], battle_rules).outcome == DefenderWins()

    def test_aliases_in_battle(self, short_dict_judge, battle_rules):
        o_or_l = short_dict_judge.set_alias(["o", "l"])
        two_ls = short_dict_judge.set_alias(["l", "l"])

        def outcome(word):
            return short_dict_judge.battle([word], ["XYZ"], battle_rules).outcome

        assert outcome(f"JO{o_or_l}{o_or_l}Y") == DefenderWins()
        assert outcome(f"JO{two_ls}{two_ls}Y") == AttackerWins([0])
        assert outcome(f"J{o_or_l}L{o_or_l}Y") == AttackerWins([0])

    def test_instant_win_attacker(self, short_dict_judge, battle_rules):
        report = short_dict_judge.battle(["XQ¤"], ["¤"], battle_rules)
        assert isinstance(report.outcome, AttackerWins)

    def test_defender_dictionary(self, short_dict_judge, battle_rules):
        attackers = {"big": WordData()}
        defenders = {"fat": WordData()}
        report = short_dict_judge.battle(["BIG"], ["FAT"], battle_rules, attackers, defenders)
        assert report.outcome == DefenderWins()
        assert report.defenders[0].valid is True


class TestBattleReport:
    def test_resolved_words(self, short_dict_judge, battle_rules):
        assert short_dict_judge.battle(["B*G"], ["XYZ"], battle_rules) == BattleReport(
            attackers=[BattleWord(original_word="B*G", word="BAG", valid=True)],
            defenders=[BattleWord(original_word="XYZ", word="XYZ", valid=False)],
            outcome=AttackerWins([0]),
        )

    def test_failed_attacker(self, short_dict_judge, battle_rules):
        assert short_dict_judge.battle(["R*G"], ["XYZ"], battle_rules) == BattleReport(
            attackers=[BattleWord(original_word="R*G", word="R*G", valid=False)],
            defenders=[BattleWord(original_word="XYZ", word="XYZ", valid=None)],
            outcome=DefenderWins(),
        )

    def test_resolved_defender(self, short_dict_judge, battle_rules):
        report = short_dict_judge.battle(["BAG"], ["JOLL*"], battle_rules)
        assert report.defenders == [BattleWord(original_word="JOLL*", word="JOLLY", valid=True)]
        assert report.outcome == DefenderWins()

    def test_str(self, short_dict_judge, battle_rules):
        report = short_dict_judge.battle(["BIG"], ["XYZ"], battle_rules)
        assert str(report) == "[BIG] vs [XYZ]: Attacker wins against [0]"


class TestWinner:
    def test_no_winner_on_fresh_board(self):
        assert Judge.winner(Board.default()) is None

    def test_tile_next_to_enemy_town_wins(self):
        board = Board.default()
        board.set(Coordinate(2, 1), 0, "A")
        assert Judge.winner(board) == 0

    def test_own_tile_next_to_own_town(self):
        board = Board.default()
        board.set(Coordinate(2, 1), 1, "A")
        assert Judge.winner(board) is None

    def test_stale_cache_is_an_invariant_error(self):
        board = Board.default()
        board.squares[1][1] = Occupied(1, "A")
        with pytest.raises(BoardInvariantError):
            Judge.winner(board)

    def test_town_added_without_recache_is_ignored(self):
        board = Board.default()
        board.squares[4][4] = Town(1)
        board.squares[4][5] = Occupied(0, "A")
        assert Judge.winner(board) is None
