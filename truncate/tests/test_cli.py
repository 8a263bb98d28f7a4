"""
Tests for the command-line interface.
"""

import pytest

from .. import cli
from .conftest import WORD_LIST


@pytest.fixture(autouse=True)
def no_env_dictionary(monkeypatch):
    monkeypatch.setattr(cli, "TRUNCATE_DICT_PATH", None)
    monkeypatch.setattr(cli, "TRUNCATE_SEARCH_DEPTH", None)
    monkeypatch.setattr(cli, "TRUNCATE_SEARCH_CAP", None)


@pytest.fixture
def dict_path(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text(WORD_LIST, encoding="utf-8")
    return str(path)


class TestJudgeCommand:
    def test_attacker_wins(self, capsys):
        assert cli.main(["judge", "BIG", "--against", "XYZ", "--words", "big,bag"]) == 0
        out = capsys.readouterr().out
        assert "Attacker wins against [0]" in out
        assert "invalid" in out

    def test_defender_wins(self, dict_path, capsys):
        assert cli.main(["judge", "BAG", "--against", "JOLLY", "--dict", dict_path]) == 0
        assert "Defender wins" in capsys.readouterr().out

    def test_needs_a_dictionary(self, capsys):
        assert cli.main(["judge", "BIG", "--against", "XYZ"]) == 1
        assert "no dictionary" in capsys.readouterr().out

    def test_missing_dictionary_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["judge", "BIG", "--against", "XYZ", "--dict", str(tmp_path / "none.txt")])
        assert exc_info.value.code == 1

    def test_malformed_dictionary_file(self, tmp_path, capsys):
        path = tmp_path / "bad.txt"
        path.write_text("big 4\n", encoding="utf-8")
        with pytest.raises(SystemExit):
            cli.main(["judge", "BIG", "--against", "XYZ", "--dict", str(path)])
        assert "Line 1" in capsys.readouterr().out


class TestDuelCommand:
    def test_short_duel(self, dict_path, capsys):
        code = cli.main([
            "duel", "--seed", "1", "--turns", "2", "--depth", "1", "--cap", "20",
            "--dict", dict_path,
        ])
        assert code == 1
        assert "No winner after 2 turns" in capsys.readouterr().out


def test_no_command(capsys):
    assert cli.main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()
