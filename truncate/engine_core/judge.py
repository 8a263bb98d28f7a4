"""
Judge - Word validity and battle adjudication.

The judge holds no board state. It resolves words against a dictionary
(its own built-in one, or an external one supplied per call) and decides
battles between attacking and defending words.

Special characters, in resolution priority order:
- INSTANT_WIN (an artifact capture): the word is valid outright
- Alias markers (①..⑨): each stands for a small set of letters
- WILDCARD (*): any letter a-z, tried alphabetically
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .board import Board, Occupied, Town
from .errors import AliasLimitError, BoardInvariantError
from .reporting import AttackerWins, BattleReport, BattleWord, DefenderWins
from .rules import BattleRules

log = logging.getLogger("truncate.judge")

INSTANT_WIN = "¤"
WILDCARD = "*"
ALIAS_MARKERS = ("①", "②", "③", "④", "⑤", "⑥", "⑦", "⑧", "⑨")
ALPHABET = "abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class WordData:
    extensions: int = 0
    rel_freq: float = 0.0
    objectionable: bool = False


WordDict = dict[str, WordData]


@dataclass
class Judge:
    """
    Dictionary-backed word resolver and battle calculator.

    The alias table belongs to this instance; drivers register aliases
    with set_alias() and clear them between games with remove_aliases().
    """
    builtin_dictionary: WordDict = field(default_factory=dict)
    aliases: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_words(cls, words: Iterable[str]) -> Judge:
        return cls(builtin_dictionary={word.lower(): WordData() for word in words})

    # ------------------------------------------------------------------
    # Aliases
    # ------------------------------------------------------------------

    def set_alias(self, candidates: Sequence[str]) -> str:
        """Register an alias for a set of letters and return its marker."""
        for marker in ALIAS_MARKERS:
            if marker in self.aliases:
                continue
            self.aliases[marker] = [c.lower() for c in candidates]
            return marker
        raise AliasLimitError(f"Only {len(ALIAS_MARKERS)} aliases can be registered")

    def remove_aliases(self) -> None:
        self.aliases.clear()

    # ------------------------------------------------------------------
    # Word resolution
    # ------------------------------------------------------------------

    def valid(
        self,
        word: str,
        external_dictionary: WordDict | None = None,
        used_aliases: frozenset[tuple[str, int]] | None = None,
    ) -> str | None:
        """
        Resolve a word, returning it upper-cased if valid and None if not.

        Wildcards and aliases are expanded depth-first from an explicit
        stack, so the first hit is the same one a recursive search trying
        candidates in order would find. used_aliases holds the
        (marker, candidate index) pairs already spent in this resolution;
        a pair may only be spent once per word.
        """
        if INSTANT_WIN in word:
            return word.upper()

        dictionary = (
            external_dictionary if external_dictionary is not None
            else self.builtin_dictionary
        )

        stack: list[tuple[str, frozenset[tuple[str, int]]]] = [
            (word, used_aliases or frozenset())
        ]
        while stack:
            current, used = stack.pop()
            expansions = self._expand(current, used)
            if expansions is None:
                if current.lower() in dictionary:
                    return current.upper()
                continue
            # Reversed so the first candidate is explored first
            stack.extend(reversed(expansions))

        return None

    def _expand(
        self,
        word: str,
        used: frozenset[tuple[str, int]],
    ) -> list[tuple[str, frozenset[tuple[str, int]]]] | None:
        """
        Substitute the first special character in a word.

        Returns None when nothing is left to substitute.
        """
        # Only the first alias found is handled; the rest wait for later passes
        for marker, candidates in self.aliases.items():
            if marker not in word:
                continue
            expansions = []
            for index, letter in enumerate(candidates):
                if (marker, index) in used:
                    continue
                expansions.append(
                    (word.replace(marker, letter, 1), used | {(marker, index)})
                )
            return expansions

        if WILDCARD in word:
            return [(word.replace(WILDCARD, letter, 1), used) for letter in ALPHABET]

        return None

    # ------------------------------------------------------------------
    # Battles
    # ------------------------------------------------------------------

    def battle(
        self,
        attackers: Sequence[str],
        defenders: Sequence[str],
        battle_rules: BattleRules,
        external_dictionary: WordDict | None = None,
        defender_dictionary: WordDict | None = None,
    ) -> BattleReport | None:
        """
        Decide a battle between two groups of words.

        No battle happens if either side is empty. The defender wins if
        any attacking word is invalid, or if every defending word is
        valid and long enough to hold against the longest attacker.
        Otherwise the attacker wins and the weak defenders are listed.

        defender_dictionary defaults to external_dictionary.
        """
        if not attackers or not defenders:
            return None

        if defender_dictionary is None:
            defender_dictionary = external_dictionary

        report = BattleReport(
            attackers=[
                self._battle_word(word, external_dictionary) for word in attackers
            ],
            defenders=[
                BattleWord(original_word=word, word=word, valid=None)
                for word in defenders
            ],
            outcome=DefenderWins(),
        )

        # Defenders are not judged once any attacker fails
        if any(word.valid is False for word in report.attackers):
            log.debug("Battle %s: attacker invalid", report)
            return report

        report.defenders = [
            self._battle_word(word, defender_dictionary) for word in defenders
        ]

        if any(INSTANT_WIN in word for word in attackers):
            report.outcome = AttackerWins([])
            return report

        longest_attacker = max(len(word) for word in attackers)
        weak_defenders = [
            index for index, word in enumerate(report.defenders)
            if word.valid is not True
            or len(word.word) + battle_rules.length_delta <= longest_attacker
        ]

        if weak_defenders:
            report.outcome = AttackerWins(weak_defenders)
        log.debug("Battle %s", report)
        return report

    def _battle_word(self, word: str, dictionary: WordDict | None) -> BattleWord:
        resolved = self.valid(word, dictionary)
        return BattleWord(
            original_word=word,
            word=resolved if resolved is not None else word,
            valid=resolved is not None,
        )

    # ------------------------------------------------------------------
    # Victory
    # ------------------------------------------------------------------

    @staticmethod
    def winner(board: Board) -> int | None:
        """
        The player touching an opponent's town, if any.

        Only the first winning tile found is reported.
        """
        for town_coord in board.towns():
            town = board.get(town_coord)
            if not isinstance(town, Town):
                raise BoardInvariantError(
                    f"Cached town at {town_coord} holds {town!r}; "
                    "was cache_special_squares() skipped?"
                )
            for neighbor in board.neighbors_4(town_coord):
                square = board.get(neighbor)
                if isinstance(square, Occupied) and square.player != town.player:
                    return square.player
        return None
