"""Word lists for the judge and the NPC dictionaries.

A word list has one word per line:

    word extensions rel_freq

A leading ``*`` on the word marks it objectionable. Keys are stored
lower-cased, the form the Judge looks them up in.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable

from .engine_core.judge import WordData, WordDict

log = logging.getLogger("truncate.dictionary")

# Words rarer than this stay out of the NPC's restricted dictionary
DEFAULT_MIN_FREQ = 0.2


class DictionaryFormatError(ValueError):
    """A word list line could not be parsed."""

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"Line {line_number}: {reason}: {line!r}")


def parse_word_list(lines: Iterable[str]) -> WordDict:
    words: WordDict = {}
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue

        chunks = line.split()
        if len(chunks) != 3:
            raise DictionaryFormatError(line_number, line, "expected 3 fields")

        word, extensions, rel_freq = chunks
        objectionable = word.startswith("*")
        if objectionable:
            word = word[1:]
        if not word:
            raise DictionaryFormatError(line_number, line, "empty word")

        try:
            data = WordData(
                extensions=int(extensions),
                rel_freq=float(rel_freq),
                objectionable=objectionable,
            )
        except ValueError as e:
            raise DictionaryFormatError(line_number, line, str(e)) from e

        words[word.lower()] = data
    return words


def load_word_dict(path: str | os.PathLike) -> WordDict:
    with open(path, "r", encoding="utf-8") as f:
        words = parse_word_list(f)
    log.info("Loaded %s words from %s", f"{len(words):,}", path)
    return words


@dataclass
class NpcDictionaries:
    """
    What an NPC knows.

    ``total`` is the full word list, used to judge the NPC's moves.
    ``restricted`` is the smaller vocabulary it searches with; it grows
    as battles reveal valid words.
    """
    total: WordDict
    restricted: WordDict = field(default_factory=dict)

    @classmethod
    def from_total(
        cls,
        total: WordDict,
        max_objectionable: bool = False,
        min_freq: float = DEFAULT_MIN_FREQ,
    ) -> NpcDictionaries:
        """Restrict to common words, and drop objectionable ones unless allowed."""
        restricted = {
            word: data for word, data in total.items()
            if data.rel_freq >= min_freq and (max_objectionable or not data.objectionable)
        }
        log.debug("Restricted dictionary holds %d of %d words", len(restricted), len(total))
        return cls(total=total, restricted=restricted)

    def remember(self, word: str) -> bool:
        """
        Add a word from the total dictionary to the restricted one.

        Returns True if the word was newly learned.
        """
        key = word.lower()
        if key in self.restricted or key not in self.total:
            return False
        self.restricted[key] = self.total[key]
        log.debug("NPC learned %s", key)
        return True
