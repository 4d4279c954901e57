"""Hot-word counting over chat history."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, Mapping

MAX_MESSAGES = 10000
DEFAULT_MESSAGES = 1000

_CHINESE = re.compile(r"[\u4e00-\u9fa5]+")


class StopWords:
    """A set of words excluded from counting."""

    def __init__(self, words: Iterable[str]) -> None:
        self.words = tuple(sorted(words))
        self._set = frozenset(self.words)

    @classmethod
    def from_text(cls, text: str) -> "StopWords":
        """Load stop words from a newline separated file's contents."""
        return cls(text.replace("\r", "").split("\n"))

    def __contains__(self, word: object) -> bool:
        return word in self._set

    def __len__(self) -> int:
        return len(self.words)


def is_chinese_word(word: str) -> bool:
    """True when ``word`` is made only of common CJK ideographs."""
    return _CHINESE.fullmatch(word) is not None


def count_words(slices: Iterable[str], stopwords: StopWords) -> Counter:
    """Count Chinese words among segmented text, skipping stop words."""
    counts: Counter = Counter()
    for piece in slices:
        word = piece.strip()
        if is_chinese_word(word) and word not in stopwords:
            counts[word] += 1
    return counts


def rank_by_word_count(freq: Mapping[str, int]) -> list[tuple[str, int]]:
    """Words with their counts, most frequent first."""
    return sorted(freq.items(), key=lambda kv: (-kv[1], kv[0]))


def clamp_message_count(p: int) -> int:
    """Number of history messages to scan for a requested count."""
    if p > MAX_MESSAGES:
        return MAX_MESSAGES
    if p == 0:
        return DEFAULT_MESSAGES
    return p