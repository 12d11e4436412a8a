"""
Readability metrics
Flesch reading ease over plain text, vowel-group syllable heuristic
"""

import re
from dataclasses import dataclass
from typing import List

_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'-]*")
_SENTENCE_RE = re.compile(r"[.!?]+")
_VOWELS = set("aeiouy")


class ReadabilityError(ValueError):
    """Text has no scorable words"""


@dataclass
class ReadabilityStats:
    words: int
    sentences: int
    syllables: int
    reading_ease: float  # 0-100, higher is easier


def count_syllables(word: str) -> int:
    """Count syllables in a word using vowel groups, minimum 1"""
    word = re.sub(r"[^a-z]", "", word.lower())
    if not word:
        return 0

    count = 0
    prev_vowel = False
    for char in word:
        is_vowel = char in _VOWELS
        if is_vowel and not prev_vowel:
            count += 1
        prev_vowel = is_vowel

    # Silent e
    if word.endswith("e") and len(word) > 2 and word[-2] not in _VOWELS:
        count -= 1

    # "table", "little"
    if len(word) > 2 and word.endswith("le") and word[-3] not in _VOWELS and count == 0:
        count += 1

    return max(1, count)


def words_of(text: str) -> List[str]:
    return _WORD_RE.findall(text or "")


def count_sentences(text: str) -> int:
    """Sentence count, at least 1 for any non-blank text"""
    pieces = [p for p in _SENTENCE_RE.split(text or "") if p.strip()]
    return max(1, len(pieces))


def flesch_reading_ease(text: str) -> ReadabilityStats:
    """
    Flesch reading ease of text, clamped to [0, 100].

    FRE = 206.835 - 1.015 * (words/sentences) - 84.6 * (syllables/words)

    Raises:
        ReadabilityError: text contains no words
    """
    words = words_of(text)
    if not words:
        raise ReadabilityError("no words to score")

    sentences = count_sentences(text)
    syllables = sum(count_syllables(w) for w in words)

    asl = len(words) / sentences
    asw = syllables / len(words)
    ease = 206.835 - 1.015 * asl - 84.6 * asw

    return ReadabilityStats(
        words=len(words),
        sentences=sentences,
        syllables=syllables,
        reading_ease=max(0.0, min(100.0, ease)),
    )
