"""Sentence segmentation and token helpers shared by the analyzers.

Sentences end at '.', '!' or '?' followed by whitespace or end of text,
or at a blank line. Decimal points and URLs therefore do not split.
Sentences of MIN_SENTENCE_LENGTH characters or fewer are dropped.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Set

from verity_system.config.logic_lexicon import (
    NEGATED_CONTRACTIONS,
    NEGATION_WORDS,
    STOP_WORDS,
)
from verity_system.data_management.schemas.content_schema import TextLocation

MIN_SENTENCE_LENGTH = 10

_SENTENCE_BREAK = re.compile(r"[.!?]+(?=\s|$)|\n\s*\n")
_TOKEN = re.compile(r"[a-z0-9]+(?:['’][a-z]+)?(?:-[a-z0-9]+)*")


@dataclass(frozen=True)
class Sentence:
    """A sentence and its span in the source text (terminator excluded)."""

    index: int
    text: str
    location: TextLocation

    @property
    def lower(self) -> str:
        return self.text.lower()


def split_sentences(text: str, min_length: int = MIN_SENTENCE_LENGTH) -> List[Sentence]:
    """Split ``text`` into located sentences.

    Args:
        text: Document text (may be empty).
        min_length: Sentences with this many characters or fewer are dropped.

    Returns:
        Sentences in document order, indexed from 0.
    """
    if not text:
        return []

    sentences: List[Sentence] = []
    cursor = 0
    boundaries = [(m.start(), m.end()) for m in _SENTENCE_BREAK.finditer(text)]
    boundaries.append((len(text), len(text)))

    for break_start, break_end in boundaries:
        raw = text[cursor:break_start]
        stripped = raw.strip()
        if len(stripped) > min_length:
            start = cursor + (len(raw) - len(raw.lstrip()))
            end = start + len(stripped)
            sentences.append(
                Sentence(
                    index=len(sentences),
                    text=stripped,
                    location=TextLocation.from_span(text, start, end),
                )
            )
        cursor = break_end

    return sentences


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens; contractions stay whole ("isn't")."""
    return _TOKEN.findall(text.lower().replace("’", "'"))


def content_words(tokens: Iterable[str], min_length: int = 1) -> List[str]:
    """Drop stop words and negations, keeping order."""
    return [
        t for t in tokens
        if t not in STOP_WORDS and t not in NEGATION_WORDS and len(t) >= min_length
    ]


def is_negated(tokens: Iterable[str]) -> bool:
    return any(t in NEGATION_WORDS or t.endswith("n't") for t in tokens)


def strip_negation(tokens: Iterable[str]) -> List[str]:
    """Remove negation words and turn negated contractions positive."""
    result = []
    for token in tokens:
        if token in NEGATED_CONTRACTIONS:
            result.append(NEGATED_CONTRACTIONS[token])
        elif token in NEGATION_WORDS:
            continue
        else:
            result.append(token)
    return result


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    set_a: Set[str] = set(a)
    set_b: Set[str] = set(b)
    if not set_a and not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def contains_phrase(text_lower: str, phrase: str) -> bool:
    """Whole-word (or whole-phrase) containment in lowercase text."""
    return re.search(rf"\b{re.escape(phrase)}\b", text_lower) is not None


def context_window(text: str, start: int, end: int, radius: int) -> str:
    return text[max(0, start - radius):min(len(text), end + radius)]
