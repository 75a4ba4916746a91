"""Tests for sentence segmentation and token helpers.

Tests cover:
- Sentence boundaries (decimals, blank lines, short fragments)
- Sentence locations map back into the source text
- Tokenization of contractions and negation handling
- Set similarity and phrase containment
"""

import pytest

from verity_system.analyzers.extraction.segmentation import (
    contains_phrase,
    content_words,
    context_window,
    is_negated,
    jaccard,
    split_sentences,
    strip_negation,
    tokenize,
)


class TestSplitSentences:
    """Boundary detection."""

    def test_empty_text(self):
        assert split_sentences("") == []

    def test_decimal_does_not_split(self):
        text = "The rate is 3.5 percent today. Second sentence here!"
        sentences = split_sentences(text)
        assert [s.text for s in sentences] == [
            "The rate is 3.5 percent today",
            "Second sentence here",
        ]

    def test_locations_index_source_text(self):
        text = "The rate is 3.5 percent today. Second sentence here!"
        for sentence in split_sentences(text):
            loc = sentence.location
            assert text[loc.start:loc.end] == sentence.text

    def test_indexes_are_sequential(self):
        text = "First sentence is here. Second sentence is here. Third one is here too."
        assert [s.index for s in split_sentences(text)] == [0, 1, 2]

    def test_short_fragments_dropped(self):
        assert split_sentences("Ok. Fine. Yes.") == []

    def test_blank_line_breaks_sentence(self):
        text = "Heading without a period\n\nBody text continues here."
        assert [s.text for s in split_sentences(text)] == [
            "Heading without a period",
            "Body text continues here",
        ]

    def test_second_line_location(self):
        text = "Heading without a period\n\nBody text continues here."
        body = split_sentences(text)[1]
        assert body.location.line == 3
        assert body.location.column == 1


class TestTokens:
    """Tokenization and negation helpers."""

    def test_tokenize_keeps_contractions(self):
        assert tokenize("It isn't SAFE") == ["it", "isn't", "safe"]

    def test_tokenize_normalizes_curly_apostrophe(self):
        assert tokenize("It isn’t") == ["it", "isn't"]

    @pytest.mark.parametrize(
        "tokens,expected",
        [
            (["is", "not", "safe"], True),
            (["doesn't", "work"], True),
            (["is", "safe"], False),
        ],
    )
    def test_is_negated(self, tokens, expected):
        assert is_negated(tokens) is expected

    def test_strip_negation(self):
        assert strip_negation(["it", "isn't", "safe"]) == ["it", "is", "safe"]
        assert strip_negation(["not", "safe"]) == ["safe"]

    def test_content_words_drop_stop_and_negation(self):
        assert content_words(["the", "patient", "not", "is", "x"], min_length=2) == ["patient"]


class TestSimilarity:
    """Jaccard, phrase containment and context windows."""

    def test_jaccard_empty(self):
        assert jaccard([], []) == 0.0

    def test_jaccard_partial(self):
        assert jaccard(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)

    def test_contains_phrase_whole_word(self):
        assert contains_phrase("the patient record", "patient")
        assert contains_phrase("the medical record is here", "medical record")
        assert not contains_phrase("outpatient care", "patient")

    def test_context_window_clamped(self):
        assert context_window("abcdef", 1, 2, 10) == "abcdef"
        assert context_window("abcdef", 2, 3, 1) == "bcd"
