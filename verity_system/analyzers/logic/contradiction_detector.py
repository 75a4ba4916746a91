"""Pairwise contradiction detection between sentences of one document.

Contradiction types, checked in priority order per sentence pair:
- Direct negation: "X is secure" vs "X is not secure" (direct, high); the
  negated predicate must match the asserted one, so "X is fast" and
  "X is not slow" do not collide
- Antonym/qualifier: "always" vs "never", "increasing" vs "decreasing" (direct, medium)
- Implicit polarity: "excellent and successful" vs "terrible and failed" (implicit, medium)
- Temporal: "A happened before B" vs "A happened after B" (temporal, medium)

Only sentences about the same subject are compared. Sentences are bucketed
by subject key (content words before the main verb) and each sentence is
compared with at most CONTRADICTION_WINDOW earlier sentences in its bucket,
so cost grows linearly with document length. Subject matching is exact:
"the new system" and "the old system" never collide.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from loguru import logger

from verity_system.analyzers.extraction.segmentation import (
    Sentence,
    contains_phrase,
    content_words,
    is_negated,
    jaccard,
    split_sentences,
    strip_negation,
    tokenize,
)
from verity_system.config import scoring
from verity_system.config.logic_lexicon import (
    ANTONYM_PAIRS,
    DISCOURSE_CONNECTIVES,
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    PREDICATE_SYNONYMS,
    PRONOUN_SUBJECTS,
    QUALIFIER_PAIRS,
    STOP_WORDS,
    SUBJECT_BOUNDARY_WORDS,
    TEMPORAL_PAIRS,
)
from verity_system.data_management.schemas.common_schema import Severity
from verity_system.data_management.schemas.issue_schema import (
    Contradiction,
    ContradictionType,
)

_SINGLE_WORD_CONNECTIVES = {c for c in DISCOURSE_CONNECTIVES if " " not in c}


@dataclass(frozen=True)
class _Statement:
    """A sentence prepared for comparison."""

    sentence: Sentence
    tokens: Tuple[str, ...]
    subject: Tuple[str, ...]
    negated: bool
    predicate: FrozenSet[str]

    @property
    def lower(self) -> str:
        return self.sentence.lower


def subject_key(tokens: Sequence[str]) -> Tuple[str, ...]:
    """Content words before the first subject boundary verb.

    Falls back to the first content word when no boundary verb occurs in
    the first eight tokens. Returns () when the subject is a pronoun.
    """
    positive = strip_negation(tokens)
    head: List[str] = []
    boundary_found = False
    for token in positive[:8]:
        if token in SUBJECT_BOUNDARY_WORDS:
            boundary_found = True
            break
        head.append(token)

    if not boundary_found:
        words = content_words(positive)
        head = words[:1]

    if head and head[0] in PRONOUN_SUBJECTS:
        return ()
    return tuple(
        t for t in head
        if t not in STOP_WORDS and t not in _SINGLE_WORD_CONNECTIVES
    )


class ContradictionDetector:
    """Finds pairs of statements that cannot both hold."""

    def __init__(
        self,
        window: int = scoring.CONTRADICTION_WINDOW,
        negation_similarity: float = scoring.NEGATION_SIMILARITY_THRESHOLD,
        antonym_context_similarity: float = scoring.ANTONYM_CONTEXT_THRESHOLD,
    ):
        """
        Initialize contradiction detector.

        Args:
            window: Earlier same-subject sentences each sentence is compared with
            negation_similarity: Minimum overlap of the two predicates (subject
                and negation removed, synonyms folded)
            antonym_context_similarity: Minimum overlap of the non-antonym words
        """
        self.window = window
        self.negation_similarity = negation_similarity
        self.antonym_context_similarity = antonym_context_similarity
        self._logger = logger.bind(component="ContradictionDetector")

    def detect(self, text: str) -> List[Contradiction]:
        """Detect contradictions in ``text``.

        Returns:
            Contradictions ordered by the position of their first statement,
            each with location1 preceding location2.
        """
        sentences = split_sentences(text)
        if len(sentences) < 2:
            return []
        return self.detect_in_sentences(sentences)

    def detect_in_sentences(self, sentences: Sequence[Sentence]) -> List[Contradiction]:
        buckets: Dict[Tuple[str, ...], List[_Statement]] = {}
        contradictions: List[Contradiction] = []

        for sentence in sentences:
            statement = self._prepare(sentence)
            if not statement.subject:
                continue
            bucket = buckets.setdefault(statement.subject, [])
            for earlier in bucket[-self.window:]:
                found = self._compare(earlier, statement)
                if found is not None:
                    contradictions.append(found)
            bucket.append(statement)

        contradictions.sort(key=lambda c: (c.location1.start, c.location2.start))
        self._logger.debug(
            f"Found {len(contradictions)} contradictions in {len(sentences)} sentences"
        )
        return contradictions

    def _prepare(self, sentence: Sentence) -> _Statement:
        tokens = tuple(tokenize(sentence.text))
        subject = subject_key(tokens)
        predicate = frozenset(
            PREDICATE_SYNONYMS.get(t, t)
            for t in content_words(strip_negation(tokens))
            if t not in subject
        )
        return _Statement(
            sentence=sentence,
            tokens=tokens,
            subject=subject,
            negated=is_negated(tokens),
            predicate=predicate,
        )

    def _compare(self, first: _Statement, second: _Statement) -> Optional[Contradiction]:
        """Apply the detection rules in priority order."""
        for check in (
            self._check_negation,
            self._check_antonyms,
            self._check_polarity,
            self._check_temporal,
        ):
            found = check(first, second)
            if found is not None:
                return found
        return None

    def _check_negation(self, a: _Statement, b: _Statement) -> Optional[Contradiction]:
        if a.negated == b.negated or not a.predicate or not b.predicate:
            return None
        # the negated predicate must be the one the other statement asserts
        shared = a.predicate & b.predicate
        overlap = len(shared) / min(len(a.predicate), len(b.predicate))
        if overlap <= self.negation_similarity:
            return None
        confidence = min(
            scoring.CONTRADICTION_CONFIDENCE_CAP,
            max(scoring.NEGATION_MIN_CONFIDENCE, jaccard(a.predicate, b.predicate) * 100),
        )
        return self._build(
            a, b,
            ContradictionType.DIRECT,
            Severity.HIGH,
            confidence,
            "One statement negates the other about the same subject",
        )

    def _check_antonyms(self, a: _Statement, b: _Statement) -> Optional[Contradiction]:
        pairs = list(QUALIFIER_PAIRS)
        # "is fast" and "is not slow" agree
        if a.negated == b.negated:
            pairs += ANTONYM_PAIRS
        for word_a, word_b in pairs:
            pair = self._opposed(a, b, word_a, word_b)
            if pair is None:
                continue
            similarity = self._context_similarity(a, b, pair)
            if similarity <= self.antonym_context_similarity:
                continue
            confidence = min(
                scoring.CONTRADICTION_CONFIDENCE_CAP,
                max(scoring.ANTONYM_MIN_CONFIDENCE, similarity * 100),
            )
            return self._build(
                a, b,
                ContradictionType.DIRECT,
                Severity.MEDIUM,
                confidence,
                f"Mutually exclusive terms '{pair[0]}' and '{pair[1]}' applied to the same subject",
            )
        return None

    def _check_polarity(self, a: _Statement, b: _Statement) -> Optional[Contradiction]:
        polarity_a = self._polarity(a)
        polarity_b = self._polarity(b)
        if polarity_a == 0 or polarity_b == 0 or polarity_a == polarity_b:
            return None
        return self._build(
            a, b,
            ContradictionType.IMPLICIT,
            Severity.MEDIUM,
            scoring.IMPLICIT_CONFIDENCE,
            "Statements about the same subject carry opposite sentiment",
        )

    def _check_temporal(self, a: _Statement, b: _Statement) -> Optional[Contradiction]:
        for word_a, word_b in TEMPORAL_PAIRS:
            pair = self._opposed(a, b, word_a, word_b)
            if pair is None:
                continue
            if self._context_similarity(a, b, pair) <= self.antonym_context_similarity:
                continue
            return self._build(
                a, b,
                ContradictionType.TEMPORAL,
                Severity.MEDIUM,
                scoring.TEMPORAL_CONTRADICTION_CONFIDENCE,
                f"Incompatible ordering: '{pair[0]}' versus '{pair[1]}' for the same event",
            )
        return None

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _opposed(
        a: _Statement, b: _Statement, word_a: str, word_b: str
    ) -> Optional[Tuple[str, str]]:
        """Return the pair as it appears in (a, b) order if a and b take opposite sides."""
        a_has_first = contains_phrase(a.lower, word_a)
        a_has_second = contains_phrase(a.lower, word_b)
        b_has_first = contains_phrase(b.lower, word_a)
        b_has_second = contains_phrase(b.lower, word_b)
        if a_has_first and not a_has_second and b_has_second and not b_has_first:
            return word_a, word_b
        if a_has_second and not a_has_first and b_has_first and not b_has_second:
            return word_b, word_a
        return None

    @staticmethod
    def _context_similarity(a: _Statement, b: _Statement, pair: Tuple[str, str]) -> float:
        excluded = set(pair[0].split()) | set(pair[1].split())
        words_a = [t for t in content_words(a.tokens) if t not in excluded]
        words_b = [t for t in content_words(b.tokens) if t not in excluded]
        return jaccard(words_a, words_b)

    @staticmethod
    def _polarity(statement: _Statement) -> int:
        positive = sum(1 for t in statement.tokens if t in POSITIVE_WORDS)
        negative = sum(1 for t in statement.tokens if t in NEGATIVE_WORDS)
        if statement.negated:
            positive, negative = negative, positive
        if positive > negative:
            return 1
        if negative > positive:
            return -1
        return 0

    @staticmethod
    def _build(
        a: _Statement,
        b: _Statement,
        contradiction_type: ContradictionType,
        severity: Severity,
        confidence: float,
        explanation: str,
    ) -> Contradiction:
        return Contradiction(
            type=contradiction_type,
            statement1=a.sentence.text,
            statement2=b.sentence.text,
            location1=a.sentence.location,
            location2=b.sentence.location,
            explanation=explanation,
            confidence=confidence,
            severity=severity,
        )
