"""Document-level coherence validation.

Four independent checks, each yielding zero or more findings:
- Semantic: abrupt topic shifts between adjacent sentences with no
  connective, and opposite sentiment about the same topic
- Temporal: sequence markers out of order (a step after "finally") and
  event orderings that reverse an earlier one ("A before B" ... "B before A")
- Causal: circular claims (A causes B ... B causes A)
- Reference: pronouns with no antecedent in the look-back window

Empty or single-sentence input yields nothing: there is no sequence to check.
Confidences are on a 0-100 scale and always positive.
"""

import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Sequence, Tuple

from loguru import logger

from verity_system.analyzers.extraction.segmentation import (
    Sentence,
    contains_phrase,
    content_words,
    jaccard,
    split_sentences,
    tokenize,
)
from verity_system.analyzers.logic.contradiction_detector import subject_key
from verity_system.config import scoring
from verity_system.config.logic_lexicon import (
    BACKWARD_CAUSAL_INDICATORS,
    DETERMINERS,
    DISCOURSE_CONNECTIVES,
    EVENT_FILLER_WORDS,
    EVENT_ORDER_MARKERS,
    EXPLETIVE_IT_PATTERN,
    FORWARD_CAUSAL_INDICATORS,
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    REFERENCE_PRONOUNS,
    SEQUENCE_MARKERS,
    TERMINAL_SEQUENCE_RANK,
)
from verity_system.data_management.schemas.common_schema import Severity
from verity_system.data_management.schemas.content_schema import (
    EntityType,
    ExtractedEntity,
    TextLocation,
)

_ANTECEDENT_ENTITY_TYPES = {
    EntityType.PERSON,
    EntityType.ORGANIZATION,
    EntityType.LEGAL_ENTITY,
    EntityType.REGULATION,
}
_NOUN_PHRASE = re.compile(
    r"\b(?:" + "|".join(sorted(DETERMINERS)) + r")\s+(?:[a-z][\w-]*\s+){0,2}[a-z][\w-]{2,}",
    re.IGNORECASE,
)
_CAPITALIZED = re.compile(r"\b[A-Z][a-zA-Z]+\b")
_PRONOUN = re.compile(r"\b(" + "|".join(sorted(REFERENCE_PRONOUNS)) + r")\b", re.IGNORECASE)
_EXPLETIVE_IT = re.compile(EXPLETIVE_IT_PATTERN, re.IGNORECASE)


@dataclass(frozen=True)
class CoherenceIssue:
    """A coherence finding before conversion to a pipeline Issue.

    Attributes:
        category: semantic_incoherence, semantic_contradiction,
            temporal_inconsistency, causal_inconsistency or reference_error
        severity: Ordinal severity
        location: Span of the offending (later) text
        description: Human-readable explanation
        evidence: Offending sentence(s), earliest first
        confidence: 0-100, strictly positive
    """

    category: str
    severity: Severity
    location: TextLocation
    description: str
    evidence: Tuple[str, ...]
    confidence: float


@dataclass(frozen=True)
class _EventOrder:
    earlier: FrozenSet[str]
    later: FrozenSet[str]
    sentence: Sentence


@dataclass(frozen=True)
class _CausalRelation:
    cause: FrozenSet[str]
    effect: FrozenSet[str]
    sentence: Sentence


@dataclass
class _SequenceState:
    last_rank: int = 0
    terminal: Optional[Sentence] = None
    previous: Optional[Sentence] = field(default=None)


class CoherenceValidator:
    """Discourse-level coherence checks over a whole document."""

    def __init__(
        self,
        lookback_chars: int = scoring.REFERENCE_LOOKBACK_CHARS,
        sentiment_window: int = scoring.SENTIMENT_WINDOW,
    ):
        """
        Initialize coherence validator.

        Args:
            lookback_chars: Characters before a pronoun searched for an antecedent
            sentiment_window: Earlier sentences compared for sentiment conflicts
        """
        self.lookback_chars = lookback_chars
        self.sentiment_window = sentiment_window
        self._logger = logger.bind(component="CoherenceValidator")
        self._causal_indicators = sorted(
            [(i, "forward") for i in FORWARD_CAUSAL_INDICATORS]
            + [(i, "backward") for i in BACKWARD_CAUSAL_INDICATORS],
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
        self._order_markers = sorted(EVENT_ORDER_MARKERS.items(), key=lambda p: len(p[0]), reverse=True)

    def validate(
        self,
        text: str,
        entities: Sequence[ExtractedEntity] = (),
    ) -> List[CoherenceIssue]:
        """Run all four checks over ``text``.

        Args:
            text: Document text.
            entities: Known entities, used as antecedents for pronouns.

        Returns:
            Findings ordered by location.
        """
        sentences = split_sentences(text)
        if len(sentences) < 2:
            return []

        issues: List[CoherenceIssue] = []
        issues.extend(self.check_semantic_coherence(sentences))
        issues.extend(self.check_temporal_consistency(text, sentences))
        issues.extend(self.check_causal_consistency(sentences))
        issues.extend(self.check_references(text, sentences, entities))

        issues.sort(key=lambda i: (i.location.start, i.category))
        self._logger.debug(f"{len(issues)} coherence issue(s) in {len(sentences)} sentences")
        return issues

    # ── Semantic ──────────────────────────────────────────────────────────

    def check_semantic_coherence(self, sentences: Sequence[Sentence]) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []
        topics = [set(content_words(tokenize(s.text), min_length=3)) for s in sentences]

        for i in range(1, len(sentences)):
            previous, current = sentences[i - 1], sentences[i]
            if (
                len(topics[i - 1]) >= scoring.TOPIC_SHIFT_MIN_WORDS
                and len(topics[i]) >= scoring.TOPIC_SHIFT_MIN_WORDS
                and jaccard(topics[i - 1], topics[i]) < scoring.TOPIC_SHIFT_SIMILARITY
                and not self._has_connective(current)
                and not self._opens_with_reference(current)
            ):
                issues.append(
                    CoherenceIssue(
                        category="semantic_incoherence",
                        severity=Severity.LOW,
                        location=current.location,
                        description="Abrupt topic shift without a transition",
                        evidence=(previous.text, current.text),
                        confidence=scoring.TOPIC_SHIFT_CONFIDENCE,
                    )
                )

        for i, current in enumerate(sentences):
            polarity = self._polarity(current)
            if polarity == 0:
                continue
            for j in range(max(0, i - self.sentiment_window), i):
                earlier = sentences[j]
                earlier_polarity = self._polarity(earlier)
                if earlier_polarity == 0 or earlier_polarity == polarity:
                    continue
                topic_a = self._topic_words(earlier)
                topic_b = self._topic_words(current)
                similarity = jaccard(topic_a, topic_b)
                if similarity > scoring.SENTIMENT_TOPIC_SIMILARITY:
                    issues.append(
                        CoherenceIssue(
                            category="semantic_contradiction",
                            severity=Severity.HIGH,
                            location=current.location,
                            description="Opposite assessments of the same topic",
                            evidence=(earlier.text, current.text),
                            confidence=scoring.SENTIMENT_CONTRADICTION_CONFIDENCE,
                        )
                    )
                    break
        return issues

    # ── Temporal ──────────────────────────────────────────────────────────

    def check_temporal_consistency(
        self, text: str, sentences: Sequence[Sentence]
    ) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []
        state = _SequenceState()

        for sentence in sentences:
            if state.previous is not None and self._paragraph_break(text, state.previous, sentence):
                state = _SequenceState()
            state.previous = sentence

            tokens = tokenize(sentence.text)
            rank = SEQUENCE_MARKERS.get(tokens[0]) if tokens else None
            if rank is None:
                continue

            if state.terminal is not None:
                issues.append(
                    CoherenceIssue(
                        category="temporal_inconsistency",
                        severity=Severity.MEDIUM,
                        location=sentence.location,
                        description=f"Step '{tokens[0]}' appears after the sequence was concluded",
                        evidence=(state.terminal.text, sentence.text),
                        confidence=scoring.TEMPORAL_ORDER_CONFIDENCE,
                    )
                )
            elif rank == 1 and state.last_rank > 1:
                issues.append(
                    CoherenceIssue(
                        category="temporal_inconsistency",
                        severity=Severity.MEDIUM,
                        location=sentence.location,
                        description=f"'{tokens[0]}' appears after later steps of the sequence",
                        evidence=(sentence.text,),
                        confidence=scoring.TEMPORAL_ORDER_CONFIDENCE,
                    )
                )

            state.last_rank = rank
            if rank >= TERMINAL_SEQUENCE_RANK and state.terminal is None:
                state.terminal = sentence

        orders: List[_EventOrder] = []
        for sentence in sentences:
            order = self._event_order(sentence)
            if order is None:
                continue
            for previous in orders:
                if self._same_event(order.earlier, previous.later) and self._same_event(
                    order.later, previous.earlier
                ):
                    issues.append(
                        CoherenceIssue(
                            category="temporal_inconsistency",
                            severity=Severity.MEDIUM,
                            location=sentence.location,
                            description="Event order reverses an order stated earlier",
                            evidence=(previous.sentence.text, sentence.text),
                            confidence=scoring.TEMPORAL_ORDER_CONFIDENCE,
                        )
                    )
                    break
            orders.append(order)
        return issues

    def _event_order(self, sentence: Sentence) -> Optional[_EventOrder]:
        lower = sentence.lower
        for marker, relation in self._order_markers:
            match = re.search(rf"\b{re.escape(marker)}\b", lower)
            if match is None:
                continue
            left = lower[:match.start()].strip(" ,")
            right = lower[match.end():].strip(" ,")
            if not left and "," in right:
                subordinate, main = right.split(",", 1)
                # "Before X, Y": Y precedes X. "After X, Y": X precedes Y.
                if relation == "precedes":
                    earlier, later = main, subordinate
                else:
                    earlier, later = subordinate, main
            elif left and right:
                if relation == "precedes":
                    earlier, later = left, right
                else:
                    earlier, later = right, left
            else:
                return None
            earlier_key = self._event_key(earlier)
            later_key = self._event_key(later)
            if not earlier_key or not later_key:
                return None
            return _EventOrder(earlier=earlier_key, later=later_key, sentence=sentence)
        return None

    @staticmethod
    def _event_key(fragment: str) -> FrozenSet[str]:
        return frozenset(
            t for t in content_words(tokenize(fragment), min_length=3)
            if t not in EVENT_FILLER_WORDS
        )

    @staticmethod
    def _same_event(a: FrozenSet[str], b: FrozenSet[str]) -> bool:
        return jaccard(a, b) >= scoring.EVENT_MATCH_SIMILARITY

    @staticmethod
    def _paragraph_break(text: str, previous: Sentence, current: Sentence) -> bool:
        between = text[previous.location.end:current.location.start]
        return re.search(r"\n\s*\n", between) is not None

    # ── Causal ────────────────────────────────────────────────────────────

    def check_causal_consistency(self, sentences: Sequence[Sentence]) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []
        relations: List[_CausalRelation] = []

        for sentence in sentences:
            relation = self._causal_relation(sentence)
            if relation is None:
                continue
            for previous in relations:
                if self._same_event(relation.cause, previous.effect) and self._same_event(
                    relation.effect, previous.cause
                ):
                    issues.append(
                        CoherenceIssue(
                            category="causal_inconsistency",
                            severity=Severity.HIGH,
                            location=sentence.location,
                            description="Circular causality: cause and effect are reversed",
                            evidence=(previous.sentence.text, sentence.text),
                            confidence=scoring.CAUSAL_CIRCULAR_CONFIDENCE,
                        )
                    )
                    break
            relations.append(relation)
        return issues

    def _causal_relation(self, sentence: Sentence) -> Optional[_CausalRelation]:
        lower = sentence.lower
        best = None
        for indicator, direction in self._causal_indicators:
            match = re.search(rf"\b{re.escape(indicator)}\b", lower)
            if match is not None and (best is None or match.start() < best[0].start()):
                best = (match, direction)
        if best is None:
            return None

        match, direction = best
        left_key = self._event_key(lower[:match.start()])
        right_key = self._event_key(lower[match.end():])
        if not left_key or not right_key:
            return None
        if direction == "forward":
            return _CausalRelation(cause=left_key, effect=right_key, sentence=sentence)
        return _CausalRelation(cause=right_key, effect=left_key, sentence=sentence)

    # ── References ────────────────────────────────────────────────────────

    def check_references(
        self,
        text: str,
        sentences: Sequence[Sentence],
        entities: Sequence[ExtractedEntity] = (),
    ) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []
        antecedent_entities = [e for e in entities if e.type in _ANTECEDENT_ENTITY_TYPES]

        for sentence in sentences:
            for match in _PRONOUN.finditer(sentence.text):
                position = sentence.location.start + match.start()
                pronoun = match.group(1)
                if pronoun.lower() == "it" and _EXPLETIVE_IT.match(sentence.text[match.start():].lower()):
                    continue
                if self._has_antecedent(text, position, sentences, antecedent_entities):
                    continue
                issues.append(
                    CoherenceIssue(
                        category="reference_error",
                        severity=Severity.MEDIUM,
                        location=TextLocation.from_span(text, position, position + len(pronoun)),
                        description=f"Pronoun '{pronoun}' has no identifiable antecedent",
                        evidence=(sentence.text,),
                        confidence=scoring.REFERENCE_ERROR_CONFIDENCE,
                    )
                )
                # one unresolved pronoun per sentence is enough signal
                break
        return issues

    def _has_antecedent(
        self,
        text: str,
        position: int,
        sentences: Sequence[Sentence],
        entities: Sequence[ExtractedEntity],
    ) -> bool:
        window_start = max(0, position - self.lookback_chars)

        for entity in entities:
            if window_start <= entity.location.start < position:
                return True

        window = text[window_start:position]
        if _NOUN_PHRASE.search(window):
            return True

        for match in _CAPITALIZED.finditer(window):
            if match.group(0).lower() in REFERENCE_PRONOUNS:
                continue
            before = window[:match.start()].rstrip()
            if before and before[-1] not in ".!?":
                return True

        for sentence in sentences:
            if sentence.location.start >= position:
                break
            if sentence.location.end < window_start:
                continue
            if sentence.location.end <= position and subject_key(tokenize(sentence.text)):
                return True
        return False

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    def _has_connective(sentence: Sentence) -> bool:
        return any(contains_phrase(sentence.lower, c) for c in DISCOURSE_CONNECTIVES)

    @staticmethod
    def _opens_with_reference(sentence: Sentence) -> bool:
        tokens = tokenize(sentence.text)
        return bool(tokens) and (tokens[0] in REFERENCE_PRONOUNS or tokens[0] in {"this", "these", "that", "those", "such"})

    @staticmethod
    def _topic_words(sentence: Sentence) -> set:
        return {
            t for t in content_words(tokenize(sentence.text), min_length=3)
            if t not in POSITIVE_WORDS and t not in NEGATIVE_WORDS
        }

    @staticmethod
    def _polarity(sentence: Sentence) -> int:
        tokens = tokenize(sentence.text)
        positive = sum(1 for t in tokens if t in POSITIVE_WORDS)
        negative = sum(1 for t in tokens if t in NEGATIVE_WORDS)
        if positive > negative:
            return 1
        if negative > positive:
            return -1
        return 0
