"""Factual claim extraction.

Segments text into sentences and keeps those that read as checkable
assertions: a factual pattern matches, the sentence is 10-500 characters,
carries no question mark, and contains a verb. Each claim gets a
heuristic extraction confidence (0-100):

    base 50
    +20 if it states a percentage
    +15 if it uses an absolute qualifier (always, never, all, ...)
    +15 if it uses a modal of obligation (must, shall, ...)
    +5 per domain keyword
    -20 if hedged (might, may, possibly, ...)
    -15 if softened (seems, appears, ...)
    clamped to [10, 95]

Claims are deduplicated by normalized statement.
"""

import re
from typing import Iterator, List, Optional, Sequence, Tuple

from loguru import logger

from verity_system.analyzers.extraction.segmentation import (
    Sentence,
    context_window,
    split_sentences,
    tokenize,
)
from verity_system.config import claim_patterns as cp
from verity_system.config.scoring import CONTEXT_RADIUS
from verity_system.data_management.schemas.claim_schema import ClaimType, ExtractedClaim
from verity_system.data_management.schemas.common_schema import Domain


class ClaimStream:
    """Lazy, restartable sequence of claims for one text."""

    def __init__(self, extractor: "ClaimExtractor", text: str, domain: Optional[Domain]):
        self._extractor = extractor
        self._text = text
        self._domain = domain

    def __iter__(self) -> Iterator[ExtractedClaim]:
        return self._extractor._iter_claims(self._text, self._domain)


class ClaimExtractor:
    """Segments text into discrete factual assertions to be checked."""

    def __init__(
        self,
        factual_patterns: Optional[Sequence[Tuple[str, str]]] = None,
        max_claims: Optional[int] = None,
    ):
        """
        Initialize the extractor.

        Args:
            factual_patterns: (name, regex) pairs; defaults to config.claim_patterns
            max_claims: Stop after this many claims (None means unbounded)
        """
        self.max_claims = max_claims
        self._logger = logger.bind(component="ClaimExtractor")
        self._patterns: List[Tuple[str, re.Pattern]] = []
        for name, pattern in factual_patterns if factual_patterns is not None else cp.FACTUAL_PATTERNS:
            try:
                self._patterns.append((name, re.compile(pattern, re.IGNORECASE)))
            except re.error as e:
                self._logger.warning(f"Skipping invalid claim pattern {name}: {e}")
        self._type_signals = [
            (ClaimType(name), re.compile(pattern, re.IGNORECASE))
            for name, pattern in cp.CLAIM_TYPE_SIGNALS
        ]
        self._verb_suffix = re.compile(cp.VERB_SUFFIX_PATTERN, re.IGNORECASE)

    def extract(self, text: str, domain: Optional[Domain] = None) -> ClaimStream:
        """Return a lazy, restartable stream of claims found in ``text``."""
        return ClaimStream(self, text or "", domain)

    def extract_claims(self, text: str, domain: Optional[Domain] = None) -> List[ExtractedClaim]:
        """Materialize every claim in ``text`` in document order."""
        return list(self.extract(text, domain))

    def extract_statements(self, text: str, domain: Optional[Domain] = None) -> List[str]:
        """Claim statements only."""
        return [claim.statement for claim in self.extract(text, domain)]

    def _iter_claims(self, text: str, domain: Optional[Domain]) -> Iterator[ExtractedClaim]:
        seen = set()
        emitted = 0
        for sentence in split_sentences(text):
            if self.max_claims is not None and emitted >= self.max_claims:
                self._logger.debug(f"Claim cap of {self.max_claims} reached")
                return

            statement = sentence.text
            # the terminator is not part of the sentence text
            if text[sentence.location.end:sentence.location.end + 1] == "?":
                continue
            if not self._matches_factual_pattern(statement):
                continue
            if not self.is_valid_claim(statement):
                continue

            key = self._normalize(statement)
            if key in seen:
                continue
            seen.add(key)

            emitted += 1
            yield self._build_claim(text, sentence, domain)

    def _matches_factual_pattern(self, statement: str) -> bool:
        for name, regex in self._patterns:
            try:
                if regex.search(statement):
                    return True
            except Exception as e:
                self._logger.warning(f"Claim pattern {name} failed: {e}")
        return False

    def is_valid_claim(self, statement: str) -> bool:
        """Length bounds, not a question, and contains a verb."""
        if len(statement) < cp.MIN_CLAIM_LENGTH or len(statement) > cp.MAX_CLAIM_LENGTH:
            return False
        if "?" in statement:
            return False
        tokens = set(tokenize(statement))
        if tokens & set(cp.COMMON_VERBS):
            return True
        return self._verb_suffix.search(statement) is not None

    def classify_claim_type(self, statement: str) -> ClaimType:
        for claim_type, regex in self._type_signals:
            if regex.search(statement):
                return claim_type
        return ClaimType.FACTUAL

    def score_confidence(self, statement: str, domain: Optional[Domain] = None) -> float:
        """Heuristic extraction confidence (0-100)."""
        tokens = tokenize(statement)
        token_set = set(tokens)
        confidence = cp.CLAIM_BASE_CONFIDENCE

        if re.search(r"\d+(?:\.\d+)?\s*(?:%|percent)", statement, re.IGNORECASE):
            confidence += cp.PERCENTAGE_BONUS
        if token_set & set(cp.ABSOLUTE_WORDS):
            confidence += cp.ABSOLUTE_BONUS
        if token_set & set(cp.MODAL_WORDS):
            confidence += cp.MODAL_BONUS
        if domain is not None:
            keywords = cp.DOMAIN_KEYWORDS.get(domain.value, [])
            confidence += cp.DOMAIN_KEYWORD_BONUS * sum(1 for k in keywords if k in token_set)
        if token_set & set(cp.HEDGE_WORDS):
            confidence -= cp.HEDGE_PENALTY
        if token_set & set(cp.SEEMS_WORDS):
            confidence -= cp.SEEMS_PENALTY

        return max(cp.CLAIM_CONFIDENCE_MIN, min(cp.CLAIM_CONFIDENCE_MAX, confidence))

    def _build_claim(self, text: str, sentence: Sentence, domain: Optional[Domain]) -> ExtractedClaim:
        return ExtractedClaim(
            statement=sentence.text,
            confidence=self.score_confidence(sentence.text, domain),
            location=sentence.location,
            context=context_window(
                text, sentence.location.start, sentence.location.end, CONTEXT_RADIUS
            ),
            claim_type=self.classify_claim_type(sentence.text),
        )

    @staticmethod
    def _normalize(statement: str) -> str:
        return " ".join(tokenize(statement))
