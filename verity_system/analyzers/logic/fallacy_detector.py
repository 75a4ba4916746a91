"""Logical fallacy detection by pattern and keyword matching.

Every sentence is tested against each fallacy family in
config.fallacy_patterns. A regex hit is strong evidence; without one, a
family still fires when FALLACY_MIN_KEYWORDS of its keywords co-occur.
Findings of the same family closer than FALLACY_DEDUP_CHARS are merged,
keeping the most confident.

Usage:
    detector = FallacyDetector()
    for finding in detector.detect("You're either with us or against us."):
        print(finding.category, finding.confidence)
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from verity_system.analyzers.extraction.segmentation import (
    Sentence,
    contains_phrase,
    split_sentences,
)
from verity_system.analyzers.logic.coherence_validator import CoherenceIssue
from verity_system.config import scoring
from verity_system.config.fallacy_patterns import FALLACY_PATTERNS
from verity_system.data_management.schemas.common_schema import Severity


@dataclass(frozen=True)
class FallacyPattern:
    """One compiled fallacy family."""

    name: str
    label: str
    description: str
    severity: Severity
    patterns: Tuple[re.Pattern, ...]
    keywords: Tuple[str, ...]
    suggestion: str

    @classmethod
    def from_config(cls, entry: Mapping[str, Any]) -> "FallacyPattern":
        return cls(
            name=entry["name"],
            label=entry.get("label", entry["name"]),
            description=entry["description"],
            severity=Severity(entry.get("severity", "medium")),
            patterns=tuple(re.compile(p, re.IGNORECASE) for p in entry.get("patterns", [])),
            keywords=tuple(k.lower() for k in entry.get("keywords", [])),
            suggestion=entry.get("suggestion", ""),
        )


class FallacyDetector:
    """Flags sentences that argue by a known fallacy."""

    def __init__(self, patterns: Optional[Sequence[Mapping[str, Any]]] = None):
        """
        Initialize fallacy detector.

        Args:
            patterns: Fallacy families (config.fallacy_patterns format).
                Defaults to FALLACY_PATTERNS.
        """
        self._logger = logger.bind(component="FallacyDetector")
        self._patterns: Dict[str, FallacyPattern] = {}
        for entry in patterns if patterns is not None else FALLACY_PATTERNS:
            self.add_pattern(entry)

    def add_pattern(self, entry: Mapping[str, Any]) -> FallacyPattern:
        """Register (or replace) a fallacy family.

        Raises:
            re.error: A pattern does not compile.
            KeyError: ``name`` or ``description`` is missing.
            ValueError: ``severity`` is not a known severity.
        """
        pattern = FallacyPattern.from_config(entry)
        self._patterns[pattern.name] = pattern
        return pattern

    @property
    def fallacy_types(self) -> List[str]:
        return list(self._patterns)

    def get_pattern(self, name: str) -> Optional[FallacyPattern]:
        return self._patterns.get(name)

    def suggestions(self) -> Dict[str, str]:
        return {name: p.suggestion for name, p in self._patterns.items() if p.suggestion}

    def detect(self, text: str) -> List[CoherenceIssue]:
        """Detect fallacies in ``text``, ordered by location."""
        return self.detect_in_sentences(split_sentences(text))

    def detect_in_sentences(self, sentences: Sequence[Sentence]) -> List[CoherenceIssue]:
        findings: List[CoherenceIssue] = []
        for sentence in sentences:
            if len(sentence.text) <= scoring.FALLACY_MIN_SENTENCE_CHARS:
                continue
            lower = sentence.lower.replace("’", "'")
            for pattern in self._patterns.values():
                finding = self._check(sentence, lower, pattern)
                if finding is not None:
                    findings.append(finding)

        findings = self._deduplicate(findings)
        self._logger.debug(f"{len(findings)} fallacy finding(s) in {len(sentences)} sentences")
        return findings

    def _check(
        self, sentence: Sentence, lower: str, pattern: FallacyPattern
    ) -> Optional[CoherenceIssue]:
        keyword_hits = sum(1 for k in pattern.keywords if contains_phrase(lower, k))
        if any(regex.search(lower) for regex in pattern.patterns):
            base = scoring.FALLACY_PATTERN_CONFIDENCE
        elif keyword_hits >= scoring.FALLACY_MIN_KEYWORDS:
            base = scoring.FALLACY_KEYWORD_CONFIDENCE
        else:
            return None

        return CoherenceIssue(
            category=pattern.name,
            severity=pattern.severity,
            location=sentence.location,
            description=f"{pattern.label}: {pattern.description.lower()}",
            evidence=(sentence.text,),
            confidence=self._confidence(base, sentence.text, pattern, keyword_hits),
        )

    @staticmethod
    def _confidence(base: float, text: str, pattern: FallacyPattern, keyword_hits: int) -> float:
        confidence = base
        if len(text) < scoring.FALLACY_SHORT_SENTENCE_CHARS:
            confidence -= scoring.FALLACY_SHORT_SENTENCE_PENALTY
        elif len(text) > scoring.FALLACY_LONG_SENTENCE_CHARS:
            confidence += scoring.FALLACY_LONG_SENTENCE_BONUS
        if keyword_hits > 1:
            confidence += keyword_hits * scoring.FALLACY_KEYWORD_BONUS
        confidence += scoring.FALLACY_SEVERITY_ADJUSTMENT.get(pattern.severity.value, 0.0)
        return min(scoring.FALLACY_MAX_CONFIDENCE, max(scoring.FALLACY_MIN_CONFIDENCE, confidence))

    @staticmethod
    def _deduplicate(findings: Sequence[CoherenceIssue]) -> List[CoherenceIssue]:
        kept: List[CoherenceIssue] = []
        for finding in findings:
            for i, existing in enumerate(kept):
                if (
                    existing.category == finding.category
                    and abs(existing.location.start - finding.location.start) < scoring.FALLACY_DEDUP_CHARS
                ):
                    if finding.confidence > existing.confidence:
                        kept[i] = finding
                    break
            else:
                kept.append(finding)
        kept.sort(key=lambda f: (f.location.start, f.category))
        return kept
