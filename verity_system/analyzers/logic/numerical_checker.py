"""Numerical consistency checks.

- Stated arithmetic ("12 + 30 = 42", "100 / 4 = 25") is recomputed
- Percentages announced as a breakdown must sum to 100 within tolerance
- Quantities of different kinds ("5 kg + 3 hours") are never added up
- Shares above 100% of a population and negative head counts are out of range
- A stated total must match the amounts listed before it, in the same
  sentence or, when the total stands alone, the sentence before
"""

import re
from typing import List, Optional, Sequence, Set, Tuple

from loguru import logger

from verity_system.analyzers.extraction.segmentation import (
    Sentence,
    split_sentences,
    tokenize,
)
from verity_system.analyzers.logic.coherence_validator import CoherenceIssue
from verity_system.config import scoring
from verity_system.config.logic_lexicon import (
    BREAKDOWN_CUES,
    COUNT_NOUNS,
    RELATIVE_PERCENT_CUES,
    UNIT_FAMILIES,
)
from verity_system.data_management.schemas.common_schema import Severity
from verity_system.data_management.schemas.content_schema import TextLocation

_NUMBER = r"-?\d[\d,]*(?:\.\d+)?"
_ARITHMETIC = re.compile(
    rf"(?P<a>{_NUMBER})\s*(?P<op>[+*/×-]|\bx\b)\s*(?P<b>{_NUMBER})\s*=\s*(?P<c>{_NUMBER})"
)
_PERCENT = re.compile(r"(\d+(?:\.\d+)?)\s*(?:%|percent\b)", re.IGNORECASE)

_UNIT = r"(?:" + "|".join(sorted(UNIT_FAMILIES, key=len, reverse=True)) + r")\b"
_MEASURE = re.compile(rf"(?<![\w.])(?P<num>\d[\d,]*(?:\.\d+)?)\s*(?P<unit>{_UNIT})", re.IGNORECASE)
_UNIT_ARITHMETIC = re.compile(
    rf"(?<![\w.])(?P<a>\d[\d,]*(?:\.\d+)?)\s*(?P<ua>{_UNIT})\s*(?P<op>[+-])\s*"
    rf"(?P<b>\d[\d,]*(?:\.\d+)?)\s*(?P<ub>{_UNIT})"
    rf"(?:\s*=\s*(?P<c>\d[\d,]*(?:\.\d+)?)\s*(?P<uc>{_UNIT})?)?",
    re.IGNORECASE,
)
_PERCENT_SHARE = re.compile(
    r"(?<![\w.])(?P<num>-?\d+(?:\.\d+)?)\s*(?:%|percent\b)\s+of\b", re.IGNORECASE
)
_NEGATIVE_COUNT = re.compile(
    r"(?<![\w.-])(?:-|minus\s+)(?P<num>\d[\d,]*)\s+(?:\w+\s+)?(?P<noun>"
    + "|".join(sorted(COUNT_NOUNS))
    + r")\b",
    re.IGNORECASE,
)
_AMOUNT = re.compile(
    r"(?<![\w.])(?P<cur>[$€£]\s?)?(?P<num>\d[\d,]*(?:\.\d+)?)(?P<pct>\s*(?:%|percent\b))?",
    re.IGNORECASE,
)
_TOTAL = re.compile(
    r"\b(?:grand\s+)?(?:total(?:l?ed|l?ing|s)?|sum|combined|altogether|adds?\s+up\s+to)\b"
    r"[^\d$€£.;]{0,25}?(?P<cur>[$€£]\s?)?(?P<total>\d[\d,]*(?:\.\d+)?)"
    r"(?P<pct>\s*(?:%|percent\b))?",
    re.IGNORECASE,
)


def _to_float(raw: str) -> float:
    return float(raw.rstrip(",").replace(",", ""))


def evaluate(a: float, op: str, b: float) -> Optional[float]:
    """Apply ``op``; None for division by zero."""
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op in ("*", "x", "×"):
        return a * b
    if b == 0:
        return None
    return a / b


def unit_family(unit: Optional[str]) -> Optional[str]:
    return UNIT_FAMILIES.get(unit.lower()) if unit else None


def listed_amounts(fragment: str) -> List[float]:
    """Plain and currency amounts in ``fragment``; percentages and years skipped."""
    amounts: List[float] = []
    for match in _AMOUNT.finditer(fragment):
        if match.group("pct"):
            continue
        raw = match.group("num").rstrip(",")
        value = _to_float(raw)
        if not match.group("cur") and "," not in raw and raw.isdigit() and 1900 <= value <= 2100:
            continue
        amounts.append(value)
    return amounts


class NumericalChecker:
    """Recomputes arithmetic, totals and percentages stated in text."""

    def __init__(
        self,
        percentage_tolerance: float = scoring.PERCENTAGE_SUM_TOLERANCE,
        sum_tolerance: float = scoring.SUM_MISMATCH_TOLERANCE,
    ):
        self.percentage_tolerance = percentage_tolerance
        self.sum_tolerance = sum_tolerance
        self._logger = logger.bind(component="NumericalChecker")

    def check(self, text: str) -> List[CoherenceIssue]:
        if not text:
            return []
        sentences = split_sentences(text)
        issues = (
            self.check_arithmetic(text)
            + self.check_percentages(text)
            + self.check_units(text, sentences)
            + self.check_ranges(text)
            + self.check_sums(sentences)
        )
        issues.sort(key=lambda i: (i.location.start, i.category))
        if issues:
            self._logger.debug(f"{len(issues)} numerical issue(s)")
        return issues

    def check_arithmetic(self, text: str) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []
        for match in _ARITHMETIC.finditer(text):
            a, b, stated = (_to_float(match.group(k)) for k in ("a", "b", "c"))
            op = match.group("op")
            expected = evaluate(a, op, b)
            if expected is None:
                continue
            tolerance = max(0.01, abs(expected) * 0.001)
            if abs(expected - stated) <= tolerance:
                continue
            issues.append(
                CoherenceIssue(
                    category="calculation_error",
                    severity=Severity.HIGH,
                    location=TextLocation.from_span(text, match.start(), match.end()),
                    description=(
                        f"Stated result {match.group('c')} does not match "
                        f"{match.group('a')} {op} {match.group('b')} = {expected:g}"
                    ),
                    evidence=(match.group(0),),
                    confidence=scoring.CALCULATION_ERROR_CONFIDENCE,
                )
            )
        return issues

    def check_percentages(self, text: str) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []
        for sentence in split_sentences(text):
            if not BREAKDOWN_CUES.intersection(tokenize(sentence.text)):
                continue
            values = [float(v) for v in _PERCENT.findall(sentence.text)]
            if len(values) < 2:
                continue
            total = sum(values)
            if abs(total - 100.0) <= self.percentage_tolerance:
                continue
            issues.append(
                CoherenceIssue(
                    category="percentage_sum_error",
                    severity=Severity.MEDIUM,
                    location=sentence.location,
                    description=f"Percentage breakdown sums to {total:g}%, not 100%",
                    evidence=(sentence.text,),
                    confidence=scoring.PERCENTAGE_SUM_CONFIDENCE,
                )
            )
        return issues

    # ── Units ─────────────────────────────────────────────────────────────

    def check_units(
        self, text: str, sentences: Optional[Sequence[Sentence]] = None
    ) -> List[CoherenceIssue]:
        """Arithmetic across unit kinds, and totals over mixed kinds."""
        issues: List[CoherenceIssue] = []
        flagged: List[Tuple[int, int]] = []

        for match in _UNIT_ARITHMETIC.finditer(text):
            units = [match.group(k) for k in ("ua", "ub", "uc") if match.group(k)]
            families = {unit_family(u) for u in units}
            if len(families) < 2:
                continue
            flagged.append((match.start(), match.end()))
            issues.append(
                CoherenceIssue(
                    category="unit_mismatch",
                    severity=Severity.HIGH,
                    location=TextLocation.from_span(text, match.start(), match.end()),
                    description=(
                        "Quantities of different kinds combined: "
                        + ", ".join(sorted(families))
                    ),
                    evidence=(match.group(0),),
                    confidence=scoring.UNIT_MISMATCH_CONFIDENCE,
                )
            )

        for sentence in sentences if sentences is not None else split_sentences(text):
            start, end = sentence.location.start, sentence.location.end
            if any(start <= s < end for s, _ in flagged):
                continue
            if _TOTAL.search(sentence.text) is None:
                continue
            families = self._families(sentence.text)
            if len(families) < 2:
                continue
            issues.append(
                CoherenceIssue(
                    category="unit_mismatch",
                    severity=Severity.MEDIUM,
                    location=sentence.location,
                    description=(
                        "Total mixes quantities of different kinds: " + ", ".join(sorted(families))
                    ),
                    evidence=(sentence.text,),
                    confidence=scoring.UNIT_MISMATCH_CONFIDENCE,
                )
            )
        return issues

    @staticmethod
    def _families(fragment: str) -> Set[str]:
        return {unit_family(m.group("unit")) for m in _MEASURE.finditer(fragment)}

    # ── Ranges ────────────────────────────────────────────────────────────

    def check_ranges(self, text: str) -> List[CoherenceIssue]:
        """Shares of a whole outside 0-100% and negative head counts."""
        issues: List[CoherenceIssue] = []

        for sentence in split_sentences(text):
            relative = RELATIVE_PERCENT_CUES.intersection(tokenize(sentence.text))
            for match in _PERCENT_SHARE.finditer(sentence.text):
                value = float(match.group("num"))
                if 0.0 <= value <= 100.0 or (value > 100.0 and relative):
                    continue
                start = sentence.location.start + match.start()
                end = sentence.location.start + match.end()
                issues.append(
                    CoherenceIssue(
                        category="range_violation",
                        severity=Severity.HIGH if value > 200.0 or value < 0 else Severity.MEDIUM,
                        location=TextLocation.from_span(text, start, end),
                        description=f"A share of {value:g}% is outside 0-100%",
                        evidence=(sentence.text,),
                        confidence=scoring.RANGE_VIOLATION_CONFIDENCE,
                    )
                )

        for match in _NEGATIVE_COUNT.finditer(text):
            issues.append(
                CoherenceIssue(
                    category="range_violation",
                    severity=Severity.MEDIUM,
                    location=TextLocation.from_span(text, match.start(), match.end()),
                    description=f"Negative count of {match.group('noun').lower()}",
                    evidence=(match.group(0),),
                    confidence=scoring.RANGE_VIOLATION_CONFIDENCE,
                )
            )
        return issues

    # ── Totals ────────────────────────────────────────────────────────────

    def check_sums(self, sentences: Sequence[Sentence]) -> List[CoherenceIssue]:
        issues: List[CoherenceIssue] = []

        for i, sentence in enumerate(sentences):
            match = _TOTAL.search(sentence.text)
            if match is None or match.group("pct"):
                continue
            # "The total is 12 + 30 = 45" is arithmetic, checked separately
            if any(
                a.start() <= match.start("total") < a.end()
                for a in _ARITHMETIC.finditer(sentence.text)
            ):
                continue

            listed = sentence.text[:match.start()]
            items = listed_amounts(listed)
            evidence: Tuple[str, ...] = (sentence.text,)
            if not items and i > 0 and _TOTAL.search(sentences[i - 1].text) is None:
                listed = sentences[i - 1].text
                items = listed_amounts(listed)
                evidence = (sentences[i - 1].text, sentence.text)
            if len(items) < 2:
                continue
            if len(self._families(listed) | self._families(sentence.text)) > 1:
                continue

            stated = _to_float(match.group("total"))
            computed = sum(items)
            if abs(computed - stated) <= max(self.sum_tolerance, abs(stated) * 0.001):
                continue
            issues.append(
                CoherenceIssue(
                    category="sum_mismatch",
                    severity=self._sum_severity(computed, stated),
                    location=sentence.location,
                    description=(
                        f"Stated total {match.group('total').rstrip(',')} does not match "
                        f"the listed amounts, which sum to {computed:g}"
                    ),
                    evidence=evidence,
                    confidence=scoring.SUM_MISMATCH_CONFIDENCE,
                )
            )
        return issues

    @staticmethod
    def _sum_severity(computed: float, stated: float) -> Severity:
        if computed == 0:
            return Severity.HIGH
        error = abs(computed - stated) / abs(computed) * 100
        if error > 25:
            return Severity.HIGH
        if error > 10:
            return Severity.MEDIUM
        return Severity.LOW
