"""Shared enumerations for the verification pipeline.

Severity and risk level use one ordinal scale (low < medium < high < critical)
so rule severities, issue severities and the document risk level can be
compared and maximized directly.
"""

from enum import Enum
from typing import Iterable, Optional


class Domain(str, Enum):
    """Business domain a document is verified under."""

    LEGAL = "legal"
    FINANCIAL = "financial"
    HEALTHCARE = "healthcare"
    INSURANCE = "insurance"


class Severity(str, Enum):
    """Four-level ordinal severity scale.

    Ordering is by rank, not by string value:
    LOW(0) < MEDIUM(1) < HIGH(2) < CRITICAL(3)
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def highest(
        cls, severities: Iterable["Severity"], default: Optional["Severity"] = None
    ) -> "Severity":
        """Return the most severe value, or ``default`` (LOW) for an empty iterable."""
        result = default or cls.LOW
        for severity in severities:
            if severity.rank > result.rank:
                result = severity
        return result


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}

# Document-level risk shares the severity scale
RiskLevel = Severity


class Urgency(str, Enum):
    """Caller-supplied urgency of a verification request."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
