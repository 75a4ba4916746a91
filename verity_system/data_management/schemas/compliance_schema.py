"""Compliance rule and violation schemas.

Rules are versioned records. An update never mutates a stored rule: it
produces a new ComplianceRule with version + 1, which the store swaps in
atomically. Rules are never deleted, only deactivated.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from verity_system.data_management.schemas.common_schema import Domain, Severity
from verity_system.data_management.schemas.content_schema import TextLocation

GLOBAL_JURISDICTION = "GLOBAL"


class ComplianceRule(BaseModel):
    """A keyword/pattern rule tied to a regulation and jurisdiction."""

    id: str = Field(..., min_length=1)
    rule_text: str = Field(..., description="Human-readable requirement")
    regulation: str = Field(..., description="Regulation name, e.g. 'HIPAA'")
    jurisdiction: str = Field(..., description="Territory, e.g. 'US', 'EU', 'GLOBAL'")
    domain: Domain
    severity: Severity
    keywords: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(
        default_factory=list, description="Regular expressions (case-insensitive)"
    )
    examples: list[str] = Field(default_factory=list)
    is_active: bool = True
    version: int = Field(default=1, ge=1)
    last_updated: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "hipaa-phi-001",
                    "rule_text": "Protected Health Information must not be disclosed",
                    "regulation": "HIPAA",
                    "jurisdiction": "US",
                    "domain": "healthcare",
                    "severity": "critical",
                    "keywords": ["ssn", "medical record"],
                    "patterns": [r"\b\d{3}-\d{2}-\d{4}\b"],
                }
            ]
        },
    }

    def applies_to(self, jurisdiction: str) -> bool:
        """True when the rule is scoped to ``jurisdiction`` or is global (case-insensitive)."""
        scope = self.jurisdiction.upper()
        return scope == GLOBAL_JURISDICTION or scope == (jurisdiction or "").upper()


class RulePatch(BaseModel):
    """Merge-patch for a rule: only fields that are set are applied."""

    rule_text: Optional[str] = None
    regulation: Optional[str] = None
    jurisdiction: Optional[str] = None
    severity: Optional[Severity] = None
    keywords: Optional[list[str]] = None
    patterns: Optional[list[str]] = None
    examples: Optional[list[str]] = None
    is_active: Optional[bool] = None

    model_config = {"extra": "forbid"}


class ViolationType(str, Enum):
    KEYWORD_MATCH = "keyword_match"
    PATTERN_MATCH = "pattern_match"
    SEMANTIC_MATCH = "semantic_match"


class ComplianceViolation(BaseModel):
    """One rule hit at one location."""

    rule_id: str
    violation_type: ViolationType
    location: TextLocation
    matched_text: str = Field(default="")
    confidence: float = Field(..., ge=0.0, le=100.0)
    severity: Severity
    description: str = Field(default="")
    regulatory_reference: str = Field(default="")
    suggested_fix: Optional[str] = None

    model_config = {"frozen": True}
