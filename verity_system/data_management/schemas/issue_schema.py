"""Issue schemas: the common output every analyzer converges on.

Issue.confidence is on a 0.0-1.0 scale. Analyzers work on 0-100 internally
(matching rule/claim/contradiction records) and convert when emitting.
"""

import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from verity_system.data_management.schemas.common_schema import Severity
from verity_system.data_management.schemas.content_schema import TextLocation


class IssueType(str, Enum):
    FACTUAL_ERROR = "factual_error"
    LOGICAL_INCONSISTENCY = "logical_inconsistency"
    COMPLIANCE_VIOLATION = "compliance_violation"


class Issue(BaseModel):
    """A single detected problem.

    Attributes:
        id: Unique issue id (not stable across runs).
        type: Issue family.
        category: Finer label within the family, e.g. 'direct', 'reference_error',
            'pattern_match', 'contradicted_claim'.
        severity: Ordinal severity.
        location: Span the issue refers to.
        description: Human-readable explanation.
        evidence: Offending sentences, matched text or contradicting sources.
        suggested_fix: Optional remediation hint.
        confidence: Detection confidence (0.0-1.0).
        module_source: Name of the analyzer that produced the issue.
        rule_id: Compliance rule id for compliance issues.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: IssueType
    category: Optional[str] = None
    severity: Severity
    location: TextLocation
    description: str
    evidence: list[str] = Field(default_factory=list)
    suggested_fix: Optional[str] = None
    confidence: float = Field(..., ge=0.0, le=1.0)
    module_source: str
    rule_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def clamp_confidence(cls, data: Any) -> Any:
        """Clamp confidence into 0.0-1.0 before field validation."""
        if isinstance(data, dict) and data.get("confidence") is not None:
            value = float(data["confidence"])
            data = {**data, "confidence": max(0.0, min(1.0, value))}
        return data

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "type": "compliance_violation",
                    "category": "pattern_match",
                    "severity": "critical",
                    "location": {"start": 18, "end": 29, "line": 1, "column": 19},
                    "description": "Potential HIPAA violation detected: pattern match",
                    "evidence": ["123-45-6789"],
                    "confidence": 0.9,
                    "module_source": "compliance",
                    "rule_id": "hipaa-phi-001",
                }
            ]
        },
    }

    def fingerprint(self) -> tuple:
        """Identity of the issue ignoring its generated id."""
        return (
            self.type.value,
            self.category,
            self.severity.value,
            self.location.start,
            self.location.end,
            self.description,
            tuple(self.evidence),
            self.suggested_fix,
            round(self.confidence, 6),
            self.module_source,
            self.rule_id,
        )


class ContradictionType(str, Enum):
    DIRECT = "direct"
    IMPLICIT = "implicit"
    TEMPORAL = "temporal"


class Contradiction(BaseModel):
    """Two statements in the same document that cannot both hold.

    location1 always precedes location2 in the text.
    """

    type: ContradictionType
    statement1: str
    statement2: str
    location1: TextLocation
    location2: TextLocation
    explanation: str
    confidence: float = Field(..., ge=0.0, le=100.0)
    severity: Severity

    @model_validator(mode="after")
    def check_order(self) -> "Contradiction":
        if self.location1.start > self.location2.start:
            raise ValueError("location1 must precede location2")
        return self

    model_config = {"frozen": True}
