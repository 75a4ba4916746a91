"""Request, audit and verdict schemas for the verification pipeline.

VerificationResult is built once per request and frozen; ownership passes
to the caller. ``model_dump(mode="json")`` yields ISO-8601 timestamps.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from verity_system.data_management.schemas.common_schema import (
    Domain,
    RiskLevel,
    Urgency,
)
from verity_system.data_management.schemas.content_schema import ParsedContent
from verity_system.data_management.schemas.issue_schema import Issue


class VerificationRequest(BaseModel):
    """Pipeline input: content, domain and optional urgency/jurisdiction."""

    content: ParsedContent
    domain: Domain
    urgency: Urgency = Urgency.MEDIUM
    jurisdiction: Optional[str] = Field(
        None, description="Defaults to settings.default_jurisdiction"
    )

    model_config = {"frozen": True}


class AuditAction(str, Enum):
    VERIFICATION_STARTED = "verification_started"
    MODULE_STARTED = "module_started"
    MODULE_COMPLETED = "module_completed"
    MODULE_FAILED = "module_failed"
    VERIFICATION_COMPLETED = "verification_completed"


class AuditEntry(BaseModel):
    """One append-only record of a pipeline step."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    session_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    action: AuditAction
    component: str
    details: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class ModuleMetrics(BaseModel):
    """Per-analyzer outcome used by the aggregator."""

    module: str
    issue_count: int = 0
    processing_time_ms: float = 0.0
    failed: bool = False
    error: Optional[str] = None
    partial_failures: list[str] = Field(
        default_factory=list,
        description="Sub-steps that failed while the analyzer itself completed",
    )

    model_config = {"frozen": True}


class ResultMetrics(BaseModel):
    """Document-level counters attached to a verdict."""

    total_issues: int = 0
    issues_by_type: dict[str, int] = Field(default_factory=dict)
    issues_by_severity: dict[str, int] = Field(default_factory=dict)
    modules: list[ModuleMetrics] = Field(default_factory=list)
    filtered_issues: int = Field(
        default=0, description="Issues dropped by the confidence threshold"
    )

    model_config = {"frozen": True}


class VerificationResult(BaseModel):
    """Final verdict for one document."""

    verification_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    overall_confidence: float = Field(..., ge=0.0, le=100.0)
    risk_level: RiskLevel
    issues: list[Issue] = Field(default_factory=list)
    audit_trail: list[AuditEntry] = Field(default_factory=list)
    processing_time: float = Field(default=0.0, ge=0.0, description="Milliseconds")
    recommendations: list[str] = Field(default_factory=list)
    metrics: ResultMetrics = Field(default_factory=ResultMetrics)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "verification_id": "uuid-here",
                    "overall_confidence": 100.0,
                    "risk_level": "low",
                    "issues": [],
                    "recommendations": [
                        "Content appears to be accurate and compliant. No issues detected."
                    ],
                }
            ]
        },
    }
