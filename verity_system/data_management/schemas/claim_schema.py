"""Claim and evidence schemas for the fact-checking subsystem.

A claim travels through three shapes:
- ExtractedClaim: a factual assertion located in the document text
- SourceQueryResult: one knowledge source's answer about that claim
- VerifiedClaim: the claim plus the credibility-weighted verdict

FactualClaim is the record form exchanged with the knowledge base.
Claim confidences are on a 0-100 scale; source credibility likewise.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from verity_system.data_management.schemas.common_schema import Domain
from verity_system.data_management.schemas.content_schema import TextLocation


class SourceType(str, Enum):
    """Knowledge source categories, ordered roughly by baseline trust."""

    GOVERNMENT = "government"
    ACADEMIC = "academic"
    ENCYCLOPEDIA = "encyclopedia"
    INDUSTRY = "industry"
    INTERNAL = "internal"
    NEWS = "news"
    OTHER = "other"


class ClaimType(str, Enum):
    """Coarse claim classification used for confidence heuristics."""

    FACTUAL = "factual"
    STATISTICAL = "statistical"
    REGULATORY = "regulatory"
    MEDICAL = "medical"
    FINANCIAL = "financial"


class Source(BaseModel):
    """An evidence provider cited for or against a claim."""

    name: str = Field(..., description="Display name of the source")
    url: Optional[str] = Field(None, description="Where the evidence was found")
    credibility_score: float = Field(
        ..., ge=0.0, le=100.0, description="Trust weight (0-100)"
    )
    source_type: SourceType = SourceType.OTHER
    last_verified: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @model_validator(mode="before")
    @classmethod
    def clamp_credibility(cls, data: dict) -> dict:
        """Clamp credibility into 0-100 before field validation."""
        if isinstance(data, dict) and data.get("credibility_score") is not None:
            score = float(data["credibility_score"])
            data = {**data, "credibility_score": max(0.0, min(100.0, score))}
        return data

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wikipedia",
                    "url": "https://en.wikipedia.org/wiki/Aspirin",
                    "credibility_score": 75,
                    "source_type": "encyclopedia",
                }
            ]
        }
    }


class ExtractedClaim(BaseModel):
    """A factual assertion located in the document."""

    statement: str = Field(..., min_length=1)
    confidence: float = Field(
        ..., ge=0.0, le=100.0, description="Extraction confidence (0-100)"
    )
    location: TextLocation
    context: str = Field(default="")
    claim_type: ClaimType = ClaimType.FACTUAL

    model_config = {"frozen": True}


class SourceQueryResult(BaseModel):
    """One knowledge source's answer for a single claim.

    An empty result (no sources, zero confidence) is the degraded form used
    when a source is unavailable, times out, or fails.
    """

    source_name: str = Field(default="unknown")
    sources: list[Source] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    is_supported: bool = False
    evidence: list[str] = Field(default_factory=list)
    contradictions: list[str] = Field(default_factory=list)
    query_time_ms: float = Field(default=0.0, ge=0.0)

    @classmethod
    def empty(cls, source_name: str = "unknown", query_time_ms: float = 0.0) -> "SourceQueryResult":
        return cls(source_name=source_name, query_time_ms=query_time_ms)

    @property
    def is_empty(self) -> bool:
        return not self.sources and self.confidence == 0.0

    @property
    def contradicts(self) -> bool:
        """True when the source actively disputes the statement."""
        return bool(self.contradictions) and not self.is_supported


class FactualClaim(BaseModel):
    """Knowledge-base record for a claim."""

    statement: str = Field(..., min_length=1)
    sources: list[Source] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=100.0)
    domain: Optional[Domain] = None
    verified: bool = False
    contradictions: Optional[list[str]] = None
    reinforcement_count: int = Field(default=0, ge=0)
    last_updated: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "statement": "FDIC insurance covers deposits up to $250,000",
                    "confidence": 98,
                    "domain": "financial",
                    "verified": True,
                }
            ]
        }
    }


class VerifiedClaim(BaseModel):
    """A claim after evidence reconciliation.

    Attributes:
        claim: The extracted claim.
        confidence: Credibility-weighted claim confidence (0-100).
        is_supported: True when the weighted evidence supports the claim.
        sources: Every source consulted that returned evidence.
        evidence: Supporting evidence snippets.
        contradictions: Contradicting evidence snippets.
        contradicting_sources: Names of sources that actively dispute the claim.
        salience: Number of sources that took a position (for weighting).
    """

    claim: ExtractedClaim
    confidence: float = Field(..., ge=0.0, le=100.0)
    is_supported: bool = False
    sources: list[Source] = Field(default_factory=list)
    evidence: list[str] = Field(default_factory=list)
    contradictions: list[str] = Field(default_factory=list)
    contradicting_sources: list[str] = Field(default_factory=list)

    @property
    def salience(self) -> int:
        return len(self.sources)

    @property
    def is_contradicted(self) -> bool:
        return bool(self.contradicting_sources)
