"""Schema package for verification pipeline data structures.

Pydantic models shared by every analyzer:
- Content: ParsedContent, ExtractedEntity, TextLocation
- Claims: ExtractedClaim, Source, SourceQueryResult, VerifiedClaim, FactualClaim
- Compliance: ComplianceRule, RulePatch, ComplianceViolation
- Issues: Issue, Contradiction
- Results: VerificationRequest, AuditEntry, VerificationResult

Usage:
    from verity_system.data_management.schemas import ParsedContent, Domain
    content = ParsedContent(id="doc-1", extracted_text="X is secure.")
"""

from verity_system.data_management.schemas.common_schema import (
    Domain,
    RiskLevel,
    Severity,
    Urgency,
)
from verity_system.data_management.schemas.content_schema import (
    DocumentStructure,
    EntityType,
    ExtractedEntity,
    ParsedContent,
    TextLocation,
)
from verity_system.data_management.schemas.claim_schema import (
    ClaimType,
    ExtractedClaim,
    FactualClaim,
    Source,
    SourceQueryResult,
    SourceType,
    VerifiedClaim,
)
from verity_system.data_management.schemas.compliance_schema import (
    GLOBAL_JURISDICTION,
    ComplianceRule,
    ComplianceViolation,
    RulePatch,
    ViolationType,
)
from verity_system.data_management.schemas.issue_schema import (
    Contradiction,
    ContradictionType,
    Issue,
    IssueType,
)
from verity_system.data_management.schemas.result_schema import (
    AuditAction,
    AuditEntry,
    ModuleMetrics,
    ResultMetrics,
    VerificationRequest,
    VerificationResult,
)

__all__ = [
    # Common
    "Domain",
    "RiskLevel",
    "Severity",
    "Urgency",
    # Content
    "DocumentStructure",
    "EntityType",
    "ExtractedEntity",
    "ParsedContent",
    "TextLocation",
    # Claims
    "ClaimType",
    "ExtractedClaim",
    "FactualClaim",
    "Source",
    "SourceQueryResult",
    "SourceType",
    "VerifiedClaim",
    # Compliance
    "GLOBAL_JURISDICTION",
    "ComplianceRule",
    "ComplianceViolation",
    "RulePatch",
    "ViolationType",
    # Issues
    "Contradiction",
    "ContradictionType",
    "Issue",
    "IssueType",
    # Results
    "AuditAction",
    "AuditEntry",
    "ModuleMetrics",
    "ResultMetrics",
    "VerificationRequest",
    "VerificationResult",
]
