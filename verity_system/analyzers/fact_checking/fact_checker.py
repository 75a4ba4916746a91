"""Fact-checking branch of the pipeline.

For every extracted claim, the internal knowledge base and all available
external sources are queried concurrently (each within its own timeout)
and their answers reconciled into one VerifiedClaim:

    per source:  value = confidence         if it supports the claim
                 value = 100 - confidence   if it contradicts the claim
                 value = confidence         otherwise
                 weight = credibility of its sources (class floor/ceiling applied)
    per group:   credibility-weighted mean of values (internal, external)
    claim:       INTERNAL_WEIGHT / EXTERNAL_WEIGHT mix of the groups that
                 answered; UNVERIFIED_CLAIM_CONFIDENCE when none did

A claim becomes a factual_error Issue only when its confidence is below the
threshold AND at least one source actively contradicts it. Claims are
verified in parallel with a fixed fan-out cap (aiometer).
"""

import asyncio
import functools
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import aiometer
import structlog
from pydantic import BaseModel, Field

from verity_system.analyzers.extraction.claim_extractor import ClaimExtractor
from verity_system.analyzers.fact_checking.credibility import SourceCredibilityScorer
from verity_system.analyzers.fact_checking.knowledge_base import KnowledgeBase
from verity_system.analyzers.fact_checking.source_manager import SourceManager
from verity_system.config import scoring
from verity_system.config.settings import settings
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas.claim_schema import (
    ExtractedClaim,
    Source,
    SourceQueryResult,
    VerifiedClaim,
)
from verity_system.data_management.schemas.common_schema import Domain, Severity, Urgency
from verity_system.data_management.schemas.content_schema import ParsedContent, TextLocation
from verity_system.data_management.schemas.issue_schema import Issue, IssueType
from verity_system.data_management.schemas.result_schema import (
    AuditAction,
    VerificationRequest,
)


class FactCheckingResult(BaseModel):
    """Outcome of checking every claim in one document."""

    verified_claims: list[VerifiedClaim] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)
    overall_confidence: float = Field(default=100.0, ge=0.0, le=100.0)

    @property
    def claims_checked(self) -> int:
        return len(self.verified_claims)


class FactChecker:
    """
    Verifies extracted claims against internal and external knowledge.

    Attributes:
        threshold: Claims below this confidence (and contradicted) become issues
        domain_thresholds: Per-domain replacement for ``threshold``, keyed by
            domain value; strict mode never lets it drop below ``threshold``
        max_concurrent_claims: Fan-out cap for claim verification
    """

    name = "fact_checking"

    def __init__(
        self,
        claim_extractor: Optional[ClaimExtractor] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        source_manager: Optional[SourceManager] = None,
        scorer: Optional[SourceCredibilityScorer] = None,
        threshold: Optional[float] = None,
        strict: bool = False,
        domain_thresholds: Optional[Mapping[Union[Domain, str], float]] = None,
        max_concurrent_claims: Optional[int] = None,
    ):
        self.claim_extractor = claim_extractor or ClaimExtractor(
            max_claims=settings.max_claims_per_document
        )
        self.knowledge_base = knowledge_base or KnowledgeBase()
        self.source_manager = source_manager or SourceManager()
        self.scorer = scorer or SourceCredibilityScorer()
        # an explicit threshold replaces the configured per-domain ones
        thresholds: Dict[str, float] = {}
        if threshold is None:
            threshold = (
                settings.strict_fact_check_threshold if strict else settings.fact_check_threshold
            )
            thresholds.update(settings.fact_check_domain_thresholds)
        thresholds.update(domain_thresholds or {})
        self.threshold = threshold
        self.strict = strict
        self.domain_thresholds = {
            str(getattr(key, "value", key)).lower(): value for key, value in thresholds.items()
        }
        self.max_concurrent_claims = max_concurrent_claims or settings.max_concurrent_claims
        self.logger = structlog.get_logger().bind(component="FactChecker")

    # ── Operations ────────────────────────────────────────────────────────

    def extract_claims(
        self,
        content: Union[ParsedContent, str],
        domain: Optional[Domain] = None,
    ) -> List[str]:
        text = content.extracted_text if isinstance(content, ParsedContent) else (content or "")
        return self.claim_extractor.extract_statements(text, domain)

    async def verify_claim(
        self,
        claim: Union[ExtractedClaim, str],
        domain: Optional[Domain] = None,
        urgency: Urgency = Urgency.MEDIUM,
        audit: Optional[AuditTrail] = None,
    ) -> VerifiedClaim:
        """Reconcile every source's answer about one claim."""
        if isinstance(claim, str):
            claim = ExtractedClaim(
                statement=claim,
                confidence=self.claim_extractor.score_confidence(claim, domain),
                location=TextLocation(start=0, end=len(claim)),
            )

        internal, external = await asyncio.gather(
            self.source_manager.query_one(
                self.knowledge_base, claim.statement, domain, urgency, audit
            ),
            self.source_manager.query_all(claim.statement, domain, urgency, audit),
        )
        verified = self._reconcile(claim, [internal], external)

        self.logger.debug(
            "claim_verified",
            claim=claim.statement[:60],
            confidence=verified.confidence,
            supported=verified.is_supported,
            contradicted=verified.is_contradicted,
        )
        return verified

    async def check_facts(
        self,
        request: VerificationRequest,
        audit: Optional[AuditTrail] = None,
    ) -> FactCheckingResult:
        """Extract, verify (bounded parallelism) and score every claim."""
        text = request.content.extracted_text
        claims = self.claim_extractor.extract_claims(text, request.domain) if text else []
        if not claims:
            return FactCheckingResult()

        verified: List[VerifiedClaim] = await aiometer.run_all(
            [
                functools.partial(
                    self.verify_claim, claim, request.domain, request.urgency, audit
                )
                for claim in claims
            ],
            max_at_once=self.max_concurrent_claims,
        )

        issues = [
            issue
            for issue in (self._to_issue(v, request.domain) for v in verified)
            if issue is not None
        ]
        result = FactCheckingResult(
            verified_claims=verified,
            issues=issues,
            overall_confidence=self.overall_confidence(verified),
        )
        self.logger.info(
            "facts_checked",
            claims=len(claims),
            issues=len(issues),
            overall_confidence=result.overall_confidence,
        )
        return result

    async def analyze(self, request: VerificationRequest, audit: AuditTrail) -> List[Issue]:
        audit.record(AuditAction.MODULE_STARTED, "fact_checker.claims", domain=request.domain.value)
        result = await self.check_facts(request, audit)
        audit.record(
            AuditAction.MODULE_COMPLETED,
            "fact_checker.claims",
            claims=result.claims_checked,
            issues=len(result.issues),
            overall_confidence=result.overall_confidence,
        )
        return result.issues

    # ── Scoring ───────────────────────────────────────────────────────────

    def threshold_for(self, domain: Optional[Domain] = None) -> float:
        """Reporting threshold for claims verified under ``domain``."""
        if domain is None:
            return self.threshold
        value = self.domain_thresholds.get(domain.value, self.threshold)
        return max(value, self.threshold) if self.strict else value

    @staticmethod
    def overall_confidence(verified: Sequence[VerifiedClaim]) -> float:
        """Mean claim confidence weighted by salience (1 + sources consulted)."""
        if not verified:
            return scoring.MAX_CONFIDENCE
        total_weight = sum(1 + v.salience for v in verified)
        weighted = sum(v.confidence * (1 + v.salience) for v in verified)
        return round(weighted / total_weight, 2)

    def _reconcile(
        self,
        claim: ExtractedClaim,
        internal: Sequence[SourceQueryResult],
        external: Sequence[SourceQueryResult],
    ) -> VerifiedClaim:
        groups: List[Tuple[float, float, float]] = []
        for group_weight, results in (
            (scoring.INTERNAL_WEIGHT, internal),
            (scoring.EXTERNAL_WEIGHT, external),
        ):
            group = self._group_confidence(results)
            if group is not None:
                groups.append((group_weight, group[0], group[1]))

        if groups:
            total = sum(w for w, _, _ in groups)
            confidence = sum(w * c for w, c, _ in groups) / total
            support_share = sum(w * s for w, _, s in groups) / total
        else:
            confidence = scoring.UNVERIFIED_CLAIM_CONFIDENCE
            support_share = 0.0

        answered = [r for r in [*internal, *external] if not r.is_empty]
        sources: List[Source] = []
        seen = set()
        for result in answered:
            for source in result.sources:
                key = (source.name, source.url)
                if key not in seen:
                    seen.add(key)
                    sources.append(source)

        return VerifiedClaim(
            claim=claim,
            confidence=round(max(0.0, min(100.0, confidence)), 2),
            is_supported=support_share > 0.5,
            sources=sources,
            evidence=sorted({e for r in answered for e in r.evidence}),
            contradictions=sorted({c for r in answered for c in r.contradictions}),
            contradicting_sources=sorted(
                {s.name for r in answered if r.contradicts for s in r.sources}
            ),
        )

    def _group_confidence(
        self, results: Sequence[SourceQueryResult]
    ) -> Optional[Tuple[float, float]]:
        """(confidence, supporting share) for one group, None if nobody answered."""
        weighted = []
        for result in results:
            if result.is_empty or not result.sources:
                continue
            weight = sum(self.scorer.score(s) for s in result.sources) / len(result.sources)
            if weight <= 0:
                continue
            if result.contradicts:
                value = 100.0 - result.confidence
            else:
                value = result.confidence
            weighted.append((weight, value, result.is_supported))

        if not weighted:
            return None
        total = sum(w for w, _, _ in weighted)
        confidence = sum(w * v for w, v, _ in weighted) / total
        support = sum(w for w, _, supported in weighted if supported) / total
        return confidence, support

    def _to_issue(self, verified: VerifiedClaim, domain: Optional[Domain] = None) -> Optional[Issue]:
        if verified.confidence >= self.threshold_for(domain) or not verified.is_contradicted:
            return None

        severity = (
            Severity.HIGH
            if verified.confidence <= scoring.FACTUAL_HIGH_SEVERITY_BELOW
            else Severity.MEDIUM
        )
        best = max(verified.sources, key=lambda s: (self.scorer.score(s), s.name), default=None)
        evidence = [f"Contradicted by {name}" for name in verified.contradicting_sources]
        evidence.extend(verified.contradictions)

        return Issue(
            type=IssueType.FACTUAL_ERROR,
            category="contradicted_claim",
            severity=severity,
            location=verified.claim.location,
            description=(
                f"Claim may be inaccurate (confidence {verified.confidence:.0f}%): "
                f"{verified.claim.statement}"
            ),
            evidence=evidence,
            suggested_fix=f"Consider verifying against: {best.name}" if best else None,
            confidence=(100.0 - verified.confidence) / 100.0,
            module_source=self.name,
        )
