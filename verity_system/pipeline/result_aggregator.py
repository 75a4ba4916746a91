"""Merge analyzer outputs into one verdict.

Confidence model (all constants in config.scoring):

    penalty(issue) = SEVERITY_PENALTIES[severity]
                     * ISSUE_TYPE_WEIGHTS[type]
                     * issue.confidence
                     * DOMAIN_CONFIDENCE_WEIGHTS[domain]

Penalties are bucketed by severity. Within a bucket the largest penalty
counts in full and the rest are dampened logarithmically:

    bucket = top * (1 + alpha * log10(1 + rest / top))

so ten low-severity issues cost far less than two critical ones.

    overall = clamp(100 - sum(buckets)
                    - MODULE_FAILURE_PENALTY * failed_modules
                    - STEP_FAILURE_PENALTY * failed_steps, 0, 100)

Risk is the higher of the most severe issue and the confidence band
(< 50 critical, < 70 high, < 85 medium). A critical issue therefore always
yields critical risk.
"""

import math
from collections import Counter
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from verity_system.config import scoring
from verity_system.data_management.schemas.common_schema import Domain, RiskLevel, Severity
from verity_system.data_management.schemas.issue_schema import Issue, IssueType
from verity_system.data_management.schemas.result_schema import (
    AuditEntry,
    ModuleMetrics,
    ResultMetrics,
    VerificationResult,
)

_TYPE_ORDER = (
    IssueType.COMPLIANCE_VIOLATION,
    IssueType.FACTUAL_ERROR,
    IssueType.LOGICAL_INCONSISTENCY,
)


class ResultAggregator:
    """Scores merged issues and builds the VerificationResult."""

    def __init__(
        self,
        confidence_threshold: float = 0.0,
        alpha: float = scoring.DIMINISHING_RETURNS_ALPHA,
        failure_penalty: float = scoring.MODULE_FAILURE_PENALTY,
        step_failure_penalty: float = scoring.STEP_FAILURE_PENALTY,
    ):
        """
        Initialize aggregator.

        Args:
            confidence_threshold: Issues below this confidence (0-1) are dropped
                before scoring and counted in metrics.filtered_issues
            alpha: Diminishing-returns strength within a severity bucket
            failure_penalty: Confidence removed per failed analyzer branch
            step_failure_penalty: Confidence removed per failed sub-step of an
                analyzer that still completed
        """
        self.confidence_threshold = confidence_threshold
        self.alpha = alpha
        self.failure_penalty = failure_penalty
        self.step_failure_penalty = step_failure_penalty
        self._logger = logger.bind(component="ResultAggregator")

    def aggregate(
        self,
        module_issues: Mapping[str, Sequence[Issue]],
        domain: Domain,
        modules: Sequence[ModuleMetrics] = (),
        audit_trail: Sequence[AuditEntry] = (),
        processing_time: float = 0.0,
        verification_id: Optional[str] = None,
    ) -> VerificationResult:
        """Merge, filter, score and package the analyzer outputs.

        Args:
            module_issues: Issues per analyzer name.
            domain: Document domain (selects the domain confidence weight).
            modules: Per-analyzer metrics; failed entries lower confidence.
            audit_trail: Chronological audit entries for the session.
            processing_time: Wall time in milliseconds.
            verification_id: Reused as the result id when given.
        """
        merged = [issue for name in module_issues for issue in module_issues[name]]
        kept, filtered = self.filter_issues(merged)
        issues = self.sort_issues(kept)
        failed = [m.module for m in modules if m.failed]
        failed_steps = [step for m in modules if not m.failed for step in m.partial_failures]

        confidence = self.calculate_confidence(
            issues, domain, failed_modules=len(failed), failed_steps=len(failed_steps)
        )
        risk = self.determine_risk(issues, confidence)
        recommendations = self.generate_recommendations(issues, risk, failed, failed_steps)

        metrics = ResultMetrics(
            total_issues=len(issues),
            issues_by_type=dict(sorted(Counter(i.type.value for i in issues).items())),
            issues_by_severity=dict(sorted(Counter(i.severity.value for i in issues).items())),
            modules=list(modules),
            filtered_issues=filtered,
        )

        fields = dict(
            overall_confidence=confidence,
            risk_level=risk,
            issues=issues,
            audit_trail=list(audit_trail),
            processing_time=max(0.0, processing_time),
            recommendations=recommendations,
            metrics=metrics,
        )
        if verification_id is not None:
            fields["verification_id"] = verification_id

        self._logger.info(
            f"Aggregated {len(issues)} issue(s): confidence {confidence:.1f}, risk {risk.value}"
        )
        return VerificationResult(**fields)

    def filter_issues(self, issues: Iterable[Issue]) -> Tuple[List[Issue], int]:
        issues = list(issues)
        kept = [i for i in issues if i.confidence >= self.confidence_threshold]
        return kept, len(issues) - len(kept)

    @staticmethod
    def sort_issues(issues: Iterable[Issue]) -> List[Issue]:
        """Severity descending, then confidence descending, then position."""
        return sorted(
            issues,
            key=lambda i: (
                -i.severity.rank,
                -i.confidence,
                i.location.start,
                i.location.end,
                i.type.value,
                i.category or "",
                i.description,
            ),
        )

    def issue_penalty(self, issue: Issue, domain: Domain) -> float:
        return (
            scoring.SEVERITY_PENALTIES[issue.severity.value]
            * scoring.ISSUE_TYPE_WEIGHTS.get(issue.type.value, 1.0)
            * issue.confidence
            * scoring.DOMAIN_CONFIDENCE_WEIGHTS.get(domain.value, 1.0)
        )

    def dampened(self, penalties: Sequence[float]) -> float:
        """Combine one bucket's penalties with diminishing returns."""
        positive = sorted((p for p in penalties if p > 0), reverse=True)
        if not positive:
            return 0.0
        top, rest = positive[0], sum(positive[1:])
        return top * (1 + self.alpha * math.log10(1 + rest / top))

    def calculate_confidence(
        self,
        issues: Sequence[Issue],
        domain: Domain,
        failed_modules: int = 0,
        failed_steps: int = 0,
    ) -> float:
        buckets: Dict[Severity, List[float]] = {}
        for issue in issues:
            buckets.setdefault(issue.severity, []).append(self.issue_penalty(issue, domain))

        penalty = sum(self.dampened(buckets[s]) for s in sorted(buckets))
        penalty += self.failure_penalty * failed_modules
        penalty += self.step_failure_penalty * failed_steps
        confidence = scoring.MAX_CONFIDENCE - penalty
        return round(max(0.0, min(scoring.MAX_CONFIDENCE, confidence)), 2)

    @staticmethod
    def determine_risk(issues: Sequence[Issue], confidence: float) -> RiskLevel:
        risk = Severity.highest(i.severity for i in issues)
        bands = scoring.RISK_CONFIDENCE_BANDS
        if confidence < bands["critical"]:
            band = Severity.CRITICAL
        elif confidence < bands["high"]:
            band = Severity.HIGH
        elif confidence < bands["medium"]:
            band = Severity.MEDIUM
        else:
            band = Severity.LOW
        return max(risk, band)

    @staticmethod
    def generate_recommendations(
        issues: Sequence[Issue],
        risk: RiskLevel,
        failed_modules: Sequence[str] = (),
        failed_steps: Sequence[str] = (),
    ) -> List[str]:
        recommendations: List[str] = []
        risk_line = scoring.RISK_RECOMMENDATIONS.get(risk.value)
        if risk_line:
            recommendations.append(risk_line)

        counts = Counter(i.type for i in issues)
        for issue_type in _TYPE_ORDER:
            if counts.get(issue_type):
                recommendations.append(
                    scoring.RECOMMENDATION_TEMPLATES[issue_type.value].format(
                        count=counts[issue_type]
                    )
                )

        for module in failed_modules:
            recommendations.append(scoring.MODULE_FAILURE_RECOMMENDATION.format(module=module))

        for step in failed_steps:
            recommendations.append(scoring.STEP_FAILURE_RECOMMENDATION.format(step=step))

        if not issues and not failed_modules and not failed_steps:
            recommendations.append(scoring.NO_ISSUES_RECOMMENDATION)

        # dedupe, first occurrence wins
        return list(dict.fromkeys(recommendations))
