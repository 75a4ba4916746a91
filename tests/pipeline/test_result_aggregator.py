"""Tests for ResultAggregator.

Tests cover:
- Per-issue penalties by severity, issue type and domain
- Diminishing returns within a severity bucket
- Module and sub-step failure penalties, and clamping
- Risk from the worst issue and the confidence band
- Recommendation order and deduplication
- Filtering, ordering and metrics of the packaged result
"""

import pytest

from verity_system.data_management.schemas import (
    Domain,
    Issue,
    IssueType,
    RiskLevel,
    Severity,
)
from verity_system.data_management.schemas.content_schema import TextLocation
from verity_system.data_management.schemas.result_schema import ModuleMetrics
from verity_system.pipeline import ResultAggregator


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def aggregator() -> ResultAggregator:
    return ResultAggregator()


def make_issue(
    issue_type: IssueType = IssueType.COMPLIANCE_VIOLATION,
    severity: Severity = Severity.CRITICAL,
    confidence: float = 0.9,
    start: int = 0,
    description: str = "problem",
) -> Issue:
    return Issue(
        type=issue_type,
        severity=severity,
        location=TextLocation(start=start, end=start + 5),
        description=description,
        confidence=confidence,
        module_source="test",
    )


class TestConfidence:
    """Overall confidence arithmetic."""

    def test_no_issues_is_full_confidence(self, aggregator):
        assert aggregator.calculate_confidence([], Domain.LEGAL) == 100.0

    def test_single_issue_penalty(self, aggregator):
        issue = make_issue(confidence=0.9)
        # 25 * 1.0 * 0.9 * 1.1
        assert aggregator.issue_penalty(issue, Domain.HEALTHCARE) == pytest.approx(24.75)
        assert aggregator.calculate_confidence([issue], Domain.HEALTHCARE) == pytest.approx(75.25)

    def test_logical_issues_weigh_less(self, aggregator):
        logical = make_issue(IssueType.LOGICAL_INCONSISTENCY, Severity.MEDIUM, 1.0)
        factual = make_issue(IssueType.FACTUAL_ERROR, Severity.MEDIUM, 1.0)
        assert aggregator.issue_penalty(logical, Domain.LEGAL) == pytest.approx(4.8)
        assert aggregator.issue_penalty(factual, Domain.LEGAL) == pytest.approx(8.0)

    def test_financial_domain_weighs_more(self, aggregator):
        issue = make_issue(IssueType.FACTUAL_ERROR, Severity.HIGH, 1.0)
        assert aggregator.issue_penalty(issue, Domain.FINANCIAL) == pytest.approx(18.0)

    def test_bucket_dampening(self, aggregator):
        issues = [make_issue(confidence=0.9, start=i * 10) for i in range(2)]
        # 24.75 * (1 + log10(2))
        assert aggregator.calculate_confidence(issues, Domain.HEALTHCARE) == pytest.approx(
            67.8, abs=0.01
        )

    def test_many_low_issues_cost_less_than_two_critical(self, aggregator):
        lows = [
            make_issue(IssueType.LOGICAL_INCONSISTENCY, Severity.LOW, 0.5, start=i * 10)
            for i in range(10)
        ]
        criticals = [make_issue(confidence=0.9, start=i * 10) for i in range(2)]

        low_confidence = aggregator.calculate_confidence(lows, Domain.LEGAL)
        assert low_confidence == pytest.approx(98.2, abs=0.01)
        assert low_confidence > aggregator.calculate_confidence(criticals, Domain.LEGAL)

    def test_dampened_ignores_zero_penalties(self, aggregator):
        assert aggregator.dampened([]) == 0.0
        assert aggregator.dampened([0.0, 0.0]) == 0.0
        assert aggregator.dampened([5.0]) == 5.0

    def test_alpha_zero_counts_only_top_penalty(self):
        aggregator = ResultAggregator(alpha=0.0)
        issues = [make_issue(confidence=1.0, start=i * 10) for i in range(4)]
        assert aggregator.calculate_confidence(issues, Domain.LEGAL) == 75.0

    def test_module_failure_penalty(self, aggregator):
        assert aggregator.calculate_confidence([], Domain.LEGAL, failed_modules=1) == 90.0
        assert aggregator.calculate_confidence([], Domain.LEGAL, failed_modules=2) == 80.0

    def test_step_failure_penalty(self, aggregator):
        assert aggregator.calculate_confidence([], Domain.LEGAL, failed_steps=1) == 95.0
        assert aggregator.calculate_confidence([], Domain.LEGAL, failed_steps=2) == 90.0

    def test_confidence_clamped_at_zero(self):
        aggregator = ResultAggregator(failure_penalty=200.0)
        assert aggregator.calculate_confidence([], Domain.LEGAL, failed_modules=1) == 0.0


class TestRisk:
    """Risk level selection."""

    @pytest.mark.parametrize(
        "confidence,expected",
        [
            (100.0, RiskLevel.LOW),
            (85.0, RiskLevel.LOW),
            (84.9, RiskLevel.MEDIUM),
            (70.0, RiskLevel.MEDIUM),
            (69.9, RiskLevel.HIGH),
            (50.0, RiskLevel.HIGH),
            (49.9, RiskLevel.CRITICAL),
        ],
    )
    def test_confidence_bands(self, confidence, expected):
        assert ResultAggregator.determine_risk([], confidence) == expected

    def test_critical_issue_forces_critical_risk(self):
        issue = make_issue(severity=Severity.CRITICAL, confidence=0.1)
        assert ResultAggregator.determine_risk([issue], 97.5) == RiskLevel.CRITICAL

    def test_band_wins_over_milder_issue(self):
        issue = make_issue(severity=Severity.LOW)
        assert ResultAggregator.determine_risk([issue], 60.0) == RiskLevel.HIGH


class TestRecommendations:
    """Recommendation text and ordering."""

    def test_no_issues(self):
        assert ResultAggregator.generate_recommendations([], RiskLevel.LOW) == [
            "Content appears to be accurate and compliant. No issues detected."
        ]

    def test_risk_line_then_types_in_fixed_order(self):
        issues = [
            make_issue(IssueType.LOGICAL_INCONSISTENCY, Severity.MEDIUM),
            make_issue(IssueType.COMPLIANCE_VIOLATION, Severity.CRITICAL),
            make_issue(IssueType.COMPLIANCE_VIOLATION, Severity.CRITICAL, start=10),
        ]
        recommendations = ResultAggregator.generate_recommendations(issues, RiskLevel.CRITICAL)

        assert recommendations == [
            "CRITICAL: Do not use this content without thorough review and correction.",
            "2 compliance violation(s) identified. "
            "Consult with legal/compliance team before proceeding.",
            "1 logical inconsistency(ies) found. "
            "Check for contradictions and ensure coherent reasoning.",
        ]

    def test_low_risk_has_no_risk_line(self):
        issues = [make_issue(IssueType.FACTUAL_ERROR, Severity.LOW)]
        assert ResultAggregator.generate_recommendations(issues, RiskLevel.LOW) == [
            "1 factual error(s) detected. Review and verify against authoritative sources."
        ]

    def test_failed_module_replaces_all_clear(self):
        recommendations = ResultAggregator.generate_recommendations(
            [], RiskLevel.LOW, failed_modules=["logic"]
        )
        assert recommendations == [
            "logic analysis failed; results may be incomplete. Re-run verification."
        ]

    def test_failed_step_replaces_all_clear(self):
        recommendations = ResultAggregator.generate_recommendations(
            [], RiskLevel.LOW, failed_steps=["logic.coherence"]
        )
        assert recommendations == [
            "logic.coherence check failed; results may be incomplete. Re-run verification."
        ]

    def test_duplicates_removed(self):
        recommendations = ResultAggregator.generate_recommendations(
            [], RiskLevel.MEDIUM, failed_modules=["logic", "logic"]
        )
        assert len(recommendations) == 2
        assert recommendations[0].startswith("MEDIUM RISK")


class TestAggregate:
    """The packaged VerificationResult."""

    def test_issues_sorted_by_severity_then_confidence(self, aggregator):
        low = make_issue(IssueType.LOGICAL_INCONSISTENCY, Severity.LOW, 0.9, start=0)
        weak_critical = make_issue(confidence=0.6, start=50)
        strong_critical = make_issue(confidence=0.9, start=80)
        early_critical = make_issue(confidence=0.9, start=20)

        result = aggregator.aggregate(
            {"logic": [low], "compliance": [weak_critical, strong_critical, early_critical]},
            Domain.LEGAL,
        )

        assert [i.location.start for i in result.issues] == [20, 80, 50, 0]

    def test_threshold_filters_and_counts(self):
        aggregator = ResultAggregator(confidence_threshold=0.5)
        kept = make_issue(confidence=0.7)
        dropped = make_issue(confidence=0.4, start=10)

        result = aggregator.aggregate({"compliance": [kept, dropped]}, Domain.LEGAL)

        assert result.issues == [kept]
        assert result.metrics.filtered_issues == 1
        assert result.metrics.total_issues == 1

    def test_metrics_counts(self, aggregator):
        result = aggregator.aggregate(
            {
                "compliance": [make_issue()],
                "logic": [
                    make_issue(IssueType.LOGICAL_INCONSISTENCY, Severity.MEDIUM, start=5),
                    make_issue(IssueType.LOGICAL_INCONSISTENCY, Severity.LOW, start=9),
                ],
            },
            Domain.LEGAL,
        )

        assert result.metrics.issues_by_type == {
            "compliance_violation": 1,
            "logical_inconsistency": 2,
        }
        assert result.metrics.issues_by_severity == {"critical": 1, "low": 1, "medium": 1}

    def test_failed_module_lowers_confidence(self, aggregator):
        modules = [
            ModuleMetrics(module="compliance", issue_count=0),
            ModuleMetrics(module="logic", failed=True, error="RuntimeError: boom"),
        ]
        result = aggregator.aggregate({"compliance": []}, Domain.LEGAL, modules=modules)

        assert result.overall_confidence == 90.0
        assert result.risk_level == RiskLevel.LOW
        assert result.metrics.modules == modules
        assert result.recommendations == [
            "logic analysis failed; results may be incomplete. Re-run verification."
        ]

    def test_partial_failure_lowers_confidence(self, aggregator):
        clean = aggregator.aggregate(
            {"logic": []}, Domain.LEGAL, modules=[ModuleMetrics(module="logic")]
        )
        partial = aggregator.aggregate(
            {"logic": []},
            Domain.LEGAL,
            modules=[ModuleMetrics(module="logic", partial_failures=["logic.coherence"])],
        )

        assert clean.overall_confidence == 100.0
        assert partial.overall_confidence == 95.0
        assert partial.recommendations == [
            "logic.coherence check failed; results may be incomplete. Re-run verification."
        ]

    def test_failed_module_steps_not_counted_twice(self, aggregator):
        modules = [
            ModuleMetrics(module="logic", failed=True, partial_failures=["logic.coherence"]),
        ]
        result = aggregator.aggregate({}, Domain.LEGAL, modules=modules)
        assert result.overall_confidence == 90.0

    def test_verification_id_and_processing_time(self, aggregator):
        result = aggregator.aggregate(
            {}, Domain.LEGAL, processing_time=-3.0, verification_id="session-1"
        )
        assert result.verification_id == "session-1"
        assert result.processing_time == 0.0
        assert result.overall_confidence == 100.0

    def test_generated_id_when_not_given(self, aggregator):
        first = aggregator.aggregate({}, Domain.LEGAL)
        second = aggregator.aggregate({}, Domain.LEGAL)
        assert first.verification_id != second.verification_id
