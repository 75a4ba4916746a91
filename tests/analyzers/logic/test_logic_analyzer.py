"""Tests for the logic branch.

Tests cover:
- Contradictions become logical_inconsistency Issues at the later statement
- Coherence findings duplicating a contradiction are dropped
- A failing sub-check is audited and does not hide the others
- Numerical and fallacy findings flow through with suggested fixes
"""

import pytest

from verity_system.analyzers.logic import LogicAnalyzer
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas import (
    AuditAction,
    Domain,
    IssueType,
    ParsedContent,
    Severity,
    VerificationRequest,
)


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def analyzer() -> LogicAnalyzer:
    return LogicAnalyzer()


@pytest.fixture
def audit() -> AuditTrail:
    return AuditTrail("test-session")


def make_request(text: str) -> VerificationRequest:
    return VerificationRequest(
        content=ParsedContent(id="doc-1", extracted_text=text),
        domain=Domain.LEGAL,
    )


class ExplodingValidator:
    def validate(self, text, entities=()):
        raise RuntimeError("coherence exploded")


class ExplodingDetector:
    def detect_in_sentences(self, sentences):
        raise RuntimeError("fallacy table broken")

    def suggestions(self):
        return {}


class TestLogicAnalyzer:
    """Analyzer behavior."""

    @pytest.mark.asyncio
    async def test_direct_contradiction(self, analyzer, audit):
        text = "The system is secure. The system is not secure."
        issues = await analyzer.analyze(make_request(text), audit)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.type == IssueType.LOGICAL_INCONSISTENCY
        assert issue.category == "direct"
        assert issue.severity == Severity.HIGH
        assert issue.confidence == pytest.approx(0.95)
        assert issue.evidence == ["The system is secure", "The system is not secure"]
        assert text[issue.location.start:issue.location.end] == "The system is not secure"
        assert issue.suggested_fix
        assert issue.module_source == "logic"

    @pytest.mark.asyncio
    async def test_duplicate_sentiment_finding_dropped(self, analyzer, audit):
        text = "The launch was excellent and successful. The launch was terrible and failed."
        issues = await analyzer.analyze(make_request(text), audit)
        assert [i.category for i in issues] == ["implicit"]

    @pytest.mark.asyncio
    async def test_numerical_issue(self, analyzer, audit):
        text = "The total is 12 + 30 = 45 units. Everything else is fine here."
        issues = await analyzer.analyze(make_request(text), audit)

        assert [i.category for i in issues] == ["calculation_error"]
        assert issues[0].confidence == pytest.approx(0.95)

    @pytest.mark.asyncio
    async def test_fallacy_issue(self, analyzer, audit):
        text = "You are either with the merger or against the company."
        issues = await analyzer.analyze(make_request(text), audit)

        assert [i.category for i in issues] == ["false_dichotomy"]
        issue = issues[0]
        assert issue.type == IssueType.LOGICAL_INCONSISTENCY
        assert issue.suggested_fix == "Acknowledge the alternatives beyond the two presented"
        assert issue.evidence == ["You are either with the merger or against the company"]

    @pytest.mark.asyncio
    async def test_failing_fallacy_step_isolated(self, audit):
        analyzer = LogicAnalyzer(fallacy_detector=ExplodingDetector())
        text = "The system is secure. The system is not secure."
        issues = await analyzer.analyze(make_request(text), audit)

        assert [i.category for i in issues] == ["direct"]
        assert len(audit.failures("logic.fallacies")) == 1

    @pytest.mark.asyncio
    async def test_failing_step_isolated(self, audit):
        analyzer = LogicAnalyzer(coherence_validator=ExplodingValidator())
        text = "The system is secure. The system is not secure."
        issues = await analyzer.analyze(make_request(text), audit)

        assert [i.category for i in issues] == ["direct"]
        failures = audit.failures("logic.coherence")
        assert len(failures) == 1
        assert "coherence exploded" in failures[0].details["error"]

    @pytest.mark.asyncio
    async def test_audit_records_each_step(self, analyzer, audit):
        await analyzer.analyze(make_request("The system is secure. The system is not secure."), audit)
        components = [e.component for e in audit.entries if e.action == AuditAction.MODULE_COMPLETED]
        assert components == [
            "logic.contradictions",
            "logic.coherence",
            "logic.numerical",
            "logic.fallacies",
        ]

    @pytest.mark.asyncio
    async def test_empty_text(self, analyzer, audit):
        assert await analyzer.analyze(make_request(""), audit) == []
        assert len(audit) == 0
