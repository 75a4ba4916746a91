"""Tests for passage assessment and per-source result building.

Tests cover:
- Claim term overlap and the evidence threshold
- Negation and antonym contradictions
- build_result support thresholds and contradiction precedence
"""

import pytest

from verity_system.analyzers.fact_checking.evidence import (
    PassageAssessment,
    assess_passage,
    assess_passages,
    claim_terms,
)
from verity_system.analyzers.fact_checking.sources import build_result
from verity_system.data_management.schemas.claim_schema import Source, SourceType


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def wiki_source() -> Source:
    return Source(
        name="Wikipedia: Aspirin",
        url="https://en.wikipedia.org/wiki/Aspirin",
        credibility_score=75,
        source_type=SourceType.ENCYCLOPEDIA,
    )


class TestAssessPassage:
    """How a passage bears on a claim."""

    def test_claim_terms_ignore_negation(self):
        assert claim_terms("Aspirin does not reduce the risk of heart attack") == {
            "aspirin", "reduce", "risk", "heart", "attack",
        }

    def test_supporting_passage(self):
        a = assess_passage(
            "Aspirin reduces the risk of heart attack",
            "Aspirin reduces the risk of heart attack in adults. It is cheap.",
        )
        assert a.supports and not a.contradicts
        assert a.overlap == 1.0
        assert a.sentence == "Aspirin reduces the risk of heart attack in adults"

    def test_negation_mismatch_contradicts(self):
        a = assess_passage(
            "Aspirin does not reduce the risk of heart attack",
            "Aspirin reduces the risk of heart attack.",
        )
        assert a.contradicts and not a.supports
        assert a.overlap == pytest.approx(0.8)

    def test_antonym_contradicts(self):
        a = assess_passage("Revenue increased last year", "Revenue decreased last year.")
        assert a.contradicts

    def test_unrelated_passage_is_not_evidence(self):
        a = assess_passage("Aspirin reduces heart attack risk", "Bananas are yellow fruit.")
        assert not a.is_evidence
        assert a.overlap == 0.0

    def test_empty_passage(self):
        assert not assess_passage("Aspirin reduces heart attack risk", "").is_evidence

    def test_assess_passages_keeps_evidence_only(self):
        found = assess_passages(
            "Aspirin reduces the risk of heart attack",
            ["Bananas are yellow.", "Aspirin reduces the risk of heart attack."],
        )
        assert len(found) == 1


class TestBuildResult:
    """Turning assessments into one source answer."""

    def test_no_evidence(self, wiki_source):
        result = build_result(
            "wikipedia", SourceType.ENCYCLOPEDIA, 75.0,
            [(PassageAssessment(overlap=0.2), wiki_source)], 1.0,
        )
        assert result.is_empty
        assert result.source_name == "wikipedia"

    def test_supported_above_threshold(self, wiki_source):
        support = PassageAssessment(overlap=1.0, sentence="s", supports=True)
        result = build_result("wikipedia", SourceType.ENCYCLOPEDIA, 75.0, [(support, wiki_source)], 1.0)
        assert result.is_supported
        assert result.confidence == 75.0
        assert result.evidence == ["s"]

    def test_below_threshold_not_supported(self, wiki_source):
        support = PassageAssessment(overlap=0.8, sentence="s", supports=True)
        result = build_result("wikipedia", SourceType.ENCYCLOPEDIA, 65.0, [(support, wiki_source)], 1.0)
        assert result.confidence == 52.0
        assert not result.is_supported
        assert not result.contradicts

    def test_contradiction_wins_ties(self, wiki_source):
        support = PassageAssessment(overlap=0.8, sentence="yes", supports=True)
        contra = PassageAssessment(overlap=0.8, sentence="no", contradicts=True)
        result = build_result(
            "wikipedia", SourceType.ENCYCLOPEDIA, 75.0,
            [(support, wiki_source), (contra, wiki_source)], 1.0,
        )
        assert result.contradicts
        assert result.contradictions == ["no"]
        assert result.confidence == 60.0

    def test_stronger_support_wins(self, wiki_source):
        support = PassageAssessment(overlap=1.0, sentence="yes", supports=True)
        contra = PassageAssessment(overlap=0.6, sentence="no", contradicts=True)
        result = build_result(
            "wikipedia", SourceType.ENCYCLOPEDIA, 75.0,
            [(support, wiki_source), (contra, wiki_source)], 1.0,
        )
        assert result.is_supported
        assert result.contradictions == []
