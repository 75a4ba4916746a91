"""Tests for the compliance rules engine.

Tests cover:
- Default rule registration and lookups
- Validation reporting every defect at once
- Merge-patch updates, versioning and deactivation
- Jurisdiction scoping with GLOBAL rules, case-insensitive
- Compiled pattern cache eviction on update and deactivation
- Keyword and pattern matching, deduplication and severity
- Concurrent readers during updates
"""

import threading

import pytest

from verity_system.analyzers.compliance import ComplianceRulesEngine
from verity_system.data_management.schemas.common_schema import Domain, Severity
from verity_system.data_management.schemas.compliance_schema import ViolationType
from verity_system.errors import RuleNotFoundError, RuleValidationError


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def engine() -> ComplianceRulesEngine:
    return ComplianceRulesEngine()


def rule_data(rule_id: str = "custom-001", **overrides) -> dict:
    data = {
        "id": rule_id,
        "rule_text": "Do not promise guaranteed returns",
        "regulation": "SEC",
        "jurisdiction": "US",
        "domain": "financial",
        "severity": "high",
        "keywords": ["guaranteed return"],
    }
    data.update(overrides)
    return data


class TestAdministration:
    """Registration, lookup and updates."""

    def test_defaults_loaded(self, engine):
        ids = [r.id for r in engine.get_all_rules()]
        assert ids == [
            "hipaa-phi-001",
            "sox-financial-001",
            "gdpr-privacy-001",
            "insurance-claim-001",
        ]

    def test_defaults_can_be_skipped(self):
        assert ComplianceRulesEngine(load_defaults=False).get_all_rules() == []

    def test_add_rule(self, engine):
        rule = engine.add_rule(rule_data())
        assert rule.version == 1
        assert engine.get_rule_by_id("custom-001") == rule

    def test_duplicate_id_rejected(self, engine):
        with pytest.raises(RuleValidationError):
            engine.add_rule(rule_data("hipaa-phi-001"))

    def test_every_regex_defect_reported(self, engine):
        with pytest.raises(RuleValidationError) as exc_info:
            engine.add_rule(rule_data(keywords=[], patterns=["(", "[a-"]))
        assert exc_info.value.rule_id == "custom-001"
        assert len(exc_info.value.defects) == 2
        assert engine.get_rule_by_id("custom-001") is None

    def test_schema_and_regex_defects_reported_together(self, engine):
        with pytest.raises(RuleValidationError) as exc_info:
            engine.add_rule(rule_data(domain="space", patterns=["("]))
        defects = exc_info.value.defects
        assert any("domain" in d for d in defects)
        assert any("regular expression" in d for d in defects)

    def test_empty_matching_pattern_rejected(self, engine):
        with pytest.raises(RuleValidationError):
            engine.add_rule(rule_data(keywords=[], patterns=["x*"]))

    def test_rule_without_keywords_or_patterns_rejected(self, engine):
        with pytest.raises(RuleValidationError):
            engine.add_rule(rule_data(keywords=[]))

    def test_update_merges_and_bumps_version(self, engine):
        updated = engine.update_rule("hipaa-phi-001", {"severity": "high"})
        assert updated.version == 2
        assert updated.severity == Severity.HIGH
        assert "ssn" in updated.keywords
        assert engine.get_rule_by_id("hipaa-phi-001").version == 2

    def test_update_unknown_rule(self, engine):
        with pytest.raises(RuleNotFoundError):
            engine.update_rule("missing", {"severity": "low"})

    def test_update_cannot_change_domain(self, engine):
        with pytest.raises(RuleValidationError):
            engine.update_rule("hipaa-phi-001", {"domain": "legal"})

    def test_invalid_update_leaves_rule_untouched(self, engine):
        with pytest.raises(RuleValidationError):
            engine.update_rule("hipaa-phi-001", {"patterns": ["("]})
        assert engine.get_rule_by_id("hipaa-phi-001").version == 1

    def test_deactivate_keeps_rule(self, engine):
        engine.deactivate_rule("hipaa-phi-001")
        assert engine.get_rule_by_id("hipaa-phi-001").is_active is False
        assert engine.get_applicable_rules(Domain.HEALTHCARE, "US") == []
        assert len(engine.get_all_rules()) == 4

    def test_update_drops_superseded_patterns(self, engine):
        rule = engine.get_rule_by_id("hipaa-phi-001")
        engine.match_rule(rule, "Patient SSN is 123-45-6789.")
        assert ("hipaa-phi-001", 1) in engine._compiled

        updated = engine.update_rule("hipaa-phi-001", {"patterns": [r"\bMRN-\d+\b"]})
        hits = engine.match_rule(updated, "Chart MRN-4411 attached.")

        assert [k for k in engine._compiled if k[0] == "hipaa-phi-001"] == [("hipaa-phi-001", 2)]
        assert [v.matched_text for v in hits if v.violation_type == ViolationType.PATTERN_MATCH] == [
            "MRN-4411"
        ]

    def test_deactivate_drops_cached_patterns(self, engine):
        rule = engine.get_rule_by_id("hipaa-phi-001")
        engine.match_rule(rule, "Patient SSN is 123-45-6789.")
        engine.deactivate_rule("hipaa-phi-001")
        assert not [k for k in engine._compiled if k[0] == "hipaa-phi-001"]


class TestApplicability:
    """Domain and jurisdiction filtering."""

    def test_scoped_by_jurisdiction(self, engine):
        assert [r.id for r in engine.get_applicable_rules(Domain.HEALTHCARE, "US")] == [
            "hipaa-phi-001"
        ]
        assert engine.get_applicable_rules(Domain.HEALTHCARE, "EU") == []

    def test_global_rules_apply_everywhere(self, engine):
        engine.add_rule(rule_data("global-001", domain="healthcare", jurisdiction="GLOBAL"))
        assert [r.id for r in engine.get_applicable_rules(Domain.HEALTHCARE, "EU")] == [
            "global-001"
        ]
        assert [r.id for r in engine.get_applicable_rules(Domain.HEALTHCARE, "US")] == [
            "hipaa-phi-001",
            "global-001",
        ]

    def test_jurisdiction_case_insensitive(self, engine):
        engine.add_rule(rule_data("global-002", domain="healthcare", jurisdiction="global"))
        assert [r.id for r in engine.get_applicable_rules(Domain.HEALTHCARE, "us")] == [
            "hipaa-phi-001",
            "global-002",
        ]
        assert [r.id for r in engine.get_applicable_rules(Domain.HEALTHCARE, "eu")] == [
            "global-002"
        ]


class TestMatching:
    """Keyword and pattern hits."""

    def test_ssn_is_critical_pattern_hit(self, engine):
        text = "Patient SSN is 123-45-6789."
        violations = engine.find_violations(text, Domain.HEALTHCARE, "US")

        assert [(v.location.start, v.location.end) for v in violations] == [
            (0, 7),
            (8, 11),
            (15, 26),
        ]
        ssn = violations[-1]
        assert ssn.violation_type == ViolationType.PATTERN_MATCH
        assert ssn.matched_text == "123-45-6789"
        assert ssn.severity == Severity.CRITICAL
        assert ssn.confidence == 90.0
        assert violations[0].violation_type == ViolationType.KEYWORD_MATCH
        assert violations[0].confidence == 85.0

    def test_keyword_occurrences_each_reported(self, engine):
        text = "The patient record and the patient chart."
        violations = engine.find_violations(text, Domain.HEALTHCARE, "US")
        assert [v.matched_text for v in violations] == ["patient", "patient"]

    def test_keyword_is_substring_match(self, engine):
        text = "Outpatient visits rose."
        violations = engine.find_violations(text, Domain.HEALTHCARE, "US")
        assert [v.matched_text for v in violations] == ["patient"]

    def test_pattern_wins_over_keyword_on_same_span(self, engine):
        engine.add_rule(
            rule_data(
                "dup-001",
                domain="insurance",
                keywords=["bias"],
                patterns=[r"\bbias\b"],
            )
        )
        rule = engine.get_rule_by_id("dup-001")
        hits = engine.match_rule(rule, "No bias here")
        assert len(hits) == 1
        assert hits[0].violation_type == ViolationType.PATTERN_MATCH

    def test_case_sensitive_group(self, engine):
        rule = engine.get_rule_by_id("hipaa-phi-001")
        assert any(
            v.matched_text == "John Smith has"
            for v in engine.match_rule(rule, "John Smith has diabetes")
        )
        assert not any(
            v.violation_type == ViolationType.PATTERN_MATCH
            for v in engine.match_rule(rule, "john smith has diabetes")
        )

    def test_no_rules_no_violations(self, engine):
        assert engine.find_violations("Patient SSN 123-45-6789", Domain.HEALTHCARE, "EU") == []

    def test_empty_text(self, engine):
        assert engine.find_violations("", Domain.HEALTHCARE, "US") == []

    def test_compliance_score(self, engine):
        violations = engine.find_violations("Patient SSN", Domain.HEALTHCARE, "US")
        assert engine.compliance_score(violations) == 50.0
        assert engine.compliance_score(violations * 3) == 0.0


class TestConcurrency:
    """Readers see whole rule versions while a writer updates."""

    def test_readers_see_monotonic_versions(self, engine):
        seen = []
        done = threading.Event()

        def reader():
            while not done.is_set():
                rules = engine.get_applicable_rules(Domain.HEALTHCARE, "US")
                seen.extend(r.version for r in rules)

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            for i in range(20):
                engine.update_rule("hipaa-phi-001", {"keywords": ["patient", f"term{i}"]})
        finally:
            done.set()
            thread.join()

        assert seen == sorted(seen)
        assert engine.get_rule_by_id("hipaa-phi-001").version == 21
