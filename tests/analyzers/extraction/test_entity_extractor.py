"""Tests for pattern-based entity extraction.

Tests cover:
- Typed entity recognition (email, phone, SSN, amounts, percentages)
- Restartable streams
- Invalid patterns and failing matchers are skipped
"""

import pytest

from verity_system.analyzers.extraction import EntityExtractor
from verity_system.analyzers.extraction.entity_extractor import EntityMatcher
from verity_system.data_management.schemas.content_schema import EntityType


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def extractor() -> EntityExtractor:
    return EntityExtractor()


class BrokenRegex:
    def finditer(self, text):
        raise RuntimeError("matcher exploded")


class TestEntityTypes:
    """Recognition of the built-in entity types."""

    def test_email_and_phone(self, extractor):
        text = "Contact john@example.com or call 555-123-4567 today."
        types = {e.type for e in extractor.extract_all(text)}
        assert EntityType.EMAIL in types
        assert EntityType.PHONE in types

    def test_email_location(self, extractor):
        text = "Contact john@example.com today."
        email = next(e for e in extractor.extract(text) if e.type == EntityType.EMAIL)
        assert email.value == "john@example.com"
        assert text[email.location.start:email.location.end] == email.value
        assert email.confidence == pytest.approx(0.95)

    def test_ssn(self, extractor):
        text = "Patient SSN is 123-45-6789."
        ssns = [e for e in extractor.extract_all(text) if e.type == EntityType.SSN]
        assert [e.value for e in ssns] == ["123-45-6789"]

    def test_amount_and_percentage(self, extractor):
        text = "Revenue grew to $1,200 which is 45% above plan."
        by_type = {e.type: e.value for e in extractor.extract_all(text)}
        assert by_type[EntityType.AMOUNT] == "$1,200"
        assert by_type[EntityType.PERCENTAGE] == "45%"

    def test_regulation(self, extractor):
        text = "The clinic follows HIPAA guidance."
        assert any(
            e.type == EntityType.REGULATION and e.value == "HIPAA"
            for e in extractor.extract_all(text)
        )

    def test_empty_text(self, extractor):
        assert extractor.extract_all("") == []
        assert list(extractor.extract(None)) == []


class TestStreams:
    """Lazy stream behavior and ordering."""

    def test_stream_is_restartable(self, extractor):
        stream = extractor.extract("Mail a@b.com and c@d.org now.")
        first = [e.value for e in stream]
        second = [e.value for e in stream]
        assert first == second
        assert len(first) == 2

    def test_extract_all_sorted_by_position(self, extractor):
        text = "Call 555-123-4567 or mail a@b.com about SSN 123-45-6789."
        starts = [e.location.start for e in extractor.extract_all(text)]
        assert starts == sorted(starts)


class TestFaultTolerance:
    """Broken matchers never fail extraction."""

    def test_invalid_patterns_skipped(self):
        extractor = EntityExtractor(
            patterns=[
                {"type": "email", "pattern": "(", "confidence": 0.9},
                {"type": "bogus", "pattern": "x", "confidence": 0.9},
                {"type": "ssn", "pattern": r"\b\d{3}-\d{2}-\d{4}\b", "confidence": 0.9},
            ]
        )
        assert [m.entity_type for m in extractor.matchers] == [EntityType.SSN]

    def test_failing_matcher_skipped(self, extractor):
        extractor.matchers.insert(0, EntityMatcher(EntityType.EMAIL, BrokenRegex(), 0.5))
        entities = extractor.extract_all("SSN 123-45-6789 on file.")
        assert any(e.type == EntityType.SSN for e in entities)
