"""Tests for content, claim and result schemas.

Tests cover:
- TextLocation invariants and line/column computation
- ParsedContent null-text normalization and required id
- Source credibility clamping
- VerificationResult JSON output with ISO-8601 timestamps
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from verity_system.data_management.schemas import (
    Domain,
    ParsedContent,
    Severity,
    Source,
    SourceQueryResult,
    TextLocation,
    VerificationRequest,
    VerificationResult,
)


class TestTextLocation:
    """Half-open span invariants."""

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            TextLocation(start=5, end=4)

    def test_negative_start_rejected(self):
        with pytest.raises(ValidationError):
            TextLocation(start=-1, end=4)

    def test_empty_span_allowed(self):
        assert TextLocation(start=3, end=3).end == 3

    def test_from_span_first_line(self):
        loc = TextLocation.from_span("hello world", 6, 11)
        assert (loc.line, loc.column) == (1, 7)

    def test_from_span_later_line(self):
        text = "first line\nsecond line"
        start = text.index("second")
        loc = TextLocation.from_span(text, start, start + 6)
        assert (loc.line, loc.column) == (2, 1)


class TestParsedContent:
    """Pipeline input normalization."""

    def test_null_text_becomes_empty(self):
        content = ParsedContent(id="doc-1", extracted_text=None)
        assert content.extracted_text == ""

    def test_missing_text_defaults_empty(self):
        assert ParsedContent(id="doc-1").extracted_text == ""

    def test_id_required(self):
        with pytest.raises(ValidationError):
            ParsedContent(extracted_text="text")

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            ParsedContent(id="", extracted_text="text")

    def test_request_default_urgency(self):
        request = VerificationRequest(
            content=ParsedContent(id="doc-1"), domain=Domain.LEGAL
        )
        assert request.urgency.value == "medium"
        assert request.jurisdiction is None


class TestClaimSchemas:
    """Source and query result helpers."""

    def test_credibility_clamped(self):
        assert Source(name="x", credibility_score=140).credibility_score == 100.0
        assert Source(name="x", credibility_score=-3).credibility_score == 0.0

    def test_empty_result(self):
        result = SourceQueryResult.empty("wikipedia")
        assert result.is_empty
        assert result.source_name == "wikipedia"
        assert result.confidence == 0.0
        assert not result.contradicts

    def test_contradicts_requires_contradiction_and_no_support(self):
        result = SourceQueryResult(
            sources=[Source(name="x", credibility_score=80)],
            confidence=80,
            contradictions=["X is not true"],
        )
        assert result.contradicts


class TestVerificationResult:
    """Verdict invariants and serialization."""

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            VerificationResult(overall_confidence=101, risk_level=Severity.LOW)

    def test_json_timestamps_are_iso(self):
        result = VerificationResult(overall_confidence=100, risk_level=Severity.LOW)
        data = result.model_dump(mode="json")
        assert isinstance(data["timestamp"], str)
        datetime.fromisoformat(data["timestamp"])
        assert data["risk_level"] == "low"
