"""Tests for concurrent source querying.

Tests cover:
- Per-source timeouts scaled by urgency
- Failures degrade to empty results and are audited
- Unavailable sources are skipped
- Results keep registration order
"""

import asyncio

import pytest

from verity_system.analyzers.fact_checking import SourceManager
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas.claim_schema import (
    Source,
    SourceQueryResult,
    SourceType,
)
from verity_system.data_management.schemas.common_schema import Urgency
from verity_system.data_management.schemas.result_schema import AuditAction
from verity_system.errors import SourceQueryError


# ── Fixtures ──────────────────────────────────────────────────────────────


class FakeSource:
    """In-memory provider with configurable delay, failure and availability."""

    source_type = SourceType.ENCYCLOPEDIA

    def __init__(self, name, confidence=80.0, delay=0.0, error=None, available=True):
        self.name = name
        self.confidence = confidence
        self.delay = delay
        self.error = error
        self.available = available
        self.calls = 0
        self.closed = False

    def is_available(self):
        if isinstance(self.available, Exception):
            raise self.available
        return self.available

    async def query(self, statement, domain=None):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SourceQueryResult(
            source_name=self.name,
            sources=[Source(name=self.name, credibility_score=75, source_type=self.source_type)],
            confidence=self.confidence,
            is_supported=True,
            evidence=[statement],
        )

    async def close(self):
        self.closed = True


@pytest.fixture
def audit() -> AuditTrail:
    return AuditTrail("test-session")


class TestTimeouts:
    """Timeout handling."""

    def test_urgency_scales_timeout(self):
        manager = SourceManager([], timeout_seconds=4.0)
        assert manager.timeout_for(Urgency.LOW) == 6.0
        assert manager.timeout_for(Urgency.MEDIUM) == 4.0
        assert manager.timeout_for(Urgency.HIGH) == 3.0
        assert manager.timeout_for(Urgency.CRITICAL) == 2.0

    @pytest.mark.asyncio
    async def test_slow_source_times_out(self, audit):
        slow = FakeSource("slow", delay=0.5)
        fast = FakeSource("fast")
        manager = SourceManager([slow, fast], timeout_seconds=0.05)

        results = await manager.query_all("claim text", audit=audit)

        assert [r.source_name for r in results] == ["slow", "fast"]
        assert results[0].is_empty
        assert results[1].confidence == 80.0
        failures = audit.failures("fact_checker.source.slow")
        assert len(failures) == 1
        assert "timed out" in failures[0].details["error"]


class TestFailures:
    """Provider errors never propagate."""

    @pytest.mark.asyncio
    async def test_source_query_error(self, audit):
        bad = FakeSource("bad", error=SourceQueryError("bad", "boom"))
        manager = SourceManager([bad])

        result = await manager.query_one(bad, "claim text", audit=audit)

        assert result.is_empty
        assert result.source_name == "bad"
        entry = audit.entries[0]
        assert entry.action == AuditAction.MODULE_FAILED
        assert entry.component == "fact_checker.source.bad"
        assert "boom" in entry.details["error"]

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        bad = FakeSource("bad", error=RuntimeError("kaput"))
        manager = SourceManager([bad, FakeSource("good")])

        results = await manager.query_all("claim text")

        assert results[0].is_empty
        assert not results[1].is_empty

    @pytest.mark.asyncio
    async def test_no_audit_trail_required(self):
        bad = FakeSource("bad", error=RuntimeError("kaput"))
        result = await SourceManager([bad]).query_one(bad, "claim text")
        assert result.is_empty


class TestAvailability:
    """Source selection."""

    @pytest.mark.asyncio
    async def test_unavailable_sources_skipped(self):
        offline = FakeSource("offline", available=False)
        broken = FakeSource("broken", available=RuntimeError("health check failed"))
        online = FakeSource("online")
        manager = SourceManager([offline, broken, online])

        results = await manager.query_all("claim text")

        assert [r.source_name for r in results] == ["online"]
        assert offline.calls == 0
        assert broken.calls == 0

    @pytest.mark.asyncio
    async def test_no_sources(self):
        assert await SourceManager([]).query_all("claim text") == []

    def test_default_http_sources_disabled_offline(self):
        manager = SourceManager()
        assert [s.name for s in manager.sources] == ["wikipedia", "government_data"]
        assert manager.available_sources() == []

    @pytest.mark.asyncio
    async def test_close_closes_sources(self):
        source = FakeSource("one")
        await SourceManager([source]).close()
        assert source.closed
