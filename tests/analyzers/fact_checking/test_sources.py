"""Tests for HTTP knowledge source providers.

Uses httpx.MockTransport so no network access is needed.

Tests cover:
- Wikipedia search request parameters and snippet assessment
- Government data records scored by agency host
- HTTP status errors raise SourceQueryError without retrying
- Availability gating
"""

import httpx
import pytest

from verity_system.analyzers.fact_checking import (
    ExternalSource,
    GovernmentDataSource,
    WikipediaSource,
)
from verity_system.data_management.schemas.common_schema import Domain
from verity_system.errors import SourceQueryError


# ── Fixtures ──────────────────────────────────────────────────────────────


WIKI_PAYLOAD = {
    "query": {
        "search": [
            {
                "title": "Aspirin",
                "snippet": '<span class="searchmatch">Aspirin</span> reduces the risk of heart attack in adults',
            }
        ]
    }
}

GOV_PAYLOAD = {
    "results": [
        {
            "title": "Aspirin guidance",
            "text": "Aspirin reduces the risk of heart attack.",
            "url": "https://www.fda.gov/aspirin",
            "agency": "FDA",
        }
    ]
}


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestWikipediaSource:
    """MediaWiki search provider."""

    @pytest.mark.asyncio
    async def test_supported_snippet(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=WIKI_PAYLOAD)

        async with mock_client(handler) as client:
            source = WikipediaSource(api_url="https://wiki.test/api.php", client=client, enabled=True)
            result = await source.query(
                "Aspirin reduces the risk of heart attack", Domain.HEALTHCARE
            )

        params = seen[0].url.params
        assert params["action"] == "query"
        assert params["list"] == "search"
        assert params["srsearch"] == "Aspirin reduces the risk of heart attack"

        assert result.source_name == "wikipedia"
        assert result.is_supported
        assert result.confidence == 70.0
        assert result.sources[0].name == "Wikipedia: Aspirin"
        assert result.sources[0].url == "https://en.wikipedia.org/wiki/Aspirin"
        assert result.evidence == ["Aspirin reduces the risk of heart attack in adults"]

    @pytest.mark.asyncio
    async def test_contradicting_snippet(self):
        async with mock_client(lambda r: httpx.Response(200, json=WIKI_PAYLOAD)) as client:
            source = WikipediaSource(api_url="https://wiki.test/api.php", client=client, enabled=True)
            result = await source.query(
                "Aspirin does not reduce the risk of heart attack", Domain.HEALTHCARE
            )

        assert result.contradicts
        assert result.confidence == 56.0

    @pytest.mark.asyncio
    async def test_no_hits(self):
        async with mock_client(lambda r: httpx.Response(200, json={"query": {"search": []}})) as client:
            source = WikipediaSource(api_url="https://wiki.test/api.php", client=client, enabled=True)
            result = await source.query("Aspirin reduces the risk of heart attack")
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_status_error_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        async with mock_client(handler) as client:
            source = WikipediaSource(api_url="https://wiki.test/api.php", client=client, enabled=True)
            with pytest.raises(SourceQueryError) as exc_info:
                await source.query("Aspirin reduces the risk of heart attack")

        assert exc_info.value.source_name == "wikipedia"
        assert len(calls) == 1

    def test_availability(self):
        assert not WikipediaSource(enabled=False).is_available()
        assert WikipediaSource(enabled=True).is_available()
        assert isinstance(WikipediaSource(enabled=False), ExternalSource)

    def test_reliability_by_domain(self):
        source = WikipediaSource(enabled=False)
        assert source.reliability(None) == 75.0
        assert source.reliability(Domain.LEGAL) == 65.0


class TestGovernmentDataSource:
    """Government open-data provider."""

    @pytest.mark.asyncio
    async def test_supported_record(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=GOV_PAYLOAD)

        async with mock_client(handler) as client:
            source = GovernmentDataSource(
                api_url="https://data.example.gov/search", client=client, enabled=True
            )
            result = await source.query(
                "Aspirin reduces the risk of heart attack", Domain.HEALTHCARE
            )

        assert seen[0].url.params["domain"] == "healthcare"
        assert result.is_supported
        assert result.confidence == 95.0
        assert result.sources[0].name == "FDA"
        assert result.sources[0].credibility_score == 98.0

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        async with mock_client(lambda r: httpx.Response(200, content=b"not json")) as client:
            source = GovernmentDataSource(
                api_url="https://data.example.gov/search", client=client, enabled=True
            )
            with pytest.raises(SourceQueryError):
                await source.query("Aspirin reduces the risk of heart attack")

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        source = GovernmentDataSource(api_url=None, enabled=True)
        assert not source.is_available()
        with pytest.raises(SourceQueryError):
            await source.query("Aspirin reduces the risk of heart attack")

    @pytest.mark.asyncio
    async def test_borrowed_client_left_open(self):
        client = mock_client(lambda r: httpx.Response(200, json=GOV_PAYLOAD))
        source = GovernmentDataSource(
            api_url="https://data.example.gov/search", client=client, enabled=True
        )
        await source.close()
        assert not client.is_closed
        await client.aclose()
