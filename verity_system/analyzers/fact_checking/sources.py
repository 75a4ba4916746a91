"""Pluggable knowledge source providers.

Every provider implements the ExternalSource protocol:
    name, source_type, is_available() -> bool,
    async query(statement, domain) -> SourceQueryResult

Providers raise SourceQueryError on failure; the SourceManager converts
that (and timeouts) into an empty result so one bad source never blocks
the others.

HTTP providers use httpx with tenacity retries on transport errors
(connection failures, timeouts). HTTP status errors are not retried.
"""

import re
import time
from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable
from urllib.parse import quote

import httpx
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from verity_system.analyzers.fact_checking.credibility import SourceCredibilityScorer
from verity_system.analyzers.fact_checking.evidence import PassageAssessment, assess_passage
from verity_system.config.scoring import SUPPORT_THRESHOLDS
from verity_system.config.settings import settings
from verity_system.config.source_credibility import (
    ENCYCLOPEDIA_DOMAIN_RELIABILITY,
    GOVERNMENT_RELIABILITY,
    WIKIPEDIA_RELIABILITY,
)
from verity_system.data_management.schemas.claim_schema import (
    Source,
    SourceQueryResult,
    SourceType,
)
from verity_system.data_management.schemas.common_schema import Domain
from verity_system.errors import SourceQueryError

_HTML_TAG = re.compile(r"<[^>]+>")
_USER_AGENT = "verity-system/1.0 (claim verification)"


@runtime_checkable
class ExternalSource(Protocol):
    """A knowledge source queried for evidence about one claim."""

    name: str
    source_type: SourceType

    def is_available(self) -> bool:
        ...

    async def query(self, statement: str, domain: Optional[Domain] = None) -> SourceQueryResult:
        ...


def build_result(
    source_name: str,
    source_type: SourceType,
    reliability: float,
    evidence: Iterable[Tuple[PassageAssessment, Source]],
    elapsed_ms: float,
) -> SourceQueryResult:
    """Turn assessed passages into one SourceQueryResult.

    Args:
        source_name: Provider name reported on the result.
        source_type: Provider class, selects the support threshold.
        reliability: Provider reliability (0-100) for this domain.
        evidence: (assessment, Source) pairs that counted as evidence.
        elapsed_ms: Query wall time.

    The strongest assessment decides: if the best contradicting passage
    overlaps the claim at least as much as the best supporting one, the
    source contradicts the claim.
    """
    pairs = [(a, s) for a, s in evidence if a.is_evidence]
    if not pairs:
        return SourceQueryResult.empty(source_name, query_time_ms=elapsed_ms)

    supporting = [(a, s) for a, s in pairs if a.supports]
    contradicting = [(a, s) for a, s in pairs if a.contradicts]
    best_support = max((a.overlap for a, _ in supporting), default=0.0)
    best_contra = max((a.overlap for a, _ in contradicting), default=0.0)

    if contradicting and best_contra >= best_support:
        return SourceQueryResult(
            source_name=source_name,
            sources=_unique_sources(s for _, s in contradicting),
            confidence=round(reliability * best_contra, 2),
            is_supported=False,
            evidence=[a.sentence for a, _ in supporting],
            contradictions=[a.sentence for a, _ in contradicting],
            query_time_ms=elapsed_ms,
        )

    confidence = round(reliability * best_support, 2)
    return SourceQueryResult(
        source_name=source_name,
        sources=_unique_sources(s for _, s in supporting),
        confidence=confidence,
        is_supported=confidence > SUPPORT_THRESHOLDS.get(source_type.value, 70.0),
        evidence=[a.sentence for a, _ in supporting],
        contradictions=[],
        query_time_ms=elapsed_ms,
    )


def _unique_sources(sources: Iterable[Source]) -> List[Source]:
    seen = set()
    unique = []
    for source in sources:
        key = (source.name, source.url)
        if key not in seen:
            seen.add(key)
            unique.append(source)
    return unique


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


class _HttpSource:
    """Shared httpx client handling for HTTP providers."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._client = client
        self._owns_client = client is None
        self.http_timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.http_timeout),
                headers={"User-Agent": _USER_AGENT},
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class WikipediaSource(_HttpSource):
    """Encyclopedia evidence from the MediaWiki search API.

    Search snippets for the claim are assessed as passages. Reliability
    depends on the business domain (coverage of legal topics is weaker than
    of financial ones).
    """

    source_type = SourceType.ENCYCLOPEDIA

    def __init__(
        self,
        api_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        max_results: int = 3,
        enabled: Optional[bool] = None,
        scorer: Optional[SourceCredibilityScorer] = None,
    ):
        super().__init__(client)
        self.name = "wikipedia"
        self.api_url = api_url or settings.wikipedia_api_url
        self.max_results = max_results
        self.enabled = settings.enable_external_sources if enabled is None else enabled
        self.scorer = scorer or SourceCredibilityScorer()
        self.logger = structlog.get_logger().bind(component="WikipediaSource")

    def is_available(self) -> bool:
        return self.enabled and bool(self.api_url)

    def reliability(self, domain: Optional[Domain]) -> float:
        if domain is None:
            return WIKIPEDIA_RELIABILITY
        return ENCYCLOPEDIA_DOMAIN_RELIABILITY.get(domain.value, WIKIPEDIA_RELIABILITY)

    async def query(self, statement: str, domain: Optional[Domain] = None) -> SourceQueryResult:
        started = time.perf_counter()
        try:
            hits = await self._search(statement)
        except httpx.HTTPError as e:
            self.logger.warning("wikipedia_query_failed", error=str(e))
            raise SourceQueryError(self.name, str(e)) from e

        reliability = self.reliability(domain)
        evidence = []
        for hit in hits:
            title = str(hit.get("title", ""))
            snippet = _HTML_TAG.sub("", str(hit.get("snippet", "")))
            source = Source(
                name=f"Wikipedia: {title}",
                url=f"https://en.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}",
                credibility_score=self.scorer.bound(self.source_type, reliability),
                source_type=self.source_type,
            )
            evidence.append((assess_passage(statement, snippet), source))

        result = build_result(self.name, self.source_type, reliability, evidence, _elapsed_ms(started))
        self.logger.debug(
            "wikipedia_query_completed",
            hits=len(hits),
            supported=result.is_supported,
            contradicted=result.contradicts,
        )
        return result

    @retry(
        stop=stop_after_attempt(settings.http_max_retries),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _search(self, statement: str) -> List[dict]:
        client = await self._get_client()
        response = await client.get(
            self.api_url,
            params={
                "action": "query",
                "list": "search",
                "srsearch": statement[:300],
                "srlimit": self.max_results,
                "srprop": "snippet",
                "format": "json",
            },
        )
        response.raise_for_status()
        data = response.json()
        return list(data.get("query", {}).get("search", []))


class GovernmentDataSource(_HttpSource):
    """Evidence from a government open-data search endpoint.

    The endpoint is configured with ``government_api_url`` and must answer
    ``GET ?q=<statement>&domain=<domain>`` with
    ``{"results": [{"title", "text", "url", "agency"}]}``.
    Unavailable when no endpoint is configured.
    """

    source_type = SourceType.GOVERNMENT

    def __init__(
        self,
        api_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        enabled: Optional[bool] = None,
        scorer: Optional[SourceCredibilityScorer] = None,
    ):
        super().__init__(client)
        self.name = "government_data"
        self.api_url = api_url or settings.government_api_url
        self.enabled = settings.enable_external_sources if enabled is None else enabled
        self.scorer = scorer or SourceCredibilityScorer()
        self.logger = structlog.get_logger().bind(component="GovernmentDataSource")

    def is_available(self) -> bool:
        return self.enabled and bool(self.api_url)

    async def query(self, statement: str, domain: Optional[Domain] = None) -> SourceQueryResult:
        if not self.api_url:
            raise SourceQueryError(self.name, "no endpoint configured")
        started = time.perf_counter()
        try:
            records = await self._fetch(statement, domain)
        except (httpx.HTTPError, ValueError) as e:
            self.logger.warning("government_query_failed", error=str(e))
            raise SourceQueryError(self.name, str(e)) from e

        evidence = []
        for record in records:
            url = record.get("url")
            source = Source(
                name=str(record.get("agency") or record.get("title") or "Government data"),
                url=url,
                credibility_score=self.scorer.bound(
                    self.source_type, self.scorer.base_score(self.source_type, url)
                ),
                source_type=self.source_type,
            )
            passage = str(record.get("text") or record.get("title") or "")
            evidence.append((assess_passage(statement, passage), source))

        result = build_result(
            self.name, self.source_type, GOVERNMENT_RELIABILITY, evidence, _elapsed_ms(started)
        )
        self.logger.debug("government_query_completed", records=len(records))
        return result

    @retry(
        stop=stop_after_attempt(settings.http_max_retries),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _fetch(self, statement: str, domain: Optional[Domain]) -> List[dict]:
        client = await self._get_client()
        params = {"q": statement[:300]}
        if domain is not None:
            params["domain"] = domain.value
        response = await client.get(self.api_url, params=params)
        response.raise_for_status()
        return list(response.json().get("results", []))
