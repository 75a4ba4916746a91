"""Internal knowledge base over a ClaimStore.

Looks up the stored reference claim that best matches a statement (by
content-word overlap) and reports:
- supported when the stored claim is verified, agrees in polarity, and its
  confidence exceeds the internal support threshold
- contradicted when polarity or a predicate is reversed, or when the
  stored claim itself is recorded as disputed

Implements the ExternalSource protocol so the SourceManager can apply the
same timeout and failure isolation as for remote providers.
"""

import time
from typing import List, Optional

import structlog

from verity_system.analyzers.fact_checking.evidence import assess_passage
from verity_system.config.scoring import SUPPORT_THRESHOLDS
from verity_system.config.source_credibility import INTERNAL_KB_RELIABILITY
from verity_system.data_management.claim_store import ClaimStore, InMemoryClaimStore
from verity_system.data_management.schemas.claim_schema import (
    FactualClaim,
    Source,
    SourceQueryResult,
    SourceType,
)
from verity_system.data_management.schemas.common_schema import Domain


class KnowledgeBase:
    """Reference-claim lookup used as the internal evidence group."""

    source_type = SourceType.INTERNAL

    def __init__(self, store: Optional[ClaimStore] = None):
        self.name = "knowledge_base"
        self.store: ClaimStore = store if store is not None else InMemoryClaimStore.with_reference_claims()
        self.logger = structlog.get_logger().bind(component="KnowledgeBase")

    def is_available(self) -> bool:
        return True

    async def search(
        self, statement: str, domain: Optional[Domain] = None
    ) -> List[FactualClaim]:
        """Stored claims that count as evidence for ``statement``, best match first."""
        scored = []
        for stored in await self.store.list_claims(domain):
            assessment = assess_passage(statement, stored.statement)
            if assessment.is_evidence:
                scored.append((assessment.overlap, stored.statement, stored))
        scored.sort(key=lambda item: (-item[0], item[1]))
        return [stored for _, _, stored in scored]

    async def query(self, statement: str, domain: Optional[Domain] = None) -> SourceQueryResult:
        started = time.perf_counter()
        matches = await self.search(statement, domain)
        elapsed = round((time.perf_counter() - started) * 1000, 3)
        if not matches:
            return SourceQueryResult.empty(self.name, query_time_ms=elapsed)

        stored = matches[0]
        assessment = assess_passage(statement, stored.statement)
        disputed = bool(stored.contradictions)
        # agreeing with a disputed record is itself contradicted
        contradicts = assessment.contradicts != disputed
        sources = list(stored.sources) or [
            Source(
                name="Internal Knowledge Base",
                credibility_score=INTERNAL_KB_RELIABILITY,
                source_type=SourceType.INTERNAL,
            )
        ]

        if contradicts:
            result = SourceQueryResult(
                source_name=self.name,
                sources=sources,
                confidence=stored.confidence,
                is_supported=False,
                contradictions=[stored.statement, *(stored.contradictions or [])],
                query_time_ms=elapsed,
            )
        else:
            result = SourceQueryResult(
                source_name=self.name,
                sources=sources,
                confidence=stored.confidence,
                is_supported=stored.verified
                and stored.confidence > SUPPORT_THRESHOLDS[SourceType.INTERNAL.value],
                evidence=[stored.statement],
                query_time_ms=elapsed,
            )

        self.logger.debug(
            "knowledge_base_match",
            statement=statement[:60],
            matched=stored.statement[:60],
            supported=result.is_supported,
            contradicted=result.contradicts,
        )
        return result
