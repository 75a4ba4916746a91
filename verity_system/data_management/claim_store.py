"""Storage port for reference factual claims used by the internal knowledge base.

Follows the same pattern as the rule store:
- Claims keyed by normalized statement
- O(1) lookup by statement
- Async-safe writes with an asyncio lock

Usage:
    from verity_system.data_management.claim_store import InMemoryClaimStore

    store = InMemoryClaimStore.with_reference_claims()
    claims = await store.list_claims()
"""

import asyncio
from typing import Iterable, List, Optional, Protocol, runtime_checkable

import structlog

from verity_system.data_management.schemas.claim_schema import (
    FactualClaim,
    Source,
    SourceType,
)
from verity_system.data_management.schemas.common_schema import Domain


def normalize_statement(statement: str) -> str:
    return " ".join(statement.lower().split()).rstrip(".")


@runtime_checkable
class ClaimStore(Protocol):
    """Persistence port for reference claims."""

    async def get(self, statement: str) -> Optional[FactualClaim]:
        ...

    async def upsert(self, claim: FactualClaim) -> FactualClaim:
        ...

    async def list_claims(self, domain: Optional[Domain] = None) -> List[FactualClaim]:
        ...


class InMemoryClaimStore:
    """Dict-backed claim store."""

    def __init__(self, claims: Optional[Iterable[FactualClaim]] = None) -> None:
        self._claims: dict[str, FactualClaim] = {}
        self._lock = asyncio.Lock()
        self._logger = structlog.get_logger().bind(component="InMemoryClaimStore")
        for claim in claims or []:
            self._claims[normalize_statement(claim.statement)] = claim

    @classmethod
    def with_reference_claims(cls) -> "InMemoryClaimStore":
        """Store seeded with a small set of verified reference claims."""
        return cls(REFERENCE_CLAIMS)

    async def get(self, statement: str) -> Optional[FactualClaim]:
        return self._claims.get(normalize_statement(statement))

    async def upsert(self, claim: FactualClaim) -> FactualClaim:
        async with self._lock:
            self._claims[normalize_statement(claim.statement)] = claim
        self._logger.debug("claim_upserted", statement=claim.statement[:60])
        return claim

    async def list_claims(self, domain: Optional[Domain] = None) -> List[FactualClaim]:
        claims = list(self._claims.values())
        if domain is not None:
            claims = [c for c in claims if c.domain is None or c.domain == domain]
        return claims

    def __len__(self) -> int:
        return len(self._claims)


REFERENCE_CLAIMS: List[FactualClaim] = [
    FactualClaim(
        statement="Aspirin reduces the risk of heart attack",
        confidence=92,
        domain=Domain.HEALTHCARE,
        verified=True,
        sources=[
            Source(
                name="FDA",
                url="https://www.fda.gov",
                credibility_score=98,
                source_type=SourceType.GOVERNMENT,
            )
        ],
    ),
    FactualClaim(
        statement="FDIC insurance covers deposits up to $250,000",
        confidence=98,
        domain=Domain.FINANCIAL,
        verified=True,
        sources=[
            Source(
                name="FDIC",
                url="https://www.fdic.gov",
                credibility_score=97,
                source_type=SourceType.GOVERNMENT,
            )
        ],
    ),
    FactualClaim(
        statement="HIPAA requires patient consent for data sharing",
        confidence=95,
        domain=Domain.HEALTHCARE,
        verified=True,
        sources=[
            Source(
                name="HHS",
                url="https://www.hhs.gov",
                credibility_score=96,
                source_type=SourceType.GOVERNMENT,
            )
        ],
    ),
]
