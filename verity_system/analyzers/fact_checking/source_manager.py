"""Concurrent source querying with per-source timeouts.

Each provider call runs as its own task. The caller waits at most the
source timeout (scaled by request urgency) for it; on timeout the task is
left to finish in the background and its result discarded. Timeouts,
SourceQueryError and any other provider exception degrade to an empty
result, are logged, and are recorded as a module_failed audit entry for
component ``fact_checker.source.<name>``.
"""

import asyncio
from typing import List, Optional, Sequence

import structlog

from verity_system.analyzers.fact_checking.sources import (
    ExternalSource,
    GovernmentDataSource,
    WikipediaSource,
)
from verity_system.config.scoring import URGENCY_TIMEOUT_FACTORS
from verity_system.config.settings import settings
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas.claim_schema import SourceQueryResult
from verity_system.data_management.schemas.common_schema import Domain, Urgency
from verity_system.data_management.schemas.result_schema import AuditAction


def _consume_exception(task: asyncio.Task) -> None:
    # abandoned tasks must not log "exception was never retrieved"
    if not task.cancelled():
        task.exception()


class SourceManager:
    """Queries a set of ExternalSource providers for one claim."""

    def __init__(
        self,
        sources: Optional[Sequence[ExternalSource]] = None,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Initialize source manager.

        Args:
            sources: Providers to consult. None registers the configured
                HTTP providers (Wikipedia, government data); pass [] for none.
            timeout_seconds: Base per-source timeout (settings default)
        """
        if sources is None:
            sources = [WikipediaSource(), GovernmentDataSource()]
        self.sources: List[ExternalSource] = list(sources)
        self.timeout_seconds = (
            settings.source_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self.logger = structlog.get_logger().bind(component="SourceManager")

    def timeout_for(self, urgency: Urgency = Urgency.MEDIUM) -> float:
        return self.timeout_seconds * URGENCY_TIMEOUT_FACTORS.get(urgency.value, 1.0)

    def available_sources(self) -> List[ExternalSource]:
        available = []
        for source in self.sources:
            try:
                if source.is_available():
                    available.append(source)
            except Exception as e:
                self.logger.warning("source_availability_check_failed", source=source.name, error=str(e))
        return available

    async def query_all(
        self,
        statement: str,
        domain: Optional[Domain] = None,
        urgency: Urgency = Urgency.MEDIUM,
        audit: Optional[AuditTrail] = None,
    ) -> List[SourceQueryResult]:
        """Query every available source concurrently.

        Returns:
            One result per available source, in registration order. Failed
            sources contribute an empty result.
        """
        sources = self.available_sources()
        if not sources:
            return []
        return list(
            await asyncio.gather(
                *(self.query_one(s, statement, domain, urgency, audit) for s in sources)
            )
        )

    async def query_one(
        self,
        source: ExternalSource,
        statement: str,
        domain: Optional[Domain] = None,
        urgency: Urgency = Urgency.MEDIUM,
        audit: Optional[AuditTrail] = None,
    ) -> SourceQueryResult:
        """Query one source within its timeout; never raises."""
        timeout = self.timeout_for(urgency)
        task = asyncio.ensure_future(source.query(statement, domain))
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError:
            task.add_done_callback(_consume_exception)
            self.logger.warning("source_timeout", source=source.name, timeout_seconds=timeout)
            self._record_failure(audit, source.name, f"timed out after {timeout:.2f}s")
        except Exception as e:
            self.logger.warning("source_query_failed", source=source.name, error=str(e))
            self._record_failure(audit, source.name, str(e))
        return SourceQueryResult.empty(source.name)

    @staticmethod
    def _record_failure(audit: Optional[AuditTrail], name: str, error: str) -> None:
        if audit is not None:
            audit.record(AuditAction.MODULE_FAILED, f"fact_checker.source.{name}", error=error)

    async def close(self) -> None:
        for source in self.sources:
            close = getattr(source, "close", None)
            if close is not None:
                await close()
