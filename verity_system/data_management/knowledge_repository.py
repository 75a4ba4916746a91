"""Knowledge feedback port called by the pipeline after each verification.

Learning from feedback happens outside the pipeline. The pipeline only
reports what it saw through these hooks:
- create_or_update_factual_claim: a claim reached a verdict
- reinforce_factual_claim: evidence gathered about a claim
- find_compliance_rule_by_issue: map a compliance issue back to its rule
- reinforce_compliance_rule: a rule produced a hit

The in-memory implementation keeps its own records and never writes back
into the knowledge base the fact checker reads, so repeated runs over
the same document stay deterministic.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Protocol, runtime_checkable

import structlog

from verity_system.data_management.claim_store import normalize_statement
from verity_system.data_management.schemas.claim_schema import FactualClaim
from verity_system.data_management.schemas.compliance_schema import ComplianceRule
from verity_system.data_management.schemas.issue_schema import Issue, IssueType


@runtime_checkable
class KnowledgeRepository(Protocol):
    """Feedback hooks exposed to external learning components."""

    async def create_or_update_factual_claim(self, claim: FactualClaim) -> FactualClaim:
        ...

    async def find_compliance_rule_by_issue(self, issue: Issue) -> Optional[ComplianceRule]:
        ...

    async def reinforce_factual_claim(self, statement: str, evidence: List[str]) -> None:
        ...

    async def reinforce_compliance_rule(self, rule_id: str) -> None:
        ...


class InMemoryKnowledgeRepository:
    """Records feedback in memory.

    Args:
        rule_lookup: Resolves a rule id to a rule (usually the rules engine's
            get_rule_by_id). Without it, rule lookups return None.
    """

    def __init__(
        self,
        rule_lookup: Optional[Callable[[str], Optional[ComplianceRule]]] = None,
    ) -> None:
        self._claims: Dict[str, FactualClaim] = {}
        self._claim_evidence: Dict[str, List[str]] = {}
        self._rule_reinforcements: Dict[str, int] = {}
        self._rule_lookup = rule_lookup
        self._lock = asyncio.Lock()
        self._logger = structlog.get_logger().bind(component="KnowledgeRepository")

    async def create_or_update_factual_claim(self, claim: FactualClaim) -> FactualClaim:
        key = normalize_statement(claim.statement)
        async with self._lock:
            existing = self._claims.get(key)
            if existing is not None:
                claim = claim.model_copy(
                    update={"reinforcement_count": existing.reinforcement_count}
                )
            self._claims[key] = claim
        self._logger.debug("claim_recorded", statement=claim.statement[:60], verified=claim.verified)
        return claim

    async def find_compliance_rule_by_issue(self, issue: Issue) -> Optional[ComplianceRule]:
        if issue.type != IssueType.COMPLIANCE_VIOLATION or not issue.rule_id:
            return None
        if self._rule_lookup is None:
            return None
        return self._rule_lookup(issue.rule_id)

    async def reinforce_factual_claim(self, statement: str, evidence: List[str]) -> None:
        key = normalize_statement(statement)
        async with self._lock:
            self._claim_evidence.setdefault(key, []).extend(evidence)
            claim = self._claims.get(key)
            if claim is not None:
                self._claims[key] = claim.model_copy(
                    update={"reinforcement_count": claim.reinforcement_count + 1}
                )

    async def reinforce_compliance_rule(self, rule_id: str) -> None:
        async with self._lock:
            self._rule_reinforcements[rule_id] = self._rule_reinforcements.get(rule_id, 0) + 1

    # Inspection helpers

    def get_claim(self, statement: str) -> Optional[FactualClaim]:
        return self._claims.get(normalize_statement(statement))

    def evidence_for(self, statement: str) -> List[str]:
        return list(self._claim_evidence.get(normalize_statement(statement), []))

    def rule_reinforcements(self, rule_id: str) -> int:
        return self._rule_reinforcements.get(rule_id, 0)
