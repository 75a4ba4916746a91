"""Analyzer capability shared by the pipeline branches.

The pipeline treats every analyzer the same way: it hands over the
request and the session audit trail and gets back a list of Issues. Any
object with a ``name`` and an async ``analyze`` fits; there is no base
class to inherit from.
"""

from typing import List, Protocol, runtime_checkable

from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas.issue_schema import Issue
from verity_system.data_management.schemas.result_schema import VerificationRequest


@runtime_checkable
class Analyzer(Protocol):
    """
    Protocol for one analytical lens over a document.

    Implementations:
    - FactChecker: factual accuracy against knowledge sources
    - ComplianceValidator: regulatory rule matching
    - LogicAnalyzer: contradictions, coherence and numerical consistency

    Contract:
    - Empty or null text yields an empty list, never an exception
    - The request is read-only; analyzers share no mutable state
    - Sub-steps may be recorded on ``audit``; the pipeline records the
      module-level started/completed/failed entries itself
    - A sub-step whose failure leaves the result incomplete is audited as
      module_failed under ``<name>.<step>``; the pipeline reports it as a
      partial failure and the aggregator lowers confidence for it. Expected
      degradation (an unreachable knowledge source) is audited under a
      different prefix and costs nothing
    """

    name: str

    async def analyze(
        self,
        request: VerificationRequest,
        audit: AuditTrail,
    ) -> List[Issue]:
        ...
