"""Verification pipeline: ParsedContent in, VerificationResult out.

Flow for one request:
1. Validate the request (InvalidRequestError if required fields are missing)
2. Run every analyzer concurrently (fact checking, compliance, logic)
3. Aggregate issues into confidence, risk and recommendations
4. Call the knowledge feedback hooks (failures logged, never raised)

A failing analyzer does not abort the verification: its failure is audited,
lowers confidence, and the other analyzers' issues are still reported.

Usage:
    from verity_system.pipeline import VerificationPipeline

    pipeline = VerificationPipeline()
    result = await pipeline.verify_text("Patient SSN: 123-45-6789", Domain.HEALTHCARE)
    print(result.risk_level, result.overall_confidence)
"""

import asyncio
import time
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from verity_system.analyzers.base_analyzer import Analyzer
from verity_system.analyzers.compliance.compliance_validator import ComplianceValidator
from verity_system.analyzers.compliance.rules_engine import ComplianceRulesEngine
from verity_system.analyzers.fact_checking.fact_checker import FactChecker
from verity_system.analyzers.logic.logic_analyzer import LogicAnalyzer
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.knowledge_repository import (
    InMemoryKnowledgeRepository,
    KnowledgeRepository,
)
from verity_system.data_management.schemas.claim_schema import FactualClaim
from verity_system.data_management.schemas.common_schema import Domain, Urgency
from verity_system.data_management.schemas.content_schema import ParsedContent
from verity_system.data_management.schemas.issue_schema import Issue, IssueType
from verity_system.data_management.schemas.result_schema import (
    AuditAction,
    ModuleMetrics,
    VerificationRequest,
    VerificationResult,
)
from verity_system.errors import InvalidRequestError
from verity_system.pipeline.result_aggregator import ResultAggregator
from verity_system.utils.logging import (
    get_correlation_id,
    get_structured_logger,
    verification_session,
)


class VerificationPipeline:
    """Runs the analyzers over one document and assembles the verdict."""

    def __init__(
        self,
        analyzers: Optional[Sequence[Analyzer]] = None,
        rules_engine: Optional[ComplianceRulesEngine] = None,
        aggregator: Optional[ResultAggregator] = None,
        knowledge_repository: Optional[KnowledgeRepository] = None,
    ) -> None:
        """Initialize VerificationPipeline.

        Args:
            analyzers: Analyzer branches. Lazy-initialized to FactChecker,
                ComplianceValidator and LogicAnalyzer if None.
            rules_engine: Shared rules engine for the compliance branch.
            aggregator: Result aggregator (default thresholds if None).
            knowledge_repository: Feedback hooks target. In-memory if None.
        """
        self._analyzers = list(analyzers) if analyzers is not None else None
        self._rules_engine = rules_engine
        self.aggregator = aggregator or ResultAggregator()
        self._knowledge_repository = knowledge_repository
        self._logger = get_structured_logger(__name__, component="VerificationPipeline")

    @property
    def rules_engine(self) -> ComplianceRulesEngine:
        if self._rules_engine is None:
            self._rules_engine = ComplianceRulesEngine()
        return self._rules_engine

    @property
    def analyzers(self) -> List[Analyzer]:
        if self._analyzers is None:
            self._analyzers = [
                FactChecker(),
                ComplianceValidator(rules_engine=self.rules_engine),
                LogicAnalyzer(),
            ]
        return self._analyzers

    @property
    def knowledge_repository(self) -> KnowledgeRepository:
        if self._knowledge_repository is None:
            self._knowledge_repository = InMemoryKnowledgeRepository(
                rule_lookup=self.rules_engine.get_rule_by_id
            )
        return self._knowledge_repository

    async def verify(
        self,
        request: Union[VerificationRequest, Mapping[str, Any]],
    ) -> VerificationResult:
        """Verify one document.

        Raises:
            InvalidRequestError: The request is missing required fields.
                Nothing else escapes; analyzer failures are reported in the
                result instead.
        """
        request = self._coerce_request(request)
        session_id = get_correlation_id()
        with verification_session(session_id, content_id=request.content.id):
            return await self._verify_session(request, session_id)

    async def _verify_session(
        self,
        request: VerificationRequest,
        session_id: str,
    ) -> VerificationResult:
        log = self._logger
        audit = AuditTrail(session_id)
        started = time.perf_counter()

        audit.record(
            AuditAction.VERIFICATION_STARTED,
            "pipeline",
            content_id=request.content.id,
            domain=request.domain.value,
            urgency=request.urgency.value,
            jurisdiction=request.jurisdiction,
            text_length=len(request.content.extracted_text),
        )
        log.info("verification_started", domain=request.domain.value, urgency=request.urgency.value)

        module_issues, modules = await self._run_analyzers(request, audit, log)

        processing_time = (time.perf_counter() - started) * 1000
        result = self.aggregator.aggregate(
            module_issues,
            request.domain,
            modules=modules,
            audit_trail=audit.entries,
            processing_time=processing_time,
            verification_id=session_id,
        )
        audit.record(
            AuditAction.VERIFICATION_COMPLETED,
            "pipeline",
            issues=len(result.issues),
            overall_confidence=result.overall_confidence,
            risk_level=result.risk_level.value,
            failed_modules=[m.module for m in modules if m.failed],
        )
        result = result.model_copy(update={"audit_trail": audit.entries})

        log.info(
            "verification_completed",
            issues=len(result.issues),
            overall_confidence=result.overall_confidence,
            risk_level=result.risk_level.value,
            processing_time_ms=round(processing_time, 2),
        )

        await self._notify_knowledge_base(request, result, log)
        return result

    async def verify_text(
        self,
        text: str,
        domain: Domain,
        urgency: Urgency = Urgency.MEDIUM,
        jurisdiction: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> VerificationResult:
        """Convenience wrapper building the ParsedContent for plain text."""
        content = ParsedContent(id=content_id or str(uuid.uuid4()), extracted_text=text)
        return await self.verify(
            VerificationRequest(
                content=content,
                domain=domain,
                urgency=urgency,
                jurisdiction=jurisdiction,
            )
        )

    async def close(self) -> None:
        for analyzer in self.analyzers:
            manager = getattr(analyzer, "source_manager", None)
            if manager is not None:
                await manager.close()

    # ── Internals ─────────────────────────────────────────────────────────

    @staticmethod
    def _coerce_request(
        request: Union[VerificationRequest, Mapping[str, Any], None],
    ) -> VerificationRequest:
        if isinstance(request, VerificationRequest):
            return request
        if request is None:
            raise InvalidRequestError("verification request is required")
        try:
            return VerificationRequest.model_validate(dict(request))
        except (ValidationError, TypeError, ValueError) as e:
            raise InvalidRequestError(f"invalid verification request: {e}") from e

    async def _run_analyzers(
        self,
        request: VerificationRequest,
        audit: AuditTrail,
        log,
    ) -> Tuple[Dict[str, List[Issue]], List[ModuleMetrics]]:
        analyzers = self.analyzers
        started: Dict[str, float] = {}

        async def run(analyzer: Analyzer) -> List[Issue]:
            audit.record(AuditAction.MODULE_STARTED, analyzer.name)
            started[analyzer.name] = time.perf_counter()
            return list(await analyzer.analyze(request, audit))

        outcomes = await asyncio.gather(*(run(a) for a in analyzers), return_exceptions=True)

        module_issues: Dict[str, List[Issue]] = {}
        modules: List[ModuleMetrics] = []
        for analyzer, outcome in zip(analyzers, outcomes):
            elapsed = (time.perf_counter() - started.get(analyzer.name, time.perf_counter())) * 1000
            if isinstance(outcome, Exception):
                error = f"{type(outcome).__name__}: {outcome}"
                audit.record(AuditAction.MODULE_FAILED, analyzer.name, error=error)
                log.error("analyzer_failed", analyzer=analyzer.name, error=error)
                modules.append(
                    ModuleMetrics(
                        module=analyzer.name,
                        processing_time_ms=round(elapsed, 3),
                        failed=True,
                        error=error,
                    )
                )
                continue
            if isinstance(outcome, BaseException):
                raise outcome

            module_issues[analyzer.name] = outcome
            # sub-steps the analyzer audited as failed under "<name>.<step>"
            partial = [e.component for e in audit.failures_under(analyzer.name)]
            audit.record(
                AuditAction.MODULE_COMPLETED,
                analyzer.name,
                issues=len(outcome),
                partial_failures=partial,
            )
            if partial:
                log.warning("analyzer_incomplete", analyzer=analyzer.name, failed_steps=partial)
            modules.append(
                ModuleMetrics(
                    module=analyzer.name,
                    issue_count=len(outcome),
                    processing_time_ms=round(elapsed, 3),
                    partial_failures=partial,
                )
            )
        return module_issues, modules

    async def _notify_knowledge_base(
        self,
        request: VerificationRequest,
        result: VerificationResult,
        log,
    ) -> None:
        """Call the feedback hooks; a failing hook is logged and skipped."""
        repository = self.knowledge_repository
        text = request.content.extracted_text

        for issue in result.issues:
            try:
                if issue.type == IssueType.FACTUAL_ERROR:
                    statement = text[issue.location.start:issue.location.end] or issue.description
                    await repository.create_or_update_factual_claim(
                        FactualClaim(
                            statement=statement,
                            confidence=round((1.0 - issue.confidence) * 100, 2),
                            domain=request.domain,
                            verified=False,
                            contradictions=list(issue.evidence),
                        )
                    )
                    await repository.reinforce_factual_claim(statement, list(issue.evidence))
                elif issue.type == IssueType.COMPLIANCE_VIOLATION:
                    rule = await repository.find_compliance_rule_by_issue(issue)
                    if rule is not None:
                        await repository.reinforce_compliance_rule(rule.id)
            except Exception as e:
                log.warning(
                    "knowledge_hook_failed",
                    issue_type=issue.type.value,
                    error=str(e),
                )
