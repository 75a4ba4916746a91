"""Logic branch of the pipeline.

Combines four checks over one sentence segmentation of the document:
contradiction detection (sentence pairs), coherence validation (discourse
level), logical fallacies and numerical consistency. Each sub-check is
isolated: if one raises, the failure is audited under "logic.<step>" and the
others still report.

A coherence finding about the same sentence pair as a contradiction is
dropped, so "X is great. X is terrible." is reported once.
"""

from typing import Callable, List, Optional, Set, Tuple

from loguru import logger

from verity_system.analyzers.extraction.segmentation import split_sentences
from verity_system.analyzers.logic.coherence_validator import (
    CoherenceIssue,
    CoherenceValidator,
)
from verity_system.analyzers.logic.contradiction_detector import ContradictionDetector
from verity_system.analyzers.logic.fallacy_detector import FallacyDetector
from verity_system.analyzers.logic.numerical_checker import NumericalChecker
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas.issue_schema import (
    Contradiction,
    Issue,
    IssueType,
)
from verity_system.data_management.schemas.result_schema import (
    AuditAction,
    VerificationRequest,
)

_SUGGESTED_FIXES = {
    "direct": "Reconcile the two statements or qualify one of them",
    "implicit": "Clarify which assessment applies",
    "temporal": "Correct the order of events so both statements agree",
    "semantic_incoherence": "Add a transition or move the sentence to a related section",
    "semantic_contradiction": "Clarify which assessment applies",
    "temporal_inconsistency": "Correct the order of events so both statements agree",
    "causal_inconsistency": "State the causal direction once and consistently",
    "reference_error": "Replace the pronoun with the entity it refers to",
    "calculation_error": "Recompute the stated figure",
    "percentage_sum_error": "Check that the breakdown covers 100% of the total",
    "unit_mismatch": "Convert the quantities to one unit before combining them",
    "range_violation": "Check the figure; it lies outside the possible range",
    "sum_mismatch": "Reconcile the stated total with the listed amounts",
}


class LogicAnalyzer:
    """Analyzer reporting contradictions, incoherence and numeric errors."""

    name = "logic"

    def __init__(
        self,
        contradiction_detector: Optional[ContradictionDetector] = None,
        coherence_validator: Optional[CoherenceValidator] = None,
        numerical_checker: Optional[NumericalChecker] = None,
        fallacy_detector: Optional[FallacyDetector] = None,
    ):
        self.contradiction_detector = contradiction_detector or ContradictionDetector()
        self.coherence_validator = coherence_validator or CoherenceValidator()
        self.numerical_checker = numerical_checker or NumericalChecker()
        self.fallacy_detector = fallacy_detector or FallacyDetector()
        self._logger = logger.bind(component="LogicAnalyzer")

    async def analyze(self, request: VerificationRequest, audit: AuditTrail) -> List[Issue]:
        text = request.content.extracted_text
        if not text:
            return []

        sentences = split_sentences(text)

        contradictions: List[Contradiction] = self._run_step(
            audit,
            "logic.contradictions",
            lambda: self.contradiction_detector.detect_in_sentences(sentences)
            if len(sentences) >= 2 else [],
        )
        findings: List[CoherenceIssue] = self._run_step(
            audit,
            "logic.coherence",
            lambda: self.coherence_validator.validate(text, request.content.entities),
        )
        numeric: List[CoherenceIssue] = self._run_step(
            audit,
            "logic.numerical",
            lambda: self.numerical_checker.check(text),
        )
        fallacies: List[CoherenceIssue] = self._run_step(
            audit,
            "logic.fallacies",
            lambda: self.fallacy_detector.detect_in_sentences(sentences),
        )

        reported_pairs: Set[Tuple[str, ...]] = {
            (c.statement1, c.statement2) for c in contradictions
        }
        issues = [self._from_contradiction(c) for c in contradictions]
        for finding in findings + numeric + fallacies:
            if finding.evidence in reported_pairs:
                continue
            issues.append(self._from_finding(finding))

        issues.sort(key=lambda i: (i.location.start, i.location.end, i.category or ""))
        self._logger.info(
            f"{len(issues)} logic issue(s): {len(contradictions)} contradiction(s), "
            f"{len(findings)} coherence, {len(numeric)} numerical, {len(fallacies)} fallacy"
        )
        return issues

    def _run_step(self, audit: AuditTrail, component: str, step: Callable[[], list]) -> list:
        audit.record(AuditAction.MODULE_STARTED, component)
        try:
            found = step()
        except Exception as e:
            self._logger.error(f"{component} failed: {e}")
            audit.record(AuditAction.MODULE_FAILED, component, error=str(e))
            return []
        audit.record(AuditAction.MODULE_COMPLETED, component, found=len(found))
        return found

    def _from_contradiction(self, contradiction: Contradiction) -> Issue:
        category = contradiction.type.value
        return Issue(
            type=IssueType.LOGICAL_INCONSISTENCY,
            category=category,
            severity=contradiction.severity,
            location=contradiction.location2,
            description=contradiction.explanation,
            evidence=[contradiction.statement1, contradiction.statement2],
            suggested_fix=_SUGGESTED_FIXES.get(category),
            confidence=contradiction.confidence / 100.0,
            module_source=self.name,
        )

    def _from_finding(self, finding: CoherenceIssue) -> Issue:
        return Issue(
            type=IssueType.LOGICAL_INCONSISTENCY,
            category=finding.category,
            severity=finding.severity,
            location=finding.location,
            description=finding.description,
            evidence=list(finding.evidence),
            suggested_fix=(
                _SUGGESTED_FIXES.get(finding.category)
                or self.fallacy_detector.suggestions().get(finding.category)
            ),
            confidence=finding.confidence / 100.0,
            module_source=self.name,
        )
