"""Compliance branch of the pipeline.

Runs the rules engine over the document and converts each violation into
a compliance_violation Issue. Entities found inside a violation span are
attached as evidence so reviewers can see what was exposed (an SSN, a
patient name, an amount).
"""

from typing import List, Optional

from loguru import logger

from verity_system.analyzers.compliance.rules_engine import ComplianceRulesEngine
from verity_system.analyzers.extraction.entity_extractor import EntityExtractor
from verity_system.config.settings import settings
from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.schemas.compliance_schema import ComplianceViolation
from verity_system.data_management.schemas.content_schema import ExtractedEntity
from verity_system.data_management.schemas.issue_schema import Issue, IssueType
from verity_system.data_management.schemas.result_schema import (
    AuditAction,
    VerificationRequest,
)


class ComplianceValidator:
    """Analyzer that reports every applicable rule hit as an Issue."""

    name = "compliance"

    def __init__(
        self,
        rules_engine: Optional[ComplianceRulesEngine] = None,
        entity_extractor: Optional[EntityExtractor] = None,
    ):
        self._rules_engine = rules_engine
        self._entity_extractor = entity_extractor
        self._logger = logger.bind(component="ComplianceValidator")

    @property
    def rules_engine(self) -> ComplianceRulesEngine:
        if self._rules_engine is None:
            self._rules_engine = ComplianceRulesEngine()
        return self._rules_engine

    @property
    def entity_extractor(self) -> EntityExtractor:
        if self._entity_extractor is None:
            self._entity_extractor = EntityExtractor()
        return self._entity_extractor

    async def analyze(self, request: VerificationRequest, audit: AuditTrail) -> List[Issue]:
        text = request.content.extracted_text
        if not text:
            return []

        jurisdiction = request.jurisdiction or settings.default_jurisdiction
        rules = self.rules_engine.get_applicable_rules(request.domain, jurisdiction)

        audit.record(
            AuditAction.MODULE_STARTED,
            "compliance.rule_matching",
            domain=request.domain.value,
            jurisdiction=jurisdiction,
            rules=len(rules),
        )
        violations = self.rules_engine.find_violations(
            text, request.domain, jurisdiction, rules=rules
        )
        audit.record(
            AuditAction.MODULE_COMPLETED,
            "compliance.rule_matching",
            violations=len(violations),
            compliance_score=self.rules_engine.compliance_score(violations),
        )

        entities = list(request.content.entities) + self.entity_extractor.extract_all(text)
        issues = [self._to_issue(v, entities) for v in violations]

        self._logger.info(
            f"{len(issues)} compliance issue(s) from {len(rules)} rule(s)",
            domain=request.domain.value,
        )
        return issues

    def _to_issue(
        self,
        violation: ComplianceViolation,
        entities: List[ExtractedEntity],
    ) -> Issue:
        evidence = [violation.matched_text, violation.regulatory_reference]
        for entity in entities:
            if (
                entity.location.start < violation.location.end
                and violation.location.start < entity.location.end
            ):
                label = f"{entity.type.value}: {entity.value}"
                if label not in evidence:
                    evidence.append(label)

        return Issue(
            type=IssueType.COMPLIANCE_VIOLATION,
            category=violation.violation_type.value,
            severity=violation.severity,
            location=violation.location,
            description=violation.description,
            evidence=evidence,
            suggested_fix=violation.suggested_fix,
            confidence=violation.confidence / 100.0,
            module_source=self.name,
            rule_id=violation.rule_id,
        )
