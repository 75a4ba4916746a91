"""Compliance rules engine: rule administration and keyword/pattern matching.

State is a RuleStore mapping each domain to an ordered list of rules.
Rules are validated at registration (every invalid regex is reported at
once), never deleted, and updated by merge-patch into a new version.

Matching, per active applicable rule:
    (a) keyword_match: every case-insensitive substring occurrence of a keyword
    (b) pattern_match: every regex match, located at the match span
Hits are deduplicated per rule per span; a pattern hit wins over a keyword
hit on the same span. Severity is copied from the rule.

Usage:
    engine = ComplianceRulesEngine()
    rules = engine.get_applicable_rules(Domain.HEALTHCARE, "US")
    violations = engine.find_violations(text, Domain.HEALTHCARE, "US")
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from loguru import logger
from pydantic import ValidationError

from verity_system.config.compliance_rules import DEFAULT_RULES
from verity_system.config.scoring import (
    COMPLIANCE_SCORE_PENALTIES,
    KEYWORD_MATCH_CONFIDENCE,
    PATTERN_MATCH_CONFIDENCE,
)
from verity_system.data_management.rule_store import InMemoryRuleStore, RuleStore
from verity_system.data_management.schemas.common_schema import Domain
from verity_system.data_management.schemas.compliance_schema import (
    ComplianceRule,
    ComplianceViolation,
    RulePatch,
    ViolationType,
)
from verity_system.data_management.schemas.content_schema import TextLocation
from verity_system.errors import RuleNotFoundError, RuleValidationError


def validate_rule(rule: ComplianceRule) -> List[str]:
    """Return every defect in ``rule`` (empty list when valid)."""
    defects: List[str] = []
    if not rule.keywords and not rule.patterns:
        defects.append("rule must define at least one keyword or pattern")
    for i, keyword in enumerate(rule.keywords):
        if not keyword.strip():
            defects.append(f"keyword[{i}] is blank")
    for i, pattern in enumerate(rule.patterns):
        if not pattern:
            defects.append(f"pattern[{i}] is empty")
            continue
        try:
            compiled = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            defects.append(f"pattern[{i}] {pattern!r} is not a valid regular expression: {e}")
            continue
        if compiled.search("") is not None:
            defects.append(f"pattern[{i}] {pattern!r} matches the empty string")
    if not rule.jurisdiction.strip():
        defects.append("jurisdiction is blank")
    return defects


class ComplianceRulesEngine:
    """
    Matches content against domain/jurisdiction rule sets.

    Rule reads are lock-free snapshots from the store; writes replace a
    rule atomically by id. Compiled patterns are cached per rule version.
    """

    def __init__(
        self,
        store: Optional[RuleStore] = None,
        load_defaults: bool = True,
        keyword_confidence: float = KEYWORD_MATCH_CONFIDENCE,
        pattern_confidence: float = PATTERN_MATCH_CONFIDENCE,
    ):
        """
        Initialize the engine.

        Args:
            store: Rule store (in-memory copy-on-write store if None)
            load_defaults: Register config.compliance_rules.DEFAULT_RULES
                into an empty store
            keyword_confidence: Confidence (0-100) for keyword matches
            pattern_confidence: Confidence (0-100) for pattern matches
        """
        self.store: RuleStore = store if store is not None else InMemoryRuleStore()
        self.keyword_confidence = keyword_confidence
        self.pattern_confidence = pattern_confidence
        self._compiled: Dict[Tuple[str, int], Tuple[re.Pattern, ...]] = {}
        self._logger = logger.bind(component="ComplianceRulesEngine")

        if load_defaults and not self.store.snapshot():
            for entry in DEFAULT_RULES:
                self.add_rule(entry)

    # ── Administration ────────────────────────────────────────────────────

    def add_rule(self, rule: Union[ComplianceRule, Mapping[str, Any]]) -> ComplianceRule:
        """Validate and register a new rule.

        Raises:
            RuleValidationError: Listing every defect (schema and regex).
        """
        rule = self._coerce(rule)
        if self.store.get(rule.id) is not None:
            raise RuleValidationError(rule.id, [f"rule id '{rule.id}' already exists"])
        self._check(rule)
        self.store.put(rule)
        self._logger.info(f"Registered rule {rule.id} ({rule.regulation}, {rule.jurisdiction})")
        return rule

    def update_rule(
        self,
        rule_id: str,
        patch: Union[RulePatch, Mapping[str, Any]],
    ) -> ComplianceRule:
        """Merge-patch a rule into a new version.

        Fields absent from the patch keep their current values. The rule's
        id and domain cannot be changed.

        Raises:
            RuleNotFoundError: Unknown rule id.
            RuleValidationError: The patched rule is invalid.
        """
        current = self.store.get(rule_id)
        if current is None:
            raise RuleNotFoundError(rule_id)
        if not isinstance(patch, RulePatch):
            try:
                patch = RulePatch.model_validate(dict(patch))
            except ValidationError as e:
                raise RuleValidationError(rule_id, _pydantic_defects(e)) from e

        changes = patch.model_dump(exclude_unset=True)
        updated = current.model_copy(
            update={
                **changes,
                "version": current.version + 1,
                "last_updated": datetime.now(timezone.utc),
            }
        )
        # model_copy skips validation; re-validate the merged record
        try:
            updated = ComplianceRule.model_validate(updated.model_dump())
        except ValidationError as e:
            raise RuleValidationError(rule_id, _pydantic_defects(e)) from e
        self._check(updated)
        self.store.put(updated)
        self._evict_compiled(rule_id, keep=updated.version if updated.is_active else None)
        self._logger.info(f"Updated rule {rule_id} to version {updated.version}")
        return updated

    def deactivate_rule(self, rule_id: str) -> ComplianceRule:
        """Soft-delete: the rule stays stored with is_active=False."""
        return self.update_rule(rule_id, RulePatch(is_active=False))

    def get_rule_by_id(self, rule_id: str) -> Optional[ComplianceRule]:
        return self.store.get(rule_id)

    def get_all_rules(self) -> List[ComplianceRule]:
        return list(self.store.snapshot())

    def get_applicable_rules(self, domain: Domain, jurisdiction: str) -> List[ComplianceRule]:
        """Active rules for ``domain`` scoped to ``jurisdiction`` or GLOBAL."""
        return [
            rule for rule in self.store.by_domain(domain)
            if rule.is_active and rule.applies_to(jurisdiction)
        ]

    # ── Matching ──────────────────────────────────────────────────────────

    def find_violations(
        self,
        text: str,
        domain: Domain,
        jurisdiction: str,
        rules: Optional[Iterable[ComplianceRule]] = None,
    ) -> List[ComplianceViolation]:
        """Evaluate every applicable rule against ``text``.

        Every rule hit is reported separately, even when several rules fire
        on the same statement. Ordered by location, then rule id.
        """
        if not text:
            return []
        if rules is None:
            rules = self.get_applicable_rules(domain, jurisdiction)

        violations: List[ComplianceViolation] = []
        for rule in rules:
            violations.extend(self.match_rule(rule, text))

        violations.sort(key=lambda v: (v.location.start, v.location.end, v.rule_id))
        return violations

    def match_rule(self, rule: ComplianceRule, text: str) -> List[ComplianceViolation]:
        """All deduplicated hits of one rule in ``text``."""
        hits: Dict[Tuple[int, int], ComplianceViolation] = {}

        lowered = text.lower()
        for keyword in rule.keywords:
            needle = keyword.lower()
            start = lowered.find(needle)
            while start != -1:
                end = start + len(needle)
                hits.setdefault(
                    (start, end),
                    self._violation(rule, ViolationType.KEYWORD_MATCH, text, start, end),
                )
                start = lowered.find(needle, start + 1)

        for regex in self._compiled_patterns(rule):
            for match in regex.finditer(text):
                if match.end() == match.start():
                    continue
                # pattern hits replace keyword hits on the same span
                hits[(match.start(), match.end())] = self._violation(
                    rule, ViolationType.PATTERN_MATCH, text, match.start(), match.end()
                )

        return [hits[span] for span in sorted(hits)]

    @staticmethod
    def compliance_score(violations: Iterable[ComplianceViolation]) -> float:
        """100 minus a fixed penalty per violation severity, floored at 0."""
        penalty = sum(COMPLIANCE_SCORE_PENALTIES[v.severity.value] for v in violations)
        return max(0.0, 100.0 - penalty)

    # ── Internals ─────────────────────────────────────────────────────────

    def _violation(
        self,
        rule: ComplianceRule,
        violation_type: ViolationType,
        text: str,
        start: int,
        end: int,
    ) -> ComplianceViolation:
        confidence = (
            self.pattern_confidence
            if violation_type == ViolationType.PATTERN_MATCH
            else self.keyword_confidence
        )
        kind = violation_type.value.replace("_", " ")
        return ComplianceViolation(
            rule_id=rule.id,
            violation_type=violation_type,
            location=TextLocation.from_span(text, start, end),
            matched_text=text[start:end],
            confidence=confidence,
            severity=rule.severity,
            description=f"Potential {rule.regulation} violation detected ({kind}): {rule.rule_text}",
            regulatory_reference=f"{rule.regulation} - {rule.rule_text}",
            suggested_fix=f"Review and ensure compliance with {rule.regulation} requirements",
        )

    def _compiled_patterns(self, rule: ComplianceRule) -> Tuple[re.Pattern, ...]:
        key = (rule.id, rule.version)
        compiled = self._compiled.get(key)
        if compiled is None:
            compiled = tuple(re.compile(p, re.IGNORECASE) for p in rule.patterns)
            self._compiled[key] = compiled
        return compiled

    def _evict_compiled(self, rule_id: str, keep: Optional[int] = None) -> None:
        """Drop cached patterns of superseded (or all, if keep is None) versions."""
        stale = [k for k in list(self._compiled) if k[0] == rule_id and k[1] != keep]
        for key in stale:
            self._compiled.pop(key, None)

    def _check(self, rule: ComplianceRule) -> None:
        defects = validate_rule(rule)
        if defects:
            self._logger.warning(f"Rejected rule {rule.id}: {len(defects)} defect(s)")
            raise RuleValidationError(rule.id, defects)

    @staticmethod
    def _coerce(rule: Union[ComplianceRule, Mapping[str, Any]]) -> ComplianceRule:
        if isinstance(rule, ComplianceRule):
            return rule
        try:
            return ComplianceRule.model_validate(dict(rule))
        except ValidationError as e:
            rule_id = str(rule.get("id", "<unknown>"))
            # Schema errors and regex errors are reported together
            defects = _pydantic_defects(e)
            for i, pattern in enumerate(rule.get("patterns") or []):
                try:
                    re.compile(pattern, re.IGNORECASE)
                except (re.error, TypeError) as regex_error:
                    defects.append(f"pattern[{i}] {pattern!r} is not a valid regular expression: {regex_error}")
            raise RuleValidationError(rule_id, defects) from e


def _pydantic_defects(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc']) or 'rule'}: {err['msg']}"
        for err in error.errors()
    ]
