"""Storage port for compliance rules, with a copy-on-write in-memory default.

Readers never lock: they grab the current immutable table once and work
from it, so a concurrent update can never be observed half-applied.
Writers serialize on a lock, build a new table and swap it in with a
single reference assignment.

Data structure:
    _RuleTable(
        rules={rule_id: ComplianceRule, ...},
        by_domain={Domain: (rule_id, ...), ...},   # registration order
    )
"""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Tuple, runtime_checkable

import structlog

from verity_system.data_management.schemas.common_schema import Domain
from verity_system.data_management.schemas.compliance_schema import ComplianceRule


@runtime_checkable
class RuleStore(Protocol):
    """Persistence port for versioned compliance rules."""

    def get(self, rule_id: str) -> Optional[ComplianceRule]:
        ...

    def put(self, rule: ComplianceRule) -> None:
        """Insert or atomically replace the rule with the same id."""
        ...

    def snapshot(self) -> Tuple[ComplianceRule, ...]:
        """All rules in registration order, as one consistent view."""
        ...

    def by_domain(self, domain: Domain) -> Tuple[ComplianceRule, ...]:
        ...


@dataclass(frozen=True)
class _RuleTable:
    rules: Mapping[str, ComplianceRule] = field(default_factory=lambda: MappingProxyType({}))
    order: Tuple[str, ...] = ()
    by_domain: Mapping[Domain, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )


class InMemoryRuleStore:
    """Copy-on-write rule table safe for concurrent readers and writers."""

    def __init__(self) -> None:
        self._table = _RuleTable()
        self._write_lock = threading.Lock()
        self._logger = structlog.get_logger().bind(component="InMemoryRuleStore")

    def get(self, rule_id: str) -> Optional[ComplianceRule]:
        return self._table.rules.get(rule_id)

    def put(self, rule: ComplianceRule) -> None:
        with self._write_lock:
            current = self._table
            rules = dict(current.rules)
            order = current.order
            by_domain = dict(current.by_domain)

            previous = rules.get(rule.id)
            if previous is None:
                order = order + (rule.id,)
                by_domain[rule.domain] = by_domain.get(rule.domain, ()) + (rule.id,)
            elif previous.domain != rule.domain:
                by_domain[previous.domain] = tuple(
                    rid for rid in by_domain.get(previous.domain, ()) if rid != rule.id
                )
                by_domain[rule.domain] = by_domain.get(rule.domain, ()) + (rule.id,)

            rules[rule.id] = rule
            self._table = _RuleTable(
                rules=MappingProxyType(rules),
                order=order,
                by_domain=MappingProxyType(by_domain),
            )

        self._logger.debug(
            "rule_stored",
            rule_id=rule.id,
            version=rule.version,
            is_active=rule.is_active,
        )

    def snapshot(self) -> Tuple[ComplianceRule, ...]:
        table = self._table
        return tuple(table.rules[rid] for rid in table.order)

    def by_domain(self, domain: Domain) -> Tuple[ComplianceRule, ...]:
        table = self._table
        return tuple(table.rules[rid] for rid in table.by_domain.get(domain, ()))

    def __len__(self) -> int:
        return len(self._table.rules)
