"""Append-only audit trail for one verification session.

Every component records the steps it performs (started/completed/failed).
Entries are kept in the order they were recorded, which is chronological
within a single event loop.

Usage:
    from verity_system.data_management.audit_trail import AuditTrail

    audit = AuditTrail(session_id="abc-123")
    audit.record(AuditAction.MODULE_STARTED, "compliance", rules=4)
    entries = audit.entries
"""

from typing import Any, List, Optional

import structlog

from verity_system.data_management.schemas.result_schema import AuditAction, AuditEntry


class AuditTrail:
    """Collects AuditEntry records for one session."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self._entries: List[AuditEntry] = []
        self._logger = structlog.get_logger().bind(component="AuditTrail")

    def record(
        self,
        action: AuditAction,
        component: str,
        **details: Any,
    ) -> AuditEntry:
        """Append an entry and return it."""
        entry = AuditEntry(
            session_id=self.session_id,
            action=action,
            component=component,
            details=details,
        )
        self._entries.append(entry)
        self._logger.debug(
            "audit_recorded",
            session_id=self.session_id,
            action=action.value,
            component=component,
        )
        return entry

    @property
    def entries(self) -> List[AuditEntry]:
        """Snapshot of entries in recording order."""
        return list(self._entries)

    def failures(self, component: Optional[str] = None) -> List[AuditEntry]:
        return [
            e for e in self._entries
            if e.action == AuditAction.MODULE_FAILED
            and (component is None or e.component == component)
        ]

    def failures_under(self, prefix: str) -> List[AuditEntry]:
        """Failures recorded by ``prefix`` itself or its sub-steps (``prefix.*``)."""
        return [
            e for e in self.failures()
            if e.component == prefix or e.component.startswith(prefix + ".")
        ]

    def __len__(self) -> int:
        return len(self._entries)
