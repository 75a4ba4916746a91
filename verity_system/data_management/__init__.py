"""Data management: schemas, storage ports and the audit trail.

Storage ports (in-memory defaults; the pipeline assumes no persistence technology):
- RuleStore / InMemoryRuleStore: versioned compliance rules, copy-on-write
- ClaimStore / InMemoryClaimStore: reference claims for the knowledge base
- KnowledgeRepository / InMemoryKnowledgeRepository: post-verification feedback hooks
"""

from verity_system.data_management.audit_trail import AuditTrail
from verity_system.data_management.claim_store import ClaimStore, InMemoryClaimStore
from verity_system.data_management.knowledge_repository import (
    InMemoryKnowledgeRepository,
    KnowledgeRepository,
)
from verity_system.data_management.rule_store import InMemoryRuleStore, RuleStore

__all__ = [
    "AuditTrail",
    "ClaimStore",
    "InMemoryClaimStore",
    "InMemoryKnowledgeRepository",
    "InMemoryRuleStore",
    "KnowledgeRepository",
    "RuleStore",
]
