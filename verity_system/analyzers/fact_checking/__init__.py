"""
Fact checking: claim verification against internal and external knowledge.

Submodules:
- credibility: source trust weights with class floors and ceilings
- evidence: passage-level support/contradiction assessment
- knowledge_base: reference-claim lookup over a ClaimStore
- sources: ExternalSource protocol and HTTP providers
- source_manager: concurrent querying with per-source timeouts
- fact_checker: claim reconciliation and the pipeline branch
"""

from verity_system.analyzers.fact_checking.credibility import SourceCredibilityScorer
from verity_system.analyzers.fact_checking.fact_checker import FactChecker, FactCheckingResult
from verity_system.analyzers.fact_checking.knowledge_base import KnowledgeBase
from verity_system.analyzers.fact_checking.source_manager import SourceManager
from verity_system.analyzers.fact_checking.sources import (
    ExternalSource,
    GovernmentDataSource,
    WikipediaSource,
)

__all__ = [
    "ExternalSource",
    "FactChecker",
    "FactCheckingResult",
    "GovernmentDataSource",
    "KnowledgeBase",
    "SourceCredibilityScorer",
    "SourceManager",
    "WikipediaSource",
]
