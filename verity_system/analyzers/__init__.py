"""
Analyzers: the three analytical lenses plus shared extraction.

Subpackages:
- extraction: entity and claim extraction, sentence segmentation
- fact_checking: claim verification against knowledge sources
- compliance: rules engine and the compliance branch
- logic: contradictions, coherence and numerical consistency

Every branch implements the Analyzer protocol.
"""

from verity_system.analyzers.base_analyzer import Analyzer

__all__ = ["Analyzer"]
