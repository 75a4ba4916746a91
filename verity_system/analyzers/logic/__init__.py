"""
Logic analysis: contradictions, coherence, fallacies and numerical consistency.

Submodules:
- contradiction_detector: windowed same-subject sentence pair comparison
- coherence_validator: topic shift, sentiment, temporal, causal and reference checks
- numerical_checker: arithmetic, percentage breakdowns, totals, units and ranges
- fallacy_detector: pattern and keyword matching for logical fallacies
- logic_analyzer: the pipeline branch combining the four
"""

from verity_system.analyzers.logic.coherence_validator import (
    CoherenceIssue,
    CoherenceValidator,
)
from verity_system.analyzers.logic.contradiction_detector import ContradictionDetector
from verity_system.analyzers.logic.fallacy_detector import FallacyDetector, FallacyPattern
from verity_system.analyzers.logic.logic_analyzer import LogicAnalyzer
from verity_system.analyzers.logic.numerical_checker import NumericalChecker

__all__ = [
    "CoherenceIssue",
    "CoherenceValidator",
    "ContradictionDetector",
    "FallacyDetector",
    "FallacyPattern",
    "LogicAnalyzer",
    "NumericalChecker",
]
