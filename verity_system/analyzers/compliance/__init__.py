"""Regulatory compliance analysis.

- ComplianceRulesEngine: rule administration and keyword/pattern matching
- ComplianceValidator: pipeline analyzer turning violations into Issues
"""

from verity_system.analyzers.compliance.compliance_validator import ComplianceValidator
from verity_system.analyzers.compliance.rules_engine import (
    ComplianceRulesEngine,
    validate_rule,
)

__all__ = [
    "ComplianceRulesEngine",
    "ComplianceValidator",
    "validate_rule",
]
