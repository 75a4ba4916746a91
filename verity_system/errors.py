"""Exception types raised across the verification pipeline.

Only rule registration and request intake raise to the caller. Provider
and analyzer failures are caught at their boundary and recorded instead.
"""

from typing import List


class VerityError(Exception):
    """Base class for verification pipeline errors."""
    pass


class RuleValidationError(VerityError):
    """Raised when a compliance rule fails validation at registration time.

    Carries every defect found so a rule author can fix them in one pass.
    """

    def __init__(self, rule_id: str, defects: List[str]):
        self.rule_id = rule_id
        self.defects = list(defects)
        joined = "; ".join(self.defects)
        super().__init__(f"Rule '{rule_id}' is invalid: {joined}")


class RuleNotFoundError(VerityError):
    """Raised when a rule id is not registered."""

    def __init__(self, rule_id: str):
        self.rule_id = rule_id
        super().__init__(f"Rule '{rule_id}' not found")


class SourceQueryError(VerityError):
    """Raised by a knowledge source when a query cannot be answered."""

    def __init__(self, source_name: str, message: str):
        self.source_name = source_name
        super().__init__(f"{source_name}: {message}")


class InvalidRequestError(VerityError):
    """Raised when a verification request is missing required fields."""
    pass
