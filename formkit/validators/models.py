"""Validation models — rule codes, failure record and the exceptions carrying them.

All validation is deterministic: same form + same answers → same outcome.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class RuleCode(str, Enum):
    """Per-field validation rules, listed in evaluation order."""

    REQUIRED_FIELD_MISSING = "RequiredFieldMissing"
    PATTERN_MISMATCH = "PatternMismatch"
    BELOW_MINIMUM = "BelowMinimum"
    ABOVE_MAXIMUM = "AboveMaximum"


class ValidationFailure(BaseModel):
    """The first violated rule of a submission."""

    field: str              # Label of the failing field
    rule: RuleCode
    detail: str             # Human-readable message
    name: Optional[str] = None
    bound: Optional[str] = None  # The min/max that was crossed, if any

    model_config = {"frozen": True}


class AnswerValidationError(ValueError):
    """Raised when an answer set fails a field rule."""

    def __init__(self, failure: ValidationFailure):
        super().__init__(failure.detail)
        self.failure = failure

    @property
    def rule(self) -> RuleCode:
        return self.failure.rule

    @property
    def field(self) -> str:
        return self.failure.field


class UnknownAnswerField(ValueError):
    """Raised when a submission names fields the form does not declare."""

    def __init__(self, names: list[str]):
        self.names = sorted(names)
        super().__init__(f"Unknown answer field(s): {', '.join(self.names)}")
