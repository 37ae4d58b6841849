"""Answer validation — deterministic rule checks of submissions against a form.

Usage:
    from formkit.validators import answer_validator

    failure = answer_validator.check(form, answers)
    if failure is not None:
        # Report failure.field and failure.rule to the respondent
"""

from formkit.validators.catalog import FIELD_TYPE_CATALOG, FieldTypeSpec, RangeKind, ValueShape, spec_for
from formkit.validators.engine import AnswerValidator, answer_validator
from formkit.validators.models import (
    AnswerValidationError,
    RuleCode,
    UnknownAnswerField,
    ValidationFailure,
)

__all__ = [
    "FIELD_TYPE_CATALOG",
    "FieldTypeSpec",
    "RangeKind",
    "ValueShape",
    "spec_for",
    "AnswerValidator",
    "answer_validator",
    "AnswerValidationError",
    "RuleCode",
    "UnknownAnswerField",
    "ValidationFailure",
]
