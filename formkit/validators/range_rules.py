"""Range Rules — min/max for text length and calendar dates.

Only text, textarea and date fields are range-checked. Number fields keep
their min/max for the UI stepper and are never checked here. Bounds are
inclusive: an answer exactly at min or max passes.
"""

from abc import abstractmethod
from typing import Any, Optional

from formkit.models.forms import FormField
from formkit.validators.base import BaseRule
from formkit.validators.catalog import FieldTypeSpec, RangeKind, parse_instant
from formkit.validators.models import RuleCode, ValidationFailure


class _RangeRule(BaseRule):
    """Shared dispatch on the catalog's range kind."""

    @abstractmethod
    def _bound(self, field: FormField) -> Any:
        """The min or max this rule compares against."""
        ...

    def applies_to(self, field: FormField, spec: FieldTypeSpec) -> bool:
        # A zero or empty bound means "no bound"
        return spec.validates_range and bool(self._bound(field))

    def check(self, field: FormField, spec: FieldTypeSpec, value: Any) -> Optional[ValidationFailure]:
        bound = self._bound(field)
        if spec.range_kind == RangeKind.LENGTH:
            limit = self._as_length_bound(bound)
            if limit is None:
                return None
            return self._check_length(field, len(spec.as_text(value)), limit, bound)
        if spec.range_kind == RangeKind.DATE:
            answered = parse_instant(value)
            limit = parse_instant(bound)
            # Unreadable dates never fail a range rule
            if answered is None or limit is None:
                return None
            return self._check_date(field, answered, limit, bound)
        return None

    @abstractmethod
    def _check_length(self, field, length, limit, bound) -> Optional[ValidationFailure]:
        ...

    @abstractmethod
    def _check_date(self, field, answered, limit, bound) -> Optional[ValidationFailure]:
        ...


class MinimumRule(_RangeRule):
    """Answer length / date must not be below the field's min."""

    @property
    def name(self) -> str:
        return "MinimumRule"

    @property
    def code(self) -> RuleCode:
        return RuleCode.BELOW_MINIMUM

    def _bound(self, field: FormField) -> Any:
        return field.min

    def _check_length(self, field, length, limit, bound):
        if length < limit:
            return self._failure(
                field,
                f"{field.label} field must be at least {self._format_bound(bound)} characters",
                bound=bound,
            )
        return None

    def _check_date(self, field, answered, limit, bound):
        if answered < limit:
            return self._failure(field, f"{field.label} field must be date after {bound}", bound=bound)
        return None


class MaximumRule(_RangeRule):
    """Answer length / date must not be above the field's max."""

    @property
    def name(self) -> str:
        return "MaximumRule"

    @property
    def code(self) -> RuleCode:
        return RuleCode.ABOVE_MAXIMUM

    def _bound(self, field: FormField) -> Any:
        return field.max

    def _check_length(self, field, length, limit, bound):
        if length > limit:
            return self._failure(
                field,
                f"{field.label} field can be max {self._format_bound(bound)} characters",
                bound=bound,
            )
        return None

    def _check_date(self, field, answered, limit, bound):
        if answered > limit:
            return self._failure(field, f"{field.label} field must be date before {bound}", bound=bound)
        return None
