"""Base rule — abstract class implementing the Strategy Pattern.

Each rule is a standalone, independently testable unit that checks one
answer against one field. The validator runs rules in a fixed order and
stops at the first failure.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from formkit.models.forms import FormField
from formkit.validators.catalog import FieldTypeSpec, parse_number
from formkit.validators.models import RuleCode, ValidationFailure


class BaseRule(ABC):
    """Abstract base for all field rules.

    Contract:
        - check() is deterministic: same field + value → same result
        - check() returns None when the value passes
        - No I/O, no shared state
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name for logging."""
        ...

    @property
    @abstractmethod
    def code(self) -> RuleCode:
        ...

    def applies_to(self, field: FormField, spec: FieldTypeSpec) -> bool:
        """Whether this rule is evaluated for the field at all."""
        return True

    @abstractmethod
    def check(self, field: FormField, spec: FieldTypeSpec, value: Any) -> Optional[ValidationFailure]:
        """Check one answer against one field.

        Args:
            field: The normalized form field
            spec: Catalog descriptor of the field's type
            value: The submitted answer (already defaulted when missing)

        Returns:
            ValidationFailure if the rule is violated, else None
        """
        ...

    # ── Helper Methods ──

    def _failure(
        self,
        field: FormField,
        message: str,
        bound: Optional[Any] = None,
    ) -> ValidationFailure:
        """Convenience method to create a ValidationFailure."""
        return ValidationFailure(
            field=field.label,
            rule=self.code,
            detail=message,
            name=field.name,
            bound=self._format_bound(bound) if bound is not None else None,
        )

    @staticmethod
    def _format_bound(bound: Any) -> str:
        if isinstance(bound, float) and bound.is_integer():
            return str(int(bound))
        return str(bound)

    @staticmethod
    def _as_length_bound(bound: Any) -> Optional[float]:
        """Parse a min/max into a character count, None if unusable."""
        return parse_number(bound)
