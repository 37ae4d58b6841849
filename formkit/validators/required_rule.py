"""Required Rule — a required field must carry a non-blank answer."""

from typing import Any, Optional

from formkit.models.forms import FormField
from formkit.validators.base import BaseRule
from formkit.validators.catalog import FieldTypeSpec
from formkit.validators.models import RuleCode, ValidationFailure


class RequiredRule(BaseRule):
    """Fails required fields whose answer is the shape's blank value.

    Checkbox answers are blank when no option is selected; every other shape
    is blank when missing, empty or zero.
    """

    @property
    def name(self) -> str:
        return "RequiredRule"

    @property
    def code(self) -> RuleCode:
        return RuleCode.REQUIRED_FIELD_MISSING

    def applies_to(self, field: FormField, spec: FieldTypeSpec) -> bool:
        return field.required and spec.required_applies

    def check(self, field: FormField, spec: FieldTypeSpec, value: Any) -> Optional[ValidationFailure]:
        if spec.is_blank(value):
            return self._failure(field, f"{field.label} field is required")
        return None
