"""Pattern Rule — the answer's string form must match the field's regexp."""

import re
from functools import lru_cache
from typing import Any, Optional

from formkit.models.forms import FormField
from formkit.validators.base import BaseRule
from formkit.validators.catalog import FieldTypeSpec
from formkit.validators.models import RuleCode, ValidationFailure


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern)


class PatternRule(BaseRule):
    """Applies to every field type that declares a regexp.

    Matching is a search anywhere in the text, so anchors must be part of
    the pattern when a full match is wanted.
    """

    @property
    def name(self) -> str:
        return "PatternRule"

    @property
    def code(self) -> RuleCode:
        return RuleCode.PATTERN_MISMATCH

    def applies_to(self, field: FormField, spec: FieldTypeSpec) -> bool:
        return bool(field.regexp)

    def check(self, field: FormField, spec: FieldTypeSpec, value: Any) -> Optional[ValidationFailure]:
        if _compile(field.regexp).search(spec.as_text(value)) is None:
            return self._failure(field, f"{field.label} field value is incorrect")
        return None
