"""Answer Validator — runs field rules over a submission and builds the AnswerSet.

This is the main entry point for answer validation. Fields are scanned in
declaration order and each field's rules run in a fixed order; the first
failure wins and nothing is accumulated.

Usage:
    validator = AnswerValidator()
    failure = validator.check(form, answers)
    if failure is None:
        answer_set = validator.validate(form, answers)
"""

import time
import uuid
from datetime import datetime
from typing import Any, Mapping, Optional

import structlog

from formkit.models.forms import AnswerEntry, AnswerSet, Form, FormField
from formkit.validators.base import BaseRule
from formkit.validators.catalog import spec_for
from formkit.validators.models import (
    AnswerValidationError,
    RuleCode,
    UnknownAnswerField,
    ValidationFailure,
)

from formkit.validators.required_rule import RequiredRule
from formkit.validators.pattern_rule import PatternRule
from formkit.validators.range_rules import MinimumRule, MaximumRule

logger = structlog.get_logger()


class AnswerValidator:
    """Validates candidate answers against a form definition.

    Design principles:
        - Deterministic: same input → same output
        - Stateless: safe to share between concurrent submissions
        - First failure wins: one error per submission
    """

    def __init__(self, rules: Optional[list[BaseRule]] = None):
        """Initialize with the default rule chain or a custom one.

        Args:
            rules: Optional list of rules in evaluation order. If None, uses all defaults.
        """
        self.rules = rules or self._default_rules()

    @staticmethod
    def _default_rules() -> list[BaseRule]:
        """Create the default rule chain in evaluation order."""
        return [
            RequiredRule(),   # Must run first: a blank answer reports as missing, not mismatched
            PatternRule(),
            MinimumRule(),
            MaximumRule(),
        ]

    def coerce_answers(self, form: Form, answers: Mapping[str, Any]) -> dict[str, AnswerEntry]:
        """Check submitted keys against the form and normalize each entry.

        Values may be AnswerEntry objects, ``{"answer": ..., "label": ...}``
        mappings or bare values. Fields left out of the submission are
        filled with their type's blank value.

        Raises:
            UnknownAnswerField: if any key is not a field name of the form
        """
        known = set(form.field_names())
        unknown = [key for key in answers if key not in known]
        if unknown:
            raise UnknownAnswerField(unknown)

        entries: dict[str, AnswerEntry] = {}
        for field in form.fields:
            if field.name in answers:
                value = self._entry_value(answers[field.name])
            else:
                value = spec_for(field.field_type).blank_value()
            entries[field.name] = AnswerEntry(label=field.label, answer=value)
        return entries

    def check(self, form: Form, answers: Mapping[str, Any]) -> Optional[ValidationFailure]:
        """Return the first violated rule, or None when the answers pass.

        Raises:
            UnknownAnswerField: if the submission names undeclared fields
        """
        _, failure = self._evaluate(form, answers)
        return failure

    def _evaluate(
        self, form: Form, answers: Mapping[str, Any]
    ) -> tuple[dict[str, AnswerEntry], Optional[ValidationFailure]]:
        """Coerce the answers once and run the rule scan over them."""
        start_time = time.perf_counter()

        entries = self.coerce_answers(form, answers)

        # Required fields with no key at all fail before any rule runs
        failure = self._missing_required(form, answers)

        if failure is None:
            for field in form.fields:
                failure = self.check_field(field, entries[field.name].answer)
                if failure is not None:
                    break

        duration = (time.perf_counter() - start_time) * 1000
        if failure is not None:
            logger.info(
                "answers_rejected",
                form_id=form.id,
                field=failure.field,
                rule=failure.rule.value,
                duration_ms=round(duration, 2),
            )
        return entries, failure

    def check_field(self, field: FormField, value: Any) -> Optional[ValidationFailure]:
        """Run the rule chain for one field, stopping at the first failure."""
        spec = spec_for(field.field_type)
        for rule in self.rules:
            if not rule.applies_to(field, spec):
                continue
            failure = rule.check(field, spec, value)
            if failure is not None:
                return failure
        return None

    def validate(
        self,
        form: Form,
        answers: Mapping[str, Any],
        answer_set_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AnswerSet:
        """Validate answers and produce the immutable AnswerSet record.

        Raises:
            UnknownAnswerField: if the submission names undeclared fields
            AnswerValidationError: carrying the first failing field and rule
        """
        entries, failure = self._evaluate(form, answers)
        if failure is not None:
            raise AnswerValidationError(failure)

        answer_set = AnswerSet(
            id=answer_set_id or uuid.uuid4().hex,
            form_id=form.id,
            answers=entries,
            created_at=now or datetime.utcnow(),
        )

        logger.info("answers_accepted", form_id=form.id, answer_set_id=answer_set.id)
        return answer_set

    # ── Helper Methods ──

    @staticmethod
    def _entry_value(raw: Any) -> Any:
        if isinstance(raw, AnswerEntry):
            return raw.answer
        if isinstance(raw, Mapping):
            return raw.get("answer")
        return raw

    def _missing_required(self, form: Form, answers: Mapping[str, Any]) -> Optional[ValidationFailure]:
        for field in form.fields:
            if field.required and field.name not in answers:
                return ValidationFailure(
                    field=field.label,
                    rule=RuleCode.REQUIRED_FIELD_MISSING,
                    detail=f"{field.label} field is required",
                    name=field.name,
                )
        return None


# Module-level singleton
answer_validator = AnswerValidator()
