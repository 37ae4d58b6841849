"""Form normalizer — raw form input → canonical Form record.

Pure transformation, no I/O and no errors of its own: input has already
passed the request schema by the time it gets here. Persisting the result
is the form store's job.
"""

import re
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Iterable, Optional

import structlog

from formkit.models.forms import AnswerEntry, Form, FormField, Option
from formkit.validators.catalog import ValueShape, spec_for

if TYPE_CHECKING:
    from formkit.models.requests import CreateFormRequest, RawFormField

logger = structlog.get_logger()

_WHITESPACE = re.compile(r"\s+")

# Every FormField attribute the builder fills, with its value when the raw
# input leaves it unset. Nothing outside this table reaches the record.
FIELD_DEFAULTS: dict[str, Any] = {
    "required": False,
    "regexp": None,
    "min": None,
    "max": None,
    "options": None,
}


def derive_name(label: str) -> str:
    """Field name from its label: lower-cased, trimmed, whitespace runs → '-'.

    >>> derive_name("  Full   Name ")
    'full-name'
    """
    return _WHITESPACE.sub("-", label.strip().lower())


def build_option_set(raw_options: Iterable[Any]) -> tuple[Option, ...]:
    """One Option per raw value, in input order."""
    options = []
    for raw in raw_options:
        if isinstance(raw, Option):
            options.append(raw)
        elif isinstance(raw, dict):
            options.append(Option(value=str(raw["value"])))
        else:
            options.append(Option(value=str(raw)))
    return tuple(options)


def build_form_field(raw: "RawFormField") -> FormField:
    """Build a canonical FormField from one raw field descriptor."""
    spec = spec_for(raw.field_type)

    values = dict(FIELD_DEFAULTS)
    for key in ("required", "regexp", "min", "max"):
        given = getattr(raw, key, None)
        if given is not None:
            values[key] = given

    # Options exist only on choice fields
    if spec.requires_options and raw.options:
        values["options"] = build_option_set(raw.options)

    return FormField(
        id=raw.id,
        label=raw.label,
        name=derive_name(raw.label),
        field_type=spec.field_type,
        **values,
    )


def normalize_form(
    request: "CreateFormRequest",
    owner_email: str,
    form_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Form:
    """Turn a validated creation request into a Form ready for storage."""
    fields = tuple(build_form_field(raw) for raw in request.form_fields)

    form = Form(
        id=form_id or uuid.uuid4().hex,
        title=request.title,
        description=request.description,
        complete_title=request.complete_title,
        complete_description=request.complete_description,
        date_of_expire=request.date_of_expire,
        fields=fields,
        owner_email=owner_email,
        created_at=now or datetime.utcnow(),
    )

    logger.debug(
        "form_normalized",
        form_id=form.id,
        field_count=len(fields),
        field_types=[f.field_type.value for f in fields],
    )
    return form


def blank_answers(form: Form) -> dict[str, AnswerEntry]:
    """The answer sheet a respondent starts from.

    Checkbox starts with nothing selected, number at its min (or 0),
    radio on its first option and every other field empty.
    """
    sheet: dict[str, AnswerEntry] = {}
    for field in form.fields:
        spec = spec_for(field.field_type)
        if spec.shape == ValueShape.NUMBER:
            value = field.min if field.min else 0
        elif spec.shape == ValueShape.CHOICE and field.options:
            value = field.options[0].value
        else:
            value = spec.blank_value()
        sheet[field.name] = AnswerEntry(label=field.label, answer=value)
    return sheet
