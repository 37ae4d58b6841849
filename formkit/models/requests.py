"""API request models.

These are the schema check in front of the engine: anything that reaches
the normalizer or the validator has already passed here.
"""

import re
import uuid
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from formkit.config import get_settings
from formkit.models.forms import Bound, FieldType
from formkit.services.normalizer import derive_name
from formkit.validators.catalog import RangeKind, ValueShape, parse_instant, parse_number, spec_for

REQUEST_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class RawOption(BaseModel):
    value: str


class RawFormField(BaseModel):
    """One field as drawn by the form builder."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    label: str = Field(..., min_length=1, max_length=200)
    field_type: FieldType
    required: bool = False
    options: Optional[list[Union[str, RawOption]]] = None
    min: Optional[Bound] = None
    max: Optional[Bound] = None
    regexp: Optional[str] = None

    model_config = REQUEST_CONFIG

    @field_validator("label")
    @classmethod
    def label_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("label must not be blank")
        return v

    @field_validator("regexp")
    @classmethod
    def regexp_compiles(cls, v: Optional[str]) -> Optional[str]:
        if v:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid regexp: {e}")
        return v

    @field_validator("options")
    @classmethod
    def flatten_options(cls, v):
        if v is None:
            return v
        return [opt.value if isinstance(opt, RawOption) else opt for opt in v]

    @model_validator(mode="after")
    def options_match_type(self) -> "RawFormField":
        if spec_for(self.field_type).requires_options and not self.options:
            raise ValueError(f"'{self.label}' is a {self.field_type.value} field and needs at least one option")
        return self

    @model_validator(mode="after")
    def bounds_readable(self) -> "RawFormField":
        spec = spec_for(self.field_type)
        if spec.range_kind == RangeKind.DATE:
            parse, kind = parse_instant, "an ISO date"
        elif spec.range_kind == RangeKind.LENGTH or spec.shape == ValueShape.NUMBER:
            parse, kind = parse_number, "a number"
        else:
            return self

        # 0, "" and None mean "no bound"
        parsed = {}
        for side in ("min", "max"):
            bound = getattr(self, side)
            if not bound:
                continue
            parsed[side] = parse(bound)
            if parsed[side] is None:
                raise ValueError(f"'{self.label}' {side} '{bound}' is not {kind}")

        if len(parsed) == 2 and parsed["min"] > parsed["max"]:
            raise ValueError(f"'{self.label}' min '{self.min}' is above max '{self.max}'")
        return self


class CreateFormRequest(BaseModel):
    """Request to create a new form."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    complete_title: str = ""
    complete_description: str = ""
    date_of_expire: Optional[str] = None
    form_fields: list[RawFormField] = Field(..., min_length=1)

    model_config = REQUEST_CONFIG

    @field_validator("date_of_expire")
    @classmethod
    def expiry_is_date(cls, v: Optional[str]) -> Optional[str]:
        if v and parse_instant(v) is None:
            raise ValueError(f"dateOfExpire '{v}' is not an ISO date")
        return v or None

    @model_validator(mode="after")
    def field_names_unique(self) -> "CreateFormRequest":
        limit = get_settings().MAX_FIELDS_PER_FORM
        if len(self.form_fields) > limit:
            raise ValueError(f"A form can have at most {limit} fields")

        seen: dict[str, str] = {}
        for raw in self.form_fields:
            name = derive_name(raw.label)
            if name in seen:
                raise ValueError(
                    f"Labels '{seen[name]}' and '{raw.label}' both map to field name '{name}'"
                )
            seen[name] = raw.label
        return self


class SubmitAnswersRequest(BaseModel):
    """Request carrying one respondent's answers, keyed by field name."""

    answers: dict[str, Any] = Field(default_factory=dict)

    model_config = REQUEST_CONFIG
