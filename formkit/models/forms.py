"""Form and answer records — the persisted shapes the engine produces.

Records are frozen: a Form never changes after creation (only deletion),
and an AnswerSet is a fresh immutable record per submission.
Attributes are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


RECORD_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}


class FieldType(str, Enum):
    """Closed set of supported field kinds."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    NUMBER = "number"
    DATE = "date"
    RADIO = "radio"
    CHECKBOX = "checkbox"


# min/max are a length for text fields, a number for number fields
# and an ISO date string for date fields
Bound = Union[int, float, str]


class Option(BaseModel):
    """One selectable value of a choice-style field. Equal by value only."""

    value: str

    model_config = RECORD_CONFIG


class FormField(BaseModel):
    """One typed, constrained question within a form."""

    id: str
    label: str
    name: str
    field_type: FieldType
    required: bool = False
    regexp: Optional[str] = None
    min: Optional[Bound] = None
    max: Optional[Bound] = None
    options: Optional[tuple[Option, ...]] = None

    model_config = RECORD_CONFIG

    def option_values(self) -> list[str]:
        """Option values in display order (empty for non-choice fields)."""
        return [opt.value for opt in self.options or ()]


class Form(BaseModel):
    """A named, ordered collection of fields owned by a single user."""

    id: str
    title: str
    description: str = ""
    complete_title: str = ""
    complete_description: str = ""
    date_of_expire: Optional[str] = None
    fields: tuple[FormField, ...]
    owner_email: str
    created_at: datetime

    model_config = RECORD_CONFIG

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


class AnswerEntry(BaseModel):
    """A single answer; the label travels with it for error messages."""

    label: Optional[str] = None
    answer: Any = None

    model_config = RECORD_CONFIG


class AnswerSet(BaseModel):
    """One respondent's accepted answers for a form."""

    id: str
    form_id: str
    answers: dict[str, AnswerEntry] = Field(default_factory=dict)
    created_at: datetime

    model_config = RECORD_CONFIG

    def value_of(self, name: str) -> Any:
        entry = self.answers.get(name)
        return entry.answer if entry else None
