"""Field type catalog — one descriptor per field type.

This table is the single place that says what a field type holds and which
constraints apply to it. Both the normalizer and the answer validator read it;
neither branches on field type on its own.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel

from formkit.models.forms import FieldType


class ValueShape(str, Enum):
    """What an answer to a field looks like."""

    STRING = "string"      # Free text, email, ISO date
    NUMBER = "number"      # Numeric scalar
    CHOICE = "choice"      # One option value
    CHOICES = "choices"    # List of option values


class RangeKind(str, Enum):
    """How min/max are enforced for a field type."""

    NONE = "none"        # Accepted on the field, never checked
    LENGTH = "length"    # Character count of the answer
    DATE = "date"        # Calendar instant comparison


class FieldTypeSpec(BaseModel):
    """Descriptor of a field type's value shape and applicable rules."""

    field_type: FieldType
    shape: ValueShape
    range_kind: RangeKind
    requires_options: bool = False
    description: str = ""

    model_config = {"frozen": True}

    @property
    def required_applies(self) -> bool:
        return True

    @property
    def validates_range(self) -> bool:
        return self.range_kind != RangeKind.NONE

    def blank_value(self) -> Any:
        """The zero value of this shape."""
        if self.shape == ValueShape.CHOICES:
            return []
        if self.shape == ValueShape.NUMBER:
            return 0
        return ""

    def is_blank(self, value: Any) -> bool:
        """True when the answer counts as not given for the required rule."""
        if value is None:
            return True
        if self.shape == ValueShape.CHOICES and isinstance(value, (list, tuple, set, frozenset)):
            return len(value) == 0
        if isinstance(value, str):
            return value == ""
        if self.shape == ValueShape.NUMBER and not isinstance(value, bool):
            return value == 0
        return False

    def as_text(self, value: Any) -> str:
        """String form of an answer, used for pattern matching."""
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ",".join(self.as_text(v) for v in value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


FIELD_TYPE_CATALOG: dict[FieldType, FieldTypeSpec] = {
    FieldType.TEXT: FieldTypeSpec(
        field_type=FieldType.TEXT,
        shape=ValueShape.STRING,
        range_kind=RangeKind.LENGTH,
        description="Short text input",
    ),
    FieldType.TEXTAREA: FieldTypeSpec(
        field_type=FieldType.TEXTAREA,
        shape=ValueShape.STRING,
        range_kind=RangeKind.LENGTH,
        description="Long text input",
    ),
    FieldType.EMAIL: FieldTypeSpec(
        field_type=FieldType.EMAIL,
        shape=ValueShape.STRING,
        range_kind=RangeKind.NONE,
        description="Email input",
    ),
    # min/max on numbers only drive the UI stepper
    FieldType.NUMBER: FieldTypeSpec(
        field_type=FieldType.NUMBER,
        shape=ValueShape.NUMBER,
        range_kind=RangeKind.NONE,
        description="Number picker",
    ),
    FieldType.DATE: FieldTypeSpec(
        field_type=FieldType.DATE,
        shape=ValueShape.STRING,
        range_kind=RangeKind.DATE,
        description="Date picker",
    ),
    FieldType.RADIO: FieldTypeSpec(
        field_type=FieldType.RADIO,
        shape=ValueShape.CHOICE,
        range_kind=RangeKind.NONE,
        requires_options=True,
        description="Select single option select",
    ),
    FieldType.CHECKBOX: FieldTypeSpec(
        field_type=FieldType.CHECKBOX,
        shape=ValueShape.CHOICES,
        range_kind=RangeKind.NONE,
        requires_options=True,
        description="Many options select",
    ),
}


def spec_for(field_type: FieldType) -> FieldTypeSpec:
    """Look up the descriptor for a field type."""
    return FIELD_TYPE_CATALOG[FieldType(field_type)]


def parse_number(value: Any) -> Optional[float]:
    """Parse a number or numeric string, None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse an ISO date or datetime into a naive UTC datetime.

    Returns None for anything that is not a readable date, so comparisons
    against an unreadable value never fail a range rule.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
