"""API response models."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from formkit.models.forms import AnswerSet, Form

RESPONSE_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class CreateFormResponse(BaseModel):
    """Response after creating a new form."""

    new_form: Form

    model_config = RESPONSE_CONFIG


class FormSummary(BaseModel):
    """One row of the owner's form list."""

    id: str
    title: str
    field_count: int
    answer_count: int = 0
    date_of_expire: Optional[str] = None
    created_at: datetime

    model_config = RESPONSE_CONFIG


class SubmitAnswersResponse(BaseModel):
    """Response after an answer set was accepted and stored."""

    answer_set: AnswerSet

    model_config = RESPONSE_CONFIG


class AnswerSetListResponse(BaseModel):
    form_id: str
    total: int
    answer_sets: list[AnswerSet] = []

    model_config = RESPONSE_CONFIG


class DeleteFormResponse(BaseModel):
    form_id: str
    deleted_answer_sets: int

    model_config = RESPONSE_CONFIG


class FieldTypeResponse(BaseModel):
    """Catalog entry as shown to the form builder."""

    field_type: str
    description: str
    value_shape: str
    requires_options: bool
    range_checked: bool

    model_config = RESPONSE_CONFIG


class HealthDependency(BaseModel):
    """Health status of a single dependency."""

    status: Literal["healthy", "unhealthy", "degraded"]
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """System health check response."""

    status: Literal["healthy", "unhealthy", "degraded"]
    version: str = "1.0.0"
    uptime_seconds: float
    dependencies: dict[str, HealthDependency]
