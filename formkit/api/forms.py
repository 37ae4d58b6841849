"""Forms API — create, list, get and delete forms; submit and list answers."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

import structlog

from formkit.api.deps import get_current_user_email, get_form_store
from formkit.models.forms import Form
from formkit.models.requests import CreateFormRequest, SubmitAnswersRequest
from formkit.models.responses import (
    AnswerSetListResponse,
    CreateFormResponse,
    DeleteFormResponse,
    FieldTypeResponse,
    FormSummary,
    SubmitAnswersResponse,
)
from formkit.services.form_store import FormStore
from formkit.services.normalizer import normalize_form
from formkit.validators import FIELD_TYPE_CATALOG, answer_validator
from formkit.validators.catalog import parse_instant

logger = structlog.get_logger()

router = APIRouter()


async def _load_form(store: FormStore, form_id: str) -> Form:
    form = await store.get_form(form_id)
    if form is None:
        raise HTTPException(status_code=404, detail=f"Form {form_id} not found")
    return form


def _require_owner(form: Form, user_email: str) -> None:
    if form.owner_email.lower() != user_email.lower():
        raise HTTPException(status_code=403, detail="Only the form owner can do this")


def _is_expired(form: Form) -> bool:
    expires = parse_instant(form.date_of_expire)
    return expires is not None and expires < datetime.utcnow()


# ─── Endpoints ───


@router.get("/field-types", response_model=list[FieldTypeResponse])
async def list_field_types():
    """Field types the form builder can offer."""
    return [
        FieldTypeResponse(
            field_type=spec.field_type.value,
            description=spec.description,
            value_shape=spec.shape.value,
            requires_options=spec.requires_options,
            range_checked=spec.validates_range,
        )
        for spec in FIELD_TYPE_CATALOG.values()
    ]


@router.post("/forms", status_code=201, response_model=CreateFormResponse)
async def create_form(
    request_body: CreateFormRequest,
    user_email: str = Depends(get_current_user_email),
    store: FormStore = Depends(get_form_store),
):
    """Normalize and store a new form owned by the signed-in user."""
    form = normalize_form(request_body, owner_email=user_email)
    await store.create_form(form)
    return CreateFormResponse(new_form=form)


@router.get("/forms", response_model=list[FormSummary])
async def list_forms(
    user_email: str = Depends(get_current_user_email),
    store: FormStore = Depends(get_form_store),
):
    """Forms owned by the signed-in user, newest first."""
    forms = await store.list_forms(user_email)
    summaries = []
    for form in forms:
        summaries.append(
            FormSummary(
                id=form.id,
                title=form.title,
                field_count=len(form.fields),
                answer_count=await store.count_answer_sets(form.id),
                date_of_expire=form.date_of_expire,
                created_at=form.created_at,
            )
        )
    return summaries


@router.get("/forms/{form_id}", response_model=Form)
async def get_form(form_id: str, store: FormStore = Depends(get_form_store)):
    """Public form definition, as rendered to respondents."""
    return await _load_form(store, form_id)


@router.delete("/forms/{form_id}", response_model=DeleteFormResponse)
async def delete_form(
    form_id: str,
    user_email: str = Depends(get_current_user_email),
    store: FormStore = Depends(get_form_store),
):
    """Delete a form and every answer set submitted to it."""
    form = await _load_form(store, form_id)
    _require_owner(form, user_email)

    deleted = await store.delete_form(form_id)
    return DeleteFormResponse(form_id=form_id, deleted_answer_sets=deleted)


@router.post("/answers/{form_id}", status_code=201, response_model=SubmitAnswersResponse)
async def submit_answers(
    form_id: str,
    request_body: SubmitAnswersRequest,
    store: FormStore = Depends(get_form_store),
):
    """Validate a respondent's answers and store them.

    Validation failures surface through the application's exception
    handlers as 422 responses naming the failing field and rule.
    """
    form = await _load_form(store, form_id)
    if _is_expired(form):
        raise HTTPException(status_code=410, detail=f"Form {form_id} no longer accepts answers")

    answer_set = answer_validator.validate(form, request_body.answers)
    await store.add_answer_set(answer_set)
    return SubmitAnswersResponse(answer_set=answer_set)


@router.get("/forms/{form_id}/answers", response_model=AnswerSetListResponse)
async def list_answers(
    form_id: str,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    user_email: str = Depends(get_current_user_email),
    store: FormStore = Depends(get_form_store),
):
    """Answer sets of a form, oldest first. Owner only."""
    form = await _load_form(store, form_id)
    _require_owner(form, user_email)

    return AnswerSetListResponse(
        form_id=form_id,
        total=await store.count_answer_sets(form_id),
        answer_sets=await store.list_answer_sets(form_id, offset=offset, limit=limit),
    )
