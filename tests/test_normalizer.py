"""
Tests for the form normalizer and the creation request schema.

These tests verify:
    - Name derivation from labels
    - Verbatim copy of constraints
    - Option materialization, in order, only on choice fields
    - Form-level metadata and ownership
    - Rejection of malformed input before normalization
    - The blank answer sheet
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from formkit.models.forms import FieldType, Option
from formkit.models.requests import CreateFormRequest, RawFormField
from formkit.services.normalizer import (
    FIELD_DEFAULTS,
    blank_answers,
    build_form_field,
    derive_name,
    normalize_form,
)

from conftest import build_form


class TestDeriveName:
    """Label → name derivation."""

    def test_lower_cases_and_joins_words(self):
        assert derive_name("Full Name") == "full-name"

    def test_trims_and_collapses_whitespace(self):
        assert derive_name("  Date \t of\n\nBirth  ") == "date-of-birth"

    def test_deterministic(self):
        assert derive_name("What is your Email?") == derive_name("What is your Email?")

    def test_keeps_punctuation(self):
        assert derive_name("E-mail (work)") == "e-mail-(work)"


class TestBuildFormField:
    """Single field normalization."""

    def test_copies_constraints_verbatim(self):
        raw = RawFormField.model_validate({
            "id": "abc",
            "label": "Full Name",
            "fieldType": "text",
            "required": True,
            "min": 3,
            "max": 20,
            "regexp": "^[A-Z]",
        })
        field = build_form_field(raw)

        assert field.id == "abc"
        assert field.name == "full-name"
        assert field.label == "Full Name"
        assert field.field_type == FieldType.TEXT
        assert field.required is True
        assert field.min == 3
        assert field.max == 20
        assert field.regexp == "^[A-Z]"
        assert field.options is None

    def test_defaults_fill_unset_attributes(self):
        field = build_form_field(RawFormField(label="Notes", field_type=FieldType.TEXTAREA))
        for key, default in FIELD_DEFAULTS.items():
            assert getattr(field, key) == default

    def test_materializes_options_in_order(self):
        raw = RawFormField.model_validate({
            "label": "Colour", "fieldType": "radio", "options": ["Red", "Green", "Blue"],
        })
        field = build_form_field(raw)
        assert field.options == (Option(value="Red"), Option(value="Green"), Option(value="Blue"))
        assert field.option_values() == ["Red", "Green", "Blue"]

    def test_accepts_option_objects(self):
        raw = RawFormField.model_validate({
            "label": "Agree", "fieldType": "radio", "options": [{"value": "Yes"}, {"value": "No"}],
        })
        assert build_form_field(raw).option_values() == ["Yes", "No"]

    def test_options_dropped_for_non_choice_types(self):
        raw = RawFormField.model_validate({"label": "Name", "fieldType": "text", "options": ["x"]})
        assert build_form_field(raw).options is None

    def test_options_compare_by_value(self):
        assert Option(value="Yes") == Option(value="Yes")


class TestNormalizeForm:
    """Whole-form normalization."""

    def test_full_name_scenario(self, full_name_form):
        (field,) = full_name_form.fields
        assert field.name == "full-name"
        assert field.min == 3
        assert field.max == 20

    def test_preserves_field_order(self, mixed_form):
        assert mixed_form.field_names() == [
            "full-name", "about-you", "email", "age", "start-date", "subscribe", "topics",
        ]

    def test_form_metadata(self):
        request = CreateFormRequest.model_validate({
            "title": "Feedback",
            "description": "Tell us",
            "completeTitle": "Thanks!",
            "completeDescription": "We read everything",
            "dateOfExpire": "2026-06-30",
            "formFields": [{"label": "Comment", "fieldType": "textarea"}],
        })
        now = datetime(2026, 2, 2)
        form = normalize_form(request, owner_email="me@example.com", form_id="F9", now=now)

        assert form.id == "F9"
        assert form.title == "Feedback"
        assert form.complete_title == "Thanks!"
        assert form.complete_description == "We read everything"
        assert form.date_of_expire == "2026-06-30"
        assert form.owner_email == "me@example.com"
        assert form.created_at == now

    def test_generates_ids_when_missing(self):
        request = CreateFormRequest.model_validate({
            "title": "T", "formFields": [{"label": "A", "fieldType": "text"}],
        })
        first = normalize_form(request, owner_email="me@example.com")
        second = normalize_form(request, owner_email="me@example.com")
        assert first.id != second.id
        assert first.fields[0].name == second.fields[0].name == "a"

    def test_form_is_frozen(self, full_name_form):
        with pytest.raises(ValidationError):
            full_name_form.title = "changed"

    def test_serializes_camel_case(self, full_name_form):
        data = full_name_form.model_dump(by_alias=True)
        assert data["ownerEmail"] == "owner@example.com"
        assert data["fields"][0]["fieldType"] == "text"


class TestCreateFormRequest:
    """Malformed input is rejected before the normalizer runs."""

    def test_unknown_field_type(self):
        with pytest.raises(ValidationError):
            build_form([{"label": "Sign", "fieldType": "signature"}])

    def test_missing_label(self):
        with pytest.raises(ValidationError):
            build_form([{"fieldType": "text"}])

    def test_blank_label(self):
        with pytest.raises(ValidationError):
            build_form([{"label": "   ", "fieldType": "text"}])

    @pytest.mark.parametrize("field_type", ["radio", "checkbox"])
    def test_choice_field_without_options(self, field_type):
        with pytest.raises(ValidationError):
            build_form([{"label": "Pick", "fieldType": field_type}])

    def test_choice_field_with_empty_options(self):
        with pytest.raises(ValidationError):
            build_form([{"label": "Pick", "fieldType": "radio", "options": []}])

    def test_labels_colliding_on_name(self):
        with pytest.raises(ValidationError, match="full-name"):
            build_form([
                {"label": "Full Name", "fieldType": "text"},
                {"label": "full   name", "fieldType": "text"},
            ])

    def test_invalid_regexp(self):
        with pytest.raises(ValidationError):
            build_form([{"label": "Code", "fieldType": "text", "regexp": "[unclosed"}])

    def test_unreadable_expiry_date(self):
        with pytest.raises(ValidationError):
            build_form([{"label": "A", "fieldType": "text"}], dateOfExpire="someday")

    @pytest.mark.parametrize("raw", [
        {"label": "Start", "fieldType": "date", "min": "next week"},
        {"label": "Start", "fieldType": "date", "max": 5},
        {"label": "Name", "fieldType": "text", "max": "abc"},
        {"label": "Bio", "fieldType": "textarea", "min": "five"},
        {"label": "Age", "fieldType": "number", "min": "lots"},
    ])
    def test_unreadable_bounds(self, raw):
        with pytest.raises(ValidationError, match="is not"):
            build_form([raw])

    def test_min_above_max(self):
        with pytest.raises(ValidationError, match="above max"):
            build_form([{"label": "Name", "fieldType": "text", "min": 10, "max": "3"}])

    @pytest.mark.parametrize("raw", [
        {"label": "Name", "fieldType": "text", "min": "3", "max": 20.0},
        {"label": "Bio", "fieldType": "textarea", "min": "", "max": 0},
        {"label": "Start", "fieldType": "date", "min": "2026-01-01", "max": "2026-06-30T12:00:00Z"},
        {"label": "Pick", "fieldType": "radio", "options": ["A"], "min": "whatever"},
    ])
    def test_readable_or_unused_bounds_accepted(self, raw):
        assert build_form([raw]).fields[0].label == raw["label"]

    def test_form_needs_fields(self):
        with pytest.raises(ValidationError):
            build_form([])


class TestBlankAnswers:
    """Initial answer sheet."""

    def test_starting_values_per_type(self, mixed_form):
        sheet = blank_answers(mixed_form)

        assert sheet["full-name"].answer == ""
        assert sheet["age"].answer == 18
        assert sheet["subscribe"].answer == "Yes"
        assert sheet["topics"].answer == []
        assert sheet["start-date"].answer == ""

    def test_number_without_min_starts_at_zero(self):
        form = build_form([{"label": "Count", "fieldType": "number"}])
        assert blank_answers(form)["count"].answer == 0

    def test_labels_are_carried(self, mixed_form):
        sheet = blank_answers(mixed_form)
        assert sheet["about-you"].label == "About You"
