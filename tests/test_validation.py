from __future__ import annotations

import pytest

from taskapi.core.errors import BadRequestError, ValidationError
from taskapi.domain.entities import TaskStatus
from taskapi.domain.validation import (
    ensure_valid_id,
    is_valid_email,
    is_valid_id,
    normalize_user_fields,
    parse_task_create,
    parse_task_status,
    parse_task_update,
    validate_user_patch,
    validate_user_payload,
)


def test_valid_user_payload_passes():
    validate_user_payload({"name": "Ann Lee", "email": "ann@example.com", "age": 30, "role": "editor", "active": False})


def test_user_payload_collects_every_violation_in_order():
    with pytest.raises(ValidationError) as info:
        validate_user_payload({"name": 5, "email": 3, "age": -1, "role": "root", "active": "yes"})

    assert info.value.details == [
        "Name must be a string",
        "Email must be a string",
        "Age cannot be negative",
        "Role 'root' is not valid. Valid roles: user, admin, editor",
        "Active must be a boolean",
    ]


def test_missing_required_fields():
    with pytest.raises(ValidationError) as info:
        validate_user_payload({})
    assert info.value.details == ["Name is required", "Email is required"]


@pytest.mark.parametrize(
    "name, message",
    [
        (" A ", "Name must be at least 2 characters long"),
        ("x" * 51, "Name cannot be longer than 50 characters"),
    ],
)
def test_name_length_is_checked_after_trim(name, message):
    with pytest.raises(ValidationError) as info:
        validate_user_payload({"name": name, "email": "a@b.co"})
    assert info.value.details == [message]


@pytest.mark.parametrize(
    "age, message",
    [
        (1.5, "Age must be an integer"),
        (121, "Age cannot be greater than 120"),
        (True, "Age must be a number"),
        ("10", "Age must be a number"),
    ],
)
def test_age_rules(age, message):
    with pytest.raises(ValidationError) as info:
        validate_user_payload({"name": "Ann", "email": "a@b.co", "age": age})
    assert info.value.details == [message]


def test_age_bounds_are_inclusive():
    validate_user_payload({"name": "Ann", "email": "a@b.co", "age": 0})
    validate_user_payload({"name": "Ann", "email": "a@b.co", "age": 120})


@pytest.mark.parametrize(
    "email, ok",
    [
        ("ann@example.com", True),
        ("first.last+tag@sub.example.org", True),
        ("ann@example", False),
        ("ann@example.c", False),
        ("@example.com", False),
        ("ann example@x.com", False),
    ],
)
def test_email_pattern(email, ok):
    assert is_valid_email(email) is ok


def test_patch_validates_only_present_fields():
    validate_user_patch({"age": 40})
    with pytest.raises(ValidationError) as info:
        validate_user_patch({"email": "nope"})
    assert info.value.details == ["Email format is not valid"]


def test_empty_patch_is_not_validated():
    validate_user_patch({})
    validate_user_patch({"unknown": "ignored"})


def test_normalize_user_fields_trims_and_lowercases():
    clean = normalize_user_fields({"name": "  Ann Lee ", "email": " Ann@Example.COM ", "age": 30.0, "extra": 1})
    assert clean == {"name": "Ann Lee", "email": "ann@example.com", "age": 30}


def test_parse_task_status():
    assert parse_task_status("completed") is TaskStatus.COMPLETED
    with pytest.raises(BadRequestError) as info:
        parse_task_status("bogus")
    assert "bogus" in info.value.message


def test_task_create_defaults_and_trim():
    schema = parse_task_create({"title": "  Write report ", "user": "u1"})
    assert schema.title == "Write report"
    assert schema.description == ""
    assert schema.status is TaskStatus.PENDING


def test_task_create_rejects_bad_payload():
    with pytest.raises(ValidationError) as info:
        parse_task_create({"title": "   ", "status": "later"})
    fields = sorted(message.split(":", 1)[0] for message in info.value.details)
    assert fields == ["status", "title", "user"]


def test_task_update_tracks_present_fields_only():
    schema = parse_task_update({"status": "in_progress"})
    assert schema.model_fields_set == {"status"}


def test_task_update_rejects_null_title():
    with pytest.raises(ValidationError):
        parse_task_update({"title": None})


@pytest.mark.parametrize(
    "value,ok",
    [
        ("0123456789abcdef01234567", True),
        ("0123456789ABCDEF01234567", False),
        ("0123456789abcdef0123456", False),
        ("0123456789abcdef012345678", False),
        ("zzzzzzzzzzzzzzzzzzzzzzzz", False),
        ("abc", False),
        ("", False),
        (None, False),
        (123, False),
    ],
)
def test_is_valid_id(value, ok):
    assert is_valid_id(value) is ok


def test_ensure_valid_id_names_the_bad_value():
    with pytest.raises(BadRequestError) as info:
        ensure_valid_id("not-an-id")
    assert info.value.message == "Invalid ID 'not-an-id'"
