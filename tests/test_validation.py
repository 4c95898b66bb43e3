from __future__ import annotations

import io
from datetime import datetime

import pytest

from portfolio_api.services.validation import (
    CERTIFICATE_TYPES,
    IMAGE_TYPES,
    is_allowed_upload,
    is_email,
    is_uuid,
    is_well_formed_url,
    parse_date,
    parse_string_list,
    sanitize_text,
    upload_size,
    validate_certification,
    validate_login,
    validate_project,
)

pytestmark = pytest.mark.unit


def valid_project(**overrides) -> dict:
    data = {
        "title": "Portfolio",
        "descriptionEn": "A portfolio site",
        "descriptionId": "Situs portofolio",
        "technologies": ["React"],
    }
    data.update(overrides)
    return data


def test_sanitize_text_trims_strips_markup_and_truncates() -> None:
    assert sanitize_text("  <b>hello</b>  ") == "bhello/b"
    assert len(sanitize_text("x" * 20000)) == 10000
    assert sanitize_text(42) == 42
    assert sanitize_text(None) is None


def test_is_uuid() -> None:
    assert is_uuid("550e8400-e29b-41d4-a716-446655440000")
    assert is_uuid("550E8400-E29B-41D4-A716-446655440000")
    assert not is_uuid("not-a-uuid")
    assert not is_uuid("123")
    # variant nibble must be 8, 9, a or b
    assert not is_uuid("550e8400-e29b-41d4-c716-446655440000")
    assert not is_uuid(None)


def test_is_well_formed_url() -> None:
    assert is_well_formed_url("https://github.com/user/repo")
    assert is_well_formed_url("http://localhost:3000/demo")
    assert not is_well_formed_url("github.com/user/repo")
    assert not is_well_formed_url("https://exa mple.com")
    assert not is_well_formed_url("")


def test_is_email() -> None:
    assert is_email("admin@example.com")
    assert not is_email("admin@example")
    assert not is_email("ad min@example.com")


def test_parse_date_accepts_dates_and_datetimes() -> None:
    assert parse_date("2024-01-15") == datetime(2024, 1, 15)
    assert parse_date("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30)
    assert parse_date("2024-01-15T12:30:00+02:00") == datetime(2024, 1, 15, 10, 30)
    assert parse_date("15/01/2024") is None
    assert parse_date("") is None


def test_parse_string_list_prefers_json_then_falls_back_to_csv() -> None:
    assert parse_string_list('["React","Node.js"]') == ["React", "Node.js"]
    assert parse_string_list("React, Node.js") == ["React", "Node.js"]
    assert parse_string_list("React,, ,Vue") == ["React", "Vue"]
    assert parse_string_list(["Flask"]) == ["Flask"]
    assert parse_string_list("") == []


@pytest.mark.parametrize("raw", ['{"name": "React"}', "42", '"React"', "null"])
def test_parse_string_list_rejects_non_lists(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_string_list(raw)


def test_validate_project_accepts_valid_payload() -> None:
    result = validate_project(valid_project(demoUrl="https://demo.example.com"))

    assert result.valid
    assert result.errors == {}


def test_validate_project_reports_each_field() -> None:
    result = validate_project(
        {
            "title": "x" * 201,
            "descriptionEn": " ",
            "technologies": [],
            "demoUrl": "not a url",
            "githubUrl": "github.com/me",
            "order": "first",
        }
    )

    assert not result.valid
    assert result.errors == {
        "title": "Title must be less than 200 characters",
        "descriptionEn": "English description is required",
        "descriptionId": "Indonesian description is required",
        "technologies": "At least one technology is required",
        "demoUrl": "Invalid demo URL format",
        "githubUrl": "Invalid GitHub URL format",
        "order": "Order must be an integer",
    }


def test_validate_project_does_not_mutate_input() -> None:
    data = valid_project(title="  padded  ")
    snapshot = dict(data)

    validate_project(data)

    assert data == snapshot


def test_validate_certification_rules() -> None:
    ok = validate_certification({"title": "AWS SAA", "issuer": "AWS", "issuedAt": "2024-03-01"})
    assert ok.valid

    result = validate_certification(
        {
            "issuedAt": "yesterday",
            "credentialUrl": "nope",
            "credentialId": "x" * 201,
            "skills": ["Cloud", " "],
        }
    )
    assert result.errors == {
        "title": "Title is required",
        "issuer": "Issuer is required",
        "issuedAt": "Invalid date format",
        "credentialUrl": "Invalid Credential URL format",
        "credentialId": "credentialId must be less than 200 characters",
        "skills": "Each skill must be a non-empty string",
    }


def test_validate_certification_requires_issued_at() -> None:
    result = validate_certification({"title": "t", "issuer": "i"})

    assert result.errors == {"issuedAt": "Issued date is required"}


def test_validate_login() -> None:
    assert validate_login({"email": "admin@example.com", "password": "secret1"}).valid
    assert validate_login({"email": "bad", "password": "123"}).errors == {
        "email": "Invalid email format",
        "password": "Password must be at least 6 characters",
    }
    assert validate_login({}).errors == {
        "email": "Email is required",
        "password": "Password is required",
    }


class _Upload:
    def __init__(self, mimetype: str) -> None:
        self.mimetype = mimetype


def test_is_allowed_upload() -> None:
    assert is_allowed_upload(_Upload("image/png"), IMAGE_TYPES)
    assert not is_allowed_upload(_Upload("application/pdf"), IMAGE_TYPES)
    assert is_allowed_upload(_Upload("application/pdf"), CERTIFICATE_TYPES)
    assert not is_allowed_upload(_Upload("text/plain"), CERTIFICATE_TYPES)


def test_upload_size_measures_stream_without_moving_it() -> None:
    upload = _Upload("image/png")
    upload.stream = io.BytesIO(b"x" * 2048)
    upload.stream.seek(10)

    assert upload_size(upload) == 2048
    assert upload.stream.tell() == 10
