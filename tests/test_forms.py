from datetime import date, timedelta

import pytest

from atelier.modules.projects.forms import (
    ProjectValidationError,
    validate_project_payload,
    validate_update_payload,
)


def valid_payload(**overrides):
    payload = {
        "title": "Acme HQ",
        "place": "Lisbon",
        "client": "Acme Corp",
        "summary": "New headquarters.",
        "content": "Offices.",
        "date": "2023-03-14",
    }
    payload.update(overrides)
    return payload


def test_valid_payload_is_normalized():
    data = validate_project_payload(valid_payload(title="  Acme HQ  ", date=date(2023, 3, 14)))
    assert data["title"] == "Acme HQ"
    assert data["date"] == date(2023, 3, 14)


@pytest.mark.parametrize("field, message", [
    ("title", "Title is required."),
    ("place", "Place is required."),
    ("client", "Client is required."),
    ("summary", "Summary is required."),
    ("content", "Content is required."),
    ("date", "Date is required."),
])
def test_missing_field_is_reported(field, message):
    with pytest.raises(ProjectValidationError) as exc:
        validate_project_payload(valid_payload(**{field: ""}))
    assert exc.value.errors[field] == [message]


def test_whitespace_only_title_is_rejected():
    with pytest.raises(ProjectValidationError) as exc:
        validate_project_payload(valid_payload(title="   "))
    assert "title" in exc.value.errors


def test_unparseable_date_is_rejected():
    with pytest.raises(ProjectValidationError) as exc:
        validate_project_payload(valid_payload(date="14/03/2023"))
    assert "date" in exc.value.errors


def test_date_before_1900_is_rejected():
    with pytest.raises(ProjectValidationError) as exc:
        validate_project_payload(valid_payload(date="1899-12-31"))
    assert "date" in exc.value.errors


def test_future_date_is_rejected():
    tomorrow = date.today() + timedelta(days=1)
    with pytest.raises(ProjectValidationError) as exc:
        validate_project_payload(valid_payload(date=tomorrow))
    assert "date" in exc.value.errors


def test_date_bounds_are_inclusive():
    assert validate_project_payload(valid_payload(date="1900-01-01"))["date"] == date(1900, 1, 1)
    assert validate_project_payload(valid_payload(date=date.today()))["date"] == date.today()


def test_update_payload_requires_http_thumbnail():
    with pytest.raises(ProjectValidationError) as exc:
        validate_update_payload(valid_payload(slug="acme-hq", thumbnail="ftp://img/x.png"))
    assert exc.value.errors["thumbnail"] == ["Thumbnail must be an http(s) URL."]


def test_update_payload_requires_slug():
    with pytest.raises(ProjectValidationError) as exc:
        validate_update_payload(valid_payload(thumbnail="https://img/x.png"))
    assert exc.value.errors["slug"] == ["Slug is required."]


def test_update_payload_keeps_slug_and_thumbnail():
    data = validate_update_payload(valid_payload(slug="acme-hq", thumbnail="https://img/x.png"))
    assert data["slug"] == "acme-hq"
    assert data["thumbnail"] == "https://img/x.png"
