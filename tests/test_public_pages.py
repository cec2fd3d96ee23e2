from datetime import date
from unittest.mock import MagicMock

from atelier.models import Project
from atelier.modules.projects_public.routes import (
    build_project_metadata,
    format_project_content,
    format_project_date,
    load_project_page,
)


def test_project_page_renders_record(client, acme):
    resp = client.get("/projects/acme-hq")
    html = resp.get_data(as_text=True)

    assert resp.status_code == 200
    assert "<title>Acme HQ - Ayaase Atalier</title>" in html
    assert '<meta name="description" content="New headquarters for Acme.">' in html
    assert "Acme Corp" in html
    assert "Lisbon" in html
    assert "March 14th, 2023" in html
    assert "<p>Open-plan offices.</p><p>A rooftop garden.</p>" in html
    assert 'src="https://img/old.png"' in html


def test_missing_slug_renders_placeholder(client, acme):
    resp = client.get("/projects/nope")
    html = resp.get_data(as_text=True)

    assert resp.status_code == 200
    assert "<title>Ayaase Atalier</title>" in html
    assert "project-placeholder" in html


def test_projects_listing(client, acme):
    resp = client.get("/projects/")
    assert resp.status_code == 200
    assert "/projects/acme-hq" in resp.get_data(as_text=True)


def test_load_project_page_uses_injected_client():
    client = MagicMock()
    client.get_project_by_slug.return_value = None

    page = load_project_page(client, "nope", "Studio")

    client.get_project_by_slug.assert_called_once_with("nope")
    assert page.found is False
    assert page.project.is_empty()
    assert page.metadata == {"title": "Studio", "description": ""}


def test_metadata_for_record():
    project = Project(slug="a", title="Tower", summary="Tall.")
    assert build_project_metadata(project, "Studio") == {"title": "Tower - Studio", "description": "Tall."}


def test_format_project_date_ordinals():
    assert format_project_date(date(2026, 10, 1)) == "October 1st, 2026"
    assert format_project_date(date(2026, 10, 2)) == "October 2nd, 2026"
    assert format_project_date(date(2026, 10, 3)) == "October 3rd, 2026"
    assert format_project_date(date(2026, 10, 11)) == "October 11th, 2026"
    assert format_project_date(date(2026, 10, 12)) == "October 12th, 2026"
    assert format_project_date(date(2026, 10, 22)) == "October 22nd, 2026"
    assert format_project_date(None) == ""


def test_format_project_content_escapes_plain_text():
    html = format_project_content("a < b\nline two")
    assert str(html) == "<p>a &lt; b<br>line two</p>"


def test_format_project_content_keeps_stored_html():
    assert str(format_project_content("<h2>Brief</h2>")) == "<h2>Brief</h2>"
    assert str(format_project_content("")) == ""
