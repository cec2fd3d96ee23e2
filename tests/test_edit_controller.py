import sqlite3
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from atelier.core.storage import UploadError
from atelier.models import Project
from atelier.modules.projects.controller import (
    FAILURE_MESSAGE,
    SUCCESS_MESSAGE,
    EditProjectController,
    FormState,
    ThumbnailSelection,
)
from atelier.rpc.client import LocalProjectClient
from atelier.rpc.errors import MutationError
from atelier.rpc.router import CallContext

from conftest import FakeUploader


def make_project(**overrides):
    data = dict(
        slug="acme-hq",
        title="Acme HQ",
        place="Lisbon",
        client="Acme Corp",
        summary="New headquarters.",
        content="Offices.",
        date=date(2023, 3, 14),
        thumbnail="https://img/old.png",
    )
    data.update(overrides)
    return Project(**data)


class RecordingClient:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def update_project(self, payload):
        self.calls.append(payload)
        if self.error is not None:
            raise self.error
        return Project.from_dict(payload)


@pytest.fixture
def notes():
    return []


@pytest.fixture
def visits():
    return []


def make_controller(notes, visits, client=None, uploader=None, project=None):
    controller = EditProjectController(
        project or make_project(),
        client or RecordingClient(),
        uploader or FakeUploader(),
        notify=lambda message, category: notes.append((message, category)),
        navigate=visits.append,
    )
    controller.mount()
    return controller


def test_mount_defaults_fields_from_record(notes, visits):
    controller = make_controller(notes, visits)
    assert controller.values["title"] == "Acme HQ"
    assert controller.values["date"] == date(2023, 3, 14)
    assert controller.preview_url == "https://img/old.png"


def test_mount_runs_once_per_record(notes, visits):
    controller = make_controller(notes, visits)
    controller.set_value("title", "Edited")

    assert controller.mount() is False
    assert controller.values["title"] == "Edited"

    assert controller.mount(make_project(slug="other", title="Other")) is True
    assert controller.values["title"] == "Other"


def test_set_value_rejects_unknown_field(notes, visits):
    controller = make_controller(notes, visits)
    with pytest.raises(KeyError):
        controller.set_value("slug", "renamed")


def test_submit_without_new_thumbnail_keeps_existing_url(notes, visits):
    client = RecordingClient()
    uploader = FakeUploader()
    controller = make_controller(notes, visits, client=client, uploader=uploader)
    controller.set_value("place", "Porto")

    outcome = controller.submit()

    assert outcome.ok
    assert uploader.uploads == []
    assert client.calls[0]["thumbnail"] == "https://img/old.png"
    assert client.calls[0]["slug"] == "acme-hq"
    assert client.calls[0]["place"] == "Porto"
    assert notes == [(SUCCESS_MESSAGE, "success")]
    assert visits == ["/dashboard/projects/"]


def test_immediate_submit_sends_original_record(notes, visits):
    client = RecordingClient()
    controller = make_controller(notes, visits, client=client)

    controller.submit()

    assert len(client.calls) == 1
    assert client.calls[0] == {
        "slug": "acme-hq",
        "title": "Acme HQ",
        "place": "Lisbon",
        "client": "Acme Corp",
        "summary": "New headquarters.",
        "content": "Offices.",
        "date": date(2023, 3, 14),
        "thumbnail": "https://img/old.png",
    }


def test_submit_uploads_before_update(notes, visits):
    order = []
    uploader = MagicMock()
    uploader.upload.side_effect = lambda file: order.append("upload") or "https://img/new.png"
    client = MagicMock()
    client.update_project.side_effect = lambda payload: order.append("update") or Project.from_dict(payload)

    controller = make_controller(notes, visits, client=client, uploader=uploader)
    selection = controller.select_thumbnail(b"\x89PNG")
    outcome = controller.submit()

    assert order == ["upload", "update"]
    assert client.update_project.call_args.args[0]["thumbnail"] == "https://img/new.png"
    assert outcome.project.thumbnail == "https://img/new.png"
    assert selection.released
    assert controller.preview_url == "https://img/new.png"


def test_validation_failure_makes_no_calls(notes, visits):
    client = RecordingClient()
    uploader = FakeUploader()
    controller = make_controller(notes, visits, client=client, uploader=uploader)
    controller.select_thumbnail(b"\x89PNG")
    controller.set_value("title", "")

    outcome = controller.submit()

    assert not outcome.ok
    assert outcome.errors["title"] == ["Title is required."]
    assert controller.state is FormState.IDLE
    assert client.calls == []
    assert uploader.uploads == []
    assert notes == [] and visits == []


def test_upload_failure_skips_update(notes, visits):
    client = RecordingClient()
    uploader = FakeUploader(error=UploadError("host down"))
    controller = make_controller(notes, visits, client=client, uploader=uploader)
    controller.set_value("place", "Porto")
    controller.select_thumbnail(b"\x89PNG")

    outcome = controller.submit()

    assert outcome.state is FormState.FAILED
    assert controller.values["place"] == "Porto"
    assert client.calls == []
    assert notes == [(FAILURE_MESSAGE, "error")]
    assert visits == []
    assert controller.is_loading is False


def test_mutation_failure_reports_generic_error(notes, visits):
    client = RecordingClient(error=MutationError("boom"))
    controller = make_controller(notes, visits, client=client)

    outcome = controller.submit()

    assert outcome.state is FormState.FAILED
    assert notes == [(FAILURE_MESSAGE, "error")]
    assert visits == []
    assert controller.is_loading is False


def test_submit_while_loading_is_ignored(notes, visits):
    client = RecordingClient()
    controller = make_controller(notes, visits, client=client)
    controller.is_loading = True

    assert controller.submit() is None
    assert client.calls == []


def test_reentrant_submit_during_update_is_ignored(notes, visits):
    client = MagicMock()
    nested = []

    def update(payload):
        nested.append(controller.submit())
        return Project.from_dict(payload)

    client.update_project.side_effect = update
    controller = make_controller(notes, visits, client=client)

    assert controller.submit().ok
    assert nested == [None]
    assert client.update_project.call_count == 1


def test_reentrant_submit_during_upload_is_ignored(notes, visits):
    uploader = MagicMock()
    client = RecordingClient()
    nested = []

    def upload(file):
        nested.append(controller.submit())
        return "https://img/new.png"

    uploader.upload.side_effect = upload
    controller = make_controller(notes, visits, client=client, uploader=uploader)
    controller.select_thumbnail(b"\x89PNG")

    assert controller.submit().ok
    assert nested == [None]
    assert uploader.upload.call_count == 1
    assert len(client.calls) == 1


def test_store_failure_through_local_client_is_reported(app, acme, notes, visits):
    router = app.extensions["atelier"].router
    with app.app_context():
        client = LocalProjectClient(router, CallContext(is_admin=True))
        controller = make_controller(notes, visits, client=client, project=acme)
        controller.set_value("place", "Porto")
        with patch("atelier.modules.projects.procedures.update_project_db",
                   side_effect=sqlite3.OperationalError("database is locked")):
            outcome = controller.submit()

    assert outcome.state is FormState.FAILED
    assert controller.is_loading is False
    assert controller.values["place"] == "Porto"
    assert notes == [(FAILURE_MESSAGE, "error")]
    assert visits == []


def test_selecting_again_releases_previous_selection(notes, visits):
    controller = make_controller(notes, visits)
    first = controller.select_thumbnail(b"one")
    second = controller.select_thumbnail(b"two")

    assert first.released
    assert not second.released
    assert controller.preview_url == second.preview_url


def test_unmount_releases_selection(notes, visits):
    controller = make_controller(notes, visits)
    selection = controller.select_thumbnail(b"one")

    controller.unmount()

    assert selection.released
    assert controller.preview_url == "https://img/old.png"


def test_released_selection_has_no_preview():
    selection = ThumbnailSelection("a.png", b"one", "image/png")
    assert selection.preview_url.startswith("data:image/png;base64,")
    selection.release()
    with pytest.raises(RuntimeError):
        selection.preview_url
