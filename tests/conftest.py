import os
import shutil
import tempfile
from datetime import date

import pytest
from flask import Flask

from atelier import Atelier


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="atelier-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


def make_app(tmp_db_dir, config=None, settings=None):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["WTF_CSRF_ENABLED"] = False
    app.config["DB_DIR"] = tmp_db_dir
    app.config["PROJECTS_DB"] = os.path.join(tmp_db_dir, "projects.db")
    app.config["LOGS_DB"] = os.path.join(tmp_db_dir, "app_logs.db")
    app.config["BRAND_NAME"] = "Ayaase Atalier"
    app.config.update(settings or {})
    Atelier(app, config)
    return app


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every Atelier module registered."""
    return make_app(tmp_db_dir)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["admin_id"] = 1
    return client


@pytest.fixture
def acme(app):
    """One stored project, slug `acme-hq`."""
    from atelier.modules.projects.database import create_project_db, init_projects_db

    with app.app_context():
        init_projects_db()
        return create_project_db(
            title="Acme HQ",
            place="Lisbon",
            client="Acme Corp",
            summary="New headquarters for Acme.",
            content="Open-plan offices.\n\nA rooftop garden.",
            date=date(2023, 3, 14),
            thumbnail="https://img/old.png",
            slug="acme-hq",
        )


class FakeUploader:
    """Stands in for the image host; records what it was asked to upload."""

    def __init__(self, url="https://img/new.png", error=None):
        self.url = url
        self.error = error
        self.uploads = []

    def upload(self, file):
        self.uploads.append(file)
        if self.error is not None:
            raise self.error
        return self.url


@pytest.fixture
def fake_uploader(app):
    uploader = FakeUploader()
    app.extensions["atelier"].image_uploader_factory = lambda: uploader
    return uploader
