"""
Edit Project Controller
=======================

Drives one instance of the dashboard edit form:

    IDLE -> VALIDATING -> (IDLE with errors)
                       -> UPLOADING (only with a new thumbnail) -> SUBMITTING
                       -> SUCCESS | FAILED

The project client, the image uploader, notifications and navigation are
passed in so the same controller runs inside a Flask view or a test.
"""

from __future__ import annotations

import base64
import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ...core.logging_service import logger
from ...core.storage import UploadError
from ...models import EDITABLE_FIELDS, Project
from ...rpc.errors import MutationError
from .forms import ProjectValidationError, validate_project_payload

SUCCESS_MESSAGE = "Project updated!"
FAILURE_MESSAGE = "Something went wrong while saving the project. Please try again."


class FormState(enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


class ThumbnailSelection:
    """A thumbnail picked in the form but not uploaded yet.

    Holds the file bytes for the preview until it is replaced, submitted or
    the form goes away; a released selection cannot be previewed.
    """

    def __init__(self, filename: str, data: bytes, mimetype: str = "application/octet-stream"):
        self.filename = filename
        self.data: Optional[bytes] = data
        self.mimetype = mimetype

    @classmethod
    def from_file(cls, file) -> "ThumbnailSelection":
        if isinstance(file, (bytes, bytearray)):
            return cls("upload", bytes(file))
        data = file.read()
        filename = getattr(file, "filename", None) or getattr(file, "name", None) or "upload"
        mimetype = getattr(file, "mimetype", None) or "application/octet-stream"
        return cls(filename, data, mimetype)

    @property
    def released(self) -> bool:
        return self.data is None

    @property
    def preview_url(self) -> str:
        if self.data is None:
            raise RuntimeError("Thumbnail selection has been released")
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mimetype};base64,{encoded}"

    def release(self) -> None:
        self.data = None


@dataclass
class SubmitOutcome:
    state: FormState
    errors: Dict[str, List[str]] = field(default_factory=dict)
    project: Optional[Project] = None

    @property
    def ok(self) -> bool:
        return self.state is FormState.SUCCESS


class EditProjectController:

    def __init__(
        self,
        project: Project,
        client,
        uploader,
        notify: Optional[Callable[[str, str], Any]] = None,
        navigate: Optional[Callable[[str], Any]] = None,
        success_url: str = "/dashboard/projects/",
        validator: Callable[[Dict[str, Any]], Dict[str, Any]] = validate_project_payload,
    ):
        self.project = project
        self.client = client
        self.uploader = uploader
        self.notify = notify or (lambda message, category: None)
        self.navigate = navigate or (lambda url: None)
        self.success_url = success_url
        self.validator = validator

        self.state = FormState.IDLE
        self.values: Dict[str, Any] = {name: "" for name in EDITABLE_FIELDS}
        self.values["date"] = None
        self.errors: Dict[str, List[str]] = {}
        self.is_loading = False
        self.selection: Optional[ThumbnailSelection] = None
        self._initialized_slug: Optional[str] = None

    def mount(self, project: Optional[Project] = None) -> bool:
        """Default the fields from the record, once per record identity.

        Returns True when the values were (re)initialized.
        """
        if project is not None:
            self.project = project
        if self._initialized_slug == self.project.slug:
            return False

        self._release_selection()
        self.values = self.project.form_defaults()
        self.errors = {}
        self.state = FormState.IDLE
        self._initialized_slug = self.project.slug
        return True

    def unmount(self) -> None:
        self._release_selection()

    def set_value(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise KeyError(name)
        self.values[name] = value

    def update_values(self, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            self.set_value(name, value)

    def select_thumbnail(self, file) -> ThumbnailSelection:
        """Use `file` as the new thumbnail, replacing any earlier pick."""
        selection = ThumbnailSelection.from_file(file)
        self._release_selection()
        self.selection = selection
        return selection

    def _release_selection(self) -> None:
        if self.selection is not None:
            self.selection.release()
            self.selection = None

    @property
    def preview_url(self) -> str:
        if self.selection is not None:
            return self.selection.preview_url
        return self.project.thumbnail

    def submit(self) -> Optional[SubmitOutcome]:
        """Validate, upload the new thumbnail if any, then update the record.

        Returns None without doing anything while a submission is in flight.
        """
        if self.is_loading:
            return None

        self.state = FormState.VALIDATING
        try:
            payload = self.validator(self.values)
        except ProjectValidationError as e:
            self.errors = e.errors
            self.state = FormState.IDLE
            return SubmitOutcome(self.state, errors=self.errors)
        self.errors = {}

        self.is_loading = True
        try:
            thumbnail = self.project.thumbnail
            if self.selection is not None:
                self.state = FormState.UPLOADING
                thumbnail = self.uploader.upload(self.selection)

            self.state = FormState.SUBMITTING
            updated = self.client.update_project(
                dict(payload, slug=self.project.slug, thumbnail=thumbnail)
            )
        except (UploadError, MutationError) as e:
            logger.warning("projects", f"Saving project '{self.project.slug}' failed: {e}",
                           {"stage": self.state.value, "error_type": type(e).__name__})
            self.state = FormState.FAILED
            self.notify(FAILURE_MESSAGE, "error")
            return SubmitOutcome(self.state)
        finally:
            self.is_loading = False

        self._release_selection()
        self.project = updated
        self.values = updated.form_defaults()
        self.state = FormState.SUCCESS
        self.notify(SUCCESS_MESSAGE, "success")
        self.navigate(self.success_url)
        return SubmitOutcome(self.state, project=updated)
