"""Validation rules for project payloads.

`ProjectForm` is the dashboard form (CSRF + thumbnail file).
`ProjectPayloadForm` applies the same rules to plain dict payloads, and
`ProjectUpdateForm` adds the fields the store needs for a full replace.
"""

from datetime import date, datetime

from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from werkzeug.datastructures import MultiDict
from wtforms import DateField, Form, HiddenField, StringField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Regexp, ValidationError

from ...models import EDITABLE_FIELDS

MIN_PROJECT_DATE = date(1900, 1, 1)


class ProjectValidationError(ValueError):
    """Payload rejected before any network call; `errors` maps field -> messages."""

    def __init__(self, errors):
        super().__init__('Project payload failed validation')
        self.errors = errors


class DateInRange:
    """The date must lie between `min` and today, inclusive."""

    def __init__(self, min=MIN_PROJECT_DATE, message=None):
        self.min = min
        self.message = message

    def __call__(self, form, field):
        if field.data is None:
            return
        today = date.today()
        if field.data < self.min or field.data > today:
            message = self.message or (
                f"Date must be between {self.min.isoformat()} and {today.isoformat()}."
            )
            raise ValidationError(message)


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class ProjectFieldsMixin:
    title = StringField(
        "Project's Title",
        validators=[DataRequired(message="Title is required.")],
        filters=[_strip],
        description="This is the title of your project.",
    )
    place = StringField(
        "Project's Place",
        validators=[DataRequired(message="Place is required.")],
        filters=[_strip],
        description="This is the location of your project.",
    )
    client = StringField(
        "Project's Client",
        validators=[DataRequired(message="Client is required.")],
        filters=[_strip],
        description="This is the client's name of your project.",
    )
    date = DateField(
        "Project's Date",
        format="%Y-%m-%d",
        validators=[InputRequired(message="Date is required."), DateInRange()],
        description="This is the completion date of your project.",
    )
    summary = TextAreaField(
        "Project's Summary",
        validators=[DataRequired(message="Summary is required.")],
        filters=[_strip],
        description="This is the summary of your project.",
    )
    content = TextAreaField(
        "Project's Content",
        validators=[DataRequired(message="Content is required.")],
        filters=[_strip],
        description="This is the full write-up of your project.",
    )


class ProjectPayloadForm(ProjectFieldsMixin, Form):
    pass


class ProjectUpdateForm(ProjectPayloadForm):
    slug = StringField("Slug", validators=[DataRequired(message="Slug is required.")], filters=[_strip])
    thumbnail = StringField(
        "Thumbnail",
        validators=[
            DataRequired(message="Thumbnail is required."),
            Regexp(r'^https?://\S+$', message="Thumbnail must be an http(s) URL."),
        ],
        filters=[_strip],
    )


class ProjectForm(ProjectFieldsMixin, FlaskForm):
    thumbnail = FileField("Project's Thumbnail")
    form_id = HiddenField()
    submit = SubmitField("Submit")

    def submitted_values(self):
        """Raw submitted strings for the editable fields."""
        values = {}
        for name in EDITABLE_FIELDS:
            raw = getattr(self, name).raw_data
            values[name] = raw[0] if raw else ''
        return values


def _as_formdata(payload):
    formdata = MultiDict()
    for key, value in (payload or {}).items():
        if value is None:
            continue
        if isinstance(value, datetime):
            value = value.date().isoformat()
        elif isinstance(value, date):
            value = value.isoformat()
        formdata[key] = value if isinstance(value, str) else str(value)
    return formdata


def _validate(form_class, payload):
    form = form_class(formdata=_as_formdata(payload))
    if not form.validate():
        raise ProjectValidationError({name: list(messages) for name, messages in form.errors.items()})
    return form.data


def validate_project_payload(payload):
    """Return the normalized editable fields or raise ProjectValidationError."""
    return _validate(ProjectPayloadForm, payload)


def validate_update_payload(payload):
    """Like validate_project_payload, plus `slug` and `thumbnail`."""
    return _validate(ProjectUpdateForm, payload)
