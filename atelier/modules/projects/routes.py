"""
Projects Dashboard Routes
=========================

The edit form posts back to itself. Each rendered form carries a `form_id`;
while a submission for that id is being processed, repeated posts of the
same form are ignored (204).
"""

import threading
import uuid
from datetime import date
from functools import wraps
from urllib.parse import urlencode

from flask import abort, current_app, flash, redirect, render_template, request, session, url_for
from flask_wtf.csrf import validate_csrf
from wtforms.validators import ValidationError

from . import projects_bp
from .controller import EditProjectController
from .forms import ProjectForm
from ...core.config import get_config_value
from ...core.storage import get_image_uploader
from ...rpc.client import get_project_client

_inflight_forms = set()
_inflight_lock = threading.Lock()


def claim_form(form_id):
    """Mark a form as submitting; False if it already is"""
    with _inflight_lock:
        if form_id in _inflight_forms:
            return False
        _inflight_forms.add(form_id)
        return True


def release_form(form_id):
    with _inflight_lock:
        _inflight_forms.discard(form_id)


def admin_required(f):
    """Redirect to the auth layer's login page unless an admin is signed in"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            login_url = get_config_value('ATELIER_LOGIN_URL', '/admin/login')
            return redirect(f"{login_url}?{urlencode({'next': request.path})}")
        return f(*args, **kwargs)
    return decorated_function


def _csrf_valid():
    if not current_app.config.get('WTF_CSRF_ENABLED', True):
        return True
    try:
        validate_csrf(request.form.get('csrf_token'))
    except ValidationError:
        return False
    return True


def _render_edit(form, controller):
    return render_template(
        'projects/edit_project.html',
        form=form,
        project=controller.project,
        preview_url=controller.preview_url,
        today=date.today().isoformat(),
    )


# ===== Routes =====

@projects_bp.route('/')
@admin_required
def projects_list():
    """Dashboard list of projects"""
    projects = get_project_client().get_all_projects()
    return render_template('projects/projects_list.html', projects=projects)


@projects_bp.route('/<slug>/edit', methods=['GET', 'POST'])
@admin_required
def edit_project(slug):
    """Edit a project; thumbnail upload happens before the record is saved"""
    client = get_project_client()
    project = client.get_project_by_slug(slug)
    if project is None:
        abort(404)

    redirects = []
    controller = EditProjectController(
        project,
        client,
        get_image_uploader(),
        notify=flash,
        navigate=redirects.append,
        success_url=url_for('projects_admin.projects_list'),
    )
    controller.mount()

    if request.method == 'GET':
        form = ProjectForm(formdata=None, data=controller.values, form_id=uuid.uuid4().hex)
        return _render_edit(form, controller)

    form = ProjectForm()
    if not _csrf_valid():
        flash('The form has expired. Please refresh and try again.', 'error')
        return redirect(url_for('projects_admin.edit_project', slug=slug))

    form_id = form.form_id.data or uuid.uuid4().hex
    if not claim_form(form_id):
        return '', 204

    try:
        controller.update_values(form.submitted_values())
        thumbnail = request.files.get('thumbnail')
        if thumbnail and thumbnail.filename:
            controller.select_thumbnail(thumbnail)
        outcome = controller.submit()
    finally:
        controller.unmount()
        release_form(form_id)

    if redirects:
        return redirect(redirects[-1])

    for name, messages in outcome.errors.items():
        getattr(form, name).errors = list(messages)
    return _render_edit(form, controller)
