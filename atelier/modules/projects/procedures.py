"""`project.*` procedures backed by the projects database."""

from ...rpc.errors import RpcError
from ...rpc.router import Router
from .database import get_all_projects_db, get_project_by_slug_db, init_projects_db, update_project_db
from .forms import ProjectValidationError, validate_update_payload

project_router = Router('project')


@project_router.query('getProjectBySlug')
def get_project_by_slug(payload, context):
    """Project as a dict, or None when nothing matches the slug."""
    slug = payload.get('slug')
    slug = slug.strip() if isinstance(slug, str) else ''
    if not slug:
        raise RpcError('slug is required', code='BAD_REQUEST', fields={'slug': ['Slug is required.']})

    init_projects_db()
    project = get_project_by_slug_db(slug)
    return project.to_dict() if project else None


@project_router.query('getAllProjects')
def get_all_projects(payload, context):
    init_projects_db()
    return [project.to_dict() for project in get_all_projects_db()]


@project_router.mutation('updateProject')
def update_project(payload, context):
    """Full replace keyed by slug. Resubmitting the same payload is harmless."""
    try:
        data = validate_update_payload(payload)
    except ProjectValidationError as e:
        raise RpcError('Invalid project payload', code='BAD_REQUEST', fields=e.errors) from e

    init_projects_db()
    project = update_project_db(data)
    if project is None:
        raise RpcError(f"Project '{data['slug']}' not found", code='NOT_FOUND')
    return project.to_dict()
