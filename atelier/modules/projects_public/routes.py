"""
Projects Public Routes
======================

Public-facing project portfolio pages. A slug with no record still renders
the detail page, filled with an empty placeholder project.
"""

from dataclasses import dataclass
import re

from flask import current_app, render_template
from markupsafe import Markup, escape

from . import projects_public_bp
from ...models import Project
from ...rpc.client import get_project_client


@dataclass
class ProjectPage:
    project: Project
    metadata: dict
    found: bool


def build_project_metadata(project, site_name):
    """Page title and description for a project (site name alone when absent)"""
    if project is None or project.is_empty():
        return {'title': site_name, 'description': ''}
    return {'title': f"{project.title} - {site_name}", 'description': project.summary}


def load_project_page(client, slug, site_name):
    """Fetch a project by slug for display; never fails on a missing record"""
    project = client.get_project_by_slug(slug)
    return ProjectPage(
        project=project or Project.empty(),
        metadata=build_project_metadata(project, site_name),
        found=project is not None,
    )


def _ordinal(day):
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(day % 10, 'th')
    return f"{day}{suffix}"


def format_project_date(value):
    """Long date form, e.g. "October 18th, 2026"."""
    if not value:
        return ""
    return f"{value.strftime('%B')} {_ordinal(value.day)}, {value.year}"


def format_project_content(content):
    """Stored HTML is rendered as-is; plain text gets paragraphs and line breaks."""
    if not content:
        return Markup("")
    if re.search(r'<[a-zA-Z][^>]*>', content):
        return Markup(content)

    html = []
    for paragraph in re.split(r'\n\s*\n', str(escape(content))):
        if paragraph.strip():
            html.append('<p>' + paragraph.strip().replace('\n', '<br>') + '</p>')
    return Markup(''.join(html))


# ===== Routes =====

@projects_public_bp.route('/')
def projects_list():
    """Public projects listing"""
    projects = get_project_client().get_all_projects()
    return render_template('projects_public/projects.html', projects=projects)


@projects_public_bp.route('/<slug>')
def project_detail(slug):
    """Individual project page"""
    page = load_project_page(get_project_client(), slug, current_app.config['BRAND_NAME'])
    return render_template('projects_public/project_detail.html',
                           project=page.project, metadata=page.metadata, found=page.found)
