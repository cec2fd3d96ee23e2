"""
Projects Dashboard Module
=========================

Dashboard interface for the project portfolio.

Provides:
- Project list (the page the editor returns to)
- Project editing with thumbnail upload to the image host
- `project.*` RPC procedures (see procedures.py)
"""

from flask import Blueprint

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/dashboard/projects',
    template_folder='templates',
)

from . import routes

__all__ = ['projects_bp']
