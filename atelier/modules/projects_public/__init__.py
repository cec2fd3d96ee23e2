"""
Projects Public Module
======================

Public-facing project portfolio pages.
"""

from flask import Blueprint

projects_public_bp = Blueprint('projects', __name__, url_prefix='/projects', template_folder='templates')

from . import routes

__all__ = ['projects_public_bp']
