"""
RPC Module
==========

Typed request/response boundary for reading and writing projects.

Procedures:
- project.getProjectBySlug (public)
- project.getAllProjects (public)
- project.updateProject (admin only)

Usage:
    POST /api/rpc/project.getProjectBySlug  {"input": {"slug": "acme-hq"}}
"""

from flask import Blueprint

rpc_bp = Blueprint('rpc', __name__, url_prefix='/api/rpc')

from .errors import MutationError, RpcError
from .router import CallContext, Router, build_app_router
from .client import HttpProjectClient, LocalProjectClient, ProjectClient, get_project_client
from . import routes

__all__ = ['rpc_bp', 'MutationError', 'RpcError', 'CallContext', 'Router', 'build_app_router',
           'ProjectClient', 'LocalProjectClient', 'HttpProjectClient', 'get_project_client']
