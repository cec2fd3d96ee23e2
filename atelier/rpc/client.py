"""
Project Clients
===============

Typed access to the `project.*` procedures. Components receive a client
explicitly; `get_project_client()` builds the app's default one.

- LocalProjectClient: calls the router in-process (server-rendered pages)
- HttpProjectClient: calls POST /api/rpc/<procedure> with requests
"""

from datetime import date, datetime

import requests
from flask import current_app

from ..core.logging_service import logger
from ..models import Project
from .errors import MutationError, RpcError


def _serialize(payload):
    data = {}
    for key, value in (payload or {}).items():
        if isinstance(value, datetime):
            value = value.date().isoformat()
        elif isinstance(value, date):
            value = value.isoformat()
        data[key] = value
    return data


class ProjectClient:
    """Read/write operations on projects. Reads are cached per client."""

    def __init__(self):
        self._cache = {}

    def _call(self, name, payload):
        raise NotImplementedError

    def get_project_by_slug(self, slug):
        """Return the Project for `slug`, or None when no record matches."""
        if slug in self._cache:
            return self._cache[slug]
        data = self._call('project.getProjectBySlug', {'slug': slug})
        project = Project.from_dict(data) if data else None
        self._cache[slug] = project
        return project

    def get_all_projects(self):
        data = self._call('project.getAllProjects', {})
        return [Project.from_dict(item) for item in data or []]

    def update_project(self, payload):
        """Replace the whole record keyed by `payload['slug']`.

        Raises:
            MutationError: unknown slug, rejected payload or backend failure.
        """
        try:
            data = self._call('project.updateProject', _serialize(payload))
        except RpcError as e:
            raise MutationError.wrap(e) from e
        if not data:
            raise MutationError('Update returned no project')
        project = Project.from_dict(data)
        self._cache[project.slug] = project
        return project


class LocalProjectClient(ProjectClient):

    def __init__(self, router, context=None):
        super().__init__()
        self.router = router
        self.context = context

    def _call(self, name, payload):
        try:
            return self.router.call(name, _serialize(payload), self.context)
        except RpcError:
            raise
        except Exception as e:
            logger.log_error_with_traceback('rpc', e, {'procedure': name})
            raise RpcError('Internal server error') from e


class HttpProjectClient(ProjectClient):

    def __init__(self, base_url, session=None, timeout=None, headers=None):
        super().__init__()
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = headers or {}

    def _call(self, name, payload):
        url = f"{self.base_url}/api/rpc/{name}"
        try:
            resp = self.session.post(url, json={'input': payload}, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise RpcError(f"Could not reach {url}: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            raise RpcError(f"Malformed response from {url}", status_code=resp.status_code) from e

        if not isinstance(body, dict):
            raise RpcError(f"Malformed response from {url}", status_code=resp.status_code)
        if body.get('error') is not None:
            raise RpcError.from_dict(body['error'], status_code=resp.status_code)
        if resp.status_code >= 400:
            raise RpcError(f"{name} failed with status {resp.status_code}", status_code=resp.status_code)
        return body.get('result')


def get_project_client():
    """New project client from the app's factory; views hold one per request."""
    return current_app.extensions['atelier'].project_client_factory()
