"""Named procedures callable in-process or over HTTP."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from flask import has_request_context, session

from .errors import RpcError


@dataclass
class CallContext:
    """Who is calling. Protected procedures need an admin."""

    is_admin: bool = False

    @classmethod
    def from_session(cls) -> "CallContext":
        if not has_request_context():
            return cls()
        return cls(is_admin='admin_id' in session)


@dataclass
class Procedure:
    name: str
    handler: Callable[[Dict[str, Any], CallContext], Any]
    kind: str
    protected: bool


class Router:
    """Registry of procedures, namespaced like `project.getProjectBySlug`."""

    def __init__(self, namespace: str = ""):
        self.namespace = namespace
        self._procedures: Dict[str, Procedure] = {}

    def _qualified(self, name: str) -> str:
        return f"{self.namespace}.{name}" if self.namespace else name

    def _register(self, name: str, kind: str, protected: bool):
        def decorator(handler):
            qualified = self._qualified(name)
            self._procedures[qualified] = Procedure(qualified, handler, kind, protected)
            return handler

        return decorator

    def query(self, name: str, *, protected: bool = False):
        return self._register(name, "query", protected)

    def mutation(self, name: str, *, protected: bool = True):
        return self._register(name, "mutation", protected)

    def merge(self, other: "Router") -> "Router":
        for procedure in other._procedures.values():
            qualified = self._qualified(procedure.name)
            self._procedures[qualified] = Procedure(
                qualified, procedure.handler, procedure.kind, procedure.protected
            )
        return self

    @property
    def names(self):
        return sorted(self._procedures)

    def get(self, name: str) -> Procedure:
        procedure = self._procedures.get(name)
        if procedure is None:
            raise RpcError(f"No procedure named '{name}'", code="NOT_FOUND")
        return procedure

    def call(self, name: str, payload: Optional[Dict[str, Any]] = None, context: Optional[CallContext] = None):
        procedure = self.get(name)
        context = context or CallContext()
        if procedure.protected and not context.is_admin:
            raise RpcError("Authentication required", code="UNAUTHORIZED")
        return procedure.handler(payload or {}, context)


def build_app_router() -> Router:
    """Root router with every module's procedures merged in."""
    from ..modules.projects.procedures import project_router

    return Router().merge(project_router)
