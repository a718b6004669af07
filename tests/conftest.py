"""Shared test fixtures for odoo-jsonrpc tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from odoo_jsonrpc.config import OdooClientSettings
from odoo_jsonrpc.connection.client import OdooClient
from odoo_jsonrpc.connection.transport import HttpxTransport


# ---------------------------------------------------------------------------
# Fake Odoo server
# ---------------------------------------------------------------------------

ADMIN_USER = {"uid": 1, "name": "Administrator", "username": "admin"}
NO_USER = {"uid": 0, "name": "", "username": ""}


class FakeOdoo:
    """Stand-in for an Odoo server behind ``httpx.MockTransport``.

    Login accepts admin/admin only. Other endpoints answer with whatever
    was registered through ``respond``: a result value, or a callable
    taking the decoded request and returning a full response body.
    """

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.paths: list[str] = []
        self._routes: dict[str, Any] = {}

    def respond(self, path: str, result: Any = None, *, body: Any = None) -> None:
        if body is not None:
            self._routes[path] = body
        else:
            self._routes[path] = lambda req: _envelope(req, result=result)

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        self.paths.append(request.url.path)

        route = self._routes.get(request.url.path)
        if route is None and request.url.path == "/web/session/authenticate":
            route = _authenticate
        if route is None:
            return httpx.Response(404, text="Not Found")

        body = route(payload) if callable(route) else route
        if isinstance(body, (str, bytes)):
            return httpx.Response(200, content=body)
        return httpx.Response(200, json=body)

    @property
    def last_params(self) -> Any:
        return self.requests[-1]["params"]


def _envelope(request: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request["id"], **kwargs}


def _authenticate(request: dict[str, Any]) -> dict[str, Any]:
    params = request["params"]
    if params.get("login") == "admin" and params.get("password") == "admin":
        return _envelope(request, result=dict(ADMIN_USER))
    return _envelope(request, result=dict(NO_USER))


def rpc_error(
    name: str | None = None,
    message: str = "Odoo Server Error",
    data_message: str = "Something went wrong",
    code: int = 200,
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Build a route answering with a JSON-RPC error object."""
    data: dict[str, Any] = {"message": data_message, "debug": "Traceback..."}
    if name is not None:
        data["name"] = name

    def route(request: dict[str, Any]) -> dict[str, Any]:
        return _envelope(
            request, error={"code": code, "message": message, "data": data}
        )

    return route


@pytest.fixture
def fake_odoo() -> FakeOdoo:
    return FakeOdoo()


@pytest.fixture
def client(fake_odoo: FakeOdoo) -> OdooClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_odoo.handler))
    return OdooClient(
        "odoo.test", 8069, transport=HttpxTransport(client=http_client)
    )


@pytest.fixture
def make_rpc_error() -> Callable[..., Callable[[dict[str, Any]], dict[str, Any]]]:
    return rpc_error


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def minimal_settings() -> OdooClientSettings:
    return OdooClientSettings(
        odoo_url="https://test.odoo.com",
        odoo_db="testdb",
        odoo_username="admin",
        odoo_password="admin",
    )

