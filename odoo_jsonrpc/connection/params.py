"""Typed parameter structs for each client operation.

Each struct validates itself on construction and renders the named
parameters sent in the JSON-RPC envelope. Invalid input is a programmer
error and raises ``ValueError``/``TypeError``, never a client failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_SEARCH_LIMIT = 80


def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
    if not value:
        raise ValueError(f"{name} must not be empty")


def _require_list(name: str, value: Any) -> None:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"{name} must be a list, got {type(value).__name__}")


def _require_dict(name: str, value: Any) -> None:
    if not isinstance(value, dict):
        raise TypeError(f"{name} must be a dict, got {type(value).__name__}")


@dataclass(frozen=True)
class LoginParams:
    db: str
    login: str
    password: str

    def __post_init__(self) -> None:
        _require_str("db", self.db)
        _require_str("login", self.login)
        _require_str("password", self.password)

    def to_params(self) -> dict[str, Any]:
        return {"db": self.db, "login": self.login, "password": self.password}


@dataclass(frozen=True)
class CallKwParams:
    """Parameters of ``/web/dataset/call_kw``. ``context`` is sent only when set."""

    model: str
    method: str
    args: list[Any]
    kwargs: dict[str, Any] = field(default_factory=dict)
    context: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        _require_str("model", self.model)
        _require_str("method", self.method)
        _require_list("args", self.args)
        _require_dict("kwargs", self.kwargs)
        if self.context is not None:
            _require_dict("context", self.context)

    @property
    def description(self) -> str:
        return f"{self.model} - {self.method}"

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": self.model,
            "method": self.method,
            "args": list(self.args),
            "kwargs": dict(self.kwargs),
        }
        if self.context is not None:
            params["context"] = dict(self.context)
        return params


@dataclass(frozen=True)
class SearchReadParams:
    """Parameters of ``/web/dataset/search_read``.

    An empty ``sort`` leaves ordering to the server; an empty ``fields``
    list returns every field.
    """

    model: str
    domain: list[Any]
    limit: int = DEFAULT_SEARCH_LIMIT
    sort: str = ""
    context: dict[str, Any] = field(default_factory=dict)
    fields: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _require_str("model", self.model)
        _require_list("domain", self.domain)
        if isinstance(self.limit, bool) or not isinstance(self.limit, int):
            raise TypeError("limit must be an integer")
        if self.limit < 0:
            raise ValueError("limit must not be negative")
        if not isinstance(self.sort, str):
            raise TypeError("sort must be a string")
        _require_dict("context", self.context)
        _require_list("fields", self.fields)

    @property
    def description(self) -> str:
        return f"search on {self.model}"

    def to_params(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "domain": list(self.domain),
            "limit": self.limit,
            "sort": self.sort,
            "context": dict(self.context),
            "fields": list(self.fields),
        }


@dataclass(frozen=True)
class ReadParams:
    model: str
    ids: list[int]
    fields: list[str] = field(default_factory=list)
    context: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        _require_str("model", self.model)
        _require_list("ids", self.ids)
        _require_list("fields", self.fields)

    def to_call(self) -> CallKwParams:
        return CallKwParams(
            model=self.model,
            method="read",
            args=[list(self.ids), list(self.fields)],
            context=self.context,
        )
