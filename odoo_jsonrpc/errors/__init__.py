"""
Failure taxonomy for the Odoo JSON-RPC client.

Every failure raised by the client is an ``OdooJsonRpcError`` tagged with a
``FailureKind``. Errors that come back through the JSON-RPC layer itself share
the ``RpcError`` supertype so callers can catch them together::

    OdooJsonRpcError
    ├── TransportError              transport_error
    ├── RpcError
    │   ├── InvalidResponseError    invalid_rpc_response
    │   ├── GenericRpcError         rpc_generic_error
    │   └── AccessDeniedError       access_denied
    └── InvalidCredentialsError     invalid_credentials
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class FailureKind(str, Enum):
    """Flat tag carried by every failure."""

    TRANSPORT_ERROR = "transport_error"
    INVALID_RPC_RESPONSE = "invalid_rpc_response"
    RPC_GENERIC_ERROR = "rpc_generic_error"
    ACCESS_DENIED = "access_denied"
    INVALID_CREDENTIALS = "invalid_credentials"


class OdooJsonRpcError(Exception):
    """Base exception for all client failures.

    ``payload`` is opaque diagnostic data: the RPC error object, the raw
    response, or the call context. It never holds partial results.
    """

    kind: FailureKind

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class TransportError(OdooJsonRpcError):
    """The HTTP exchange itself failed (connection, timeout, HTTP status)."""

    kind = FailureKind.TRANSPORT_ERROR


class RpcError(OdooJsonRpcError):
    """Any failure reported through, or caused by, the JSON-RPC envelope."""


class InvalidResponseError(RpcError):
    """The body is not a well-formed JSON-RPC response."""

    kind = FailureKind.INVALID_RPC_RESPONSE


class GenericRpcError(RpcError):
    """Well-formed RPC error with no more specific mapping."""

    kind = FailureKind.RPC_GENERIC_ERROR


class AccessDeniedError(RpcError):
    """Odoo refused access to a model, record or field."""

    kind = FailureKind.ACCESS_DENIED


class InvalidCredentialsError(OdooJsonRpcError):
    """Login returned a successful envelope without an authenticated user."""

    kind = FailureKind.INVALID_CREDENTIALS


__all__ = [
    "AccessDeniedError",
    "FailureKind",
    "GenericRpcError",
    "InvalidCredentialsError",
    "InvalidResponseError",
    "OdooJsonRpcError",
    "RpcError",
    "TransportError",
]
