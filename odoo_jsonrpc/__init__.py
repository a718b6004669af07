"""Odoo JSON-RPC client: login, call_kw and search over Odoo's web API."""

from importlib.metadata import version, PackageNotFoundError

from odoo_jsonrpc.connection import OdooClient, build_url, connect
from odoo_jsonrpc.errors import (
    AccessDeniedError,
    FailureKind,
    GenericRpcError,
    InvalidCredentialsError,
    InvalidResponseError,
    OdooJsonRpcError,
    RpcError,
    TransportError,
)

try:
    __version__ = version("odoo-jsonrpc")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "AccessDeniedError",
    "FailureKind",
    "GenericRpcError",
    "InvalidCredentialsError",
    "InvalidResponseError",
    "OdooClient",
    "OdooJsonRpcError",
    "RpcError",
    "TransportError",
    "build_url",
    "connect",
]
