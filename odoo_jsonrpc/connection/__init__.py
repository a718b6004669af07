"""Odoo connection layer: envelopes, transport and the client."""

from odoo_jsonrpc.connection.client import (
    ConnectionConfig,
    OdooClient,
    build_url,
    connect,
    parse_url,
)
from odoo_jsonrpc.connection.envelope import (
    RequestIdCounter,
    RpcRequest,
    build_request,
    interpret_response,
)
from odoo_jsonrpc.connection.transport import HttpxTransport, Transport

__all__ = [
    "ConnectionConfig",
    "HttpxTransport",
    "OdooClient",
    "RequestIdCounter",
    "RpcRequest",
    "Transport",
    "build_request",
    "build_url",
    "connect",
    "interpret_response",
    "parse_url",
]
