"""
RPC error classifier.

Maps the Odoo exception class named in a JSON-RPC error's ``data.name`` to a
failure class. ``ODOO_EXCEPTION_MAP`` is the single extension point: supporting
a new Odoo exception means adding one entry here, call sites stay untouched.
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from odoo_jsonrpc.errors import AccessDeniedError, GenericRpcError, RpcError

logger = logging.getLogger(__name__)

# data.name → failure class
ODOO_EXCEPTION_MAP: dict[str, type[RpcError]] = {
    "odoo.exceptions.AccessError": AccessDeniedError,
}


def _error_data(error: dict[str, Any]) -> dict[str, Any]:
    data = error.get("data")
    return data if isinstance(data, dict) else {}


def classify_error(error: dict[str, Any]) -> RpcError:
    """Build the failure matching an RPC error object.

    The specific failure uses ``data.message`` as its message; the generic one
    falls back to the top-level ``message``. Both carry the full error object
    as payload.
    """
    data = _error_data(error)
    name = data.get("name")

    exc_class = ODOO_EXCEPTION_MAP.get(name) if name else None
    if exc_class is not None:
        message = data.get("message") or error.get("message") or name
        return exc_class(message, payload=error)

    if name:
        logger.debug("No specific mapping for Odoo exception %s", name)
    message = data.get("message") or error.get("message") or "Error from Odoo"
    return GenericRpcError(message, payload=error)


def raise_for_error(error: dict[str, Any]) -> NoReturn:
    """Raise the failure matching an RPC error object."""
    raise classify_error(error)
