"""JSON-RPC 2.0 envelopes: request building and response interpretation."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from odoo_jsonrpc.errors import InvalidResponseError
from odoo_jsonrpc.errors.classifier import raise_for_error

JSONRPC_VERSION = "2.0"
DEFAULT_METHOD = "call"

_MISSING = object()


class RequestIdCounter:
    """Allocates strictly increasing request ids.

    One counter may be shared by several clients; allocation is locked so
    ids never repeat.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            request_id = self._next
            self._next += 1
            return request_id


@dataclass(frozen=True)
class RpcRequest:
    """A single JSON-RPC request. ``params`` is a list or a mapping."""

    id: int
    method: str
    params: list[Any] | dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": JSONRPC_VERSION,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict()).encode("utf-8")


def build_request(
    counter: RequestIdCounter,
    method: str = DEFAULT_METHOD,
    args: Sequence[Any] | None = None,
    kwargs: Mapping[str, Any] | None = None,
) -> RpcRequest:
    """Build a request with either positional ``args`` or named ``kwargs``."""
    if args is None and kwargs is None:
        raise TypeError("build_request() needs either args or kwargs")
    if args is not None and kwargs is not None:
        raise TypeError("build_request() takes args or kwargs, not both")
    if isinstance(args, (str, bytes)):
        raise TypeError("args must be a sequence of arguments, not a string")

    params: list[Any] | dict[str, Any]
    params = list(args) if args is not None else dict(kwargs)  # type: ignore[arg-type]
    return RpcRequest(id=counter.next_id(), method=method, params=params)


def _invalid(reason: str, body: Any, context: str | None) -> InvalidResponseError:
    message = f"RPC call returned invalid response: {reason}"
    if context:
        message += f" (context: {context})"
    return InvalidResponseError(
        message,
        payload={"error": reason, "response": body, "context": context},
    )


def interpret_response(
    body: Any,
    request: RpcRequest | None = None,
    context: str | None = None,
) -> Any:
    """Return the ``result`` of a JSON-RPC response or raise its failure.

    ``body`` may be raw bytes/str or an already decoded value. The shape of
    ``result`` is never inspected.
    """
    if isinstance(body, (bytes, bytearray, str)):
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise _invalid(f"body is not JSON ({exc})", body, context) from exc
    else:
        data = body

    if not isinstance(data, dict):
        raise _invalid("body is not a JSON object", body, context)

    has_result = "result" in data
    has_error = "error" in data
    if has_result and has_error:
        raise _invalid("both 'result' and 'error' present", data, context)
    if not has_result and not has_error:
        raise _invalid("neither 'result' nor 'error' present", data, context)

    response_id = data.get("id", _MISSING)
    if (
        request is not None
        and response_id is not _MISSING
        and response_id is not None
        and response_id != request.id
    ):
        raise _invalid(
            f"response id {response_id!r} does not match request id {request.id}",
            data,
            context,
        )

    if has_error:
        error = data["error"]
        if not isinstance(error, dict):
            raise _invalid("'error' is not an object", data, context)
        raise_for_error(error)

    return data["result"]
