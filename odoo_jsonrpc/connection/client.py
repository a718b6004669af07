"""Odoo JSON-RPC client: connection state, URL construction and the call API."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from odoo_jsonrpc.connection.envelope import (
    RequestIdCounter,
    RpcRequest,
    build_request,
    interpret_response,
)
from odoo_jsonrpc.connection.params import (
    DEFAULT_SEARCH_LIMIT,
    CallKwParams,
    LoginParams,
    ReadParams,
    SearchReadParams,
)
from odoo_jsonrpc.connection.transport import (
    DEFAULT_TIMEOUT,
    HttpxTransport,
    Transport,
)
from odoo_jsonrpc.errors import InvalidCredentialsError, InvalidResponseError

if TYPE_CHECKING:
    from odoo_jsonrpc.config import OdooClientSettings

logger = logging.getLogger("odoo_jsonrpc.connection.client")

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8069

AUTHENTICATE_PATH = "/web/session/authenticate"
CALL_KW_PATH = "/web/dataset/call_kw"
SEARCH_READ_PATH = "/web/dataset/search_read"

_URL_RE = re.compile(
    r"^(?:(?P<scheme>[A-Za-z][A-Za-z0-9+.-]*)://)?"
    r"(?P<host>[^:/\s]+)"
    r"(?::(?P<port>\d*))?"
    r"/?$"
)


def build_url(https: bool, host: str, port: int, path: str) -> str:
    """Return ``scheme://host:port/path`` with exactly one leading ``/`` on path."""
    scheme = "https" if https else "http"
    return f"{scheme}://{host}:{port}/{path.lstrip('/')}"


@dataclass(frozen=True)
class ConnectionConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    https: bool = False

    @property
    def base_url(self) -> str:
        scheme = "https" if self.https else "http"
        return f"{scheme}://{self.host}:{self.port}"

    def url(self, path: str) -> str:
        return build_url(self.https, self.host, self.port, path)


def parse_url(url: str | None) -> ConnectionConfig:
    """Parse ``[scheme://]host[:port]`` into a ``ConnectionConfig``.

    Scheme defaults to ``http`` and port to 8069, also when the URL ends in a
    bare ``:``. An empty URL gives the default configuration.
    """
    if not url:
        return ConnectionConfig()

    match = _URL_RE.match(url.strip())
    if not match:
        raise ValueError(f"Cannot parse Odoo URL: {url!r}")

    scheme = (match.group("scheme") or "http").lower()
    if scheme not in ("http", "https"):
        raise ValueError(f"Unsupported URL scheme {scheme!r} in {url!r}")

    port = match.group("port")
    return ConnectionConfig(
        host=match.group("host"),
        port=int(port) if port else DEFAULT_PORT,
        https=scheme == "https",
    )


_SENSITIVE_KEYS = ("password", "secret", "key")


def _sanitize_params(params: Any) -> Any:
    """Mask credential-looking values at any depth for debug logging."""
    if isinstance(params, dict):
        return {
            k: "***"
            if isinstance(k, str) and any(s in k.lower() for s in _SENSITIVE_KEYS)
            else _sanitize_params(v)
            for k, v in params.items()
        }
    if isinstance(params, (list, tuple)):
        return [_sanitize_params(v) for v in params]
    return params


class OdooClient:
    """Client for Odoo's JSON-RPC web API.

    Construct with host/port/https (or via ``connect``), then ``login``.
    Every call is one awaited request/response round trip; failures are
    raised as ``OdooJsonRpcError`` subclasses and never retried.

    The transport and the request id counter are created here unless
    passed in. Passing them in lets several clients share them, but each
    client keeps its own session user, so use one client per login.

    ``timeout`` and ``verify_ssl`` configure the default ``HttpxTransport``
    only; combining either with an explicit ``transport`` is a ``TypeError``.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        https: bool = False,
        *,
        transport: Transport | None = None,
        id_counter: RequestIdCounter | None = None,
        timeout: float | None = None,
        verify_ssl: bool | None = None,
    ) -> None:
        if transport is not None and (timeout is not None or verify_ssl is not None):
            raise TypeError(
                "timeout and verify_ssl cannot be combined with transport; "
                "configure the transport instead"
            )
        self._config = ConnectionConfig(host=host, port=port, https=https)
        self._transport = transport or HttpxTransport(
            timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
            verify_ssl=True if verify_ssl is None else verify_ssl,
        )
        self._ids = id_counter or RequestIdCounter()
        self._user: dict[str, Any] | None = None

    @classmethod
    def from_connection_config(
        cls, config: ConnectionConfig, **kwargs: Any
    ) -> OdooClient:
        return cls(config.host, config.port, config.https, **kwargs)

    @classmethod
    def connect(cls, url: str | None = None, **kwargs: Any) -> OdooClient:
        return cls.from_connection_config(parse_url(url), **kwargs)

    @classmethod
    def from_settings(cls, settings: OdooClientSettings, **kwargs: Any) -> OdooClient:
        if kwargs.get("transport") is None:
            kwargs.setdefault("timeout", settings.odoo_timeout)
            kwargs.setdefault("verify_ssl", settings.odoo_verify_ssl)
        return cls.from_connection_config(settings.connection_config(), **kwargs)

    # --- Connection state ---

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def https(self) -> bool:
        return self._config.https

    @property
    def user(self) -> dict[str, Any] | None:
        return dict(self._user) if self._user is not None else None

    @property
    def uid(self) -> int | None:
        return self._user["uid"] if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def url(self, path: str) -> str:
        return self._config.url(path)

    # --- Wire ---

    async def _post(self, path: str, request: RpcRequest, context: str) -> Any:
        url = self.url(path)
        logger.debug(
            "POST %s id=%d params=%s",
            url,
            request.id,
            _sanitize_params(request.params),
        )
        body = await self._transport.post(url, request.to_json())
        return interpret_response(body, request=request, context=context)

    # --- Session ---

    async def login(self, db: str, login: str, password: str) -> OdooClient:
        """Authenticate and store the returned user. Returns the client.

        Odoo answers bad credentials with a successful envelope whose ``uid``
        is false or zero; that raises ``InvalidCredentialsError`` and leaves
        the current session untouched.
        """
        params = LoginParams(db=db, login=login, password=password)
        request = build_request(self._ids, kwargs=params.to_params())
        result = await self._post(AUTHENTICATE_PATH, request, context="login")

        if isinstance(result, dict) and result.get("uid"):
            self._user = dict(result)
            logger.info(
                "Logged in to %s (db=%s, uid=%s)",
                self._config.base_url,
                db,
                result["uid"],
            )
            return self

        logger.warning("Login rejected for %r on database %r", login, db)
        raise InvalidCredentialsError("Bad credentials", payload=result)

    async def fetch_user_fields(self, fields: list[str]) -> dict[str, Any]:
        """Read extra ``res.users`` fields for the session user and merge them in.

        The login response only holds a handful of user fields.
        """
        if self._user is None:
            raise RuntimeError("fetch_user_fields() requires a logged-in session")
        if not fields:
            raise ValueError("fields must not be empty")

        records = await self.read("res.users", [self._user["uid"]], fields=fields)
        if records:
            record = records[0]
            self._user.update({name: record.get(name) for name in fields})
        return dict(self._user)

    # --- Calls ---

    async def call_kw(
        self,
        model: str,
        method: str,
        args: list[Any],
        kwargs: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
    ) -> Any:
        """Call ``method`` on ``model`` through ``/web/dataset/call_kw``.

        Returns the RPC result as-is.
        """
        params = CallKwParams(
            model=model,
            method=method,
            args=args,
            kwargs=kwargs if kwargs is not None else {},
            context=context,
        )
        return await self._call(params)

    call = call_kw

    async def _call(self, params: CallKwParams) -> Any:
        request = build_request(self._ids, kwargs=params.to_params())
        return await self._post(CALL_KW_PATH, request, context=params.description)

    async def search_read(
        self,
        model: str,
        domain: list[Any],
        limit: int = DEFAULT_SEARCH_LIMIT,
        sort: str = "",
        context: dict[str, Any] | None = None,
        fields: list[str] | None = None,
    ) -> Any:
        """Search ``model`` through ``/web/dataset/search_read``.

        ``domain`` is a list of Odoo search triplets. Returns the raw result,
        a mapping holding ``records`` (and usually ``length``).
        """
        params = SearchReadParams(
            model=model,
            domain=domain,
            limit=limit,
            sort=sort,
            context=context if context is not None else {},
            fields=fields if fields is not None else [],
        )
        request = build_request(self._ids, kwargs=params.to_params())
        return await self._post(
            SEARCH_READ_PATH, request, context=params.description
        )

    async def search(
        self,
        model: str,
        domain: list[Any],
        limit: int = DEFAULT_SEARCH_LIMIT,
        sort: str = "",
        context: dict[str, Any] | None = None,
        fields: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        result = await self.search_read(
            model, domain, limit=limit, sort=sort, context=context, fields=fields
        )
        if not isinstance(result, dict):
            raise InvalidResponseError(
                f"search on {model} did not return a mapping",
                payload={"response": result, "context": f"search on {model}"},
            )
        records = result.get("records")
        if not isinstance(records, list):
            raise InvalidResponseError(
                f"search on {model} returned no record list",
                payload={"response": result, "context": f"search on {model}"},
            )
        return list(records)

    async def find(
        self,
        model: str,
        domain: list[Any],
        context: dict[str, Any] | None = None,
        fields: list[str] | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> dict[str, Any] | None:
        """Return the first record matching ``domain``, or None.

        Logs a warning when more than one record matched; pass ``limit=1``
        to silence it, though a tighter domain is usually the better fix.
        """
        records = await self.search(
            model, domain, limit=limit, context=context, fields=fields
        )
        if len(records) > 1:
            logger.warning(
                "Find on %s returned more than one result (%d)",
                model,
                len(records),
            )
        return records[0] if records else None

    async def read(
        self,
        model: str,
        ids: list[int],
        fields: list[str] | None = None,
        context: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        params = ReadParams(
            model=model,
            ids=ids,
            fields=fields if fields is not None else [],
            context=context,
        )
        return await self._call(params.to_call())

    async def get_accessible_fields(self, model: str) -> list[str]:
        """Names of the fields of ``model`` the session user may read.

        Odoo raises an access error on ``read`` if any requested field is
        restricted; passing this list as ``fields`` avoids that.
        """
        result = await self.call_kw(
            model, "check_field_access_rights", ["read", None]
        )
        if not isinstance(result, list):
            context = f"{model} - check_field_access_rights"
            raise InvalidResponseError(
                f"{context} did not return a list of field names",
                payload={"response": result, "context": context},
            )
        return list(result)

    # --- Lifecycle ---

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> OdooClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


def connect(url: str | None = None, **kwargs: Any) -> OdooClient:
    """Build an unauthenticated client from ``[scheme://]host[:port]``.

    No network traffic happens here; ``kwargs`` go to ``OdooClient``.
    """
    return OdooClient.connect(url, **kwargs)
