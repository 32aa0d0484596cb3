"""Authenticated HTTP client built on ``httpx.AsyncClient``.

Every authenticated verb runs the same gate before touching the network:
- no token stored: ``MissingTokenError``
- stored token no longer valid: the slot is cleared, ``InvalidTokenError``
- otherwise the key is sent as ``Authorization: Bearer <key>``

The ``*_no_auth`` verbs skip the gate entirely and are meant for endpoints that
hand out tokens (login and the like). Results are wrapped in ``Response``
whatever the status code; only transport failures raise.
"""

import asyncio
import logging
import threading
from collections.abc import Mapping, Sequence
from types import TracebackType
from typing import Any, Self, TypeAlias

import httpx

from .config import DEFAULT_HEADERS, RestConfig
from .errors import (
    ConfigTypeMismatchError,
    InvalidTokenError,
    MissingTokenError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportError,
)
from .response import Response
from .token import Token

logger = logging.getLogger("bearer_rest.client")

Payload: TypeAlias = Mapping[str, Any]
Headers: TypeAlias = Mapping[str, str]


def prepare_payload(payload: Payload | None) -> dict[str, str]:
    """Flatten a payload into query-string values.

    Strings pass through, booleans become ``"true"``/``"false"``, and every
    other value uses ``str()``. Request bodies are never flattened this way.

    Args:
        payload: Mapping of parameter names to arbitrary values.

    Returns:
        Mapping of parameter names to their string form.

    """
    result: dict[str, str] = {}
    for key, value in (payload or {}).items():
        if isinstance(value, str):
            result[key] = value
        elif isinstance(value, bool):
            result[key] = "true" if value else "false"
        else:
            result[key] = str(value)
    return result


async def _send_cancellable(
    http: httpx.AsyncClient,
    request: httpx.Request,
    cancel: asyncio.Event,
) -> httpx.Response:
    """Send ``request`` and abandon it as soon as ``cancel`` is set."""
    if cancel.is_set():
        msg = f"{request.method} {request.url} cancelled before it was sent."
        raise RequestCancelledError(msg)

    send_task = asyncio.ensure_future(http.send(request))
    cancel_task = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        cancel_task.cancel()
        if not send_task.done():
            send_task.cancel()

    if send_task.done() and not send_task.cancelled():
        return send_task.result()

    # Let the transport unwind the cancelled send before reporting.
    await asyncio.gather(send_task, return_exceptions=True)
    msg = f"{request.method} {request.url} cancelled by caller."
    raise RequestCancelledError(msg)


class RestClient:
    """HTTP client holding one bearer token slot and a configuration map.

    The token slot is guarded by a lock, so ``set_token`` and the request gate
    may be used from several threads or tasks. The configuration map is not
    synchronized; concurrent writers must coordinate themselves.
    """

    def __init__(
        self,
        config: RestConfig | Mapping[str, Any] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client and its HTTP transport.

        Args:
            config: Typed options, or a free-form mapping that becomes the
                client's configuration map. A mapping may carry an
                ``InsecureSkipVerify`` bool.
            transport: Optional transport handed to ``httpx.AsyncClient``.

        Raises:
            ConfigTypeMismatchError: If ``InsecureSkipVerify`` is not a bool.

        """
        if isinstance(config, RestConfig):
            self._settings = config
            self._config: dict[str, Any] = {}
        elif config is None:
            self._settings = RestConfig()
            self._config = {}
        else:
            self._settings = RestConfig.from_mapping(config)
            self._config = config if isinstance(config, dict) else dict(config)

        if self._settings.insecure_skip_verify:
            logger.warning("TLS certificate verification is disabled for this client.")

        self._http = httpx.AsyncClient(
            base_url=self._settings.base_url,
            headers=DEFAULT_HEADERS,
            timeout=httpx.Timeout(self._settings.timeout_seconds),
            verify=self._settings.verify_ssl,
            transport=transport,
        )
        self._token_lock = threading.Lock()
        self._token: Token | None = Token()

    async def __aenter__(self) -> Self:
        """Return the client for ``async with`` usage."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the transport when leaving an ``async with`` block."""
        await self.aclose()

    async def aclose(self) -> None:
        """Release pooled connections held by the transport."""
        await self._http.aclose()

    @property
    def settings(self) -> RestConfig:
        """The typed transport options in effect."""
        return self._settings

    @property
    def token(self) -> Token | None:
        """The token currently stored, without validating it."""
        with self._token_lock:
            return self._token

    def _get_token(self) -> Token:
        """Return the stored token if it may be used for a request.

        Raises:
            MissingTokenError: If no token is stored.
            InvalidTokenError: If the stored token is no longer valid; the slot
                is cleared so it cannot be reused.

        """
        with self._token_lock:
            if self._token is None:
                msg = "Missing authentication token."
                raise MissingTokenError(msg)
            if not self._token.is_valid():
                self._token = None
                logger.debug("Discarded invalid authentication token.")
                msg = "Invalid authentication token."
                raise InvalidTokenError(msg)
            return self._token

    def set_token(self, token: Token) -> None:
        """Store ``token`` for subsequent authenticated requests.

        Raises:
            InvalidTokenError: If ``token`` is not valid now. The stored token
                is left untouched.

        """
        if not token.is_valid():
            msg = "Token is invalid."
            raise InvalidTokenError(msg)
        with self._token_lock:
            self._token = token

    def set_config(self, key: str, value: Any) -> None:
        """Store a runtime configuration value."""
        self._config[key] = value

    def get_config(self, key: str) -> str:
        """Return the string stored under ``key``.

        Raises:
            KeyError: If nothing is stored under ``key``.
            ConfigTypeMismatchError: If the stored value is not a string.

        """
        value = self._config[key]
        if not isinstance(value, str):
            msg = f"Config value {key!r} is {type(value).__name__}, not str."
            raise ConfigTypeMismatchError(msg)
        return value

    def get_config_data(self) -> dict[str, Any]:
        """Return the configuration map itself; changes are visible to the client."""
        return self._config

    async def _request(
        self,
        method: str,
        link: str,
        *,
        authenticated: bool = True,
        body: Any = None,
        params: Payload | None = None,
        headers: Headers | None = None,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        # httpx.Headers replaces a caller Authorization entry whatever its casing.
        request_headers = httpx.Headers(headers or {})
        if authenticated:
            request_headers["Authorization"] = f"Bearer {self._get_token().get_key()}"

        extra: dict[str, Any] = {}
        if body is not None:
            extra["json"] = body
        if params is not None:
            extra["params"] = prepare_payload(params)
        if timeout is not None:
            extra["timeout"] = httpx.Timeout(timeout)
        request = self._http.build_request(method, link, headers=request_headers, **extra)

        # httpx limits each phase separately; the deadline bounds the whole call.
        deadline = timeout if timeout is not None else self._settings.timeout_seconds
        logger.debug("Sending %s %s", method, request.url)
        try:
            async with asyncio.timeout(deadline):
                if cancel is None:
                    resp = await self._http.send(request)
                else:
                    resp = await _send_cancellable(self._http, request, cancel)
        except TimeoutError as exc:
            msg = f"{method} {request.url} exceeded the {deadline:g}s deadline."
            raise RequestTimeoutError(msg) from exc
        except httpx.TimeoutException as exc:
            msg = f"{method} {request.url} timed out: {exc}"
            raise RequestTimeoutError(msg) from exc
        except httpx.TransportError as exc:
            msg = f"{method} {request.url} failed: {exc}"
            raise TransportError(msg) from exc

        return Response(code=resp.status_code, raw=resp.text)

    async def get(
        self,
        link: str,
        payload: Payload | None = None,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated GET with ``payload`` as query parameters."""
        return await self._request("GET", link, params=payload, cancel=cancel, timeout=timeout)

    async def get_with_headers(
        self,
        link: str,
        payload: Payload | None,
        headers: Headers,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated GET with extra headers."""
        return await self._request(
            "GET",
            link,
            params=payload,
            headers=headers,
            cancel=cancel,
            timeout=timeout,
        )

    async def get_with_headers_no_auth(
        self,
        link: str,
        payload: Payload | None,
        headers: Headers,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send a GET with extra headers and no bearer token."""
        return await self._request(
            "GET",
            link,
            authenticated=False,
            params=payload,
            headers=headers,
            cancel=cancel,
            timeout=timeout,
        )

    async def post(
        self,
        link: str,
        payload: Payload | None = None,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated POST with ``payload`` as the JSON body."""
        return await self._request("POST", link, body=payload, cancel=cancel, timeout=timeout)

    async def post_many(
        self,
        link: str,
        payloads: Sequence[Payload],
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated POST whose JSON body is the list of ``payloads``, in order."""
        return await self._request("POST", link, body=list(payloads), cancel=cancel, timeout=timeout)

    async def post_with_context(
        self,
        link: str,
        payload: Payload | None,
        cancel: asyncio.Event,
        *,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated POST that is abandoned once ``cancel`` is set.

        Raises:
            RequestCancelledError: If ``cancel`` fires before the response arrives.

        """
        return await self._request("POST", link, body=payload, cancel=cancel, timeout=timeout)

    async def post_with_headers(
        self,
        link: str,
        payload: Payload | None,
        headers: Headers,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated POST with extra headers.

        The bearer credential replaces any ``Authorization`` entry in ``headers``.
        """
        return await self._request(
            "POST",
            link,
            body=payload,
            headers=headers,
            cancel=cancel,
            timeout=timeout,
        )

    async def post_with_headers_no_auth(
        self,
        link: str,
        payload: Payload | None,
        headers: Headers,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send a POST with extra headers and no bearer token, e.g. to a login endpoint."""
        return await self._request(
            "POST",
            link,
            authenticated=False,
            body=payload,
            headers=headers,
            cancel=cancel,
            timeout=timeout,
        )

    async def delete(
        self,
        link: str,
        *,
        cancel: asyncio.Event | None = None,
        timeout: float | None = None,
    ) -> Response:
        """Send an authenticated DELETE without a body."""
        return await self._request("DELETE", link, cancel=cancel, timeout=timeout)


__all__ = ["RestClient", "prepare_payload"]
