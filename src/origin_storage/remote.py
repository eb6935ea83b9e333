"""RemoteRequestor — fire-and-forget HTTP calls for server-backed storage."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

import httpx

logger = logging.getLogger(__name__)

Credentials = Literal["omit", "same-origin", "include"]
CacheMode = Literal["default", "no-store", "reload", "no-cache", "force-cache", "only-if-cached"]

_CREDENTIAL_HEADERS = frozenset({"cookie", "authorization"})


def _deliver(callback: Callable[[Any], object] | None, arg: Any) -> None:
    if callback is None:
        return
    try:
        callback(arg)
    except Exception:
        logger.exception("Remote request callback %r raised", callback)


@dataclass
class RequestOptions:
    """Everything needed to issue one remote call.

    Attributes:
        url:         Absolute URL, or a path relative to the requestor's base URL.
        method:      HTTP method.
        headers:     Extra request headers.
        body:        Raw request body.
        credentials: ``"omit"`` strips ``Cookie`` and ``Authorization``
                     headers before sending.
        cache_mode:  Anything other than ``"default"`` is sent as
                     ``Cache-Control``.
        on_success:  Called with the parsed JSON body of a 2xx response.
        on_error:    Called with the non-2xx :class:`httpx.Response` or with
                     the exception raised by the transport.
    """

    url: str
    method: str = "GET"
    headers: dict[str, str] | None = None
    body: str | bytes | None = None
    credentials: Credentials = "omit"
    cache_mode: CacheMode = "default"
    on_success: Callable[[Any], object] | None = None
    on_error: Callable[[Any], object] | None = None

    def build_headers(self) -> dict[str, str]:
        headers = dict(self.headers or {})
        if self.credentials == "omit":
            headers = {k: v for k, v in headers.items() if k.lower() not in _CREDENTIAL_HEADERS}
        if self.cache_mode != "default":
            headers.setdefault("Cache-Control", self.cache_mode)
        return headers


class RemoteRequestor:
    """Issues one HTTP request per call and reports the outcome via callbacks.

    :meth:`request` schedules the call on the running event loop and returns
    immediately.  There is no retry and no cancellation, and responses of
    overlapping requests may arrive in any order.

    Parameters:
        base_url: Prefix for relative request URLs.
        timeout:  Client timeout in seconds.  ``None`` waits indefinitely.
    """

    def __init__(self, *, base_url: str = "", timeout: float | None = None) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._pending: set[asyncio.Task[None]] = set()

    def request(self, options: RequestOptions | None) -> asyncio.Task[None] | None:
        """Schedule *options* for sending.  Returns ``None`` when there is no URL."""
        if options is None or not options.url:
            return None
        task = asyncio.get_running_loop().create_task(self.send(options))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def send(self, options: RequestOptions) -> None:
        """Perform the request described by *options* and fire its callbacks."""
        try:
            async with httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout) as client:
                response = await client.request(
                    options.method.upper(),
                    options.url,
                    headers=options.build_headers(),
                    content=options.body,
                )
        except httpx.HTTPError as exc:
            logger.debug("Request to %s failed: %s", options.url, exc)
            _deliver(options.on_error, exc)
            return

        if not response.is_success:
            logger.debug("Request to %s returned HTTP %s", options.url, response.status_code)
            _deliver(options.on_error, response)
            return

        try:
            data = response.json()
        except ValueError as exc:
            _deliver(options.on_error, exc)
            return
        _deliver(options.on_success, data)


class RemoteStorage:
    """Storage variant whose state lives entirely on a server."""

    def __init__(self, requestor: RemoteRequestor | None = None) -> None:
        self._requestor = requestor or RemoteRequestor()

    @property
    def requestor(self) -> RemoteRequestor:
        return self._requestor

    def request(self, options: RequestOptions | None) -> asyncio.Task[None] | None:
        return self._requestor.request(options)
