"""Shared async HTTP client for the task store.

Holds one lazily created ``httpx.AsyncClient`` configured with the store's
base URL, the acting user's identity headers and a timeout.  Resource
clients (records, tasks, comments) borrow it; whoever builds the ``Client``
closes it, preferably with ``async with``.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from attrs import define, field

from ..session import UserSession
from .errors import NetworkFailure

logger = logging.getLogger(__name__)

_NETWORK_ERROR_MESSAGE = "Network error. Please try again."


@define
class Client:
    """A client bound to one store and one acting user.

    The following are accepted as keyword arguments and will be used to
    construct the httpx client:

        ``base_url``: The base URL for the store, all requests are made to a relative path to this URL

        ``session``: The acting user; its headers are attached to every request

        ``timeout``: The maximum amount of a time a request can take, in seconds

        ``httpx_args``: Additional arguments passed to ``httpx.AsyncClient`` (e.g. a ``transport``)

    A response body that is not JSON is treated as empty.
    """

    base_url: str = field(alias="base_url")
    session: UserSession = field(alias="session")
    timeout: float = field(default=10.0, kw_only=True, alias="timeout")
    _httpx_args: dict[str, Any] = field(factory=dict, kw_only=True, alias="httpx_args")
    _async_client: httpx.AsyncClient | None = field(default=None, init=False)

    def get_async_httpx_client(self) -> httpx.AsyncClient:
        """Get the underlying httpx.AsyncClient, constructing a new one if not previously set"""
        if self._async_client is None:
            self._async_client = httpx.AsyncClient(
                base_url=self.base_url.rstrip("/"),
                headers={"Content-Type": "application/json", **self.session.headers()},
                timeout=httpx.Timeout(self.timeout),
                **self._httpx_args,
            )
        return self._async_client

    async def aclose(self) -> None:
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None

    async def __aenter__(self) -> "Client":
        """Enter a context manager for underlying httpx.AsyncClient—see https://www.python-httpx.org/async/"""
        await self.get_async_httpx_client().__aenter__()
        return self

    async def __aexit__(self, *args: Any, **kwargs: Any) -> None:
        """Exit a context manager for underlying httpx.AsyncClient (see https://www.python-httpx.org/async/)"""
        await self.get_async_httpx_client().__aexit__(*args, **kwargs)
        self._async_client = None

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        json_body: dict[str, Any] | None = None,
    ) -> tuple[int, Any]:
        """Send a request and decode the JSON body.

        Args:
            method:    HTTP method.
            url:       Path relative to ``base_url``.
            json_body: Optional JSON request body.

        Returns:
            ``(status_code, body)``; ``body`` is ``{}`` for an empty or non-JSON response.

        Raises:
            NetworkFailure: On any transport-level error (connect, timeout, ...).
        """
        kwargs: dict[str, Any] = {"method": method, "url": url}
        if json_body is not None:
            kwargs["json"] = json_body

        try:
            response = await self.get_async_httpx_client().request(**kwargs)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method.upper(), url, exc)
            raise NetworkFailure(_NETWORK_ERROR_MESSAGE) from exc

        logger.debug("%s %s -> %d", method.upper(), url, response.status_code)

        if not response.content:
            return response.status_code, {}
        try:
            return response.status_code, response.json()
        except json.JSONDecodeError:
            logger.warning("%s %s returned a non-JSON body (%d)", method.upper(), url, response.status_code)
            return response.status_code, {}


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def error_message(body: Any, default: str) -> str:
    """Extract the store's ``message`` field, falling back to ``default``."""
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return default
