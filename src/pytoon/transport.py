"""HTTP transport layer for the Toon API.

The authentication handler and the resource fetcher never talk to aiohttp
directly: they issue requests through an :class:`HTTPTransport`, which
returns the status code, headers and body of a single round trip. This keeps
the token and polling logic testable with a scripted transport.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout

from pytoon.const import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from pytoon.exceptions import ToonConnectionError, ToonTimeoutError


if TYPE_CHECKING:
    from types import TracebackType

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Outcome of a single HTTP round trip.

    Attributes:
        status: HTTP status code.
        headers: Response headers.
        body: Response body decoded as text.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def header(self, name: str) -> str | None:
        """Look up a header case-insensitively."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json.loads(self.body)


class HTTPTransport(Protocol):
    """Anything able to issue a request and return a :class:`TransportResponse`.

    Implementations raise :class:`ToonConnectionError` or
    :class:`ToonTimeoutError` when the round trip cannot be completed.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> TransportResponse:
        """Issue one HTTP request."""
        ...


class AiohttpTransport:
    """:class:`HTTPTransport` backed by an aiohttp ``ClientSession``.

    Example:
        ```python
        async with AiohttpTransport() as transport:
            response = await transport.request("GET", "https://api.toon.eu/toon/v3/agreements")
        ```

        Or with an injected session, which the transport will not close:

        ```python
        async with ClientSession() as session:
            transport = AiohttpTransport(session=session)
        ```
    """

    def __init__(
        self,
        *,
        session: ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            session: Optional aiohttp ClientSession. If not provided, one will be
                created when entering the context manager.
            timeout: Overall request timeout in seconds.
            connect_timeout: Connection establishment timeout in seconds.
        """
        self._session = session
        self._owns_session = session is None
        self._timeout = ClientTimeout(total=timeout, sock_connect=connect_timeout)

    @property
    def session(self) -> ClientSession | None:
        """The underlying aiohttp session, if any."""
        return self._session

    async def __aenter__(self) -> AiohttpTransport:
        """Enter the context manager, creating a session if none was injected."""
        if self._session is None:
            self._session = ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, closing the session if this transport created it."""
        await self.close()

    async def close(self) -> None:
        """Close the session if this transport owns it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _validate_session(self) -> ClientSession:
        if self._session is None:
            msg = "Session not initialized. Use 'async with' or provide a session."
            raise RuntimeError(msg)

        if self._session.closed:
            msg = "Session is closed. Cannot make requests."
            raise RuntimeError(msg)

        return self._session

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
        allow_redirects: bool = True,
    ) -> TransportResponse:
        """Issue one HTTP request.

        Args:
            method: HTTP method (GET, POST).
            url: Absolute URL.
            headers: Optional request headers.
            params: Optional query parameters.
            data: Optional form fields, sent url-encoded.
            allow_redirects: Whether to follow redirects.

        Returns:
            TransportResponse with status, headers and body text.

        Raises:
            RuntimeError: If session is not initialized or is closed.
            ToonTimeoutError: If the request times out.
            ToonConnectionError: If the connection fails.
        """
        session = self._validate_session()

        _LOGGER.debug("%s %s", method, url)

        try:
            async with session.request(
                method,
                url,
                headers=dict(headers) if headers else None,
                params=dict(params) if params else None,
                data=dict(data) if data is not None else None,
                allow_redirects=allow_redirects,
                timeout=self._timeout,
            ) as response:
                body = await response.text(errors="replace")
                return TransportResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=body,
                )

        except TimeoutError as exc:
            msg = f"Request to {url} timed out"
            raise ToonTimeoutError(msg) from exc

        except ClientError as exc:
            msg = f"Failed to connect to API: {exc}"
            raise ToonConnectionError(msg) from exc
