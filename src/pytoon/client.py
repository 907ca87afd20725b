"""High-level client for the Toon API.

This module wires the authentication handler and the resource API together
so that every call is made with a valid token.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pytoon.api import ToonAPI
from pytoon.auth import AuthenticationHandler
from pytoon.const import DEFAULT_BASE_URL, DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT
from pytoon.models import Agreement
from pytoon.transport import AiohttpTransport


if TYPE_CHECKING:
    from datetime import datetime
    from types import TracebackType

    from aiohttp import ClientSession

    from pytoon.models import Credentials, FlowData, StatusSnapshot
    from pytoon.polling import PollingPolicy
    from pytoon.transport import HTTPTransport

_LOGGER = logging.getLogger(__name__)


def _agreement_id(agreement: Agreement | str) -> str:
    return agreement.agreement_id if isinstance(agreement, Agreement) else agreement


class ToonClient:
    """Client for a single Toon account.

    Example:
        ```python
        from pytoon import Credentials, ToonClient

        credentials = Credentials(
            username="myEnecoUsername",
            password="myEnecoPassword",
            tenant_id="eneco",
            consumer_key="ToonAPIConsumerKey",
            consumer_secret="ToonAPIConsumerSecret",
        )

        async with ToonClient(credentials) as client:
            for agreement in await client.get_agreements():
                status = await client.get_status(agreement)
                print(status.current_temperature)
        ```

    A single client is not meant to be shared between accounts. Concurrent
    calls on one client are safe with respect to the token: renewals are
    serialized by the authentication handler.

    Attributes:
        auth: Authentication handler owning the token.
        api: Low-level API for direct access to the resource endpoints.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: ClientSession | None = None,
        transport: HTTPTransport | None = None,
        polling: PollingPolicy | None = None,
        refresh_enabled: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        """Initialize the Toon client.

        Args:
            credentials: Account and consumer credentials.
            base_url: Base URL for the API. Defaults to Toon production API.
            session: Optional aiohttp ClientSession, used when no transport is given.
            transport: Optional custom HTTP transport. Takes precedence over session.
            polling: Optional polling policy for the status endpoint.
            refresh_enabled: Whether expired access tokens are renewed with the
                refresh token before falling back to a full login.
            timeout: Overall request timeout in seconds for the default transport.
            connect_timeout: Connection timeout in seconds for the default transport.
        """
        self._owned_transport: AiohttpTransport | None = None
        if transport is None:
            self._owned_transport = AiohttpTransport(
                session=session,
                timeout=timeout,
                connect_timeout=connect_timeout,
            )
            transport = self._owned_transport

        self.auth = AuthenticationHandler(
            credentials,
            transport,
            base_url=base_url,
            refresh_enabled=refresh_enabled,
        )
        self.api = ToonAPI(transport, base_url=base_url, polling=polling)

    async def __aenter__(self) -> ToonClient:
        """Enter the context manager, opening the default transport if needed."""
        if self._owned_transport is not None:
            await self._owned_transport.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the context manager, closing the default transport if this client created it."""
        if self._owned_transport is not None:
            await self._owned_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def get_agreements(self) -> list[Agreement]:
        """Get the agreements (displays) bound to the account.

        Raises:
            AuthenticationError: If a valid token cannot be obtained.
            FetchError: If the request fails.
        """
        token = await self.auth.ensure_valid()
        return await self.api.list_agreements(token)

    async def get_status(self, agreement: Agreement | str) -> StatusSnapshot:
        """Get the current status of a display.

        Args:
            agreement: Agreement or agreement identifier.

        Raises:
            AuthenticationError: If a valid token cannot be obtained.
            FetchError: If the request fails or the status never becomes ready.
        """
        agreement_id = _agreement_id(agreement)
        _LOGGER.debug("Fetching status for agreement %s", agreement_id)
        token = await self.auth.ensure_valid()
        return await self.api.get_status(token, agreement_id)

    async def get_gas_flow(
        self,
        agreement: Agreement | str,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
    ) -> FlowData:
        """Get gas consumption readings.

        Args:
            agreement: Agreement or agreement identifier.
            from_time: Optional start of the window.
            to_time: Optional end of the window.

        Raises:
            AuthenticationError: If a valid token cannot be obtained.
            FetchError: If the request fails.
        """
        token = await self.auth.ensure_valid()
        return await self.api.get_gas_flow(token, _agreement_id(agreement), from_time, to_time)

    async def get_electricity_flow(
        self,
        agreement: Agreement | str,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
    ) -> FlowData:
        """Get electricity consumption readings. See :meth:`get_gas_flow`."""
        token = await self.auth.ensure_valid()
        return await self.api.get_electricity_flow(token, _agreement_id(agreement), from_time, to_time)
