"""Low-level API client for Toon resource endpoints.

This module performs authenticated reads against the agreements, status and
consumption flow endpoints. Every method takes the token explicitly; keeping
the token valid is the job of :class:`pytoon.auth.AuthenticationHandler`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

from pytoon.const import (
    AGREEMENTS_PATH,
    CHANNEL_ELECTRICITY,
    CHANNEL_GAS,
    DEFAULT_BASE_URL,
    FLOWS_PATH,
    STATUS_PATH,
)
from pytoon.exceptions import (
    FetchNetworkError,
    HttpStatusError,
    StatusNotReadyError,
    ToonDecodeError,
    ToonTransportError,
)
from pytoon.parsers import encode_epoch_millis
from pytoon.polling import PollingPolicy
from pytoon.serializers import deserialize_agreements, deserialize_flow, deserialize_status


if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from pytoon.models import Agreement, FlowData, StatusSnapshot, Token
    from pytoon.transport import HTTPTransport, TransportResponse

_LOGGER = logging.getLogger(__name__)


def create_headers(access_token: str) -> dict[str, str]:
    """Create HTTP headers for authenticated Toon API requests."""
    return {
        "authorization": f"Bearer {access_token}",
        "accept": "application/json",
        "content-type": "application/json",
        "cache-control": "no-cache",
    }


def build_flow_params(from_time: datetime | None, to_time: datetime | None) -> dict[str, str]:
    """Build the ``fromTime``/``toTime`` query parameters.

    A bound is omitted when it is None or the Unix epoch itself, letting the
    server pick its default window (typically the last hour). Present bounds
    are sent as milliseconds since the epoch.

    Example:
        >>> from datetime import UTC, datetime
        >>> build_flow_params(datetime(2024, 1, 1, tzinfo=UTC), None)
        {'fromTime': '1704067200000'}
    """
    params: dict[str, str] = {}
    for key, value in (("fromTime", from_time), ("toTime", to_time)):
        millis = encode_epoch_millis(value)
        if millis:
            params[key] = str(millis)
    return params


class ToonAPI:
    """Low-level API client for the Toon v3 resource endpoints.

    Example:
        ```python
        async with AiohttpTransport() as transport:
            auth = AuthenticationHandler(credentials, transport)
            api = ToonAPI(transport)

            token = await auth.ensure_valid()
            agreements = await api.list_agreements(token)
            status = await api.get_status(token, agreements[0].agreement_id)
        ```

    Attributes:
        base_url: Base URL for the API (default: https://api.toon.eu).
        polling: Bounds for the status endpoint's 202 loop.
    """

    def __init__(
        self,
        transport: HTTPTransport,
        *,
        base_url: str = DEFAULT_BASE_URL,
        polling: PollingPolicy | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            transport: HTTP transport used for all requests.
            base_url: Base URL for the API. Defaults to Toon production API.
            polling: Optional polling policy for the status endpoint.
        """
        self._transport = transport
        self.base_url = base_url.rstrip("/")
        self.polling = polling or PollingPolicy()

    async def _get(
        self,
        token: Token,
        path: str,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        url = f"{self.base_url}{path}"
        try:
            return await self._transport.request(
                "GET",
                url,
                headers=create_headers(token.access_token),
                params=params,
            )
        except ToonTransportError as exc:
            msg = f"Request to {path} failed: {exc}"
            raise FetchNetworkError(msg) from exc

    @staticmethod
    def _decode_json(response: TransportResponse, path: str) -> Any:
        try:
            return response.json()
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON response from {path}: {exc}"
            raise ToonDecodeError(msg, value=response.body) from exc

    @staticmethod
    def _raise_for_status(response: TransportResponse, path: str) -> None:
        if response.status != HTTPStatus.OK:
            _LOGGER.debug("GET %s returned HTTP %d", path, response.status)
            raise HttpStatusError(response.status, response.body)

    # -------------------------------------------------------------------------
    # Agreements
    # -------------------------------------------------------------------------

    async def list_agreements(self, token: Token) -> list[Agreement]:
        """Get the agreements (displays) bound to the account.

        Args:
            token: Valid access token.

        Returns:
            List of Agreement instances.

        Raises:
            HttpStatusError: If the endpoint does not answer 200.
            ToonDecodeError: If the response is not an array of agreements.
            FetchNetworkError: If the request cannot be completed.
        """
        response = await self._get(token, AGREEMENTS_PATH)
        self._raise_for_status(response, AGREEMENTS_PATH)
        agreements = deserialize_agreements(self._decode_json(response, AGREEMENTS_PATH))
        _LOGGER.debug("Found %d agreement(s)", len(agreements))
        return agreements

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    async def get_status(self, token: Token, agreement_id: str) -> StatusSnapshot:
        """Get the current status of a display.

        The server computes the snapshot on demand and answers 202 Accepted
        until it is ready; the identical request is then re-issued, bounded
        by the polling policy.

        Args:
            token: Valid access token.
            agreement_id: Agreement identifier.

        Returns:
            StatusSnapshot instance.

        Raises:
            HttpStatusError: If the endpoint answers anything but 200 or 202.
            StatusNotReadyError: If the polling policy is exhausted.
            ToonDecodeError: If the response cannot be decoded.
            FetchNetworkError: If a request cannot be completed.
        """
        path = STATUS_PATH.format(agreement_id=agreement_id)
        policy = self.polling

        for attempt in range(policy.max_attempts):
            response = await self._get(token, path)

            if response.status == HTTPStatus.OK:
                return deserialize_status(self._decode_json(response, path))

            if response.status != HTTPStatus.ACCEPTED:
                self._raise_for_status(response, path)

            if attempt < policy.max_attempts - 1:
                delay = policy.delay_for(attempt)
                _LOGGER.debug(
                    "Status for %s not ready (attempt %d/%d), retrying in %.2fs",
                    agreement_id,
                    attempt + 1,
                    policy.max_attempts,
                    delay,
                )
                await asyncio.sleep(delay)

        _LOGGER.warning("Status for %s not ready after %d attempts", agreement_id, policy.max_attempts)
        msg = f"Status for {agreement_id} not ready after {policy.max_attempts} attempts"
        raise StatusNotReadyError(msg, attempts=policy.max_attempts)

    # -------------------------------------------------------------------------
    # Consumption flows
    # -------------------------------------------------------------------------

    async def get_flow(
        self,
        token: Token,
        agreement_id: str,
        channel: str,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
    ) -> FlowData:
        """Get time-bucketed consumption readings for a channel.

        Args:
            token: Valid access token.
            agreement_id: Agreement identifier.
            channel: Consumption channel ("gas" or "electricity").
            from_time: Optional start of the window; None lets the server decide.
            to_time: Optional end of the window; None lets the server decide.

        Returns:
            FlowData instance.

        Raises:
            HttpStatusError: If the endpoint does not answer 200.
            ToonDecodeError: If the response cannot be decoded.
            FetchNetworkError: If the request cannot be completed.
        """
        path = FLOWS_PATH.format(agreement_id=agreement_id, channel=channel)
        response = await self._get(token, path, build_flow_params(from_time, to_time))
        self._raise_for_status(response, path)
        return deserialize_flow(self._decode_json(response, path))

    async def get_gas_flow(
        self,
        token: Token,
        agreement_id: str,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
    ) -> FlowData:
        """Get gas consumption readings. See :meth:`get_flow`."""
        return await self.get_flow(token, agreement_id, CHANNEL_GAS, from_time, to_time)

    async def get_electricity_flow(
        self,
        token: Token,
        agreement_id: str,
        from_time: datetime | None = None,
        to_time: datetime | None = None,
    ) -> FlowData:
        """Get electricity consumption readings. See :meth:`get_flow`."""
        return await self.get_flow(token, agreement_id, CHANNEL_ELECTRICITY, from_time, to_time)
