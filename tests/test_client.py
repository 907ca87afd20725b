"""Tests for the high-level Toon client."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from pytoon.client import ToonClient
from pytoon.exceptions import HttpStatusError, InvalidCredentialsError
from pytoon.models import Agreement
from pytoon.polling import PollingPolicy
from pytoon.transport import AiohttpTransport, TransportResponse
from tests.helpers import (
    AGREEMENTS_PAYLOAD,
    FLOW_PAYLOAD,
    STATUS_PAYLOAD,
    ScriptedTransport,
    json_response,
    login_responses,
)


if TYPE_CHECKING:
    from aiohttp import ClientSession

    from pytoon.models import Credentials


class TestToonClientInit:
    """Test ToonClient construction."""

    def test_default_transport(self, credentials: Credentials) -> None:
        """Test that an aiohttp transport is created when none is given."""
        client = ToonClient(credentials)

        assert isinstance(client._owned_transport, AiohttpTransport)
        assert client.auth.credentials is credentials
        assert client.api.base_url == "https://api.toon.eu"

    def test_custom_transport(self, credentials: Credentials, transport: ScriptedTransport) -> None:
        """Test that an injected transport is used as-is."""
        client = ToonClient(credentials, transport=transport, base_url="https://example.test/")

        assert client._owned_transport is None
        assert client.auth.base_url == "https://example.test"
        assert client.api.base_url == "https://example.test"

    def test_polling_policy_passed_to_api(self, credentials: Credentials, transport: ScriptedTransport) -> None:
        """Test that the polling policy reaches the API."""
        policy = PollingPolicy(max_attempts=2)
        client = ToonClient(credentials, transport=transport, polling=policy)

        assert client.api.polling is policy

    async def test_context_manager_with_injected_session(
        self, credentials: Credentials, mock_session: ClientSession
    ) -> None:
        """Test that an injected session is not closed by the client."""
        async with ToonClient(credentials, session=mock_session) as client:
            assert client._owned_transport is not None
            assert client._owned_transport.session is mock_session

        assert mock_session.closed is False

    async def test_context_manager_closes_own_session(self, credentials: Credentials) -> None:
        """Test that a session created by the client is closed on exit."""
        with patch("pytoon.transport.ClientSession") as session_cls:
            session = MagicMock()
            session.closed = False

            async def close() -> None:
                session.closed = True

            session.close = close
            session_cls.return_value = session

            async with ToonClient(credentials):
                pass

            assert session.closed is True


class TestToonClientCalls:
    """Test token-aware resource calls."""

    async def test_get_agreements_logs_in_first(self, credentials: Credentials) -> None:
        """Test that the first call performs the login flow."""
        transport = ScriptedTransport(*login_responses(), json_response(200, AGREEMENTS_PAYLOAD))

        async with ToonClient(credentials, transport=transport) as client:
            agreements = await client.get_agreements()

        assert [a.agreement_id for a in agreements] == ["1234567"]
        assert [r.method for r in transport.requests] == ["POST", "POST", "GET"]
        assert transport.requests[2].headers["authorization"] == "Bearer access-123"

    async def test_token_reused_across_calls(self, credentials: Credentials) -> None:
        """Test that a valid token is reused."""
        transport = ScriptedTransport(
            *login_responses(),
            json_response(200, AGREEMENTS_PAYLOAD),
            json_response(200, STATUS_PAYLOAD),
            json_response(200, FLOW_PAYLOAD),
            json_response(200, FLOW_PAYLOAD),
        )
        client = ToonClient(credentials, transport=transport)

        agreement = (await client.get_agreements())[0]
        status = await client.get_status(agreement)
        gas = await client.get_gas_flow(agreement, datetime(2024, 1, 1, tzinfo=UTC))
        power = await client.get_electricity_flow("1234567")

        assert status.current_temperature == 20.5
        assert len(gas.hours) == 2
        assert len(power.days) == 1
        assert len(transport.requests) == 6
        assert transport.requests[4].params == {"fromTime": "1704067200000"}
        assert transport.requests[5].url.endswith("/1234567/consumption/electricity/flows")

    async def test_get_status_accepts_id(self, credentials: Credentials) -> None:
        """Test that get_status accepts a bare agreement id and polls."""
        transport = ScriptedTransport(
            *login_responses(),
            json_response(202),
            json_response(200, STATUS_PAYLOAD),
        )
        client = ToonClient(credentials, transport=transport, polling=PollingPolicy(delay=0))

        await client.get_status("1234567")

        assert transport.requests[-1].url == "https://api.toon.eu/toon/v3/1234567/status"
        assert len(transport.requests) == 4

    async def test_login_failure_propagates(self, credentials: Credentials) -> None:
        """Test that auth errors reach the caller and no fetch is made."""
        transport = ScriptedTransport(TransportResponse(status=200))
        client = ToonClient(credentials, transport=transport)

        with pytest.raises(InvalidCredentialsError):
            await client.get_agreements()

        assert len(transport.requests) == 1

    async def test_fetch_failure_propagates(self, credentials: Credentials) -> None:
        """Test that fetch errors reach the caller."""
        transport = ScriptedTransport(*login_responses(), json_response(503, "maintenance"))
        client = ToonClient(credentials, transport=transport)

        with pytest.raises(HttpStatusError) as exc_info:
            await client.get_gas_flow(Agreement(agreement_id="1234567"))

        assert exc_info.value.status == 503
        assert exc_info.value.body == "maintenance"
