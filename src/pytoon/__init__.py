"""Python client library for the Toon smart thermostat.

This package provides an async client for the Toon REST API
(https://developer.toon.eu): credential-based login, token lifecycle, and
retrieval of display status and consumption data.

The library is organized into three layers:
1. **Transport Layer** (pytoon.transport): A single HTTP round trip, backed by aiohttp
2. **Auth and API Layer** (pytoon.auth, pytoon.api): Token management and resource endpoints
3. **Client Layer** (pytoon.client): Token-aware access to all endpoints

Example:
    Basic usage:

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
            print(f"{agreement.display_common_name}: {status.current_temperature} C")
    ```
"""

from __future__ import annotations

from pytoon.api import ToonAPI
from pytoon.auth import AuthenticationHandler, is_token_valid
from pytoon.client import ToonClient
from pytoon.exceptions import (
    AuthenticationError,
    AuthenticationNetworkError,
    CodeExtractionError,
    FetchError,
    FetchNetworkError,
    HttpStatusError,
    InvalidCredentialsError,
    MalformedTokenResponseError,
    StatusNotReadyError,
    ToonConnectionError,
    ToonDecodeError,
    ToonError,
    ToonTimeoutError,
    ToonTransportError,
)
from pytoon.models import (
    Agreement,
    Credentials,
    FlowData,
    FlowPoint,
    GasUsage,
    PowerUsage,
    StatusSnapshot,
    ThermostatInfo,
    ThermostatState,
    Token,
)
from pytoon.polling import PollingPolicy
from pytoon.transport import AiohttpTransport, HTTPTransport, TransportResponse


__version__ = "0.1.0"

__all__ = [
    "Agreement",
    "AiohttpTransport",
    "AuthenticationError",
    "AuthenticationHandler",
    "AuthenticationNetworkError",
    "CodeExtractionError",
    "Credentials",
    "FetchError",
    "FetchNetworkError",
    "FlowData",
    "FlowPoint",
    "GasUsage",
    "HTTPTransport",
    "HttpStatusError",
    "InvalidCredentialsError",
    "MalformedTokenResponseError",
    "PollingPolicy",
    "PowerUsage",
    "StatusNotReadyError",
    "StatusSnapshot",
    "ThermostatInfo",
    "ThermostatState",
    "Token",
    "ToonAPI",
    "ToonClient",
    "ToonConnectionError",
    "ToonDecodeError",
    "ToonError",
    "ToonTimeoutError",
    "ToonTransportError",
    "TransportResponse",
    "__version__",
    "is_token_valid",
]
