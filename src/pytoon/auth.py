"""Authentication handler for Toon API."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlsplit

from pytoon.const import (
    AUTHORIZE_LEGACY_PATH,
    DEFAULT_BASE_URL,
    TOKEN_EXPIRY_MARGIN_SECONDS,
    TOKEN_PATH,
)
from pytoon.exceptions import (
    AuthenticationError,
    AuthenticationNetworkError,
    CodeExtractionError,
    InvalidCredentialsError,
    MalformedTokenResponseError,
    ToonDecodeError,
    ToonTransportError,
)
from pytoon.serializers import deserialize_token_response


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from pytoon.models import Credentials, Token
    from pytoon.transport import HTTPTransport, TransportResponse

_LOGGER = logging.getLogger(__name__)

_REDIRECT_STATUSES = (
    HTTPStatus.MOVED_PERMANENTLY,
    HTTPStatus.FOUND,
    HTTPStatus.SEE_OTHER,
    HTTPStatus.TEMPORARY_REDIRECT,
    HTTPStatus.PERMANENT_REDIRECT,
)
_REJECTED_STATUSES = (HTTPStatus.BAD_REQUEST, HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def is_token_valid(token: Token | None, now: datetime) -> bool:
    """Check whether a token can be used at ``now``.

    A token is valid iff both its access and refresh expiry instants lie
    strictly after ``now``.
    """
    return token is not None and token.is_valid(now)


def extract_authorization_code(location: str | None) -> str | None:
    """Extract the ``code`` query parameter from a redirect location."""
    if not location:
        return None
    values = parse_qs(urlsplit(location).query).get("code")
    return values[0] if values else None


class AuthenticationHandler:
    """Obtain and maintain a bearer token for the Toon API.

    The provider does not offer an authorization-code redirect a library can
    intercept, so tokens are obtained with the legacy login flow:

    1. POST the account credentials to ``/authorize/legacy`` without
       following redirects; the 302 ``Location`` carries a ``code``.
    2. Extract the code from the ``Location`` query string.
    3. POST the code to ``/token`` and parse the token pair.

    Expiry instants are computed from the time the token request was sent,
    minus a safety margin, so a token is never used in its final moments.

    Refresh Extension:
        With ``refresh_enabled=True``, :meth:`ensure_valid` first tries to
        renew an expired access token with the refresh token, falling back to
        a full login if that fails.

    Example:
        ```python
        async with AiohttpTransport() as transport:
            auth = AuthenticationHandler(credentials, transport)
            token = await auth.ensure_valid()
        ```

    Attributes:
        credentials: Account and consumer credentials.
        base_url: Base URL for the API (without trailing slash).
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: HTTPTransport,
        *,
        base_url: str = DEFAULT_BASE_URL,
        clock: Callable[[], datetime] = _utcnow,
        refresh_enabled: bool = False,
        expiry_margin_seconds: int = TOKEN_EXPIRY_MARGIN_SECONDS,
    ) -> None:
        """Initialize the authentication handler.

        Args:
            credentials: Account and consumer credentials.
            transport: HTTP transport used for the login requests.
            base_url: Base URL for the API. Defaults to Toon production API.
            clock: Callable returning the current aware UTC datetime.
            refresh_enabled: Whether ensure_valid may renew tokens with the
                refresh token instead of a full login.
            expiry_margin_seconds: Seconds subtracted from server-declared
                lifetimes.
        """
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")

        self._transport = transport
        self._clock = clock
        self._refresh_enabled = refresh_enabled
        self._expiry_margin_seconds = expiry_margin_seconds
        self._token: Token | None = None
        self._auth_lock = asyncio.Lock()

    @property
    def token(self) -> Token | None:
        """The current token, or None if not authenticated."""
        return self._token

    def is_valid(self, now: datetime | None = None) -> bool:
        """Check if the current token is usable.

        Args:
            now: Instant to check against. Defaults to the handler's clock.
        """
        return is_token_valid(self._token, now if now is not None else self._clock())

    def clear_token(self) -> None:
        """Drop the current token, forcing a login on next use."""
        self._token = None
        _LOGGER.debug("Token cleared")

    async def _post_form(self, path: str, data: Mapping[str, str], *, allow_redirects: bool = True) -> TransportResponse:
        url = f"{self.base_url}{path}"
        try:
            return await self._transport.request("POST", url, data=data, allow_redirects=allow_redirects)
        except ToonTransportError as exc:
            msg = f"Request to {url} failed: {exc}"
            raise AuthenticationNetworkError(msg) from exc

    async def _request_code(self) -> str:
        creds = self.credentials
        response = await self._post_form(
            AUTHORIZE_LEGACY_PATH,
            {
                "client_id": creds.consumer_key,
                "tenant_id": creds.tenant_id,
                "username": creds.username,
                "password": creds.password,
                "response_type": "code",
                "state": "",
                "scope": "",
            },
            allow_redirects=False,
        )

        if response.status not in _REDIRECT_STATUSES:
            msg = f"Legacy login failed with status {response.status}: invalid credentials or consumer key"
            raise InvalidCredentialsError(msg, status=response.status)

        code = extract_authorization_code(response.header("Location"))
        if not code:
            msg = "Failed to extract authorization code from redirect"
            raise CodeExtractionError(msg, headers=response.headers)

        return code

    async def _request_token(self, data: Mapping[str, str]) -> Token:
        issued_at = self._clock()
        response = await self._post_form(TOKEN_PATH, data)

        if response.status in _REJECTED_STATUSES:
            msg = f"Token request rejected with status {response.status}: invalid consumer secret or code"
            raise InvalidCredentialsError(msg, status=response.status)

        if response.status != HTTPStatus.OK:
            msg = f"Token request failed with status {response.status}"
            raise MalformedTokenResponseError(msg, body=response.body)

        try:
            return deserialize_token_response(response.json(), issued_at, self._expiry_margin_seconds)
        except json.JSONDecodeError as exc:
            msg = f"Invalid JSON in token response: {exc}"
            raise MalformedTokenResponseError(msg, body=response.body) from exc
        except ToonDecodeError as exc:
            msg = f"Malformed token response: {exc}"
            raise MalformedTokenResponseError(msg, body=response.body) from exc

    async def acquire_token(self) -> Token:
        """Log in with the account credentials and store a fresh token.

        Returns:
            The new token.

        Raises:
            InvalidCredentialsError: If the login is not answered with a redirect.
            CodeExtractionError: If the redirect carries no authorization code.
            MalformedTokenResponseError: If the token response cannot be parsed.
            AuthenticationNetworkError: If a request cannot be completed.
        """
        # A failed login must not leave the previous token behind
        self._token = None

        _LOGGER.debug("Requesting authorization code for tenant %s", self.credentials.tenant_id)
        code = await self._request_code()

        self._token = await self._request_token(
            {
                "client_id": self.credentials.consumer_key,
                "client_secret": self.credentials.consumer_secret,
                "grant_type": "authorization_code",
                "code": code,
            }
        )

        _LOGGER.info("Authentication successful for %s", self.credentials.username)
        return self._token

    async def refresh_access_token(self) -> Token:
        """Renew the token pair using the current refresh token.

        Returns:
            The new token.

        Raises:
            AuthenticationError: If there is no token to refresh.
            MalformedTokenResponseError: If the token response cannot be parsed.
            AuthenticationNetworkError: If the request cannot be completed.
        """
        if self._token is None:
            msg = "No refresh token available"
            raise AuthenticationError(msg)

        refresh_token = self._token.refresh_token
        self._token = None
        self._token = await self._request_token(
            {
                "client_id": self.credentials.consumer_key,
                "client_secret": self.credentials.consumer_secret,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            }
        )

        _LOGGER.info("Access token refreshed")
        return self._token

    async def ensure_valid(self) -> Token:
        """Return a usable token, logging in again only if necessary.

        This is the recommended method to call before making API requests.

        Returns:
            A token valid at the time of the call.

        Raises:
            AuthenticationError: If a new token cannot be obtained.
        """
        async with self._auth_lock:
            now = self._clock()
            token = self._token
            if token is not None and token.is_valid(now):
                return token

            if self._refresh_enabled and token is not None and token.refresh_expires_at > now:
                try:
                    return await self.refresh_access_token()
                except AuthenticationError as exc:
                    _LOGGER.warning("Token refresh failed, logging in again: %s", exc)

            self._token = None
            return await self.acquire_token()
