"""Custom exceptions for pytoon library."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class ToonError(Exception):
    """Base exception for all Toon errors."""


class ToonTransportError(ToonError):
    """Exception raised when an HTTP round trip cannot be completed."""


class ToonConnectionError(ToonTransportError):
    """Exception raised for connection failures."""


class ToonTimeoutError(ToonTransportError):
    """Exception raised when API requests timeout."""


class AuthenticationError(ToonError):
    """Exception raised for authentication failures."""


class AuthenticationNetworkError(AuthenticationError):
    """Exception raised when the login flow fails at the transport level."""


class InvalidCredentialsError(AuthenticationError):
    """Exception raised when the legacy login does not answer with a redirect.

    Attributes:
        status: HTTP status returned by the authorization endpoint.
    """

    def __init__(self, message: str = "", status: int | None = None) -> None:
        """Initialize InvalidCredentialsError.

        Args:
            message: Error message.
            status: HTTP status returned by the authorization endpoint.
        """
        super().__init__(message)
        self.status = status


class CodeExtractionError(AuthenticationError):
    """Exception raised when no authorization code is found in the redirect.

    Attributes:
        headers: Response headers captured for diagnosis.
    """

    def __init__(self, message: str = "", headers: Mapping[str, str] | None = None) -> None:
        """Initialize CodeExtractionError.

        Args:
            message: Error message.
            headers: Response headers captured for diagnosis.
        """
        super().__init__(message)
        self.headers = dict(headers or {})


class MalformedTokenResponseError(AuthenticationError):
    """Exception raised when the token endpoint response cannot be parsed.

    Attributes:
        body: Raw response body.
    """

    def __init__(self, message: str = "", body: str | None = None) -> None:
        """Initialize MalformedTokenResponseError.

        Args:
            message: Error message.
            body: Raw response body.
        """
        super().__init__(message)
        self.body = body


class FetchError(ToonError):
    """Exception raised for failures on authenticated resource calls."""


class FetchNetworkError(FetchError):
    """Exception raised when a resource request fails at the transport level."""


class HttpStatusError(FetchError):
    """Exception raised when a resource endpoint answers with an unexpected status.

    Attributes:
        status: HTTP status code.
        body: Raw response body text.
    """

    def __init__(self, status: int, body: str = "", message: str | None = None) -> None:
        """Initialize HttpStatusError.

        Args:
            status: HTTP status code.
            body: Raw response body text.
            message: Optional error message. Derived from status when omitted.
        """
        super().__init__(message or f"Unexpected HTTP status {status}")
        self.status = status
        self.body = body


class ToonDecodeError(FetchError):
    """Exception raised when a response payload cannot be decoded.

    Attributes:
        field: Optional name of the offending field.
        value: Optional value that could not be decoded.
    """

    def __init__(self, message: str = "", field: str | None = None, value: Any = None) -> None:
        """Initialize ToonDecodeError.

        Args:
            message: Error message.
            field: Optional name of the offending field.
            value: Optional value that could not be decoded.
        """
        super().__init__(message)
        self.field = field
        self.value = value


class StatusNotReadyError(FetchError):
    """Exception raised when the status endpoint keeps answering 202.

    Attributes:
        attempts: Number of requests issued before giving up.
    """

    def __init__(self, message: str = "", attempts: int = 0) -> None:
        """Initialize StatusNotReadyError.

        Args:
            message: Error message.
            attempts: Number of requests issued before giving up.
        """
        super().__init__(message)
        self.attempts = attempts
