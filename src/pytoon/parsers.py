"""Field-level parsing utilities for Toon API payloads.

The Toon API encodes instants as integer Unix epochs (seconds for some
fields, milliseconds for others) and some flags as ``0``/``1`` as well as
``true``/``false``. These helpers convert such raw values into Python types
and back, raising :class:`ToonDecodeError` on anything unexpected.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Any

from pytoon.exceptions import ToonDecodeError


__all__ = [
    "EPOCH",
    "encode_epoch_millis",
    "encode_epoch_seconds",
    "encode_smart_flag",
    "parse_epoch_millis",
    "parse_epoch_seconds",
    "parse_lifetime",
    "parse_smart_flag",
    "to_utc",
]

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

_INTEGER_STRING = re.compile(r"-?[0-9]+")

_SMART_FLAG_VALUES: dict[str, bool] = {
    "0": False,
    "1": True,
    "false": False,
    "true": True,
}


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_smart_flag(value: Any, field: str = "isSmart") -> bool | None:
    """Decode a boolean-like flag.

    Accepts ``0``, ``1``, ``false`` and ``true``, either as JSON literals or
    as strings. ``None`` means the field was not reported.

    Args:
        value: Raw JSON value.
        field: Field name used in error reporting.

    Returns:
        The decoded flag, or None if the value is absent.

    Raises:
        ToonDecodeError: If the value is any other literal.
    """
    if value is None:
        return None

    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return value

    if isinstance(value, int) and value in (0, 1):
        return bool(value)

    if isinstance(value, str) and value in _SMART_FLAG_VALUES:
        return _SMART_FLAG_VALUES[value]

    msg = f"Invalid value for {field}: {value!r}"
    raise ToonDecodeError(msg, field=field, value=value)


def encode_smart_flag(value: bool | None) -> int | None:
    """Encode a flag the way the display reports it (``0``/``1``)."""
    if value is None:
        return None
    return int(value)


def _parse_epoch(value: Any, field: str, unit: timedelta) -> datetime | None:
    if value is None:
        return None

    msg = f"Invalid epoch timestamp for {field}: {value!r}"
    # bool is a subclass of int
    if isinstance(value, bool):
        raise ToonDecodeError(msg, field=field, value=value)

    # Integers occasionally arrive as digit strings
    if isinstance(value, str) and _INTEGER_STRING.fullmatch(value):
        number = int(value)
    elif isinstance(value, int):
        number = value
    else:
        raise ToonDecodeError(msg, field=field, value=value)

    try:
        return EPOCH + number * unit
    except OverflowError as exc:
        msg = f"Epoch timestamp out of range for {field}: {value!r}"
        raise ToonDecodeError(msg, field=field, value=value) from exc


def parse_epoch_millis(value: Any, field: str = "timestamp") -> datetime | None:
    """Decode a millisecond Unix epoch into an aware UTC datetime.

    Raises:
        ToonDecodeError: If the value is not an integer or is out of range.
    """
    return _parse_epoch(value, field, timedelta(milliseconds=1))


def parse_epoch_seconds(value: Any, field: str = "timestamp") -> datetime | None:
    """Decode a second Unix epoch into an aware UTC datetime.

    Raises:
        ToonDecodeError: If the value is not an integer or is out of range.
    """
    return _parse_epoch(value, field, timedelta(seconds=1))


def encode_epoch_millis(value: datetime | None) -> int | None:
    """Encode a datetime as integer milliseconds since the Unix epoch."""
    if value is None:
        return None
    return (to_utc(value) - EPOCH) // timedelta(milliseconds=1)


def encode_epoch_seconds(value: datetime | None) -> int | None:
    """Encode a datetime as integer seconds since the Unix epoch."""
    if value is None:
        return None
    return (to_utc(value) - EPOCH) // timedelta(seconds=1)


def parse_lifetime(value: Any, field: str) -> int:
    """Decode a token lifetime transmitted as a numeric string.

    Raises:
        ToonDecodeError: If the value is missing or not an integer.
    """
    if isinstance(value, str) and _INTEGER_STRING.fullmatch(value):
        return int(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    msg = f"Invalid lifetime for {field}: {value!r}"
    raise ToonDecodeError(msg, field=field, value=value)
