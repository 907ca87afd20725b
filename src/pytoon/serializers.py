"""Serialization and deserialization of API payloads.

This module provides stateless functions for converting between raw API
responses and typed domain models, in both directions. The mapping tables
below pair each model attribute with its JSON key and field codec, so that
deserializing and serializing a payload use the exact same field set.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import fields
from datetime import datetime, timedelta
from typing import Any, TypeVar

from pytoon.const import TOKEN_EXPIRY_MARGIN_SECONDS
from pytoon.exceptions import ToonDecodeError
from pytoon.models import (
    Agreement,
    FlowData,
    FlowPoint,
    GasUsage,
    PowerUsage,
    StatusSnapshot,
    ThermostatInfo,
    ThermostatState,
    Token,
)
from pytoon.parsers import (
    encode_epoch_millis,
    encode_epoch_seconds,
    encode_smart_flag,
    parse_epoch_millis,
    parse_epoch_seconds,
    parse_lifetime,
    parse_smart_flag,
)


_T = TypeVar("_T")

# (attribute, JSON key, decoder, encoder); None means pass-through
_FieldSpec = tuple[str, str, Callable[[Any, str], Any] | None, Callable[[Any], Any] | None]

_MILLIS = (parse_epoch_millis, encode_epoch_millis)
_SECONDS = (parse_epoch_seconds, encode_epoch_seconds)
_SMART = (parse_smart_flag, encode_smart_flag)
_RAW = (None, None)

_THERMOSTAT_INFO_FIELDS: tuple[_FieldSpec, ...] = (
    ("current_setpoint", "currentSetpoint", *_RAW),
    ("current_display_temp", "currentDisplayTemp", *_RAW),
    ("program_state", "programState", *_RAW),
    ("active_state", "activeState", *_RAW),
    ("next_program", "nextProgram", *_RAW),
    ("next_state", "nextState", *_RAW),
    ("next_time", "nextTime", *_SECONDS),
    ("next_setpoint", "nextSetpoint", *_RAW),
    ("error_found", "errorFound", *_RAW),
    ("boiler_module_connected", "boilerModuleConnected", *_RAW),
    ("real_setpoint", "realSetpoint", *_RAW),
    ("burner_info", "burnerInfo", *_RAW),
    ("ot_comm_error", "otCommError", *_RAW),
    ("current_modulation_level", "currentModulationLevel", *_RAW),
    ("have_ot_boiler", "haveOTBoiler", *_RAW),
    ("last_updated_from_display", "lastUpdatedFromDisplay", *_MILLIS),
)

_POWER_USAGE_FIELDS: tuple[_FieldSpec, ...] = (
    ("value", "value", *_RAW),
    ("day_cost", "dayCost", *_RAW),
    ("value_produced", "valueProduced", *_RAW),
    ("day_cost_produced", "dayCostProduced", *_RAW),
    ("value_solar", "valueSolar", *_RAW),
    ("max_solar", "maxSolar", *_RAW),
    ("day_usage", "dayUsage", *_RAW),
    ("day_low_usage", "dayLowUsage", *_RAW),
    ("avg_value", "avgValue", *_RAW),
    ("avg_day_value", "avgDayValue", *_RAW),
    ("meter_reading", "meterReading", *_RAW),
    ("meter_reading_low", "meterReadingLow", *_RAW),
    ("meter_reading_prod", "meterReadingProd", *_RAW),
    ("meter_reading_low_prod", "meterReadingLowProd", *_RAW),
    ("lowest_day_value", "lowestDayValue", *_RAW),
    ("solar_produced_today", "solarProducedToday", *_RAW),
    ("is_smart", "isSmart", *_SMART),
    ("last_updated_from_display", "lastUpdatedFromDisplay", *_MILLIS),
)

_GAS_USAGE_FIELDS: tuple[_FieldSpec, ...] = (
    ("value", "value", *_RAW),
    ("day_cost", "dayCost", *_RAW),
    ("day_usage", "dayUsage", *_RAW),
    ("avg_value", "avgValue", *_RAW),
    ("avg_day_value", "avgDayValue", *_RAW),
    ("meter_reading", "meterReading", *_RAW),
    ("is_smart", "isSmart", *_SMART),
    ("last_updated_from_display", "lastUpdatedFromDisplay", *_MILLIS),
)

_AGREEMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("agreement_id", "agreementId"),
    ("agreement_id_checksum", "agreementIdChecksum"),
    ("heating_type", "heatingType"),
    ("display_common_name", "displayCommonName"),
    ("display_hardware_version", "displayHardwareVersion"),
    ("display_software_version", "displaySoftwareVersion"),
    ("is_toon_solar", "isToonSolar"),
    ("is_toonly", "isToonly"),
)

_FLOW_BUCKETS: tuple[str, ...] = tuple(f.name for f in fields(FlowData))


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        msg = f"Expected JSON object for {what}, got {type(data).__name__}"
        raise ToonDecodeError(msg, field=what, value=data)
    return data


def _decode_fields(cls: type[_T], data: Any, specs: tuple[_FieldSpec, ...], what: str) -> _T:
    data = _require_mapping(data, what)
    kwargs: dict[str, Any] = {}
    for attr, key, decoder, _ in specs:
        value = data.get(key)
        kwargs[attr] = decoder(value, key) if decoder is not None else value
    return cls(**kwargs)


def _encode_fields(obj: Any, specs: tuple[_FieldSpec, ...]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for attr, key, _, encoder in specs:
        value = getattr(obj, attr)
        if value is None:
            continue
        payload[key] = encoder(value) if encoder is not None else value
    return payload


def _text(value: Any) -> str:
    return "" if value is None else str(value)


# -------------------------------------------------------------------------
# Authentication
# -------------------------------------------------------------------------


def _expiry(issued_at: datetime, lifetime: int, margin_seconds: int, field: str) -> datetime:
    try:
        return issued_at + timedelta(seconds=lifetime - margin_seconds)
    except OverflowError as exc:
        msg = f"Lifetime out of range for {field}: {lifetime}"
        raise ToonDecodeError(msg, field=field, value=lifetime) from exc


def deserialize_token_response(
    data: Any,
    issued_at: datetime,
    margin_seconds: int = TOKEN_EXPIRY_MARGIN_SECONDS,
) -> Token:
    """Deserialize a token endpoint response.

    The expiry instants are derived from the time the token request was
    issued: ``issued_at + lifetime - margin``.

    Args:
        data: Parsed JSON with ``access_token``, ``expires_in``,
            ``refresh_token`` and ``refresh_token_expires_in``; the lifetimes
            are transmitted as numeric strings.
        issued_at: Instant the token request was sent.
        margin_seconds: Safety margin subtracted from both lifetimes.

    Returns:
        Token instance.

    Raises:
        ToonDecodeError: If a field is missing or malformed.

    Example:
        >>> from datetime import UTC, datetime
        >>> t0 = datetime(2024, 1, 1, tzinfo=UTC)
        >>> token = deserialize_token_response(
        ...     {"access_token": "a", "expires_in": "600",
        ...      "refresh_token": "r", "refresh_token_expires_in": "3600"},
        ...     issued_at=t0,
        ... )
        >>> (token.access_expires_at - t0).total_seconds()
        420.0
    """
    data = _require_mapping(data, "token response")

    access_token = data.get("access_token")
    refresh_token = data.get("refresh_token")
    if not isinstance(access_token, str) or not access_token:
        msg = "Missing access_token in token response"
        raise ToonDecodeError(msg, field="access_token")
    if not isinstance(refresh_token, str) or not refresh_token:
        msg = "Missing refresh_token in token response"
        raise ToonDecodeError(msg, field="refresh_token")

    access_lifetime = parse_lifetime(data.get("expires_in"), "expires_in")
    refresh_lifetime = parse_lifetime(data.get("refresh_token_expires_in"), "refresh_token_expires_in")

    return Token(
        access_token=access_token,
        access_expires_at=_expiry(issued_at, access_lifetime, margin_seconds, "expires_in"),
        refresh_token=refresh_token,
        refresh_expires_at=_expiry(issued_at, refresh_lifetime, margin_seconds, "refresh_token_expires_in"),
    )


# -------------------------------------------------------------------------
# Agreements
# -------------------------------------------------------------------------


def deserialize_agreement(data: Any) -> Agreement:
    """Deserialize one agreement record.

    Raises:
        ToonDecodeError: If the record is not an object or lacks an agreement id.
    """
    data = _require_mapping(data, "agreement")

    agreement_id = data.get("agreementId")
    if agreement_id in (None, ""):
        msg = "Missing agreementId in agreement record"
        raise ToonDecodeError(msg, field="agreementId")

    return Agreement(
        agreement_id=str(agreement_id),
        agreement_id_checksum=_text(data.get("agreementIdChecksum")),
        heating_type=_text(data.get("heatingType")),
        display_common_name=_text(data.get("displayCommonName")),
        display_hardware_version=_text(data.get("displayHardwareVersion")),
        display_software_version=_text(data.get("displaySoftwareVersion")),
        is_toon_solar=bool(parse_smart_flag(data.get("isToonSolar"), "isToonSolar")),
        is_toonly=bool(parse_smart_flag(data.get("isToonly"), "isToonly")),
    )


def deserialize_agreements(data: Any) -> list[Agreement]:
    """Deserialize the agreements endpoint response (a JSON array).

    Raises:
        ToonDecodeError: If the payload is not an array of agreement records.
    """
    if not isinstance(data, list):
        msg = f"Expected JSON array of agreements, got {type(data).__name__}"
        raise ToonDecodeError(msg, field="agreements", value=data)
    return [deserialize_agreement(item) for item in data]


def serialize_agreement(agreement: Agreement) -> dict[str, Any]:
    """Serialize an agreement back to its API representation."""
    return {key: getattr(agreement, attr) for attr, key in _AGREEMENT_FIELDS}


# -------------------------------------------------------------------------
# Status
# -------------------------------------------------------------------------


def deserialize_thermostat_states(data: Any) -> list[ThermostatState]:
    """Deserialize the ``thermostatStates`` object.

    Args:
        data: Raw data in format {"state": [{"id": int, "tempValue": int, "dhw": int}, ...]}
    """
    if data is None:
        return []
    data = _require_mapping(data, "thermostatStates")
    states: list[ThermostatState] = []
    items = data.get("state") or []
    if not isinstance(items, list):
        msg = "Expected JSON array for thermostatStates.state"
        raise ToonDecodeError(msg, field="thermostatStates.state", value=items)
    for item in items:
        item = _require_mapping(item, "thermostatStates.state")
        states.append(
            ThermostatState(
                id=item.get("id"),
                temp_value=item.get("tempValue"),
                dhw=item.get("dhw"),
            )
        )
    return states


def deserialize_status(data: Any) -> StatusSnapshot:
    """Deserialize the status endpoint response.

    Args:
        data: Raw status data in format:
              {"thermostatStates": {...}, "thermostatInfo": {...},
               "powerUsage": {...}, "gasUsage": {...},
               "lastUpdateFromDisplay": int}

    Returns:
        StatusSnapshot instance. Sections missing from the payload are None.

    Raises:
        ToonDecodeError: If the payload or one of its fields is malformed.
    """
    data = _require_mapping(data, "status")

    info = data.get("thermostatInfo")
    power = data.get("powerUsage")
    gas = data.get("gasUsage")

    return StatusSnapshot(
        thermostat_states=deserialize_thermostat_states(data.get("thermostatStates")),
        thermostat_info=(
            _decode_fields(ThermostatInfo, info, _THERMOSTAT_INFO_FIELDS, "thermostatInfo")
            if info is not None
            else None
        ),
        power_usage=(
            _decode_fields(PowerUsage, power, _POWER_USAGE_FIELDS, "powerUsage") if power is not None else None
        ),
        gas_usage=_decode_fields(GasUsage, gas, _GAS_USAGE_FIELDS, "gasUsage") if gas is not None else None,
        last_update_from_display=parse_epoch_millis(data.get("lastUpdateFromDisplay"), "lastUpdateFromDisplay"),
        raw_data=dict(data),
    )


def serialize_status(status: StatusSnapshot) -> dict[str, Any]:
    """Serialize a status snapshot to its API representation.

    Only populated fields are emitted, so deserializing the result yields an
    equal snapshot.
    """
    payload: dict[str, Any] = {
        "thermostatStates": {
            "state": [
                {
                    key: value
                    for key, value in (("id", state.id), ("tempValue", state.temp_value), ("dhw", state.dhw))
                    if value is not None
                }
                for state in status.thermostat_states
            ]
        }
    }
    if status.thermostat_info is not None:
        payload["thermostatInfo"] = _encode_fields(status.thermostat_info, _THERMOSTAT_INFO_FIELDS)
    if status.power_usage is not None:
        payload["powerUsage"] = _encode_fields(status.power_usage, _POWER_USAGE_FIELDS)
    if status.gas_usage is not None:
        payload["gasUsage"] = _encode_fields(status.gas_usage, _GAS_USAGE_FIELDS)
    if status.last_update_from_display is not None:
        payload["lastUpdateFromDisplay"] = encode_epoch_millis(status.last_update_from_display)
    return payload


# -------------------------------------------------------------------------
# Consumption flows
# -------------------------------------------------------------------------


def deserialize_flow_point(data: Any) -> FlowPoint:
    """Deserialize one {timestamp, unit, value} reading.

    Raises:
        ToonDecodeError: If the reading lacks a timestamp or value.
    """
    data = _require_mapping(data, "flow point")

    timestamp = parse_epoch_millis(data.get("timestamp"), "timestamp")
    if timestamp is None:
        msg = "Missing timestamp in flow point"
        raise ToonDecodeError(msg, field="timestamp")

    value = data.get("value")
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"Invalid flow value: {value!r}"
        raise ToonDecodeError(msg, field="value", value=value)

    return FlowPoint(timestamp=timestamp, unit=_text(data.get("unit")), value=value)


def deserialize_flow(data: Any) -> FlowData:
    """Deserialize a consumption flows response.

    Args:
        data: Raw data in format:
              {"hours": [{"timestamp": int, "unit": str, "value": float}, ...],
               "days": [...], "weeks": [...], "months": [...], "years": [...]}

    Returns:
        FlowData instance. Missing buckets are empty.
    """
    data = _require_mapping(data, "flows")
    buckets: dict[str, tuple[FlowPoint, ...]] = {}
    for bucket in _FLOW_BUCKETS:
        items = data.get(bucket) or []
        if not isinstance(items, list):
            msg = f"Expected JSON array for {bucket}"
            raise ToonDecodeError(msg, field=bucket, value=items)
        buckets[bucket] = tuple(deserialize_flow_point(item) for item in items)
    return FlowData(**buckets)


def serialize_flow(flow: FlowData) -> dict[str, Any]:
    """Serialize flow data to its API representation."""
    return {
        bucket: [
            {"timestamp": encode_epoch_millis(point.timestamp), "unit": point.unit, "value": point.value}
            for point in getattr(flow, bucket)
        ]
        for bucket in _FLOW_BUCKETS
    }
