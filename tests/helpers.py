"""Test doubles shared by the pytoon test suite."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from pytoon.transport import TransportResponse


T0 = datetime(2024, 1, 1, tzinfo=UTC)

LOCATION = "http://127.0.0.1/?code=auth-code-123&state="

TOKEN_BODY = (
    '{"access_token": "access-123", "expires_in": "600",'
    ' "refresh_token": "refresh-456", "refresh_token_expires_in": "3600"}'
)


@dataclass
class RecordedRequest:
    """A request seen by ScriptedTransport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    data: dict[str, str] = field(default_factory=dict)
    allow_redirects: bool = True


class ScriptedTransport:
    """HTTPTransport returning queued responses in order.

    Queued exceptions are raised instead of returned.
    """

    def __init__(self, *responses: TransportResponse | Exception) -> None:
        self.responses: list[TransportResponse | Exception] = list(responses)
        self.requests: list[RecordedRequest] = []

    def queue(self, *responses: TransportResponse | Exception) -> None:
        self.responses.extend(responses)

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
        self.requests.append(
            RecordedRequest(
                method=method,
                url=url,
                headers=dict(headers or {}),
                params=dict(params or {}),
                data=dict(data or {}),
                allow_redirects=allow_redirects,
            )
        )
        if not self.responses:
            msg = f"No scripted response left for {method} {url}"
            raise AssertionError(msg)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeClock:
    """Settable clock for token expiry tests."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def json_response(status: int, body: Any = "") -> TransportResponse:
    """Response with a JSON body; strings are used verbatim."""
    text = body if isinstance(body, str) else json.dumps(body)
    return TransportResponse(status=status, headers={"Content-Type": "application/json"}, body=text)


def login_responses(token_body: str = TOKEN_BODY) -> tuple[TransportResponse, TransportResponse]:
    """Responses for a successful legacy login."""
    return (
        TransportResponse(status=302, headers={"Location": LOCATION}),
        json_response(200, token_body),
    )


STATUS_PAYLOAD: dict[str, Any] = {
    "thermostatStates": {
        "state": [
            {"id": 0, "tempValue": 2000, "dhw": 1},
            {"id": 1, "tempValue": 1800, "dhw": 1},
            {"id": 2, "tempValue": 1500, "dhw": 1},
            {"id": 3, "tempValue": 1200, "dhw": 1},
        ]
    },
    "thermostatInfo": {
        "currentSetpoint": 2000,
        "currentDisplayTemp": 2050,
        "programState": 1,
        "activeState": 0,
        "nextProgram": 1,
        "nextState": 1,
        "nextTime": 1704092400,
        "nextSetpoint": 1800,
        "errorFound": 255,
        "boilerModuleConnected": 1,
        "realSetpoint": 2000,
        "burnerInfo": "1",
        "otCommError": "0",
        "currentModulationLevel": 40,
        "haveOTBoiler": 1,
        "lastUpdatedFromDisplay": 1704067190123,
    },
    "powerUsage": {
        "value": 450,
        "dayCost": 1.25,
        "valueProduced": 0,
        "dayCostProduced": 0.0,
        "valueSolar": 0,
        "maxSolar": 0,
        "dayUsage": 3400,
        "dayLowUsage": 1200,
        "avgValue": 401.5,
        "avgDayValue": 9800.0,
        "meterReading": 1234567,
        "meterReadingLow": 765432,
        "isSmart": 1,
        "lastUpdatedFromDisplay": 1704067195000,
    },
    "gasUsage": {
        "value": 0,
        "dayCost": 0.52,
        "dayUsage": 1200,
        "avgValue": 150.0,
        "avgDayValue": 3600.0,
        "meterReading": 4321000,
        "isSmart": "true",
        "lastUpdatedFromDisplay": 1704067195000,
    },
    "lastUpdateFromDisplay": 1704067199000,
}

FLOW_PAYLOAD: dict[str, Any] = {
    "hours": [
        {"timestamp": 1704067200000, "unit": "m3", "value": 0.12},
        {"timestamp": 1704070800000, "unit": "m3", "value": 0.2},
    ],
    "days": [{"timestamp": 1704067200000, "unit": "m3", "value": 3.5}],
    "weeks": [],
    "months": [{"timestamp": 1704067200000, "unit": "m3", "value": 120}],
    "years": [],
}

AGREEMENTS_PAYLOAD: list[dict[str, Any]] = [
    {
        "agreementId": "1234567",
        "agreementIdChecksum": "abcdef",
        "heatingType": "GAS",
        "displayCommonName": "eneco-001-123456",
        "displayHardwareVersion": "qb2/ene/2.10.12",
        "displaySoftwareVersion": "qb2/ene/4.19.10",
        "isToonSolar": False,
        "isToonly": False,
    }
]
