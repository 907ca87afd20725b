"""Data models for Toon API requests and responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


__all__ = [
    "Agreement",
    "Credentials",
    "FlowData",
    "FlowPoint",
    "GasUsage",
    "PowerUsage",
    "StatusSnapshot",
    "ThermostatInfo",
    "ThermostatState",
    "Token",
]


@dataclass(frozen=True)
class Credentials:
    """Account and API consumer credentials.

    Attributes:
        username: Tenant account name (e.g. the Mijn Eneco account).
        password: Password of the tenant account.
        tenant_id: Tenant identifier (e.g. "eneco", "viesgo").
        consumer_key: Toon API consumer key (OAuth client id).
        consumer_secret: Toon API consumer secret (OAuth client secret).
    """

    username: str
    password: str = field(repr=False)
    tenant_id: str
    consumer_key: str
    consumer_secret: str = field(repr=False)


@dataclass(frozen=True)
class Token:
    """Access/refresh token pair with derived expiry instants.

    The expiry instants already include the safety margin, so a token is
    considered expired some time before the server would reject it.

    Attributes:
        access_token: Bearer token for API requests.
        access_expires_at: Instant after which the access token must not be used.
        refresh_token: Token used to renew the access token.
        refresh_expires_at: Instant after which the refresh token must not be used.
    """

    access_token: str
    access_expires_at: datetime
    refresh_token: str = field(repr=False)
    refresh_expires_at: datetime

    def is_valid(self, now: datetime) -> bool:
        """Check whether both tokens are still usable at ``now``."""
        return self.refresh_expires_at > now and self.access_expires_at > now


@dataclass(frozen=True)
class Agreement:
    """Binding between the account and one physical Toon display.

    Attributes:
        agreement_id: Agreement identifier used in resource URLs.
        agreement_id_checksum: Checksum of the agreement id.
        heating_type: Heating type (e.g. "GAS").
        display_common_name: Display common name (e.g. "eneco-001-123456").
        display_hardware_version: Display hardware version.
        display_software_version: Display firmware version.
        is_toon_solar: Whether the display has the solar module.
        is_toonly: Whether the display is a Toon lite ("Toonly").
    """

    agreement_id: str
    agreement_id_checksum: str = ""
    heating_type: str = ""
    display_common_name: str = ""
    display_hardware_version: str = ""
    display_software_version: str = ""
    is_toon_solar: bool = False
    is_toonly: bool = False


@dataclass
class ThermostatState:
    """One preset of the thermostat (comfort, home, sleep, away, ...).

    Attributes:
        id: Preset identifier.
        temp_value: Preset temperature in hundredths of a degree.
        dhw: Domestic hot water flag for the preset.
    """

    id: int
    temp_value: int | None = None
    dhw: int | None = None


@dataclass
class ThermostatInfo:
    """Current thermostat state.

    Temperatures are reported in hundredths of a degree Celsius.
    """

    current_setpoint: int | None = None
    current_display_temp: int | None = None
    program_state: int | None = None
    active_state: int | None = None
    next_program: int | None = None
    next_state: int | None = None
    next_time: datetime | None = None
    next_setpoint: int | None = None
    error_found: int | None = None
    boiler_module_connected: int | None = None
    real_setpoint: int | None = None
    burner_info: str | None = None
    ot_comm_error: str | None = None
    current_modulation_level: int | None = None
    have_ot_boiler: int | None = None
    last_updated_from_display: datetime | None = None


@dataclass
class PowerUsage:
    """Electricity usage as reported by the display.

    Attributes:
        value: Current power usage in watts.
        is_smart: Whether readings come from a smart meter.
        last_updated_from_display: When the display last reported these values.
    """

    value: float | None = None
    day_cost: float | None = None
    value_produced: float | None = None
    day_cost_produced: float | None = None
    value_solar: float | None = None
    max_solar: float | None = None
    day_usage: float | None = None
    day_low_usage: float | None = None
    avg_value: float | None = None
    avg_day_value: float | None = None
    meter_reading: float | None = None
    meter_reading_low: float | None = None
    meter_reading_prod: float | None = None
    meter_reading_low_prod: float | None = None
    lowest_day_value: float | None = None
    solar_produced_today: float | None = None
    is_smart: bool | None = None
    last_updated_from_display: datetime | None = None


@dataclass
class GasUsage:
    """Gas usage as reported by the display."""

    value: float | None = None
    day_cost: float | None = None
    day_usage: float | None = None
    avg_value: float | None = None
    avg_day_value: float | None = None
    meter_reading: float | None = None
    is_smart: bool | None = None
    last_updated_from_display: datetime | None = None


@dataclass
class StatusSnapshot:
    """Result of a single status fetch.

    Attributes:
        thermostat_states: Thermostat presets.
        thermostat_info: Current thermostat state.
        power_usage: Electricity usage.
        gas_usage: Gas usage.
        last_update_from_display: When the display last pushed the snapshot.
        raw_data: Original API response data for debugging.
    """

    thermostat_states: list[ThermostatState] = field(default_factory=list)
    thermostat_info: ThermostatInfo | None = None
    power_usage: PowerUsage | None = None
    gas_usage: GasUsage | None = None
    last_update_from_display: datetime | None = None
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def current_temperature(self) -> float | None:
        """Displayed room temperature in degrees Celsius."""
        if self.thermostat_info is None or self.thermostat_info.current_display_temp is None:
            return None
        return self.thermostat_info.current_display_temp / 100

    @property
    def current_setpoint(self) -> float | None:
        """Active setpoint in degrees Celsius."""
        if self.thermostat_info is None or self.thermostat_info.current_setpoint is None:
            return None
        return self.thermostat_info.current_setpoint / 100


@dataclass(frozen=True)
class FlowPoint:
    """A single consumption reading."""

    timestamp: datetime
    unit: str
    value: float


@dataclass(frozen=True)
class FlowData:
    """Time-bucketed consumption readings for one channel.

    Attributes:
        hours: Hourly readings.
        days: Daily readings.
        weeks: Weekly readings.
        months: Monthly readings.
        years: Yearly readings.
    """

    hours: tuple[FlowPoint, ...] = ()
    days: tuple[FlowPoint, ...] = ()
    weeks: tuple[FlowPoint, ...] = ()
    months: tuple[FlowPoint, ...] = ()
    years: tuple[FlowPoint, ...] = ()
