"""Constants for pytoon library."""

from __future__ import annotations


# API Configuration
DEFAULT_BASE_URL = "https://api.toon.eu"
DEFAULT_TIMEOUT = 10  # seconds, whole request
DEFAULT_CONNECT_TIMEOUT = 5  # seconds, connection establishment

# Endpoints
AUTHORIZE_LEGACY_PATH = "/authorize/legacy"
TOKEN_PATH = "/token"
AGREEMENTS_PATH = "/toon/v3/agreements"
STATUS_PATH = "/toon/v3/{agreement_id}/status"
FLOWS_PATH = "/toon/v3/{agreement_id}/consumption/{channel}/flows"

# Consumption channels
CHANNEL_GAS = "gas"
CHANNEL_ELECTRICITY = "electricity"

# Token lifecycle
TOKEN_EXPIRY_MARGIN_SECONDS = 180

# Status polling
DEFAULT_POLL_MAX_ATTEMPTS = 30
DEFAULT_POLL_DELAY = 1.0  # seconds
DEFAULT_POLL_BACKOFF_FACTOR = 1.0
DEFAULT_POLL_MAX_DELAY = 10.0  # seconds
