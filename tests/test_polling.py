"""Tests for the status polling policy."""

from __future__ import annotations

import pytest

from pytoon.polling import PollingPolicy


class TestPollingPolicy:
    """Test PollingPolicy."""

    def test_defaults(self) -> None:
        """Test the documented defaults."""
        policy = PollingPolicy()
        assert policy.max_attempts == 30
        assert policy.delay == 1.0
        assert policy.backoff_factor == 1.0
        assert policy.max_delay == 10.0

    def test_constant_delay(self) -> None:
        """Test that a factor of 1 keeps the delay constant."""
        policy = PollingPolicy(delay=0.5)
        assert [policy.delay_for(n) for n in range(4)] == [0.5, 0.5, 0.5, 0.5]

    def test_exponential_delay_is_capped(self) -> None:
        """Test backoff growth and the max_delay cap."""
        policy = PollingPolicy(delay=1.0, backoff_factor=2.0, max_delay=5.0)
        assert [policy.delay_for(n) for n in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"delay": -1.0},
            {"max_delay": -1.0},
            {"backoff_factor": 0.5},
        ],
    )
    def test_invalid(self, kwargs: dict[str, float]) -> None:
        """Test that out-of-range bounds are rejected."""
        with pytest.raises(ValueError):  # noqa: PT011
            PollingPolicy(**kwargs)
