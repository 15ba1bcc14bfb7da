"""Tests for latency threshold resolution against resource timeouts."""

from __future__ import annotations

import pytest

from alarm_engine.exceptions import InvalidDefinition, UnresolvedThreshold
from alarm_engine.thresholds import (
    LatencyThreshold,
    TimeoutPercentageThreshold,
    parse_latency_threshold,
    resolve_latency_threshold,
)


# ── resolve_latency_threshold ───────────────────────────────────


class TestResolveLatencyThreshold:
    def test_half_of_ten_seconds(self) -> None:
        resolved = resolve_latency_threshold(TimeoutPercentageThreshold(50), 10_000)
        assert resolved.max_latency_ms == 5000

    def test_default_timeout_applies(self) -> None:
        resolved = resolve_latency_threshold(TimeoutPercentageThreshold(50), None)
        assert resolved.max_latency_ms == 1500

    def test_fraction_floors(self) -> None:
        resolved = resolve_latency_threshold(TimeoutPercentageThreshold(33), 1000)
        assert resolved.max_latency_ms == 330

    def test_fraction_floors_not_rounds(self) -> None:
        resolved = resolve_latency_threshold(TimeoutPercentageThreshold(33.35), 1000)
        assert resolved.max_latency_ms == 333

    def test_absolute_passes_through(self) -> None:
        threshold = LatencyThreshold(max_latency_ms=1234, props={"custom_tags": ["a"]})
        assert resolve_latency_threshold(threshold, 10_000) is threshold

    def test_props_carried_through(self) -> None:
        threshold = TimeoutPercentageThreshold(
            50, props={"datapoints_to_alarm": 2, "custom_tags": ["grp"]}
        )
        resolved = resolve_latency_threshold(threshold, 10_000)
        assert resolved.props == {"datapoints_to_alarm": 2, "custom_tags": ["grp"]}

    def test_no_timeout_and_no_default(self) -> None:
        with pytest.raises(UnresolvedThreshold):
            resolve_latency_threshold(
                TimeoutPercentageThreshold(50), None, default_timeout_ms=None
            )

    def test_custom_default(self) -> None:
        resolved = resolve_latency_threshold(
            TimeoutPercentageThreshold(10), None, default_timeout_ms=60_000
        )
        assert resolved.max_latency_ms == 6000


# ── parse_latency_threshold ─────────────────────────────────────


class TestParseLatencyThreshold:
    def test_absolute(self) -> None:
        threshold = parse_latency_threshold({"max_latency_ms": 2000, "custom_tags": ["a"]})
        assert threshold == LatencyThreshold(2000, props={"custom_tags": ["a"]})

    def test_percentage(self) -> None:
        threshold = parse_latency_threshold({"max_latency_percentage_of_timeout": 80})
        assert isinstance(threshold, TimeoutPercentageThreshold)
        assert threshold.max_latency_percentage_of_timeout == 80.0

    def test_both_rejected(self) -> None:
        with pytest.raises(InvalidDefinition, match="mutually exclusive"):
            parse_latency_threshold(
                {"max_latency_ms": 1, "max_latency_percentage_of_timeout": 1}
            )

    def test_neither_rejected(self) -> None:
        with pytest.raises(InvalidDefinition):
            parse_latency_threshold({"custom_tags": ["a"]})
