import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .constants import DEFAULT_TIMEOUT_MS
from .exceptions import InvalidDefinition, UnresolvedThreshold

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatencyThreshold:
    """Absolute latency ceiling in milliseconds."""

    max_latency_ms: int
    # remaining alarm fields (datapoints, tags, ...) carried through resolution
    props: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TimeoutPercentageThreshold:
    """Latency ceiling expressed as a percentage of the resource timeout."""

    max_latency_percentage_of_timeout: float
    props: Dict[str, Any] = field(default_factory=dict)


AnyLatencyThreshold = Union[LatencyThreshold, TimeoutPercentageThreshold]


def resolve_latency_threshold(
    threshold: AnyLatencyThreshold,
    timeout_ms: Optional[int],
    default_timeout_ms: Optional[int] = DEFAULT_TIMEOUT_MS,
) -> LatencyThreshold:
    """
    Normalize a latency threshold to an absolute value.

    Percentages resolve to floor(timeout * percentage / 100): flooring keeps the
    alarm on the earlier-triggering side of the ceiling.

    Raises:
        UnresolvedThreshold: If no timeout is known and no default applies.
    """
    if isinstance(threshold, LatencyThreshold):
        return threshold

    effective_timeout = timeout_ms if timeout_ms is not None else default_timeout_ms
    if effective_timeout is None:
        raise UnresolvedThreshold(
            f"Cannot resolve {threshold.max_latency_percentage_of_timeout}% of timeout: "
            "resource has no timeout and no default applies"
        )

    resolved = math.floor(
        effective_timeout * threshold.max_latency_percentage_of_timeout / 100
    )
    logger.debug(
        f"Resolved {threshold.max_latency_percentage_of_timeout}% of "
        f"{effective_timeout} ms to {resolved} ms"
    )
    return LatencyThreshold(max_latency_ms=resolved, props=dict(threshold.props))


def parse_latency_threshold(data: Dict[str, Any]) -> AnyLatencyThreshold:
    """Build a latency threshold from a config mapping."""
    props = {
        key: value
        for key, value in data.items()
        if key not in ("max_latency_ms", "max_latency_percentage_of_timeout")
    }
    if "max_latency_ms" in data and "max_latency_percentage_of_timeout" in data:
        raise InvalidDefinition(
            "max_latency_ms and max_latency_percentage_of_timeout are mutually exclusive"
        )
    if "max_latency_ms" in data:
        return LatencyThreshold(max_latency_ms=int(data["max_latency_ms"]), props=props)
    if "max_latency_percentage_of_timeout" in data:
        return TimeoutPercentageThreshold(
            max_latency_percentage_of_timeout=float(
                data["max_latency_percentage_of_timeout"]
            ),
            props=props,
        )
    raise InvalidDefinition(
        "Latency threshold requires max_latency_ms or max_latency_percentage_of_timeout"
    )
