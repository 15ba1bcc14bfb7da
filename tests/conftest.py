from __future__ import annotations

from typing import Any, Callable

import pytest

from alarm_engine.alarm_config import AlarmDefinition, ComparisonOperator, Metric
from alarm_engine.naming import AlarmNamingStrategy
from alarm_engine.registry import AlarmRegistry


@pytest.fixture
def metric() -> Metric:
    return Metric(
        name="Duration",
        namespace="AWS/Lambda",
        statistic="p90",
        unit="Milliseconds",
        dimensions=[{"Name": "FunctionName", "Value": "order-handler"}],
    )


@pytest.fixture
def registry() -> AlarmRegistry:
    return AlarmRegistry(AlarmNamingStrategy("MyApp"))


@pytest.fixture
def make_definition(metric: Metric) -> Callable[..., AlarmDefinition]:
    def _make(**fields: Any) -> AlarmDefinition:
        values: dict[str, Any] = {
            "metric": metric,
            "comparison_operator": ComparisonOperator.GREATER_THAN,
            "threshold": 100.0,
            "evaluation_periods": 5,
            "datapoints_to_alarm": 5,
            "alarm_name_suffix": "Latency",
        }
        values.update(fields)
        return AlarmDefinition(**values)

    return _make
