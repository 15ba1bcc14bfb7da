from __future__ import annotations

import pytest

from alarm_engine.alarm_config import ComparisonOperator, TreatMissingData, notify_sns
from alarm_engine.alarm_factory import AlarmFactory, AlarmFactoryDefaults
from alarm_engine.exceptions import InvalidDefinition, UnresolvedThreshold
from alarm_engine.thresholds import LatencyThreshold, TimeoutPercentageThreshold


@pytest.fixture
def defaults() -> AlarmFactoryDefaults:
    return AlarmFactoryDefaults(
        alarm_name_prefix="MyApp",
        datapoints_to_alarm=5,
        treat_missing_data=TreatMissingData.NOT_BREACHING,
    )


@pytest.fixture
def factory(registry, defaults) -> AlarmFactory:
    return AlarmFactory(registry, defaults, local_prefix="OrderHandler")


class TestAddAlarm:
    def test_defaults_applied(self, factory, metric) -> None:
        record = factory.add_alarm(
            metric, ComparisonOperator.GREATER_THAN, 100, "Errors", "Critical"
        )
        definition = record.definition
        assert record.name == "MyApp-OrderHandler-Errors-Critical"
        assert definition.datapoints_to_alarm == 5
        assert definition.evaluation_periods == 5
        assert definition.treat_missing_data is TreatMissingData.NOT_BREACHING
        assert definition.actions_enabled is True

    def test_props_override_defaults(self, factory, metric) -> None:
        record = factory.add_alarm(
            metric,
            ComparisonOperator.LESS_THAN,
            1,
            "LowTps",
            datapoints_to_alarm=2,
            evaluation_periods=4,
            treat_missing_data="breaching",
            actions_enabled=False,
            custom_tags=["orders"],
        )
        definition = record.definition
        assert (definition.datapoints_to_alarm, definition.evaluation_periods) == (2, 4)
        assert definition.treat_missing_data is TreatMissingData.BREACHING
        assert definition.actions_enabled is False
        assert record.custom_tags == frozenset({"orders"})

    def test_evaluation_periods_default(self, registry, metric) -> None:
        defaults = AlarmFactoryDefaults(
            alarm_name_prefix="MyApp", datapoints_to_alarm=3, evaluation_periods=10
        )
        record = AlarmFactory(registry, defaults).add_alarm(
            metric, ComparisonOperator.GREATER_THAN, 1, "Errors"
        )
        assert record.name == "MyApp-Errors"
        assert record.definition.evaluation_periods == 10
        assert record.definition.datapoints_to_alarm == 3

    def test_unknown_prop_rejected(self, factory, metric) -> None:
        with pytest.raises(InvalidDefinition, match="colour"):
            factory.add_alarm(
                metric, ComparisonOperator.GREATER_THAN, 1, "Errors", colour="red"
            )

    def test_datapoints_above_periods_rejected(self, factory, metric) -> None:
        with pytest.raises(InvalidDefinition):
            factory.add_alarm(
                metric,
                ComparisonOperator.GREATER_THAN,
                1,
                "Errors",
                datapoints_to_alarm=6,
                evaluation_periods=5,
            )

    def test_action_resolution_through_registry(self, factory, registry, metric) -> None:
        registry.disambiguator_actions["Critical"] = notify_sns("arn:critical")
        critical = factory.add_alarm(
            metric, ComparisonOperator.GREATER_THAN, 1, "Errors", "Critical"
        )
        explicit = factory.add_alarm(
            metric,
            ComparisonOperator.GREATER_THAN,
            1,
            "Faults",
            "Critical",
            action=notify_sns("arn:explicit"),
        )
        assert critical.alarm_actions() == ["arn:critical"]
        assert explicit.alarm_actions() == ["arn:explicit"]


class TestAddLatencyAlarm:
    def test_percentage_of_timeout(self, factory, metric) -> None:
        record = factory.add_latency_alarm(
            metric,
            TimeoutPercentageThreshold(80, props={"custom_tags": ["orders"]}),
            timeout_ms=10000,
            disambiguator="Critical",
        )
        assert record.name == "MyApp-OrderHandler-Latency-Critical"
        assert record.definition.threshold == 8000
        assert record.definition.comparison_operator is ComparisonOperator.GREATER_THAN
        assert record.custom_tags == frozenset({"orders"})

    def test_default_timeout(self, factory, metric) -> None:
        record = factory.add_latency_alarm(
            metric, TimeoutPercentageThreshold(50), timeout_ms=None
        )
        assert record.definition.threshold == 1500

    def test_absolute_threshold(self, factory, metric) -> None:
        record = factory.add_latency_alarm(
            metric,
            LatencyThreshold(2000, props={"datapoints_to_alarm": 2}),
            timeout_ms=10000,
            alarm_name_suffix="LatencyP90",
            disambiguator="Warning",
        )
        assert record.definition.threshold == 2000
        assert record.definition.datapoints_to_alarm == 2

    def test_unresolved_not_registered(self, factory, registry, metric, monkeypatch) -> None:
        def unresolved(threshold, timeout_ms):
            raise UnresolvedThreshold("no timeout")

        monkeypatch.setattr(
            "alarm_engine.alarm_factory.resolve_latency_threshold", unresolved
        )
        with pytest.raises(UnresolvedThreshold):
            factory.add_latency_alarm(metric, TimeoutPercentageThreshold(50), None)
        assert len(registry) == 0
