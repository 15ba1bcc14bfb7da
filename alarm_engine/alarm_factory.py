import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .alarm_config import (
    AlarmAction,
    AlarmDefinition,
    AlarmRecord,
    ComparisonOperator,
    Metric,
    TreatMissingData,
)
from .constants import DEFAULT_DATAPOINTS_TO_ALARM
from .exceptions import InvalidDefinition
from .registry import AlarmRegistry
from .thresholds import AnyLatencyThreshold, resolve_latency_threshold

logger = logging.getLogger(__name__)

ALARM_PROPS = frozenset(
    {
        "evaluation_periods",
        "datapoints_to_alarm",
        "treat_missing_data",
        "actions_enabled",
        "action",
        "custom_tags",
        "alarm_description",
    }
)


@dataclass
class AlarmFactoryDefaults:
    """Session-wide defaults applied to every alarm the factory creates."""

    alarm_name_prefix: str
    actions_enabled: bool = True
    datapoints_to_alarm: int = DEFAULT_DATAPOINTS_TO_ALARM
    # falls back to datapoints_to_alarm
    evaluation_periods: Optional[int] = None
    treat_missing_data: TreatMissingData = TreatMissingData.MISSING
    action: Optional[AlarmAction] = None
    disambiguator_actions: Dict[str, AlarmAction] = field(default_factory=dict)


class AlarmFactory:
    """Creates metric alarms for one monitored resource and registers them."""

    def __init__(
        self,
        registry: AlarmRegistry,
        defaults: AlarmFactoryDefaults,
        local_prefix: Optional[str] = None,
    ) -> None:
        self.registry = registry
        self.defaults = defaults
        self.naming_strategy = registry.naming_strategy.with_local_prefix(local_prefix)

    def add_alarm(
        self,
        metric: Metric,
        comparison_operator: ComparisonOperator,
        threshold: float,
        alarm_name_suffix: str,
        disambiguator: Optional[str] = None,
        **props: Any,
    ) -> AlarmRecord:
        """Fill in the defaults for any field not given in props and register the alarm."""
        unknown = set(props) - ALARM_PROPS
        if unknown:
            raise InvalidDefinition(
                f"Unsupported alarm properties for {alarm_name_suffix}: {', '.join(sorted(unknown))}"
            )

        datapoints = props.pop("datapoints_to_alarm", self.defaults.datapoints_to_alarm)
        evaluation_periods = props.pop(
            "evaluation_periods", self.defaults.evaluation_periods
        )
        if evaluation_periods is None:
            evaluation_periods = datapoints
        settings: Dict[str, Any] = {
            "treat_missing_data": self.defaults.treat_missing_data,
            "actions_enabled": self.defaults.actions_enabled,
        }
        settings.update(props)

        definition = AlarmDefinition(
            metric=metric,
            comparison_operator=comparison_operator,
            threshold=threshold,
            evaluation_periods=evaluation_periods,
            datapoints_to_alarm=datapoints,
            disambiguator=disambiguator,
            alarm_name_suffix=alarm_name_suffix,
            **settings,
        )
        record = self.registry.register(definition, naming_strategy=self.naming_strategy)
        logger.debug(f"Created alarm {record.name} with threshold {threshold}")
        return record

    def add_latency_alarm(
        self,
        metric: Metric,
        threshold: AnyLatencyThreshold,
        timeout_ms: Optional[int],
        alarm_name_suffix: str = "Latency",
        disambiguator: Optional[str] = None,
    ) -> AlarmRecord:
        """Create a latency ceiling alarm, resolving timeout percentages first."""
        resolved = resolve_latency_threshold(threshold, timeout_ms)
        return self.add_alarm(
            metric,
            ComparisonOperator.GREATER_THAN,
            resolved.max_latency_ms,
            alarm_name_suffix,
            disambiguator,
            **resolved.props,
        )
