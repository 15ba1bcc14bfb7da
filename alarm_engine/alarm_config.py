from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from .constants import DEFAULT_DATAPOINTS_TO_ALARM
from .exceptions import InvalidDefinition
from .naming import AlarmNamingStrategy


class ComparisonOperator(str, Enum):
    """Threshold comparison operators supported by CloudWatch."""

    GREATER_THAN = "GreaterThanThreshold"
    GREATER_THAN_OR_EQUAL = "GreaterThanOrEqualToThreshold"
    LESS_THAN = "LessThanThreshold"
    LESS_THAN_OR_EQUAL = "LessThanOrEqualToThreshold"

    @classmethod
    def parse(cls, value: Union[str, "ComparisonOperator"]) -> "ComparisonOperator":
        """Accept a member, a member name or a CloudWatch operator string."""
        if isinstance(value, cls):
            return value
        if value in cls.__members__:
            return cls[value]
        return cls(value)


class TreatMissingData(str, Enum):
    BREACHING = "breaching"
    NOT_BREACHING = "notBreaching"
    IGNORE = "ignore"
    MISSING = "missing"

    @classmethod
    def parse(cls, value: Union[str, "TreatMissingData"]) -> "TreatMissingData":
        if isinstance(value, cls):
            return value
        if value in cls.__members__:
            return cls[value]
        return cls(value)


@dataclass(frozen=True)
class Metric:
    """Reference to a CloudWatch metric. Never interpreted by the engine."""

    name: str
    namespace: str
    statistic: str = "Average"
    period: int = 300
    unit: Optional[str] = None
    # (name, value) pairs; accepts a mapping or CloudWatch {"Name", "Value"} entries
    dimensions: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", _to_dimension_pairs(self.dimensions))


def _to_dimension_pairs(dimensions: Any) -> Tuple[Tuple[str, str], ...]:
    if not dimensions:
        return ()
    if isinstance(dimensions, Mapping):
        return tuple((str(k), str(v)) for k, v in dimensions.items())
    pairs = []
    for dimension in dimensions:
        if isinstance(dimension, Mapping):
            pairs.append((str(dimension["Name"]), str(dimension["Value"])))
        else:
            name, value = dimension
            pairs.append((str(name), str(value)))
    return tuple(pairs)


@dataclass(frozen=True)
class AlarmAction:
    """Notification target for an alarm (SNS topics)."""

    topic_arns: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.topic_arns)


def notify_sns(*topic_arns: str) -> AlarmAction:
    return AlarmAction(topic_arns=tuple(topic_arns))


def noop_action() -> AlarmAction:
    return AlarmAction()


@dataclass(frozen=True)
class AlarmDefinition:
    """Trigger condition of a single alarm.

    Attributes:
        metric (Metric): The metric the alarm evaluates (None for composites)
        comparison_operator (ComparisonOperator): How the metric is compared to the threshold
        threshold (float): The threshold value to compare against
        evaluation_periods (int): N in the "M out of N" rule
        datapoints_to_alarm (int): M in the "M out of N" rule
        treat_missing_data (TreatMissingData): Behaviour when datapoints are absent
        actions_enabled (bool): Whether notifications fire on state change
        action (AlarmAction): Explicit notification target, resolved by the registry when absent
        disambiguator (str): Severity or tier label, e.g. 'Critical'
        custom_tags (FrozenSet[str]): Free-form labels used for selection
        alarm_name_suffix (str): Base identifier passed to the naming strategy
        alarm_description (str): Optional description of the alarm
    """

    metric: Optional[Metric] = None
    comparison_operator: Optional[ComparisonOperator] = None
    threshold: Optional[float] = None
    evaluation_periods: int = DEFAULT_DATAPOINTS_TO_ALARM
    datapoints_to_alarm: int = DEFAULT_DATAPOINTS_TO_ALARM
    treat_missing_data: TreatMissingData = TreatMissingData.MISSING
    actions_enabled: bool = True
    action: Optional[AlarmAction] = None
    disambiguator: Optional[str] = None
    custom_tags: FrozenSet[str] = frozenset()
    alarm_name_suffix: str = ""
    alarm_description: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.custom_tags, str):
            raise InvalidDefinition(
                f"custom_tags must be a collection of strings, got {self.custom_tags!r}"
            )
        object.__setattr__(self, "custom_tags", frozenset(self.custom_tags or ()))
        try:
            if self.comparison_operator is not None:
                object.__setattr__(
                    self,
                    "comparison_operator",
                    ComparisonOperator.parse(self.comparison_operator),
                )
            object.__setattr__(
                self,
                "treat_missing_data",
                TreatMissingData.parse(self.treat_missing_data),
            )
        except (KeyError, ValueError) as e:
            raise InvalidDefinition(f"Invalid enum value: {e}") from e

    def validate(self, composite: bool = False) -> None:
        """Check the definition invariants. Values are never clamped."""
        for field_name in ("evaluation_periods", "datapoints_to_alarm"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidDefinition(
                    f"{field_name} must be a positive integer, got {value!r}"
                )

        if self.datapoints_to_alarm > self.evaluation_periods:
            raise InvalidDefinition(
                f"datapoints_to_alarm ({self.datapoints_to_alarm}) exceeds "
                f"evaluation_periods ({self.evaluation_periods})"
            )

        if composite:
            return

        missing = [
            name
            for name in ("metric", "comparison_operator", "threshold")
            if getattr(self, name) is None
        ]
        if missing:
            raise InvalidDefinition(
                f"Metric alarm '{self.alarm_name_suffix}' is missing: {', '.join(missing)}"
            )

        threshold = self.threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise InvalidDefinition(f"threshold must be a number, got {threshold!r}")


@dataclass(frozen=True, eq=False)
class AlarmRecord:
    """An alarm created in the current session."""

    name: str
    description: str
    definition: AlarmDefinition
    action: Optional[AlarmAction] = None
    is_composite: bool = False
    members: Tuple["AlarmRecord", ...] = ()
    naming_strategy: Optional[AlarmNamingStrategy] = None

    @property
    def disambiguator(self) -> Optional[str]:
        return self.definition.disambiguator

    @property
    def custom_tags(self) -> FrozenSet[str]:
        return self.definition.custom_tags

    @property
    def alarm_rule(self) -> str:
        """CloudWatch rule for a composite: any member in ALARM triggers it."""
        return " OR ".join(f'ALARM("{member.name}")' for member in self.members)

    def alarm_actions(self) -> List[str]:
        if not self.action:
            return []
        return list(self.action.topic_arns)

    def __repr__(self) -> str:
        kind = "Composite" if self.is_composite else "Metric"
        return f"AlarmRecord({kind}, name={self.name!r})"


def describe(record: AlarmRecord) -> Dict[str, Any]:
    """Flatten a record for logging and dry runs."""
    definition = record.definition
    summary: Dict[str, Any] = {
        "name": record.name,
        "composite": record.is_composite,
        "disambiguator": definition.disambiguator,
        "tags": sorted(definition.custom_tags),
        "actions_enabled": definition.actions_enabled,
        "actions": record.alarm_actions(),
    }
    if record.is_composite:
        summary["rule"] = record.alarm_rule
    else:
        summary.update(
            metric=f"{definition.metric.namespace}/{definition.metric.name}",
            comparison=definition.comparison_operator.value,
            threshold=definition.threshold,
            datapoints=f"{definition.datapoints_to_alarm}/{definition.evaluation_periods}",
        )
    return summary
