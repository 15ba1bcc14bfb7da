import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from utils import load_yaml
from resource_discovery import Resource
from .alarm_config import ComparisonOperator, Metric, TreatMissingData, notify_sns
from .alarm_factory import AlarmFactoryDefaults
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ALARM_TYPES = ("threshold", "latency")


@dataclass
class AlarmSettings:
    """One alarm of a resource, with per-disambiguator thresholds."""

    alarm_name_suffix: str
    metric: Metric
    alarm_type: str = "threshold"
    comparison_operator: Optional[ComparisonOperator] = None
    disambiguators: Dict[str, Dict[str, Any]] = field(default_factory=dict)


@dataclass
class ResourceSettings:
    resource: Resource
    alarms: List[AlarmSettings] = field(default_factory=list)


@dataclass
class CloneSettings:
    source_disambiguator: str
    overrides: Dict[str, Any] = field(default_factory=dict)
    # only clone alarms with this operator
    comparison_operator: Optional[ComparisonOperator] = None
    threshold_factor: Optional[float] = None
    datapoints_delta: int = 0


@dataclass
class CompositeSettings:
    tag: str
    overrides: Dict[str, Any] = field(default_factory=dict)
    allow_nested_composites: bool = False


@dataclass
class SessionConfig:
    defaults: AlarmFactoryDefaults
    resources: List[ResourceSettings] = field(default_factory=list)
    clones: List[CloneSettings] = field(default_factory=list)
    composites: List[CompositeSettings] = field(default_factory=list)


class ConfigLoader:
    """Loads a monitoring session definition from YAML."""

    @classmethod
    def load(cls, path: Union[str, Path]) -> SessionConfig:
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, FileNotFoundError) as e:
            logger.error(f"Error loading alarm config from {path}: {e}")
            raise ConfigurationError(f"Failed to load alarm config: {e}") from e

        config = cls.parse(data or {})
        logger.info(
            f"Loaded {len(config.resources)} resources, {len(config.clones)} clone rules "
            f"and {len(config.composites)} composites from {path}"
        )
        return config

    @classmethod
    def parse(cls, data: Dict[str, Any]) -> SessionConfig:
        try:
            return SessionConfig(
                defaults=cls._parse_defaults(data["defaults"]),
                resources=[
                    cls._parse_resource(resource)
                    for resource in data.get("resources", [])
                ],
                clones=[cls._parse_clone(clone) for clone in data.get("clones", [])],
                composites=[
                    CompositeSettings(
                        tag=composite["tag"],
                        overrides=cls._parse_props(composite.get("overrides", {})),
                        allow_nested_composites=bool(
                            composite.get("allow_nested_composites", False)
                        ),
                    )
                    for composite in data.get("composites", [])
                ],
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Invalid alarm config: {e!r}")
            raise ConfigurationError(f"Invalid alarm config: {e!r}") from e

    @classmethod
    def _parse_defaults(cls, data: Dict[str, Any]) -> AlarmFactoryDefaults:
        defaults = AlarmFactoryDefaults(
            alarm_name_prefix=data["alarm_name_prefix"],
            actions_enabled=bool(data.get("actions_enabled", True)),
            evaluation_periods=data.get("evaluation_periods"),
            treat_missing_data=TreatMissingData.parse(
                data.get("treat_missing_data", TreatMissingData.MISSING)
            ),
            disambiguator_actions={
                disambiguator: notify_sns(*arns)
                for disambiguator, arns in data.get(
                    "disambiguator_sns_topic_arns", {}
                ).items()
            },
        )
        if "datapoints_to_alarm" in data:
            defaults.datapoints_to_alarm = data["datapoints_to_alarm"]
        if data.get("sns_topic_arns"):
            defaults.action = notify_sns(*data["sns_topic_arns"])
        return defaults

    @classmethod
    def _parse_resource(cls, data: Dict[str, Any]) -> ResourceSettings:
        resource = Resource(
            type=data["type"],
            name=data["name"],
            id=data.get("id", ""),
            timeout_ms=data.get("timeout_ms"),
        )
        return ResourceSettings(
            resource=resource,
            alarms=[cls._parse_alarm(alarm) for alarm in data.get("alarms", [])],
        )

    @classmethod
    def _parse_alarm(cls, data: Dict[str, Any]) -> AlarmSettings:
        alarm_type = data.get("type", "threshold")
        if alarm_type not in ALARM_TYPES:
            raise ValueError(f"Unknown alarm type '{alarm_type}'")

        metric_data = data["metric"]
        metric = Metric(
            name=metric_data["name"],
            namespace=metric_data["namespace"],
            statistic=metric_data.get("statistic", "Average"),
            period=int(metric_data.get("period", 300)),
            unit=metric_data.get("unit"),
            dimensions=metric_data.get("dimensions", []),
        )
        operator = data.get("comparison_operator")
        if alarm_type == "threshold" and operator is None:
            raise ValueError(f"Alarm '{data['alarm_name_suffix']}' needs a comparison_operator")

        return AlarmSettings(
            alarm_name_suffix=data["alarm_name_suffix"],
            metric=metric,
            alarm_type=alarm_type,
            comparison_operator=ComparisonOperator.parse(operator) if operator else None,
            disambiguators={
                disambiguator: cls._parse_props(props or {})
                for disambiguator, props in data.get("disambiguators", {}).items()
            },
        )

    @classmethod
    def _parse_clone(cls, data: Dict[str, Any]) -> CloneSettings:
        operator = data.get("comparison_operator")
        factor = data.get("threshold_factor")
        return CloneSettings(
            source_disambiguator=data["source_disambiguator"],
            overrides=cls._parse_props(data.get("overrides", {})),
            comparison_operator=ComparisonOperator.parse(operator) if operator else None,
            threshold_factor=float(factor) if factor is not None else None,
            datapoints_delta=int(data.get("datapoints_delta", 0)),
        )

    @staticmethod
    def _parse_props(data: Dict[str, Any]) -> Dict[str, Any]:
        """Turn config keys into alarm fields: sns_topic_arns becomes an action."""
        props = dict(data)
        if "sns_topic_arns" in props:
            props["action"] = notify_sns(*props.pop("sns_topic_arns"))
        return props
