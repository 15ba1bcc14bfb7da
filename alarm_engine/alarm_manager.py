# ====================================================
# Standard Library Imports
# ====================================================
import boto3
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set
from concurrent.futures import ThreadPoolExecutor, as_completed

# ====================================================
# Internal Module Imports
# ====================================================
from resource_discovery import Resource
from .alarm_config import AlarmRecord, ComparisonOperator, Metric
from .alarm_factory import AlarmFactory, AlarmFactoryDefaults
from .clone import CloneEngine, CloneTransform
from .composite import CompositeBuilder
from .config_loader import CloneSettings, ResourceSettings, SessionConfig
from .constants import (
    DEFAULT_MAX_WORKERS,
    DELETE_BATCH_SIZE,
    MANAGE_BY_TAG_KEY,
    MANAGED_TAG_VALUE,
)
from .exceptions import InvalidDefinition
from .naming import AlarmNamingStrategy
from .registry import AlarmRegistry
from .thresholds import AnyLatencyThreshold, parse_latency_threshold

# ====================================================
# Logger Setup
# ====================================================
logger = logging.getLogger(__name__)

TimeoutLookup = Callable[[Resource], Optional[int]]

EXTENDED_STATISTIC_PATTERN = re.compile(
    r"^(?:IQM|(?:p|tm|tc|ts|wm)\d{1,3}(?:\.\d+)?|(?:TM|TC|TS|WM|PR|tm|tc|ts|wm|pr)\([^():]*:[^():]*\))$"
)


# ====================================================
# MonitoringSession Class Definition
# ====================================================
class MonitoringSession:
    """
    One configuration pass: owns the alarm registry and the builders that
    operate on it. Sessions are independent; several can coexist.
    """

    def __init__(self, defaults: AlarmFactoryDefaults) -> None:
        self.defaults = defaults
        self.registry = AlarmRegistry(
            naming_strategy=AlarmNamingStrategy(defaults.alarm_name_prefix),
            default_action=defaults.action,
            disambiguator_actions=defaults.disambiguator_actions,
        )
        self.composite_builder = CompositeBuilder(self.registry)
        self.clone_engine = CloneEngine(self.registry)

    @classmethod
    def from_config(
        cls, config: SessionConfig, timeout_lookup: Optional[TimeoutLookup] = None
    ) -> "MonitoringSession":
        """
        Build a session from loaded configuration.
        Resources are monitored first, then clone rules apply, then composites.
        """
        session = cls(config.defaults)
        for resource_settings in config.resources:
            session.monitor_resource(resource_settings, timeout_lookup)
        for clone_settings in config.clones:
            session.apply_clone_rule(clone_settings)
        for composite in config.composites:
            session.create_composite_alarm_using_tag(
                composite.tag,
                composite.overrides,
                composite.allow_nested_composites,
            )
        logger.info(f"Session defines {len(session.registry)} alarms")
        return session

    # ----------------------------
    # Alarm Creation Methods
    # ----------------------------
    def alarm_factory(self, local_prefix: Optional[str] = None) -> AlarmFactory:
        return AlarmFactory(self.registry, self.defaults, local_prefix)

    def monitor_resource(
        self,
        settings: ResourceSettings,
        timeout_lookup: Optional[TimeoutLookup] = None,
    ) -> List[AlarmRecord]:
        """Create every configured alarm of a resource, one per disambiguator."""
        resource = settings.resource
        factory = self.alarm_factory(resource.name)
        timeout_ms = self._get_timeout_ms(settings, timeout_lookup)

        created = []
        for alarm in settings.alarms:
            for disambiguator, props in alarm.disambiguators.items():
                props = dict(props)
                if alarm.alarm_type == "latency":
                    record = factory.add_latency_alarm(
                        alarm.metric,
                        parse_latency_threshold(props),
                        timeout_ms,
                        alarm.alarm_name_suffix,
                        disambiguator,
                    )
                else:
                    if "threshold" not in props:
                        raise InvalidDefinition(
                            f"{resource.name}.{alarm.alarm_name_suffix} ({disambiguator}) has no threshold"
                        )
                    threshold = props.pop("threshold")
                    record = factory.add_alarm(
                        alarm.metric,
                        alarm.comparison_operator,
                        threshold,
                        alarm.alarm_name_suffix,
                        disambiguator,
                        **props,
                    )
                created.append(record)

        logger.info(f"Created {len(created)} alarm definitions for {resource.type} - {resource.name}")
        return created

    def _get_timeout_ms(
        self, settings: ResourceSettings, timeout_lookup: Optional[TimeoutLookup]
    ) -> Optional[int]:
        resource = settings.resource
        if resource.timeout_ms is not None:
            return resource.timeout_ms
        if timeout_lookup is None:
            return None
        if not any(alarm.alarm_type == "latency" for alarm in settings.alarms):
            return None
        return timeout_lookup(resource)

    def add_alarm(
        self,
        metric: Metric,
        comparison_operator: ComparisonOperator,
        threshold: float,
        alarm_name_suffix: str,
        disambiguator: Optional[str] = None,
        local_prefix: Optional[str] = None,
        **props: Any,
    ) -> AlarmRecord:
        return self.alarm_factory(local_prefix).add_alarm(
            metric,
            comparison_operator,
            threshold,
            alarm_name_suffix,
            disambiguator,
            **props,
        )

    def add_latency_alarm(
        self,
        metric: Metric,
        threshold: AnyLatencyThreshold,
        resource: Resource,
        alarm_name_suffix: str = "Latency",
        disambiguator: Optional[str] = None,
    ) -> AlarmRecord:
        """Latency alarm named after the resource, resolved against its timeout."""
        return self.alarm_factory(resource.name).add_latency_alarm(
            metric, threshold, resource.timeout_ms, alarm_name_suffix, disambiguator
        )

    # ----------------------------
    # Registry Queries
    # ----------------------------
    def created_alarms(self) -> List[AlarmRecord]:
        return self.registry.all()

    def created_alarms_with_disambiguator(self, disambiguator: str) -> List[AlarmRecord]:
        return self.registry.by_disambiguator(disambiguator)

    def created_alarms_with_tag(self, tag: str) -> List[AlarmRecord]:
        return self.registry.by_tag(tag)

    # ----------------------------
    # Composition and Cloning
    # ----------------------------
    def create_composite_alarm_using_tag(
        self,
        tag: str,
        overrides: Optional[Mapping[str, Any]] = None,
        allow_nested_composites: bool = False,
    ) -> AlarmRecord:
        return self.composite_builder.build_composite(
            tag, overrides, allow_nested_composites
        )

    def clone_alarms(
        self, source_records: Iterable[AlarmRecord], transform: CloneTransform
    ) -> List[AlarmRecord]:
        return self.clone_engine.clone_alarms(source_records, transform)

    def apply_clone_rule(self, rule: CloneSettings) -> List[AlarmRecord]:
        """Clone the alarms of one disambiguator as described by a config rule."""

        def transform(record: AlarmRecord) -> Optional[Dict[str, Any]]:
            definition = record.definition
            if (
                rule.comparison_operator is not None
                and definition.comparison_operator != rule.comparison_operator
            ):
                return None
            overrides = dict(rule.overrides)
            if rule.threshold_factor is not None and definition.threshold is not None:
                overrides["threshold"] = definition.threshold * rule.threshold_factor
            if rule.datapoints_delta:
                overrides["datapoints_to_alarm"] = (
                    definition.datapoints_to_alarm + rule.datapoints_delta
                )
            return overrides

        sources = self.registry.by_disambiguator(rule.source_disambiguator)
        return self.clone_alarms(sources, transform)


# ====================================================
# AlarmDeployer Class Definition
# ====================================================
class AlarmDeployer:
    """
    Publishes session alarms to CloudWatch.
    Metric alarms are deployed in parallel; composites follow in registration
    order, after every alarm they reference exists.
    """

    def __init__(
        self, session: boto3.Session, max_workers: int = DEFAULT_MAX_WORKERS
    ) -> None:
        self.cloudwatch = session.client("cloudwatch")
        self.max_workers = max_workers

    # ----------------------------
    # Alarm Deployment Methods
    # ----------------------------
    def deploy_alarms(self, records: Iterable[AlarmRecord]) -> None:
        records = list(records)
        metric_alarms = [record for record in records if not record.is_composite]
        composites = [record for record in records if record.is_composite]
        logger.info(
            f"Deploying {len(metric_alarms)} metric alarms and {len(composites)} composite alarms"
        )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._deploy_metric_alarm, record): record.name
                for record in metric_alarms
            }
            for future in as_completed(futures):
                alarm_name = futures[future]
                try:
                    future.result()
                    logger.info(f"Deployed alarm: {alarm_name}")
                except Exception as e:
                    logger.error(f"Failed to deploy {alarm_name}: {e}")
                    raise

        for record in composites:
            self._deploy_composite_alarm(record)
            logger.info(f"Deployed composite alarm: {record.name}")

    def _deploy_metric_alarm(self, record: AlarmRecord) -> None:
        """Deploy a single metric alarm using the put_metric_alarm API."""
        definition = record.definition
        metric = definition.metric
        params: Dict[str, Any] = {
            "AlarmName": record.name,
            "AlarmDescription": record.description,
            "ActionsEnabled": definition.actions_enabled,
            "AlarmActions": record.alarm_actions(),
            "MetricName": metric.name,
            "Namespace": metric.namespace,
            "Dimensions": self._build_dimensions(metric),
            "Period": metric.period,
            "EvaluationPeriods": definition.evaluation_periods,
            "DatapointsToAlarm": definition.datapoints_to_alarm,
            "Threshold": float(definition.threshold),
            "ComparisonOperator": definition.comparison_operator.value,
            "TreatMissingData": definition.treat_missing_data.value,
            "Tags": self._build_alarm_tags(record.name),
        }
        if self._is_extended_statistic(metric.statistic):
            params["ExtendedStatistic"] = metric.statistic
        else:
            params["Statistic"] = metric.statistic
        if metric.unit:
            params["Unit"] = metric.unit

        try:
            self.cloudwatch.put_metric_alarm(**params)
        except Exception as e:
            logger.error(f"Error deploying alarm {record.name}: {e}")
            raise

    def _deploy_composite_alarm(self, record: AlarmRecord) -> None:
        """Deploy a single composite alarm using the put_composite_alarm API."""
        try:
            self.cloudwatch.put_composite_alarm(
                AlarmName=record.name,
                AlarmRule=record.alarm_rule,
                AlarmDescription=record.description,
                ActionsEnabled=record.definition.actions_enabled,
                AlarmActions=record.alarm_actions(),
                Tags=self._build_alarm_tags(record.name),
            )
        except Exception as e:
            logger.error(f"Error deploying composite alarm {record.name}: {e}")
            raise

    # ----------------------------
    # Alarm Scan and Delete Methods
    # ----------------------------
    def scan_alarms(self, prefix: str) -> Set[str]:
        """Return the names of existing alarms whose name starts with prefix."""
        paginator = self.cloudwatch.get_paginator("describe_alarms")
        names: Set[str] = set()
        for page in paginator.paginate(
            AlarmNamePrefix=prefix, AlarmTypes=["MetricAlarm", "CompositeAlarm"]
        ):
            names.update(alarm["AlarmName"] for alarm in page.get("MetricAlarms", []))
            names.update(
                alarm["AlarmName"] for alarm in page.get("CompositeAlarms", [])
            )
        logger.info(f"Found {len(names)} existing alarms with prefix '{prefix}'")
        return names

    def delete_alarms(self, records: Iterable[AlarmRecord]) -> None:
        """
        Delete the given alarms. Composites go first, newest first, since
        CloudWatch refuses to delete an alarm a composite still references.
        """
        records = list(records)
        composites = [record.name for record in reversed(records) if record.is_composite]
        metric_alarms = [record.name for record in records if not record.is_composite]

        for names in (composites, metric_alarms):
            for i in range(0, len(names), DELETE_BATCH_SIZE):
                batch = names[i : i + DELETE_BATCH_SIZE]
                try:
                    self.cloudwatch.delete_alarms(AlarmNames=batch)
                    logger.info(f"Successfully deleted alarms: {batch}")
                except Exception as e:
                    logger.error(f"Error deleting alarms {batch}: {e}")
                    raise

    # ----------------------------
    # Helper Methods
    # ----------------------------
    @staticmethod
    def _is_extended_statistic(statistic: str) -> bool:
        """Percentiles (p90), trimmed and winsorized means (tm99, TM(10%:90%)), IQM, PR(...)."""
        return EXTENDED_STATISTIC_PATTERN.match(statistic) is not None

    @staticmethod
    def _build_dimensions(metric: Metric) -> List[Dict[str, str]]:
        return [{"Name": name, "Value": value} for name, value in metric.dimensions]

    @staticmethod
    def _build_alarm_tags(alarm_name: str) -> List[Dict[str, str]]:
        """Create standardized tags for CloudWatch alarms."""
        return [
            {"Key": "Name", "Value": alarm_name},
            {"Key": "ResourceType", "Value": "CloudWatchAlarm"},
            {"Key": MANAGE_BY_TAG_KEY, "Value": MANAGED_TAG_VALUE},
        ]


# ====================================================
# End of AlarmManager Module
# ====================================================
