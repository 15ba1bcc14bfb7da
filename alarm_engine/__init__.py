"""
Alarm Engine Package

Session-scoped registry of CloudWatch alarms, with:
- Tag and disambiguator lookups
- Composite alarms built from tagged alarms
- Cloning of existing alarms under a transform
- Latency thresholds relative to a resource timeout
"""

__version__ = "0.1.0"

from .alarm_config import (
    AlarmAction,
    AlarmDefinition,
    AlarmRecord,
    ComparisonOperator,
    Metric,
    TreatMissingData,
    noop_action,
    notify_sns,
)
from .alarm_factory import AlarmFactory, AlarmFactoryDefaults
from .alarm_manager import AlarmDeployer, MonitoringSession
from .clone import CloneEngine
from .composite import CompositeBuilder
from .config_loader import ConfigLoader, SessionConfig
from .exceptions import (
    AlarmEngineError,
    ConfigurationError,
    DuplicateName,
    EmptyCompositeSet,
    InvalidDefinition,
    UnresolvedThreshold,
)
from .naming import AlarmNamingStrategy
from .registry import AlarmRegistry
from .thresholds import (
    LatencyThreshold,
    TimeoutPercentageThreshold,
    resolve_latency_threshold,
)

__all__ = [
    # Data model
    "AlarmAction",
    "AlarmDefinition",
    "AlarmRecord",
    "ComparisonOperator",
    "Metric",
    "TreatMissingData",
    "noop_action",
    "notify_sns",
    # Engine
    "AlarmRegistry",
    "AlarmNamingStrategy",
    "CompositeBuilder",
    "CloneEngine",
    "AlarmFactory",
    "AlarmFactoryDefaults",
    "LatencyThreshold",
    "TimeoutPercentageThreshold",
    "resolve_latency_threshold",
    # Session
    "MonitoringSession",
    "AlarmDeployer",
    "ConfigLoader",
    "SessionConfig",
    # Errors
    "AlarmEngineError",
    "ConfigurationError",
    "DuplicateName",
    "EmptyCompositeSet",
    "InvalidDefinition",
    "UnresolvedThreshold",
]
