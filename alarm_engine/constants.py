"""Constants for CloudWatch alarm management."""

from typing import Final, FrozenSet

# Alarm defaults
DEFAULT_DATAPOINTS_TO_ALARM: Final[int] = 3
DEFAULT_TIMEOUT_MS: Final[int] = 3000
DEFAULT_COMPOSITE_SUFFIX: Final[str] = "Composite"
NAME_SEPARATOR: Final[str] = "-"

# Deployment
DEFAULT_MAX_WORKERS: Final[int] = 5
DELETE_BATCH_SIZE: Final[int] = 100
MANAGE_BY_TAG_KEY: Final[str] = "managed_by"
MANAGED_TAG_VALUE: Final[str] = "AlarmEngine"

# Fields a clone transform may replace
CLONEABLE_FIELDS: Final[FrozenSet[str]] = frozenset(
    {
        "threshold",
        "comparison_operator",
        "evaluation_periods",
        "datapoints_to_alarm",
        "treat_missing_data",
        "disambiguator",
        "actions_enabled",
        "action",
        "alarm_description",
        "alarm_name_suffix",
        "custom_tags",
    }
)

# Fields a composite alarm may set
COMPOSITE_FIELDS: Final[FrozenSet[str]] = frozenset(
    {
        "disambiguator",
        "alarm_name_suffix",
        "alarm_description",
        "custom_tags",
        "actions_enabled",
        "action",
    }
)
