import logging
from typing import Any, List, Mapping, Optional

from .alarm_config import AlarmDefinition, AlarmRecord
from .constants import COMPOSITE_FIELDS, DEFAULT_COMPOSITE_SUFFIX, NAME_SEPARATOR
from .exceptions import EmptyCompositeSet, InvalidDefinition
from .registry import AlarmRegistry

logger = logging.getLogger(__name__)


class CompositeBuilder:
    """Builds composite alarms over the registry's alarms sharing a tag."""

    def __init__(self, registry: AlarmRegistry) -> None:
        self.registry = registry

    def build_composite(
        self,
        tag: str,
        overrides: Optional[Mapping[str, Any]] = None,
        allow_nested_composites: bool = False,
    ) -> AlarmRecord:
        """
        Create and register a composite alarm that fires when any alarm tagged
        with `tag` is in ALARM state.

        Members are taken from records already registered, so the new composite
        never ends up among its own members.

        Raises:
            EmptyCompositeSet: If no eligible alarm carries the tag.
            InvalidDefinition: If overrides name an unsupported field.
        """
        overrides = dict(overrides or {})
        unknown = set(overrides) - COMPOSITE_FIELDS
        if unknown:
            raise InvalidDefinition(
                f"Unsupported composite alarm fields: {', '.join(sorted(unknown))}"
            )

        matched = self.registry.by_tag(tag)
        if allow_nested_composites:
            members = matched
        else:
            members = self._exclude_nested(tag, matched)

        if not members:
            raise EmptyCompositeSet(f"No eligible alarms found with tag '{tag}'")

        definition = AlarmDefinition(
            evaluation_periods=1,
            datapoints_to_alarm=1,
            actions_enabled=overrides.get("actions_enabled", True),
            action=overrides.get("action"),
            disambiguator=overrides.get("disambiguator"),
            custom_tags=overrides.get("custom_tags") or (),
            alarm_name_suffix=overrides.get("alarm_name_suffix")
            or f"{DEFAULT_COMPOSITE_SUFFIX}{NAME_SEPARATOR}{tag}",
            alarm_description=overrides.get("alarm_description", ""),
        )
        record = self.registry.register(definition, members=members)
        logger.info(
            f"Created composite alarm {record.name} over {len(members)} alarms tagged '{tag}'"
        )
        return record

    def _exclude_nested(self, tag: str, matched: List[AlarmRecord]) -> List[AlarmRecord]:
        """Drop composite alarms from the members. Not an error: it flattens the tree."""
        members = []
        for record in matched:
            if record.is_composite:
                logger.info(
                    f"Excluding composite alarm {record.name} from composite over tag '{tag}'"
                )
                continue
            members.append(record)
        return members
