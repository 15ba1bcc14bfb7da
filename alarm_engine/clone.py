import dataclasses
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional

from .alarm_config import AlarmRecord
from .constants import CLONEABLE_FIELDS
from .exceptions import InvalidDefinition
from .registry import AlarmRegistry

logger = logging.getLogger(__name__)

CloneTransform = Callable[[AlarmRecord], Optional[Mapping[str, Any]]]


class CloneEngine:
    """Derives new alarms from existing ones under a caller-supplied transform."""

    def __init__(self, registry: AlarmRegistry) -> None:
        self.registry = registry

    def clone_alarms(
        self, source_records: Iterable[AlarmRecord], transform: CloneTransform
    ) -> List[AlarmRecord]:
        """
        Clone each source record whose transform returns overrides.

        The transform returns None to skip a record, or a mapping of the fields
        to replace. Every other field, the metric included, is copied from the
        source. Clones go through the same registry validation as any alarm.

        Returns:
            List[AlarmRecord]: The clones, in input order.
        """
        clones = []
        for source in source_records:
            overrides = transform(source)
            if overrides is None:
                logger.debug(f"Transform skipped alarm {source.name}")
                continue
            clones.append(self._clone(source, overrides))

        logger.info(f"Cloned {len(clones)} alarms")
        return clones

    def _clone(self, source: AlarmRecord, overrides: Mapping[str, Any]) -> AlarmRecord:
        unknown = set(overrides) - CLONEABLE_FIELDS
        if unknown:
            raise InvalidDefinition(
                f"Cannot override {', '.join(sorted(unknown))} when cloning {source.name}"
            )

        definition = dataclasses.replace(source.definition, **overrides)

        return self.registry.register(
            definition,
            naming_strategy=source.naming_strategy,
            members=source.members if source.is_composite else None,
        )
