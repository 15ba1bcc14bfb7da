import logging
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from .alarm_config import AlarmAction, AlarmDefinition, AlarmRecord
from .exceptions import DuplicateName
from .naming import AlarmNamingStrategy

logger = logging.getLogger(__name__)


class AlarmRegistry:
    """
    Append-only store of every alarm created during one configuration pass.
    Records are indexed by tag and by disambiguator at registration time, so
    lookups return them in registration order without rescanning.
    """

    def __init__(
        self,
        naming_strategy: AlarmNamingStrategy,
        default_action: Optional[AlarmAction] = None,
        disambiguator_actions: Optional[Mapping[str, AlarmAction]] = None,
    ) -> None:
        self.naming_strategy = naming_strategy
        self.default_action = default_action
        self.disambiguator_actions: Dict[str, AlarmAction] = dict(
            disambiguator_actions or {}
        )

        self._records: List[AlarmRecord] = []
        self._by_name: Dict[str, AlarmRecord] = {}
        self._by_tag: Dict[str, List[AlarmRecord]] = {}
        self._by_disambiguator: Dict[str, List[AlarmRecord]] = {}

    # ----------------------------
    # Registration
    # ----------------------------
    def register(
        self,
        definition: AlarmDefinition,
        naming_strategy: Optional[AlarmNamingStrategy] = None,
        members: Optional[Sequence[AlarmRecord]] = None,
    ) -> AlarmRecord:
        """
        Validate a definition, assign its identity and append it.

        Args:
            definition (AlarmDefinition): The alarm to register.
            naming_strategy (AlarmNamingStrategy): Overrides the registry's strategy.
            members (Sequence[AlarmRecord]): Member alarms; marks the record composite.

        Raises:
            InvalidDefinition: If the definition violates its invariants.
            DuplicateName: If the resolved name is already registered.
        """
        is_composite = members is not None
        definition.validate(composite=is_composite)

        naming = naming_strategy or self.naming_strategy
        name = naming.get_name(definition.alarm_name_suffix, definition.disambiguator)
        if name in self._by_name:
            raise DuplicateName(f"Alarm '{name}' is already registered")

        record = AlarmRecord(
            name=name,
            description=naming.get_description(
                definition.alarm_name_suffix,
                definition.disambiguator,
                definition.alarm_description,
            ),
            definition=definition,
            action=self._resolve_action(definition),
            is_composite=is_composite,
            members=tuple(members or ()),
            naming_strategy=naming,
        )

        self._records.append(record)
        self._by_name[name] = record
        for tag in definition.custom_tags:
            self._by_tag.setdefault(tag, []).append(record)
        if definition.disambiguator is not None:
            self._by_disambiguator.setdefault(definition.disambiguator, []).append(
                record
            )

        logger.debug(f"Registered alarm {name} (composite={is_composite})")
        return record

    def _resolve_action(self, definition: AlarmDefinition) -> Optional[AlarmAction]:
        """Explicit action first, then the disambiguator default, then the global default."""
        if definition.action is not None:
            return definition.action
        if definition.disambiguator in self.disambiguator_actions:
            return self.disambiguator_actions[definition.disambiguator]
        return self.default_action

    # ----------------------------
    # Lookups
    # ----------------------------
    def by_disambiguator(self, disambiguator: str) -> List[AlarmRecord]:
        return list(self._by_disambiguator.get(disambiguator, []))

    def by_tag(self, tag: str) -> List[AlarmRecord]:
        return list(self._by_tag.get(tag, []))

    def all(self) -> List[AlarmRecord]:
        return list(self._records)

    def get(self, name: str) -> Optional[AlarmRecord]:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[AlarmRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
