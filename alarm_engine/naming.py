from dataclasses import dataclass
from typing import Optional

from .constants import NAME_SEPARATOR


@dataclass(frozen=True)
class AlarmNamingStrategy:
    """Builds alarm names as <global prefix>-<local prefix>-<suffix>-<disambiguator>."""

    global_prefix: str
    local_prefix: Optional[str] = None

    def get_name(self, alarm_name_suffix: str, disambiguator: Optional[str] = None) -> str:
        parts = [self.global_prefix, self.local_prefix, alarm_name_suffix, disambiguator]
        return NAME_SEPARATOR.join(part for part in parts if part)

    def get_description(
        self,
        alarm_name_suffix: str,
        disambiguator: Optional[str] = None,
        description: str = "",
    ) -> str:
        if description:
            return description
        subject = self.local_prefix or self.global_prefix
        label = f" ({disambiguator})" if disambiguator else ""
        return f"{alarm_name_suffix} alarm for {subject}{label}"

    def with_local_prefix(self, local_prefix: Optional[str]) -> "AlarmNamingStrategy":
        return AlarmNamingStrategy(self.global_prefix, local_prefix)
