from abc import ABC, abstractmethod
from typing import Optional


from .resource import Resource


class BaseResourcePlugin(ABC):
    @abstractmethod
    def get_timeout_ms(self, resource: Resource) -> Optional[int]:
        """
        Return the resource's configured timeout in milliseconds, or None.
        """
        pass
