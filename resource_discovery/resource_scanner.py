import logging
from typing import Dict, Optional

from .resource_plugins.base_plugin import BaseResourcePlugin
from .resource_plugins.lambda_plugin import LambdaPlugin
from .resource_plugins.resource import Resource

logger = logging.getLogger(__name__)


class ResourceScanner:
    """Looks up resource settings the alarm engine needs (e.g. timeouts)."""

    def __init__(self, session) -> None:
        self._session = session
        self.plugins: Dict[str, BaseResourcePlugin] = {
            "Lambda": LambdaPlugin(session),
        }

    def get_timeout_ms(self, resource: Resource) -> Optional[int]:
        """Return the configured timeout, querying AWS when it is not already known."""
        if resource.timeout_ms is not None:
            return resource.timeout_ms

        plugin = self.plugins.get(resource.type)
        if plugin is None:
            logger.debug(f"No timeout lookup for resource type {resource.type}")
            return None

        timeout_ms = plugin.get_timeout_ms(resource)
        if timeout_ms is not None:
            logger.info(f"Discovered timeout of {timeout_ms} ms for {resource.name}")
        return timeout_ms
