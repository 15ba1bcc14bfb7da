import logging
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from .base_plugin import BaseResourcePlugin
from .resource import Resource

logger = logging.getLogger(__name__)


class LambdaPlugin(BaseResourcePlugin):
    """Plugin for looking up Lambda function settings."""

    def __init__(self, session):
        self.client = session.client("lambda")

    def get_timeout_ms(self, resource: Resource) -> Optional[int]:
        """Fetch the function timeout (configured in seconds) in milliseconds."""
        function_name = resource.id or resource.name
        try:
            response = self.client.get_function_configuration(
                FunctionName=function_name
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Failed to fetch timeout for Lambda {function_name}: {e}")
            return None

        timeout = response.get("Timeout")
        if timeout is None:
            return None
        return int(timeout) * 1000
