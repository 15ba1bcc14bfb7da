from dataclasses import dataclass
from typing import Optional


@dataclass
class Resource:
    type: str  # Lambda, DynamoDB, etc.
    name: str  # Used as the local alarm name prefix
    id: str = ""  # Resource identifier (e.g., function name or ARN)
    timeout_ms: Optional[int] = None  # Configured timeout, if the resource has one
