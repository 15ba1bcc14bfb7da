from .resource_plugins.resource import Resource
from .resource_scanner import ResourceScanner

__all__ = [
    "Resource",
    "ResourceScanner",
]
