from logging import Logger
from pathlib import Path
from typing import Any, Dict, Union

import yaml


def load_yaml(file_path: Union[str, Path]) -> Dict:
    with open(file_path, "r", encoding="utf-8") as file:
        data = yaml.safe_load(file)
    return data or {}


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


def validate_config_paths(config_paths: Dict[str, Path], logger: Logger) -> bool:
    """Validate that all configuration paths exist."""
    for config_name, path in config_paths.items():
        if not path.is_file():
            logger.error(f"Configuration file not found: {config_name} at {path}")
            raise FileNotFoundError(
                f"Configuration file not found: {config_name} at {path}"
            )
    return True
