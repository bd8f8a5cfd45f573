"""
YAML loading for the provider config files under config/providers/

databases.yaml and indicators.yaml are plain mappings read once by Settings;
any key missing from them falls back to the default coded in Settings.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def load_yaml(filepath: str) -> dict[str, Any]:
    """
    Read a provider config file

    Args:
        filepath: Path to the YAML file, relative to the working directory or absolute

    Returns:
        Top-level mapping of the file ({} when the file is empty)

    Raises:
        FileNotFoundError: File is missing
        yaml.YAMLError: File is not valid YAML
        ValueError: Top level is not a mapping (e.g. a bare list)

    Example:
        >>> calculation = load_yaml("config/providers/indicators.yaml")["calculation"]
        >>> calculation["window_size"], calculation["page_size"]
        (50, 10000)
    """
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {filepath} must be a mapping, got {type(data).__name__}")
    return data


def load_yaml_safe(filepath: str) -> dict[str, Any]:
    """
    Read a provider config file, or {} so Settings runs on its coded defaults

    A missing file is normal (e.g. a container without config/ mounted); an
    unreadable one is logged.
    """
    try:
        return load_yaml(filepath)
    except FileNotFoundError:
        logger.debug(f"No config file at {filepath}, using defaults")
        return {}
    except (yaml.YAMLError, ValueError) as e:
        logger.warning(f"⚠️ Ignoring invalid config file {filepath}: {e}")
        return {}
