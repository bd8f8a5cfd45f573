"""
Pytest configuration for integration tests

This conftest patches YAML loading at MODULE LEVEL to replace Docker hostnames
with localhost for tests running on the host machine.
"""

import os
from unittest import mock

# ============================================================================
# Patch YAML loading at MODULE LEVEL
# This runs BEFORE any test modules are imported by pytest
# ============================================================================
from core.utils.config import load_yaml_safe as _original_load_yaml_safe


def _patched_load_yaml_safe(path):
    """Load YAML and replace Docker hostnames with localhost for integration tests"""
    config = _original_load_yaml_safe(path)

    if "databases.yaml" in path:
        if "clickhouse" in config:
            config["clickhouse"]["host"] = "localhost"
        if "postgres" in config:
            config["postgres"]["host"] = "localhost"
            config["postgres"]["port"] = 5433  # Docker exposes 5433→5432 on host

    return config


mock.patch("config.settings.load_yaml_safe", side_effect=_patched_load_yaml_safe).start()

os.environ["CLICKHOUSE_HOST"] = "localhost"
os.environ["POSTGRES_HOST"] = "localhost"

# Reset Settings singleton to force reload with patched YAML loader
import config.settings as _settings_module
from config.settings import Settings

if hasattr(Settings, "_yaml_loaded"):
    delattr(Settings, "_yaml_loaded")
_settings_module._settings_instance = None

# ============================================================================
# Now all test files will use localhost when they load Settings/YAML configs
# ============================================================================
