"""
Runtime Configuration Module

Provides configuration loading for tree defaults and logging.
"""

from .runtime import (
    ENV_PREFIX,
    DEFAULT_HEIGHT,
    RuntimeConfig,
    load_config,
    get_default_config_template,
)

__all__ = [
    "ENV_PREFIX",
    "DEFAULT_HEIGHT",
    "RuntimeConfig",
    "load_config",
    "get_default_config_template",
]
