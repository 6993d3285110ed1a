"""
Runtime Configuration

Central configuration for tree construction defaults and logging.

Sources, lowest precedence first:
- Dataclass defaults
- JSON or YAML file (explicit path, else ./arbor.json, ./.arbor.json,
  ~/.config/arbor/config.json)
- Environment variables (ARBOR_* prefix, .env honoured)
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from arbor.crypto.hashing import DEFAULT_HASH_ALGORITHM, HashFunction, get_hash_function
from arbor.schemas.errors import InvalidHeightException

load_dotenv()


# Environment variable prefix
ENV_PREFIX = "ARBOR_"

DEFAULT_HEIGHT = 4

OUTPUT_FORMATS = ("human", "json")


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - JSON or YAML file
    - Programmatic construction
    """
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    default_height: int = DEFAULT_HEIGHT

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Output
    output_format: str = "human"  # "human" or "json"

    def __post_init__(self):
        if isinstance(self.default_height, bool) or not isinstance(self.default_height, int) \
                or self.default_height < 1:
            raise InvalidHeightException(self.default_height)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )

    @property
    def hash_fn(self) -> HashFunction:
        """Resolve the configured hash algorithm."""
        return get_hash_function(self.hash_algorithm)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - ARBOR_HASH_ALGORITHM: Hash algorithm name (sha256, sha3_256, ...)
        - ARBOR_DEFAULT_HEIGHT: Default tree height
        - ARBOR_LOG_LEVEL: Log level
        - ARBOR_LOG_FILE: Optional log file path
        - ARBOR_OUTPUT_FORMAT: human or json
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}DEFAULT_HEIGHT"):
            overrides["default_height"] = int(
                os.getenv(f"{ENV_PREFIX}DEFAULT_HEIGHT", str(DEFAULT_HEIGHT))
            )
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")
        if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
            overrides["output_format"] = os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT", "human").lower()

        return overrides

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (unknown keys are ignored)."""
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @staticmethod
    def read_file(path: str | Path) -> dict[str, Any]:
        """Read raw settings from a JSON file (YAML if the suffix says so)."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        if path.suffix in (".yaml", ".yml"):
            import yaml
            with open(path) as f:
                data = yaml.safe_load(f)
        else:
            with open(path, "r") as f:
                data = json.load(f)

        return data or {}

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON or YAML file."""
        return cls.from_dict(cls.read_file(path))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "arbor.json",
        Path.cwd() / ".arbor.json",
        Path.home() / ".config" / "arbor" / "config.json",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Raw values are merged
    before validation, so an environment override can replace a bad file
    value.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        data = RuntimeConfig.read_file(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                data = RuntimeConfig.read_file(default_path)
                break

    data.update(RuntimeConfig._get_env_overrides())
    return RuntimeConfig.from_dict(data)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"
