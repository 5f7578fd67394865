"""
Configuration Management for TFTSight

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables

Configuration precedence (highest to lowest):
1. Environment variables (TFTSIGHT_*)
2. Configuration file
3. Default values
"""

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tftsight.core.constants import KEY_ROUNDS, TOP_CARRY_COUNT

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class TrackerConfig:
    """Configuration for the tracker analytics pipeline."""

    # Player whose round outcome is picked from the per-round outcome table.
    # Empty means "use the summoner name stored in the snapshot".
    game_name: str = ""

    # Carries reported in the result
    top_carries: int = TOP_CARRY_COUNT

    # Rounds surfaced as decision points in summary mode
    key_rounds: list[str] = field(default_factory=lambda: list(KEY_ROUNDS))

    # Tracked matches listed when the requested one has no snapshot
    max_available_matches: int = 10


@dataclass
class IntegrationConfig:
    """Configuration for the HTTP collaborators (snapshot source, name tables)."""

    metatft_api_base: str = "https://api.metatft.com"
    snapshot_base: str = "https://metatft-matches-2.ams3.digitaloceanspaces.com"
    cdragon_url: str = "https://raw.communitydragon.org/latest/cdragon/tft/en_us.json"
    platform: str = "euw1"
    tag_line: str = ""
    tft_set: str = "TFTSet16"
    timeout_seconds: float = 15.0
    user_agent: str = "TFTSight/0.1"


@dataclass
class ExportConfig:
    """Configuration for result export."""

    json_indent: int = 2


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class TFTSightConfig:
    """Main configuration container."""

    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    integrations: IntegrationConfig = field(default_factory=IntegrationConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Version of the config format
    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    paths = []

    # Current directory
    paths.append(Path.cwd() / "tftsight.yaml")
    paths.append(Path.cwd() / "tftsight.toml")
    paths.append(Path.cwd() / "tftsight.json")
    paths.append(Path.cwd() / ".tftsight.yaml")

    # User home directory
    home = Path.home()
    paths.append(home / ".config" / "tftsight" / "config.yaml")
    paths.append(home / ".config" / "tftsight" / "config.toml")
    paths.append(home / ".tftsight.yaml")

    # XDG config directory
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    paths.append(Path(xdg_config) / "tftsight" / "config.yaml")

    return paths


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a YAML file."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from a TOML file."""
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(path) as f:
        return json.load(f)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return load_yaml_config(path)
    elif suffix == ".toml":
        return load_toml_config(path)
    elif suffix == ".json":
        return load_json_config(path)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    env_mappings = {
        "TFTSIGHT_LOG_LEVEL": ("logging", "level"),
        "TFTSIGHT_LOG_FILE": ("logging", "file"),
        "TFTSIGHT_GAME_NAME": ("tracker", "game_name"),
        "TFTSIGHT_TOP_CARRIES": ("tracker", "top_carries"),
        "TFTSIGHT_PLATFORM": ("integrations", "platform"),
        "TFTSIGHT_TAG_LINE": ("integrations", "tag_line"),
        "TFTSIGHT_TFT_SET": ("integrations", "tft_set"),
        "TFTSIGHT_HTTP_TIMEOUT": ("integrations", "timeout_seconds"),
        "TFTSIGHT_JSON_INDENT": ("export", "json_indent"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            if section not in config:
                config[section] = {}

            # Type conversion
            if value.lower() in ("true", "false"):
                value = value.lower() == "true"
            elif value.isdigit():
                value = int(value)
            else:
                try:
                    value = float(value)
                except ValueError:
                    pass

            config[section][key] = value

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> TFTSightConfig:
    """Convert a dictionary to TFTSightConfig, ignoring unknown keys."""
    config = TFTSightConfig()

    for section_name in ("tracker", "integrations", "export", "logging"):
        section_data = data.get(section_name)
        if not isinstance(section_data, dict):
            continue
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if hasattr(section, key):
                setattr(section, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {section_name}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> TFTSightConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged TFTSightConfig
    """
    config_data: dict[str, Any] = {}

    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    if include_env:
        env_config = load_env_config()
        config_data = merge_configs(config_data, env_config)

    return dict_to_config(config_data)


def save_config(config: TFTSightConfig, path: Path) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration to save
        path: Path to save to (.yaml/.yml or .json)
    """
    data = config_to_dict(config)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    else:
        raise ValueError(f"Unsupported config format for saving: {suffix}")

    logger.info(f"Saved config to: {path}")


def config_to_dict(config: TFTSightConfig) -> dict[str, Any]:
    """Convert TFTSightConfig to a dictionary."""
    return asdict(config)


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: TFTSightConfig | None = None


def get_config() -> TFTSightConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: TFTSightConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _global_config
    _global_config = None
