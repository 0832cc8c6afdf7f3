"""
Configuration Management for ScrimStats

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables

Configuration precedence (highest to lowest):
1. Explicit arguments
2. Environment variables (SCRIMSTATS_*)
3. Configuration file
4. Default values
"""

import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from scrimstats.core.constants import (
    IMPACT_DAMPING,
    MAX_LOBBY_SIZE,
    PLAYSTYLE_TARGETS,
    SNIPER_KILL_SHARE,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class PlaystyleConfig:
    """Reference maxima for the 0-100 playstyle scores."""

    firepower_target: float = PLAYSTYLE_TARGETS["firepower"]
    entrying_target: float = PLAYSTYLE_TARGETS["entrying"]
    opening_target: float = PLAYSTYLE_TARGETS["opening"]
    trading_target: float = PLAYSTYLE_TARGETS["trading"]
    clutching_target: float = PLAYSTYLE_TARGETS["clutching"]
    sniping_target: float = PLAYSTYLE_TARGETS["sniping"]
    utility_target: float = PLAYSTYLE_TARGETS["utility"]

    def targets(self) -> dict[str, float]:
        """Targets keyed by score name."""
        return {
            "firepower": self.firepower_target,
            "entrying": self.entrying_target,
            "opening": self.opening_target,
            "trading": self.trading_target,
            "clutching": self.clutching_target,
            "sniping": self.sniping_target,
            "utility": self.utility_target,
        }


@dataclass
class RatingConfig:
    """Role classification and rating constants."""

    # Sniper when sniper kills / kills is strictly above this share
    sniper_kill_share: float = SNIPER_KILL_SHARE
    impact_damping: float = IMPACT_DAMPING


@dataclass
class BalancerConfig:
    """Configuration for team building."""

    # "greedy" or "exhaustive"
    strategy: str = "greedy"
    max_lobby_size: int = MAX_LOBBY_SIZE
    # Exhaustive search is skipped (falls back to greedy) above this pool size
    exhaustive_max_pool: int = 14


@dataclass
class ExportConfig:
    """Configuration for data export."""

    default_format: str = "csv"
    json_indent: int = 2
    csv_delimiter: str = ","
    float_precision: int = 2


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None


@dataclass
class ScrimStatsConfig:
    """Main configuration container."""

    playstyle: PlaystyleConfig = field(default_factory=PlaystyleConfig)
    rating: RatingConfig = field(default_factory=RatingConfig)
    balancer: BalancerConfig = field(default_factory=BalancerConfig)
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
    paths.append(Path.cwd() / "scrimstats.yaml")
    paths.append(Path.cwd() / "scrimstats.toml")
    paths.append(Path.cwd() / "scrimstats.json")

    # XDG config directory
    home = Path.home()
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    paths.append(Path(xdg_config) / "scrimstats" / "config.yaml")
    paths.append(Path(xdg_config) / "scrimstats" / "config.toml")

    return paths


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        with open(path) as f:
            return yaml.safe_load(f) or {}
    elif suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    elif suffix == ".json":
        with open(path) as f:
            return json.load(f)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


def _convert_env_value(value: str) -> Any:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    env_mappings = {
        "SCRIMSTATS_LOG_LEVEL": ("logging", "level"),
        "SCRIMSTATS_LOG_FILE": ("logging", "file"),
        "SCRIMSTATS_EXPORT_FORMAT": ("export", "default_format"),
        "SCRIMSTATS_BALANCER_STRATEGY": ("balancer", "strategy"),
        "SCRIMSTATS_MAX_LOBBY_SIZE": ("balancer", "max_lobby_size"),
        "SCRIMSTATS_SNIPER_KILL_SHARE": ("rating", "sniper_kill_share"),
        "SCRIMSTATS_IMPACT_DAMPING": ("rating", "impact_damping"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            config.setdefault(section, {})[key] = _convert_env_value(value)

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


def dict_to_config(data: dict[str, Any]) -> ScrimStatsConfig:
    """Convert a dictionary to ScrimStatsConfig. Unknown keys are ignored."""
    config = ScrimStatsConfig()

    for section in fields(config):
        values = data.get(section.name)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section.name)
        for key, value in values.items():
            if hasattr(target, key):
                setattr(target, key, value)
            else:
                logger.debug(f"Ignoring unknown config key {section.name}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> ScrimStatsConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged ScrimStatsConfig
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
        config_data = merge_configs(config_data, load_env_config())

    return dict_to_config(config_data)


def config_to_dict(config: ScrimStatsConfig) -> dict[str, Any]:
    """Convert ScrimStatsConfig to a dictionary."""
    return asdict(config)


def save_config(config: ScrimStatsConfig, path: Path) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration to save
        path: Path to save to (.yaml, .yml or .json)
    """
    data = config_to_dict(config)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    else:
        raise ValueError(f"Unsupported config format for saving: {suffix}")

    logger.info(f"Saved config to: {path}")


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Apply a LoggingConfig to the root logger."""
    config = config or get_config().logging
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    logging.basicConfig(
        level=getattr(logging, str(config.level).upper(), logging.INFO),
        format=config.format,
        handlers=handlers,
        force=True,
    )


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: ScrimStatsConfig | None = None


def get_config() -> ScrimStatsConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: ScrimStatsConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _global_config
    _global_config = None
