"""
Configuration Management for quakelog

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables

Configuration precedence (highest to lowest):
1. Command line arguments (applied by the CLI)
2. Environment variables (QUAKELOG_*)
3. Configuration file
4. Default values
"""

import codecs
import json
import logging
import os
import tomllib
from dataclasses import asdict, dataclass, field
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv", "xlsx")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class ParserConfig:
    """Configuration for log parsing."""

    encoding: str = "utf-8"
    # Passed to open(); "replace" keeps going on invalid bytes, "strict" fails the run
    errors: str = "replace"


@dataclass
class ReportConfig:
    """Configuration for summaries and rankings."""

    top_n: int | None = None  # None = every player
    show_players: bool = True
    show_means: bool = True


@dataclass
class ExportConfig:
    """Configuration for data export."""

    default_format: str = "json"
    json_indent: int = 2
    csv_delimiter: str = ","
    include_events: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class QuakeLogConfig:
    """Main configuration container."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
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
    paths.append(Path.cwd() / "quakelog.yaml")
    paths.append(Path.cwd() / "quakelog.toml")
    paths.append(Path.cwd() / "quakelog.json")
    paths.append(Path.cwd() / ".quakelog.yaml")

    # User home directory
    home = Path.home()
    paths.append(home / ".config" / "quakelog" / "config.yaml")
    paths.append(home / ".config" / "quakelog" / "config.toml")
    paths.append(home / ".quakelog.yaml")

    # XDG config directory
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    paths.append(Path(xdg_config) / "quakelog" / "config.yaml")

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
        "QUAKELOG_LOG_LEVEL": ("logging", "level", str),
        "QUAKELOG_LOG_FILE": ("logging", "file", str),
        "QUAKELOG_ENCODING": ("parser", "encoding", str),
        "QUAKELOG_EXPORT_FORMAT": ("export", "default_format", str),
        "QUAKELOG_TOP_N": ("report", "top_n", int),
    }

    for env_var, (section, key, value_type) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            if section not in config:
                config[section] = {}

            # Only numeric settings are converted; names and paths stay text
            if value_type is int and value.isdigit():
                value = int(value)

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


def dict_to_config(data: dict[str, Any]) -> QuakeLogConfig:
    """Convert a dictionary to QuakeLogConfig. Unknown keys are ignored."""
    config = QuakeLogConfig()

    for section in ("parser", "report", "export", "logging"):
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        for key, value in values.items():
            if hasattr(target, key):
                setattr(target, key, value)

    if "config_version" in data:
        config.config_version = str(data["config_version"])

    return config


def validate_config(config: QuakeLogConfig) -> QuakeLogConfig:
    """
    Check values that would otherwise fail late.

    Raises:
        ValueError: Unknown log level, export format, encoding or error
            handler, or a bad top_n
    """
    # YAML reads `encoding: 1252` as an int
    encoding = str(config.parser.encoding)
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise ValueError(f"Unknown encoding: {config.parser.encoding}")
    config.parser.encoding = encoding

    errors = str(config.parser.errors)
    try:
        codecs.lookup_error(errors)
    except LookupError:
        raise ValueError(f"Unknown decode error handler: {config.parser.errors}")
    config.parser.errors = errors

    level = str(config.logging.level).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {config.logging.level}")
    config.logging.level = level

    export_format = str(config.export.default_format).lower()
    if export_format not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {config.export.default_format}")
    config.export.default_format = export_format

    top_n = config.report.top_n
    if top_n is not None and (not isinstance(top_n, int) or top_n < 1):
        raise ValueError(f"report.top_n must be a positive integer, got: {top_n}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> QuakeLogConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged and validated QuakeLogConfig
    """
    config_data: dict[str, Any] = {}

    # Try to find and load a config file
    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    # Merge environment variables
    if include_env:
        env_config = load_env_config()
        config_data = merge_configs(config_data, env_config)

    return validate_config(dict_to_config(config_data))


# ============================================================================
# Logging Setup
# ============================================================================


def setup_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """
    Configure the root logger from a LoggingConfig.

    Args:
        config: Logging settings
        verbose: Force DEBUG level regardless of config.level
    """
    level = logging.DEBUG if verbose else getattr(logging, str(config.level).upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(
            RotatingFileHandler(
                config.file,
                maxBytes=config.file_max_bytes,
                backupCount=config.file_backup_count,
            )
        )

    logging.basicConfig(level=level, format=config.format, handlers=handlers, force=True)


# ============================================================================
# Configuration Saving
# ============================================================================


def config_to_dict(config: QuakeLogConfig) -> dict[str, Any]:
    """Convert QuakeLogConfig to a dictionary."""
    return asdict(config)


def save_config(config: QuakeLogConfig, path: Path) -> None:
    """
    Save configuration to a file.

    TOML output is not supported (the standard library only reads TOML).

    Args:
        config: Configuration to save
        path: Path to save to (format detected from extension)
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
        raise ValueError(f"Unknown config format: {suffix}")

    logger.info(f"Saved config to: {path}")


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# quakelog configuration

# Parser settings
parser:
  encoding: utf-8
  errors: replace  # strict, ignore or replace

# Summary and ranking settings
report:
  # top_n: 10  # Only show the best N players
  show_players: true
  show_means: true

# Export settings
export:
  default_format: json  # json, csv or xlsx
  json_indent: 2
  csv_delimiter: ","
  include_events: false

# Logging settings
logging:
  level: INFO
  # file: /path/to/quakelog.log
"""


def generate_default_config(path: Path) -> None:
    """Generate a default configuration file."""
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML)
    else:
        config = QuakeLogConfig()
        save_config(config, path)

    logger.info(f"Generated default config at: {path}")
