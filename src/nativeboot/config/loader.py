"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Global config (~/.nativeboot/config.yml)
- Custom config file (--config)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from nativeboot.bootstrap.paths import NativebootPaths
from nativeboot.bootstrap.versions import OVERWRITE_AUTO
from nativeboot.config.models import NativeBootConfig
from nativeboot.config.validation import validate_config
from nativeboot.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    paths: Optional[NativebootPaths] = None,
) -> NativeBootConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path)
    3. Global config (~/.nativeboot/config.yml)
    4. Built-in defaults

    Args:
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.
        paths: nativeboot home paths, defaults to NativebootPaths.default().

    Returns:
        Merged NativeBootConfig instance.

    Raises:
        ConfigError: If the custom config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config(paths)
    if global_path is not None:
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (yaml.YAMLError, ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        try:
            custom_dict = load_yaml_file(cli_config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {cli_config_path}: {e}") from e
        validate_config(custom_dict, source=str(cli_config_path))
        merged = merge_configs(merged, custom_dict)
        sources.append(f"custom:{cli_config_path}")
        LOGGER.debug(f"Loaded custom config from {cli_config_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def find_global_config(paths: Optional[NativebootPaths] = None) -> Optional[Path]:
    """Find global config at ~/.nativeboot/config.yml.

    Returns:
        Path to global config if it exists, None otherwise.
    """
    config_path = (paths or NativebootPaths.default()).config_file
    if config_path.exists():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> NativeBootConfig:
    """Convert a validated dict to a typed NativeBootConfig.

    Values of the wrong type fall back to defaults (validation already
    warned about them).
    """
    overwrite = data.get("overwrite", OVERWRITE_AUTO)
    overwrite = overwrite.lower() if isinstance(overwrite, str) else OVERWRITE_AUTO

    update_environment = data.get("update_environment", True)
    if not isinstance(update_environment, bool):
        update_environment = True

    config = NativeBootConfig(
        home=_str_or_none(data.get("home")),
        subdir=_str_or_none(data.get("subdir")) or "",
        overwrite=overwrite,
        resource_prefix=_str_or_none(data.get("resource_prefix")),
        include=_str_list(data.get("include")),
        exclude=_str_list(data.get("exclude")),
        update_environment=update_environment,
        preload=_str_list(data.get("preload")),
    )
    if not config.is_valid_overwrite():
        LOGGER.warning(f"Unknown overwrite policy '{config.overwrite}', using '{OVERWRITE_AUTO}'")
        config.overwrite = OVERWRITE_AUTO
    return config


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def config_to_dict(config: NativeBootConfig) -> Dict[str, Any]:
    """Serializable form of a config, omitting unset optional keys."""
    data: Dict[str, Any] = {
        "subdir": config.subdir,
        "overwrite": config.overwrite,
        "update_environment": config.update_environment,
    }
    if config.home:
        data["home"] = config.home
    if config.resource_prefix:
        data["resource_prefix"] = config.resource_prefix
    for key in ("include", "exclude", "preload"):
        values = getattr(config, key)
        if values:
            data[key] = list(values)
    return data


def read_raw_config(path: Path) -> Dict[str, Any]:
    """Read a config file as written, without ``${VAR}`` expansion.

    Used when a config file is rewritten, so that placeholders survive.

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")
    return data


def write_config(config: NativeBootConfig, path: Path) -> Path:
    """Write a config as YAML, creating parent directories."""
    return write_raw_config(config_to_dict(config), path)


def write_raw_config(data: Dict[str, Any], path: Path) -> Path:
    """Write a config mapping as YAML, keeping key order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
    return path
