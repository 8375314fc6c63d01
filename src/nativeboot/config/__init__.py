"""Configuration module for nativeboot.

Provides configuration file loading, parsing, and validation with support for:
- Global config (~/.nativeboot/config.yml)
- Custom config file passed on the command line
- Environment variable expansion
"""

from nativeboot.config.models import NativeBootConfig
from nativeboot.config.loader import (
    ConfigError,
    find_global_config,
    load_config,
    read_raw_config,
    write_config,
    write_raw_config,
)
from nativeboot.config.validation import validate_config, ConfigValidationWarning

__all__ = [
    "NativeBootConfig",
    "ConfigError",
    "load_config",
    "find_global_config",
    "read_raw_config",
    "write_config",
    "write_raw_config",
    "validate_config",
    "ConfigValidationWarning",
]
