"""Configuration validation for nativeboot.

Validates configuration keys and value types, warning on unknown keys.
Does not raise: problems are reported as warnings and logged.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from nativeboot.bootstrap.versions import OVERWRITE_POLICIES
from nativeboot.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "home",
    "subdir",
    "overwrite",
    "resource_prefix",
    "include",
    "exclude",
    "update_environment",
    "preload",
}

_STRING_KEYS = ("home", "subdir", "resource_prefix")
_LIST_KEYS = ("include", "exclude", "preload")


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warning = ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        )
        _log_warning(warning)
        return [warning]

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            warnings.append(ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(str(key), VALID_TOP_LEVEL_KEYS),
            ))

    for key in _STRING_KEYS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must be a string, got {type(value).__name__}",
                source=source,
                key=key,
            ))

    for key in _LIST_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must be a list, got {type(value).__name__}",
                source=source,
                key=key,
            ))
        elif not all(isinstance(item, str) for item in value):
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must only contain strings",
                source=source,
                key=key,
            ))

    overwrite = data.get("overwrite")
    if overwrite is not None:
        if not isinstance(overwrite, str):
            warnings.append(ConfigValidationWarning(
                message=f"'overwrite' must be a string, got {type(overwrite).__name__}",
                source=source,
                key="overwrite",
            ))
        elif overwrite.lower() not in OVERWRITE_POLICIES:
            warnings.append(ConfigValidationWarning(
                message=f"Invalid overwrite policy '{overwrite}'",
                source=source,
                key="overwrite",
                suggestion=_suggest_key(overwrite.lower(), set(OVERWRITE_POLICIES)),
            ))

    update_environment = data.get("update_environment")
    if update_environment is not None and not isinstance(update_environment, bool):
        warnings.append(ConfigValidationWarning(
            message="'update_environment' must be a boolean",
            source=source,
            key="update_environment",
        ))

    for warning in warnings:
        _log_warning(warning)
    return warnings


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
