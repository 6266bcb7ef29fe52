from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration (stored JSON merged with CLI overrides)
into the typed settings the shell and CLI rely on. In lenient mode bad
values fall back to defaults and produce warnings; in strict mode they
raise.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from cvfs.domain.config import get_default_config
from cvfs.infra.logging.config import _LEVEL_MAP

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data.
        strict: Raise TypeError/ValueError instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and the
        warnings produced while normalizing it.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    for field in ("prompt", "locale", "log_file"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in ("strict_scripts", "log_to_file"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["default_capacity"] = _as_optional_capacity(
        merged.get("default_capacity"), warnings, strict
    )
    merged["log_level"] = _as_level(merged.get("log_level"), defaults["log_level"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _reject(msg: str, warnings: List[str], strict: bool, exc: type = TypeError) -> None:
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        if field == "prompt":
            # Trailing space is part of the prompt.
            return value if value.strip() else fallback
        return value.strip() or fallback
    _reject(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false", "1", "0", "yes", "no"):
        return value.strip().lower() in ("true", "1", "yes")
    if value is None:
        return fallback
    _reject(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_optional_capacity(value: Any, warnings: List[str], strict: bool) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        _reject("Invalid field 'default_capacity': expected int, received bool.", warnings, strict)
        return None
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        _reject(f"Invalid field 'default_capacity': {value!r} is not an integer.", warnings, strict, ValueError)
        return None
    if capacity < 0:
        _reject("Invalid field 'default_capacity': must not be negative.", warnings, strict, ValueError)
        return None
    return capacity


def _as_level(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    if isinstance(value, str) and value.strip().upper() in _LEVEL_MAP:
        return value.strip().upper()
    if value is None:
        return fallback
    _reject(f"Invalid field 'log_level': {value!r} is not a logging level.", warnings, strict, ValueError)
    return fallback
