from __future__ import annotations

"""
Configuration Validation Service.

Ensures the configuration dictionary conforms to the expected schema
before a structure is built. Handles type coercion, path normalization,
permission string normalization and default value injection.
"""

import logging
import re
from typing import Any, Dict, List, Tuple

from fsreconcile.domain.config import get_default_config
from fsreconcile.infra.fs import normalize_path

logger = logging.getLogger(__name__)

_PERMISSION_RE = re.compile(r"^[0-7]{3,4}$")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on invalid values instead of
                falling back to defaults.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    # 1. Base Type Validation
    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    # 2. Field Processing & Normalization
    for field in ("base_path", "structure_file", "log_file", "log_level"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["base_path"] = normalize_path(merged["base_path"], defaults["base_path"])
    if merged["structure_file"]:
        merged["structure_file"] = normalize_path(merged["structure_file"], "")

    for field in ("file_permission", "directory_permission"):
        merged[field] = _as_permission(merged.get(field), defaults[field], field, warnings, strict)

    merged["log_level"] = _as_log_level(merged["log_level"], defaults["log_level"], warnings, strict)

    # 3. Unknown keys are dropped
    for key in list(merged):
        if key not in defaults:
            warnings.append(f"Unknown field '{key}' ignored.")
            del merged[key]

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_permission(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Normalize an octal permission string to its canonical four digits."""
    if isinstance(value, int) and not isinstance(value, bool) and not strict:
        warnings.append(f"Field '{field}' converted from number {value} to string.")
        value = str(value)

    if not isinstance(value, str):
        msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    v = value.strip()
    if v.startswith("0o"):
        v = v[2:]
    if not _PERMISSION_RE.match(v):
        msg = f"Invalid permission '{value}' in '{field}': expected 3 or 4 octal digits."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return v.zfill(4)


def _as_log_level(value: str, fallback: str, warnings: List[str], strict: bool) -> str:
    if not value:
        return fallback
    level = value.upper()
    if level == "WARN":
        level = "WARNING"
    if level in _LOG_LEVELS:
        return level

    msg = f"Invalid log level '{value}'."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
