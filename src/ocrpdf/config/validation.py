"""Configuration validation for ocrpdf.

Unknown keys and badly typed values produce warnings, not failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from ocrpdf.config.models import MAX_PAGES
from ocrpdf.core.logging import get_logger

LOGGER = get_logger(__name__)

VALID_TOP_LEVEL_KEYS: Set[str] = {
    "first_page",
    "last_page",
    "language",
    "filters",
    "output",
    "workers",
    "tools",
    "tesseract_args",
}

VALID_TOOLS_KEYS: Set[str] = {
    "pdfimages",
    "ddjvu",
    "tesseract",
}

PAGE_KEYS = ("first_page", "last_page")


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
    """Validate a configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings (also logged).
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            warnings.append(ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))

    for key in PAGE_KEYS:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, int) or isinstance(value, bool):
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must be an integer, got {type(value).__name__}",
                source=source,
                key=key,
            ))
        elif value <= 0 or value > MAX_PAGES:
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must be between 1 and {MAX_PAGES}, got {value}",
                source=source,
                key=key,
            ))

    workers = data.get("workers")
    if workers is not None and (not isinstance(workers, int) or isinstance(workers, bool) or workers < 0):
        warnings.append(ConfigValidationWarning(
            message=f"'workers' must be a non-negative integer, got {workers!r}",
            source=source,
            key="workers",
        ))

    for key in ("filters", "tesseract_args"):
        value = data.get(key)
        if value is not None and not isinstance(value, list):
            warnings.append(ConfigValidationWarning(
                message=f"'{key}' must be a list, got {type(value).__name__}",
                source=source,
                key=key,
            ))

    tools = data.get("tools")
    if tools is not None:
        if not isinstance(tools, dict):
            warnings.append(ConfigValidationWarning(
                message=f"'tools' must be a mapping, got {type(tools).__name__}",
                source=source,
                key="tools",
            ))
        else:
            for key in tools.keys():
                if key not in VALID_TOOLS_KEYS:
                    warnings.append(ConfigValidationWarning(
                        message=f"Unknown key 'tools.{key}'",
                        source=source,
                        key=f"tools.{key}",
                        suggestion=_suggest_key(key, VALID_TOOLS_KEYS),
                    ))

    for warning in warnings:
        _log_warning(warning)

    return warnings


def _suggest_key(key: str, valid_keys: Set[str]) -> Optional[str]:
    matches = get_close_matches(key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    message = f"{warning.source}: {warning.message}"
    if warning.suggestion:
        message += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(message)
