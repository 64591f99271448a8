"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.ocrpdf.yml in the working directory)
- Global config (~/.ocrpdf/config.yml)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ocrpdf.config.models import MAX_PAGES, OcrPdfConfig, ToolsConfig
from ocrpdf.config.validation import validate_config
from ocrpdf.core.errors import OcrPdfError
from ocrpdf.core.logging import get_logger
from ocrpdf.core.paths import get_global_config_path

LOGGER = get_logger(__name__)

PROJECT_CONFIG_NAMES = [".ocrpdf.yml", ".ocrpdf.yaml", "ocrpdf.yml", "ocrpdf.yaml"]

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(OcrPdfError):
    """Configuration loading or parsing error."""


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> OcrPdfConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.ocrpdf.yml)
    3. Global config (~/.ocrpdf/config.yml)
    4. Built-in defaults

    Raises:
        ConfigError: If the custom config file doesn't exist or a config
            file cannot be parsed.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Global config
    global_path = find_global_config()
    if global_path:
        try:
            global_dict = load_yaml_file(global_path)
            validate_config(global_dict, source=str(global_path))
            merged = merge_configs(merged, global_dict)
            sources.append(f"global:{global_path}")
            LOGGER.debug(f"Loaded global config from {global_path}")
        except (yaml.YAMLError, ConfigError, OSError) as e:
            LOGGER.warning(f"Failed to load global config: {e}")

    # Layer 2: Custom or project config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        config_path: Optional[Path] = cli_config_path
        label = "custom"
    else:
        config_path = find_project_config(project_root)
        label = "project"

    if config_path:
        try:
            file_dict = load_yaml_file(config_path)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e
        validate_config(file_dict, source=str(config_path))
        merged = merge_configs(merged, _resolve_filter_paths(file_dict, config_path.parent))
        sources.append(f"{label}:{config_path}")
        LOGGER.debug(f"Loaded {label} config from {config_path}")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find a config file in ``project_root``."""
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.is_file():
            return config_path
    return None


def find_global_config() -> Optional[Path]:
    """Return the global config path if it exists."""
    config_path = get_global_config_path()
    if config_path.is_file():
        return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file, expanding environment variables.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in string values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match) -> str:
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

    Dicts merge recursively; scalars and lists are replaced.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def _resolve_filter_paths(data: Dict[str, Any], base_dir: Path) -> Dict[str, Any]:
    # Relative filter paths in a config file are relative to that file
    filters = data.get("filters")
    if not isinstance(filters, list):
        return data
    resolved = [
        str(base_dir / f) if isinstance(f, str) and not Path(f).is_absolute() else f
        for f in filters
    ]
    return {**data, "filters": resolved}


def _int_value(
    data: Dict[str, Any],
    key: str,
    default: Optional[int],
    minimum: int,
    maximum: Optional[int] = None,
) -> Optional[int]:
    value = data.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        return default
    if value < minimum or (maximum is not None and value > maximum):
        return default
    return value


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def dict_to_config(data: Dict[str, Any]) -> OcrPdfConfig:
    """Convert a merged config dict to a typed OcrPdfConfig.

    Values rejected by validation fall back to their defaults.
    """
    defaults = OcrPdfConfig()

    tools_data = data.get("tools")
    if not isinstance(tools_data, dict):
        tools_data = {}
    tools = ToolsConfig(
        pdfimages=str(tools_data.get("pdfimages") or defaults.tools.pdfimages),
        ddjvu=str(tools_data.get("ddjvu") or defaults.tools.ddjvu),
        tesseract=str(tools_data.get("tesseract") or defaults.tools.tesseract),
    )

    output = data.get("output")

    return OcrPdfConfig(
        first_page=_int_value(data, "first_page", defaults.first_page, 1, MAX_PAGES),
        last_page=_int_value(data, "last_page", None, 1, MAX_PAGES),
        language=str(data.get("language") or defaults.language),
        filters=_str_list(data, "filters"),
        output=str(output) if output else None,
        workers=_int_value(data, "workers", defaults.workers, 0),
        tools=tools,
        tesseract_args=_str_list(data, "tesseract_args"),
    )
