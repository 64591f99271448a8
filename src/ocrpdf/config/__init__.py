"""Configuration module for ocrpdf.

Provides configuration file loading, parsing, and validation with support for:
- Project-level config (.ocrpdf.yml)
- Global config (~/.ocrpdf/config.yml)
- Environment variable expansion
"""

from ocrpdf.config.models import MAX_PAGES, OcrPdfConfig, ToolsConfig
from ocrpdf.config.loader import ConfigError, load_config, find_project_config, find_global_config
from ocrpdf.config.validation import validate_config, ConfigValidationWarning

__all__ = [
    "MAX_PAGES",
    "OcrPdfConfig",
    "ToolsConfig",
    "ConfigError",
    "load_config",
    "find_project_config",
    "find_global_config",
    "validate_config",
    "ConfigValidationWarning",
]
