"""Location of the ocrpdf home directory (~/.ocrpdf)."""

from __future__ import annotations

import os
from pathlib import Path

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".ocrpdf"

# Environment variable to override home directory
OCRPDF_HOME_ENV = "OCRPDF_HOME"

GLOBAL_CONFIG_NAME = "config.yml"


def get_ocrpdf_home() -> Path:
    """Get the ocrpdf home directory path.

    Resolution order:
    1. OCRPDF_HOME environment variable (if set)
    2. ~/.ocrpdf (default)
    """
    env_home = os.environ.get(OCRPDF_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


def get_global_config_path() -> Path:
    """Path of the global config file (may not exist)."""
    return get_ocrpdf_home() / GLOBAL_CONFIG_NAME
