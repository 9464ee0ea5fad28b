"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "ignition-scan"
APP_AUTHOR = "SFLOW"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_CONFIG_PATH = "IGNITION_SCAN_CONFIG"
ENV_PROJECT_PATHS = "IGNITION_SCAN_PROJECT_PATHS"

# Scanner defaults
DEFAULT_CACHE_TTL = 300.0
DEFAULT_DEBOUNCE = 1.0
DEFAULT_BATCH_CONCURRENCY = 3
