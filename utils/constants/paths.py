"""Filesystem locations for configurations and fixtures."""

import sys
from pathlib import Path


def _default_base_dir() -> Path:
    """Return the writable base directory for config and fixtures."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent.parent.parent


BASE_DATA_DIR = _default_base_dir()
CONFIG_DIR = BASE_DATA_DIR / "config"
FIXTURES_DIR = BASE_DATA_DIR / "fixtures"


def ensure_base_dirs() -> None:
    """Ensure config and fixture directories exist without importing side effects."""
    for path in (CONFIG_DIR, FIXTURES_DIR):
        path.mkdir(parents=True, exist_ok=True)


COMBO_CONFIG_FILE = CONFIG_DIR / "combo_config.json"
FIXTURE_FILE_PREFIX = "Test"
