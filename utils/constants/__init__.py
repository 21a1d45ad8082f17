from utils.constants.paths import (
    BASE_DATA_DIR,
    COMBO_CONFIG_FILE,
    CONFIG_DIR,
    FIXTURE_FILE_PREFIX,
    FIXTURES_DIR,
    ensure_base_dirs,
)

__all__ = [
    "BASE_DATA_DIR",
    "COMBO_CONFIG_FILE",
    "CONFIG_DIR",
    "FIXTURE_FILE_PREFIX",
    "FIXTURES_DIR",
    "ensure_base_dirs",
]
