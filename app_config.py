# app_config.py
"""
Central configuration for the Dopamine Reset Coach app.

- DATA_DIR: directory holding the persisted state file.
- STORAGE_KEY: base name of the persisted state file (<DATA_DIR>/<STORAGE_KEY>.json).
- DEFAULT_PLAN_DAYS: plan length used for a fresh profile and after "Reset All Data".
- DEFAULT_STRICTNESS: strictness used for a fresh profile and after "Reset All Data".
- LOG_LEVEL: level passed to logging.basicConfig in app.py.
- SERVER_NAME / SERVER_PORT: where demo.launch() binds.
"""

import os

STRICTNESS_LEVELS = ("Light", "Standard", "Hard")
PLAN_DAY_CHOICES = (30, 100)
MACRO_KEYS = ("calories", "protein", "carbs", "fat")


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


# Where the single profile's state lives
DATA_DIR: str = os.getenv("DRC_DATA_DIR", "user_data")

# Base name of the state file
STORAGE_KEY: str = os.getenv("DRC_STORAGE_KEY", "drc_v1")

DEFAULT_PLAN_DAYS: int = _int_env("DRC_DEFAULT_PLAN_DAYS", 100)

DEFAULT_STRICTNESS: str = os.getenv("DRC_DEFAULT_STRICTNESS", "Standard")
if DEFAULT_STRICTNESS not in STRICTNESS_LEVELS:
    DEFAULT_STRICTNESS = "Standard"

LOG_LEVEL: str = os.getenv("DRC_LOG_LEVEL", "INFO").upper()

SERVER_NAME: str = os.getenv("DRC_SERVER_NAME", "127.0.0.1")
SERVER_PORT: int = _int_env("DRC_SERVER_PORT", 7860)
