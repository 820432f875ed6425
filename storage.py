import os
import json
import logging
import tempfile
from datetime import date, datetime, timedelta

import app_config

logger = logging.getLogger(__name__)

BASE_DIR = app_config.DATA_DIR


def ensure_base_dir() -> None:
    """Ensure that the base data directory exists."""
    os.makedirs(BASE_DIR, exist_ok=True)


def get_state_path() -> str:
    """Return the path of the persisted state file."""
    return os.path.join(BASE_DIR, f"{app_config.STORAGE_KEY}.json")


def safe_parse(text):
    """Parse a JSON string, returning None for empty or malformed input."""
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Discarding unparsable stored state: %s", exc)
        return None


def load_json(path: str, default):
    """Load JSON from a file, returning default if it is missing or unparsable."""
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return default
    data = safe_parse(text)
    return default if data is None else data


def save_json(path: str, data) -> None:
    """Atomically save JSON to a file, creating parent directories if necessary."""
    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)

    fd, tmp = tempfile.mkstemp(prefix=".tmp_state_", dir=parent, text=True)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


def delete_file(path: str) -> bool:
    """Remove a file if it exists. Returns True when something was deleted."""
    if not os.path.exists(path):
        return False
    os.remove(path)
    return True


def today_str() -> str:
    """Return today's date as an ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def parse_date(date_str: str):
    """Parse a YYYY-MM-DD string into a date, or None if it is not one."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def add_days(date_str: str, days: int) -> str:
    """Shift a YYYY-MM-DD string by a number of days."""
    d0 = parse_date(date_str)
    if d0 is None:
        raise ValueError(f"Not a YYYY-MM-DD date: {date_str!r}")
    return (d0 + timedelta(days=days)).isoformat()
