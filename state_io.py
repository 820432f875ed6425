# state_io.py
"""
Loading and saving the single persisted STATE blob.

Layout of <DATA_DIR>/<STORAGE_KEY>.json:
    {
      "history": [ <check-in>, ... ],        # sorted ascending by date
      "plan_days": 100,
      "strictness": "Light" | "Standard" | "Hard",
      "tracked_macros": {"calories": true, "protein": true, "carbs": false, "fat": false}
    }
"""

import logging
from typing import Any, Dict

import app_config
import storage
from logic.logic_checkin import normalize_checkin, sort_history

logger = logging.getLogger(__name__)

DEFAULT_MACROS: Dict[str, bool] = {
    "calories": True,
    "protein": True,
    "carbs": False,
    "fat": False,
}


def default_state() -> Dict[str, Any]:
    return {
        "history": [],
        "plan_days": app_config.DEFAULT_PLAN_DAYS,
        "strictness": app_config.DEFAULT_STRICTNESS,
        "tracked_macros": dict(DEFAULT_MACROS),
    }


def normalize_state(saved) -> Dict[str, Any]:
    """Fill in defaults for anything missing or malformed in a loaded blob."""
    state = default_state()
    if not isinstance(saved, dict):
        return state

    raw_history = saved.get("history")
    if not isinstance(raw_history, list):
        if raw_history is not None:
            logger.warning("Ignoring history that is not a list: %r", raw_history)
        raw_history = []

    by_date: Dict[str, Dict[str, Any]] = {}
    for raw in raw_history:
        record = normalize_checkin(raw)
        if record is None:
            logger.warning("Dropping history entry without a valid date: %r", raw)
            continue
        # one record per date; the later entry wins, as a save would
        by_date[record["date"]] = record
    state["history"] = sort_history(list(by_date.values()))

    plan_days = saved.get("plan_days")
    if isinstance(plan_days, int) and not isinstance(plan_days, bool) and plan_days > 0:
        state["plan_days"] = plan_days

    if saved.get("strictness") in app_config.STRICTNESS_LEVELS:
        state["strictness"] = saved["strictness"]

    macros = saved.get("tracked_macros")
    if isinstance(macros, dict):
        state["tracked_macros"] = {
            k: bool(macros.get(k, DEFAULT_MACROS[k])) for k in app_config.MACRO_KEYS
        }
    return state


def load_state() -> Dict[str, Any]:
    path = storage.get_state_path()
    saved = storage.load_json(path, None)
    state = normalize_state(saved)
    logger.info("Loaded %d day(s) from %s", len(state["history"]), path)
    return state


def save_state(state: Dict[str, Any]) -> None:
    payload = {
        "history": state["history"],
        "plan_days": state["plan_days"],
        "strictness": state["strictness"],
        "tracked_macros": state["tracked_macros"],
    }
    storage.save_json(storage.get_state_path(), payload)
    logger.debug("Saved state with %d day(s)", len(payload["history"]))


def reset_state(state: Dict[str, Any]) -> Dict[str, Any]:
    """
    Wipe the stored file and return a fresh state.

    Macro visibility survives the reset.
    """
    path = storage.get_state_path()
    if storage.delete_file(path):
        logger.info("Deleted %s", path)
    fresh = default_state()
    fresh["tracked_macros"] = dict(state.get("tracked_macros") or DEFAULT_MACROS)
    return fresh
