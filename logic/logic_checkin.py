import copy
import logging
import re
from typing import Any, Dict, List, Optional

from storage import add_days, parse_date, today_str

logger = logging.getLogger(__name__)

VIRTUE_KEYS = ("study", "gym", "meditate")

FLOAT_FIELDS = ("sleep_hours", "caffeine_mg", "social_minutes", "calories", "protein_g", "carbs_g", "fat_g")
INT_FIELDS = ("sleep_quality", "mood", "energy")
BOOL_FIELDS = ("workout", "junk_food")


def default_checkin(date_str: str) -> Dict[str, Any]:
    return {
        "date": date_str,
        # user-added things to cut down on, e.g. [{"label": "Tiktok", "value": True}]
        "load_items": [],
        "virtues": {"study": False, "gym": False, "meditate": False},
        "sleep_hours": 7.5,
        "sleep_quality": 7,
        "caffeine_mg": 0,
        "social_minutes": 0,
        "workout": False,
        "mood": 7,
        "energy": 7,
        "junk_food": False,
        "notes": "",
        "calories": 0,
        "protein_g": 0,
        "carbs_g": 0,
        "fat_g": 0,
    }


def to_number(value) -> float:
    """Coerce form input to a number; blanks and garbage become 0."""
    if isinstance(value, bool):
        return 1 if value else 0
    if value is None or value == "":
        return 0
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0
    if num != num or num in (float("inf"), float("-inf")):
        return 0
    return int(num) if num.is_integer() else num


def normalize_checkin(raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Turn whatever was stored or typed into a well-formed check-in dict.

    Returns None when the entry has no usable YYYY-MM-DD date, since history
    is keyed by date and later days are derived from it.
    """
    if not isinstance(raw, dict):
        return None
    parsed = parse_date(str(raw.get("date") or "").strip())
    if parsed is None:
        return None

    record = default_checkin(parsed.isoformat())
    for key in FLOAT_FIELDS + INT_FIELDS:
        if key in raw:
            record[key] = to_number(raw[key])
    for key in BOOL_FIELDS:
        if key in raw:
            record[key] = bool(raw[key])
    record["notes"] = str(raw.get("notes") or "")

    virtues = raw.get("virtues") or {}
    if isinstance(virtues, dict):
        record["virtues"] = {k: bool(virtues.get(k, False)) for k in VIRTUE_KEYS}

    items: List[Dict[str, Any]] = []
    raw_items = raw.get("load_items")
    if not isinstance(raw_items, list):
        raw_items = []
    for item in raw_items:
        if not isinstance(item, dict):
            continue
        label = str(item.get("label") or "").strip()
        if label and get_toggle(items, label) is None:
            items.append({"label": label, "value": bool(item.get("value", False))})
    record["load_items"] = items
    return record


# ================== Toggle lists (load items) ==================


def get_toggle(items: List[Dict[str, Any]], label: str):
    for item in items:
        if item["label"].lower() == label.lower():
            return item
    return None


def upsert_toggle(items: List[Dict[str, Any]], label: str, value: bool) -> List[Dict[str, Any]]:
    out = [dict(x) for x in items]
    for item in out:
        if item["label"].lower() == label.lower():
            item["value"] = value
            return out
    out.append({"label": label, "value": value})
    return out


def remove_toggle(items: List[Dict[str, Any]], label: str) -> List[Dict[str, Any]]:
    return [dict(x) for x in items if x["label"].lower() != label.lower()]


def title_case(text: str) -> str:
    words = re.sub(r"\s+", " ", text.strip()).split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def add_load_item(items: List[Dict[str, Any]], label: str) -> List[Dict[str, Any]]:
    """Append a new, switched-off load item unless it is blank or already present."""
    label = (label or "").strip()
    if not label or get_toggle(items, label) is not None:
        return [dict(x) for x in items]
    return [dict(x) for x in items] + [{"label": title_case(label), "value": False}]


def active_load_count(record: Dict[str, Any]) -> int:
    return sum(1 for x in record.get("load_items") or [] if x.get("value"))


def virtues_count(virtues: Dict[str, bool]) -> int:
    return sum(1 for k in VIRTUE_KEYS if virtues.get(k))


# ================== History editing ==================


def sort_history(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(history, key=lambda x: x["date"])


def get_active(history: List[Dict[str, Any]], draft: Optional[Dict[str, Any]]):
    """The day shown on screen: the draft if there is one, else the latest saved day."""
    if draft:
        return draft
    if not history:
        return None
    return history[-1]


def next_day_date(history: List[Dict[str, Any]], today: Optional[str] = None) -> str:
    if not history:
        return today or today_str()
    return add_days(history[-1]["date"], 1)


def add_day(history: List[Dict[str, Any]], today: Optional[str] = None):
    """
    Append a blank check-in for the day after the latest one (or today).

    Returns (new_history, new_draft); the new day becomes the draft.
    """
    record = default_checkin(next_day_date(history, today))
    logger.info("Adding day %s", record["date"])
    return list(history) + [record], copy.deepcopy(record)


def remove_day(history: List[Dict[str, Any]]):
    """Drop the latest day. The draft is always cleared. Returns (new_history, None)."""
    if not history:
        return list(history), None
    logger.info("Removing day %s", history[-1]["date"])
    return list(history[:-1]), None


def save_checkin(history: List[Dict[str, Any]], draft: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Upsert the draft into history by date and keep history sorted."""
    if not draft:
        return list(history)
    saved = copy.deepcopy(draft)
    if any(x["date"] == saved["date"] for x in history):
        updated = [saved if x["date"] == saved["date"] else x for x in history]
    else:
        updated = list(history) + [saved]
    return sort_history(updated)


def reset_draft(history: List[Dict[str, Any]], draft: Optional[Dict[str, Any]]):
    """Throw away unsaved edits: reload the saved record for the draft's date, else the latest day."""
    if draft:
        for x in history:
            if x["date"] == draft["date"]:
                return copy.deepcopy(x)
    if not history:
        return draft
    return copy.deepcopy(history[-1])


def is_valid_date(date_str: str) -> bool:
    return parse_date(date_str) is not None
