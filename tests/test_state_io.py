"""
Tests for the persisted state file: round trip, defaults and corrupt-file recovery.
"""
import json

import pytest

import storage
from logic import logic_tracker as tracker
from state_io import DEFAULT_MACROS, default_state, load_state, reset_state, save_state


def _write_raw(text):
    path = storage.get_state_path()
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def test_missing_file_gives_defaults(data_dir):
    state = load_state()
    assert state == default_state()
    assert state["history"] == []
    assert state["plan_days"] == 100
    assert state["strictness"] == "Standard"
    assert state["tracked_macros"] == DEFAULT_MACROS


def test_save_then_load(data_dir, make_checkin):
    state = default_state()
    state["history"] = [make_checkin("2026-01-02"), make_checkin("2026-01-01", energy=3)]
    state["plan_days"] = 30
    state["strictness"] = "Hard"
    save_state(state)

    loaded = load_state()
    assert [x["date"] for x in loaded["history"]] == ["2026-01-01", "2026-01-02"]
    assert loaded["history"][0]["energy"] == 3
    assert loaded["plan_days"] == 30
    assert loaded["strictness"] == "Hard"


def test_file_layout(data_dir):
    save_state(default_state())
    with open(data_dir / "drc_v1.json", encoding="utf-8") as f:
        payload = json.load(f)
    assert set(payload) == {"history", "plan_days", "strictness", "tracked_macros"}


def test_corrupt_file_is_discarded(data_dir, caplog):
    _write_raw("{not json")
    assert load_state() == default_state()
    assert "Discarding unparsable stored state" in caplog.text


def test_non_object_blob_gives_defaults(data_dir):
    _write_raw("[1, 2, 3]")
    assert load_state() == default_state()


def test_bad_fields_fall_back(data_dir):
    _write_raw(json.dumps({
        "history": [{"date": "2026-01-01", "caffeine_mg": "x"}, {"energy": 3}],
        "plan_days": "many",
        "strictness": "Brutal",
        "tracked_macros": {"fat": True},
    }))
    state = load_state()
    assert len(state["history"]) == 1
    assert state["history"][0]["caffeine_mg"] == 0
    assert state["plan_days"] == 100
    assert state["strictness"] == "Standard"
    assert state["tracked_macros"] == {"calories": True, "protein": True, "carbs": False, "fat": True}


@pytest.mark.parametrize(
    "blob",
    [
        {"history": 5},
        {"history": "2026-01-01"},
        {"history": {"date": "2026-01-01"}},
    ],
)
def test_non_list_history_is_empty(data_dir, blob):
    _write_raw(json.dumps(blob))
    assert load_state()["history"] == []


@pytest.mark.parametrize("load_items", [5, "Sugar", {"label": "Sugar"}, None])
def test_non_list_load_items_are_empty(data_dir, load_items):
    _write_raw(json.dumps({"history": [{"date": "2026-01-01", "load_items": load_items}]}))
    state = load_state()
    assert [x["date"] for x in state["history"]] == ["2026-01-01"]
    assert state["history"][0]["load_items"] == []


def test_entries_with_bad_dates_are_dropped(data_dir, caplog):
    _write_raw(json.dumps({
        "history": [
            {"date": "someday"},
            {"date": "2026-13-40"},
            {"date": 20260101},
            {"date": "2026-01-01", "energy": 4},
        ],
    }))
    state = load_state()
    assert [x["date"] for x in state["history"]] == ["2026-01-01"]
    assert "Dropping history entry without a valid date" in caplog.text


def test_add_day_after_loading_bad_dates(data_dir):
    """A stray non-date entry on disk must not break the next + Add Day."""
    _write_raw(json.dumps({"history": [{"date": "2026-01-01"}, {"date": "someday"}]}))
    result = tracker.add_day_action(load_state(), None)
    draft = result[1]
    assert draft["date"] == "2026-01-02"


def test_loose_dates_are_rewritten_and_deduped(data_dir):
    _write_raw(json.dumps({
        "history": [
            {"date": "2026-1-5", "energy": 2},
            {"date": "2026-01-05", "energy": 9},
            {"date": "2026-01-04"},
        ],
    }))
    history = load_state()["history"]
    assert [x["date"] for x in history] == ["2026-01-04", "2026-01-05"]
    assert history[1]["energy"] == 9


def test_failed_save_leaves_no_temp_file(data_dir):
    with pytest.raises(TypeError):
        storage.save_json(storage.get_state_path(), {"history": object()})
    assert list(data_dir.iterdir()) == []


def test_failed_save_keeps_previous_file(data_dir, make_checkin):
    state = default_state()
    state["history"] = [make_checkin("2026-01-01")]
    save_state(state)

    state["history"].append(object())
    with pytest.raises(TypeError):
        save_state(state)
    assert [p.name for p in data_dir.iterdir()] == ["drc_v1.json"]
    assert [x["date"] for x in load_state()["history"]] == ["2026-01-01"]


def test_reset_deletes_file_but_keeps_macros(data_dir, make_checkin):
    state = default_state()
    state["history"] = [make_checkin()]
    state["strictness"] = "Hard"
    state["tracked_macros"] = {"calories": False, "protein": False, "carbs": True, "fat": True}
    save_state(state)

    fresh = reset_state(state)
    assert not (data_dir / "drc_v1.json").exists()
    assert fresh["history"] == []
    assert fresh["strictness"] == "Standard"
    assert fresh["plan_days"] == 100
    assert fresh["tracked_macros"] == state["tracked_macros"]
