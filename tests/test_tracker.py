"""
Tests for the Gradio callbacks in logic_tracker.

The callbacks return (state..., *dashboard, *form) tuples; these tests check the
state they hand back, what they persist, and the text they render.
"""
import pytest

from logic import logic_tracker as tracker
from logic.logic_checkin import default_checkin
from state_io import default_state, load_state

DASHBOARD_LEN = 8
FORM_LEN = 19
SETTINGS_LEN = 3


@pytest.fixture
def fresh_state(data_dir):
    return default_state()


def _form_values(draft, **overrides):
    values = {
        "date_str": draft["date"],
        "sleep_hours": draft["sleep_hours"],
        "sleep_quality": draft["sleep_quality"],
        "caffeine_mg": draft["caffeine_mg"],
        "social_minutes": draft["social_minutes"],
        "mood": draft["mood"],
        "energy": draft["energy"],
        "virtues_on": [k for k, v in draft["virtues"].items() if v],
        "load_items_on": [x["label"] for x in draft["load_items"] if x["value"]],
        "workout": draft["workout"],
        "junk_food": draft["junk_food"],
        "calories": draft["calories"],
        "protein_g": draft["protein_g"],
        "carbs_g": draft["carbs_g"],
        "fat_g": draft["fat_g"],
        "notes": draft["notes"],
    }
    values.update(overrides)
    return list(values.values())


class TestRendering:
    def test_output_arity(self, fresh_state):
        assert len(tracker.render_dashboard(fresh_state, None)) == DASHBOARD_LEN
        assert len(tracker.render_form(fresh_state, None)) == FORM_LEN
        assert len(tracker.render_form(fresh_state, default_checkin("2026-01-01"))) == FORM_LEN
        assert len(tracker.render_settings(fresh_state)) == SETTINGS_LEN

    def test_blank_state_messages(self, fresh_state):
        header, progress, scores, tasks, snapshot, dls_plot, energy_plot, _ = tracker.render_dashboard(
            fresh_state, None
        )
        assert "Days: 0" in header
        assert "add Day 1" in progress
        assert "No active day yet" in scores
        assert "Add a day first" in tasks
        assert dls_plot is None and energy_plot is None

    def test_scores_for_active_day(self, fresh_state):
        draft = dict(default_checkin("2026-01-01"), social_minutes=100, caffeine_mg=100,
                     junk_food=True, sleep_hours=6)
        scores = tracker.render_scores(fresh_state, draft)
        assert "**Dopamine Load** 45/100" in scores
        assert "**Natural Energy Index** 50/100" in scores

    def test_text_bar(self):
        assert tracker.text_bar(0) == "░" * 20
        assert tracker.text_bar(100) == "█" * 20
        assert tracker.text_bar(50).count("█") == 10


class TestDayLifecycle:
    def test_load_blank(self, data_dir):
        out = tracker.load_app_action()
        assert len(out) == 2 + DASHBOARD_LEN + FORM_LEN + SETTINGS_LEN
        assert out[0] == default_state()
        assert out[1] is None

    def test_add_day_persists(self, fresh_state):
        state, draft, msg, *_ = tracker.add_day_action(fresh_state, None)
        assert len(state["history"]) == 1
        assert draft["date"] == state["history"][0]["date"]
        assert "Day 1" in msg
        assert load_state()["history"] == state["history"]

    def test_remove_day(self, fresh_state):
        state, draft, *_ = tracker.add_day_action(fresh_state, None)
        state, draft, *_ = tracker.add_day_action(state, draft)
        state, draft, msg, *_ = tracker.remove_day_action(state, draft)
        assert len(state["history"]) == 1
        assert draft is None
        assert len(load_state()["history"]) == 1

    def test_remove_day_on_empty(self, fresh_state):
        state, draft, msg, *_ = tracker.remove_day_action(fresh_state, None)
        assert state["history"] == []
        assert msg == "Nothing to remove."

    def test_edit_then_save_upserts(self, fresh_state):
        state, draft, *_ = tracker.add_day_action(fresh_state, None)
        out = tracker.update_draft_action(state, draft, *_form_values(draft, energy=3, caffeine_mg=""))
        draft = out[0]
        assert draft["energy"] == 3
        assert draft["caffeine_mg"] == 0
        assert len(out) == 1 + DASHBOARD_LEN

        state, msg, *_ = tracker.save_checkin_action(state, draft)
        assert len(state["history"]) == 1
        assert state["history"][0]["energy"] == 3
        assert load_state()["history"][0]["energy"] == 3

    def test_save_rejects_bad_date(self, fresh_state):
        state, draft, *_ = tracker.add_day_action(fresh_state, None)
        draft = tracker.apply_form_to_draft(draft, *_form_values(draft, date_str="tomorrow"))
        new_state, msg, *_ = tracker.save_checkin_action(state, draft)
        assert new_state is state
        assert "YYYY-MM-DD" in msg

    def test_save_without_draft(self, fresh_state):
        state, msg, *_ = tracker.save_checkin_action(fresh_state, None)
        assert msg == "Add a day first."

    def test_reset_draft(self, fresh_state):
        state, draft, *_ = tracker.add_day_action(fresh_state, None)
        edited = tracker.apply_form_to_draft(draft, *_form_values(draft, mood=1))
        reverted, msg, *_ = tracker.reset_draft_action(state, edited)
        assert reverted["mood"] == 7


class TestLoadItems:
    def test_add_and_toggle_and_remove(self, fresh_state):
        state, draft, *_ = tracker.add_day_action(fresh_state, None)
        draft, msg, cleared, *_ = tracker.add_load_item_action(state, draft, "sugar")
        assert draft["load_items"] == [{"label": "Sugar", "value": False}]
        assert cleared == ""

        draft = tracker.apply_form_to_draft(draft, *_form_values(draft, load_items_on=["Sugar"]))
        assert draft["load_items"][0]["value"] is True

        draft, msg, *_ = tracker.remove_load_item_action(state, draft, "Sugar")
        assert draft["load_items"] == []

    def test_add_without_draft(self, fresh_state):
        draft, msg, *_ = tracker.add_load_item_action(fresh_state, None, "Sugar")
        assert draft is None
        assert msg == "Add a day first."


class TestSettings:
    def test_strictness(self, fresh_state):
        state, *_ = tracker.set_strictness_action(fresh_state, None, "Hard")
        assert state["strictness"] == "Hard"
        assert load_state()["strictness"] == "Hard"

    def test_unknown_strictness_ignored(self, fresh_state):
        state, *_ = tracker.set_strictness_action(fresh_state, None, "Extreme")
        assert state["strictness"] == "Standard"

    def test_plan_days(self, fresh_state):
        state, radio, *_ = tracker.set_plan_days_action(fresh_state, None, "30")
        assert state["plan_days"] == 30
        assert load_state()["plan_days"] == 30

    def test_tracked_macros(self, fresh_state):
        state, *_ = tracker.set_tracked_macros_action(fresh_state, None, ["carbs"])
        assert state["tracked_macros"] == {"calories": False, "protein": False, "carbs": True, "fat": False}

    def test_reset_all(self, fresh_state):
        state, draft, *_ = tracker.add_day_action(fresh_state, None)
        state, *_ = tracker.set_strictness_action(state, draft, "Hard")
        out = tracker.reset_all_action(state, draft)
        assert len(out) == 3 + DASHBOARD_LEN + FORM_LEN + SETTINGS_LEN
        new_state, new_draft = out[0], out[1]
        assert new_state["history"] == []
        assert new_state["strictness"] == "Standard"
        assert new_draft is None
        assert load_state()["history"] == []


class TestUrgeTimer:
    def test_not_running(self):
        assert tracker.urge_timer_text(None) == "Timer not running."

    def test_countdown(self):
        assert tracker.urge_timer_text(1000.0, 1000.0).startswith("⏳ 10:00")
        assert tracker.urge_timer_text(1000.0, 1061.0).startswith("⏳ 08:59")

    def test_finished(self):
        assert tracker.urge_timer_text(1000.0, 1000.0 + 600).startswith("✅")
