import copy
import logging
import time
from typing import Any, Dict, List, Optional

import gradio as gr

import app_config
from state_io import load_state, save_state, reset_state
from .logic_checkin import (
    VIRTUE_KEYS,
    active_load_count,
    add_day,
    add_load_item,
    get_active,
    is_valid_date,
    remove_day,
    remove_toggle,
    reset_draft,
    save_checkin,
    title_case,
    to_number,
    virtues_count,
)
from .logic_scoring import coach_tasks, compute_dls, compute_nei, progress_pct
from .logic_progress import (
    chart_rows,
    dls_figure,
    energy_sleep_figure,
    export_history_csv,
    virtue_streaks,
)

logger = logging.getLogger(__name__)

URGE_TIMER_SECONDS = 10 * 60

MACRO_FIELDS = {
    "calories": "calories",
    "protein": "protein_g",
    "carbs": "carbs_g",
    "fat": "fat_g",
}

LEVEL_BADGES = {"Easy": "🟢 Easy", "Medium": "🟡 Medium", "Hard": "🔴 Hard"}


def text_bar(pct: int, width: int = 20) -> str:
    filled = int(pct) * width // 100
    return "█" * filled + "░" * (width - filled)


def day_number(app_state: Dict[str, Any]) -> int:
    return len(app_state["history"])


# ================== Rendering ==================


def render_header(app_state: Dict[str, Any]) -> str:
    return f"**Days: {day_number(app_state)}** · Strictness: **{app_state['strictness']}**"


def render_progress(app_state: Dict[str, Any]) -> str:
    n = day_number(app_state)
    pct = progress_pct(n, app_state["plan_days"])
    lines = [
        "### 🔥 Reset Progress",
        f"**Day {n}** of {app_state['plan_days']} days · **{pct}%** completion",
        "",
        f"`{text_bar(pct)}`",
    ]
    if n == 0:
        lines += ["", "Start blank: click **+ Add Day** to add Day 1."]
    return "\n".join(lines)


def render_scores(app_state: Dict[str, Any], draft: Optional[Dict[str, Any]]) -> str:
    active = get_active(app_state["history"], draft)
    if not active:
        return "### ⚡ Active Day Scores\nNo active day yet. Add Day 1 to start."
    dls = compute_dls(active)
    nei = compute_nei(app_state["history"])
    return "\n".join([
        "### ⚡ Active Day Scores",
        f"**Dopamine Load** {dls}/100",
        f"`{text_bar(dls)}`",
        "",
        f"**Natural Energy Index** {nei}/100",
        f"`{text_bar(nei)}`",
        "",
        f"Energy: **{active['energy']}/10** · Sleep: **{float(active['sleep_hours']):.1f}h**",
    ])


def render_tasks(app_state: Dict[str, Any], draft: Optional[Dict[str, Any]]) -> str:
    active = get_active(app_state["history"], draft)
    if not active:
        return "### 📋 Coach Tasks\nAdd a day first. Tasks are generated per day."
    tasks = coach_tasks(active, day_number(app_state) or 1, app_state["strictness"])
    lines = ["### 📋 Coach Tasks"]
    for t in tasks:
        lines += ["", f"**{LEVEL_BADGES[t['level']]}** · {t['text']}", f"<small>{t['why']}</small>"]
    return "\n".join(lines)


def render_snapshot(app_state: Dict[str, Any], draft: Optional[Dict[str, Any]]) -> str:
    active = get_active(app_state["history"], draft)
    if not active:
        return "### Active Day Snapshot\nNo active day. Click **+ Add Day**."
    return "\n".join([
        "### Active Day Snapshot",
        f"**Date:** {active['date']}",
        "",
        "| Caffeine | Social | Workout | Virtues On |",
        "|---|---|---|---|",
        f"| {active['caffeine_mg']}mg | {active['social_minutes']}m | "
        f"{'Yes' if active['workout'] else 'No'} | {virtues_count(active['virtues'])} |",
        "",
        f"Load items on: **{active_load_count(active)}** · Junk: **{'Yes' if active['junk_food'] else 'No'}**",
        "",
        f"**Notes:** {active['notes'] or '—'}",
    ])


def render_streaks(app_state: Dict[str, Any]) -> str:
    streaks = virtue_streaks(app_state["history"])
    lines = ["### Virtue Streaks", "", "| Virtue | Current | Best |", "|---|---|---|"]
    for key in VIRTUE_KEYS:
        lines.append(f"| {title_case(key)} | {streaks[key]['current']} | {streaks[key]['best']} |")
    return "\n".join(lines)


def render_dashboard(app_state: Dict[str, Any], draft: Optional[Dict[str, Any]]):
    """Outputs, in order: header, progress, scores, tasks, snapshot, dls plot, energy plot, streaks."""
    rows = chart_rows(app_state["history"])
    dls_plot = dls_figure(rows) if rows else None
    energy_plot = energy_sleep_figure(rows) if rows else None
    return (
        render_header(app_state),
        render_progress(app_state),
        render_scores(app_state, draft),
        render_tasks(app_state, draft),
        render_snapshot(app_state, draft),
        dls_plot,
        energy_plot,
        render_streaks(app_state),
    )


def render_form(app_state: Dict[str, Any], draft: Optional[Dict[str, Any]]):
    """
    Outputs, in order: notice, form column, date, sleep hours, sleep quality,
    caffeine, social, mood, energy, virtues, load items, remove-item dropdown,
    workout, junk food, calories, protein, carbs, fat, notes.
    """
    macros = app_state["tracked_macros"]
    if not draft:
        notice = "You’re starting blank. Click **+ Add Day** to create Day 1."
        if app_state["history"]:
            notice = "No day open for editing. Click **Reset** to load the latest day, or **+ Add Day**."
        return (
            notice,
            gr.update(visible=False),
            *[gr.update() for _ in range(12)],
            *[gr.update(visible=macros[k]) for k in MACRO_FIELDS],
            gr.update(),
        )

    labels = [x["label"] for x in draft["load_items"]]
    return (
        "",
        gr.update(visible=True),
        gr.update(value=draft["date"]),
        gr.update(value=draft["sleep_hours"]),
        gr.update(value=draft["sleep_quality"]),
        gr.update(value=draft["caffeine_mg"]),
        gr.update(value=draft["social_minutes"]),
        gr.update(value=draft["mood"]),
        gr.update(value=draft["energy"]),
        gr.update(value=[k for k in VIRTUE_KEYS if draft["virtues"][k]]),
        gr.update(choices=labels, value=[x["label"] for x in draft["load_items"] if x["value"]]),
        gr.update(choices=labels, value=None),
        gr.update(value=draft["workout"]),
        gr.update(value=draft["junk_food"]),
        *[gr.update(value=draft[field], visible=macros[k]) for k, field in MACRO_FIELDS.items()],
        gr.update(value=draft["notes"]),
    )


def plan_day_choices(plan_days: int) -> List[str]:
    return [str(d) for d in sorted(set(app_config.PLAN_DAY_CHOICES) | {plan_days})]


def render_settings(app_state: Dict[str, Any]):
    """Outputs, in order: strictness radio, plan length radio, tracked macros group."""
    return (
        gr.update(value=app_state["strictness"]),
        gr.update(choices=plan_day_choices(app_state["plan_days"]), value=str(app_state["plan_days"])),
        gr.update(value=[k for k in app_config.MACRO_KEYS if app_state["tracked_macros"][k]]),
    )


# ================== Draft editing ==================


def apply_form_to_draft(
    draft: Dict[str, Any],
    date_str,
    sleep_hours,
    sleep_quality,
    caffeine_mg,
    social_minutes,
    mood,
    energy,
    virtues_on: List[str],
    load_items_on: List[str],
    workout,
    junk_food,
    calories,
    protein_g,
    carbs_g,
    fat_g,
    notes,
) -> Dict[str, Any]:
    """Copy the check-in form values onto a fresh copy of the draft."""
    new_draft = copy.deepcopy(draft)
    on_labels = {x.lower() for x in (load_items_on or [])}
    new_draft.update({
        "date": (date_str or "").strip(),
        "sleep_hours": to_number(sleep_hours),
        "sleep_quality": to_number(sleep_quality),
        "caffeine_mg": to_number(caffeine_mg),
        "social_minutes": to_number(social_minutes),
        "mood": to_number(mood),
        "energy": to_number(energy),
        "virtues": {k: k in (virtues_on or []) for k in VIRTUE_KEYS},
        "load_items": [
            {"label": x["label"], "value": x["label"].lower() in on_labels}
            for x in draft["load_items"]
        ],
        "workout": bool(workout),
        "junk_food": bool(junk_food),
        "calories": to_number(calories),
        "protein_g": to_number(protein_g),
        "carbs_g": to_number(carbs_g),
        "fat_g": to_number(fat_g),
        "notes": notes or "",
    })
    return new_draft


def update_draft_action(app_state, draft, *form_values):
    """Gradio callback: any check-in field edited by the user."""
    if not draft:
        return (draft, *render_dashboard(app_state, draft))
    new_draft = apply_form_to_draft(draft, *form_values)
    return (new_draft, *render_dashboard(app_state, new_draft))


def add_load_item_action(app_state, draft, new_label: str):
    """Gradio callback: add a user-defined load item to the draft."""
    if not draft:
        return (draft, "Add a day first.", "", *render_dashboard(app_state, draft), *render_form(app_state, draft))
    new_draft = copy.deepcopy(draft)
    new_draft["load_items"] = add_load_item(draft["load_items"], new_label)
    added = len(new_draft["load_items"]) > len(draft["load_items"])
    msg = f"Added load item “{new_draft['load_items'][-1]['label']}”." if added else ""
    return (new_draft, msg, "", *render_dashboard(app_state, new_draft), *render_form(app_state, new_draft))


def remove_load_item_action(app_state, draft, label: str):
    """Gradio callback: drop a load item from the draft."""
    if not draft or not label:
        return (draft, "", *render_dashboard(app_state, draft), *render_form(app_state, draft))
    new_draft = copy.deepcopy(draft)
    new_draft["load_items"] = remove_toggle(draft["load_items"], label)
    return (
        new_draft,
        f"Removed load item “{label}”.",
        *render_dashboard(app_state, new_draft),
        *render_form(app_state, new_draft),
    )


# ================== Day lifecycle ==================


def load_app_action():
    """Gradio callback for demo.load: read the stored state and render everything."""
    app_state = load_state()
    draft = None
    return (
        app_state,
        draft,
        *render_dashboard(app_state, draft),
        *render_form(app_state, draft),
        *render_settings(app_state),
    )


def add_day_action(app_state, draft):
    history, new_draft = add_day(app_state["history"])
    new_state = {**app_state, "history": history}
    save_state(new_state)
    return (
        new_state,
        new_draft,
        f"Added {new_draft['date']} (Day {len(history)}).",
        *render_dashboard(new_state, new_draft),
        *render_form(new_state, new_draft),
    )


def remove_day_action(app_state, draft):
    if not app_state["history"]:
        return (
            app_state,
            draft,
            "Nothing to remove.",
            *render_dashboard(app_state, draft),
            *render_form(app_state, draft),
        )
    removed = app_state["history"][-1]["date"]
    history, new_draft = remove_day(app_state["history"])
    new_state = {**app_state, "history": history}
    save_state(new_state)
    return (
        new_state,
        new_draft,
        f"Removed {removed}.",
        *render_dashboard(new_state, new_draft),
        *render_form(new_state, new_draft),
    )


def save_checkin_action(app_state, draft):
    """Gradio callback: promote the draft into history (upsert by date)."""
    if not draft:
        return (app_state, "Add a day first.", *render_dashboard(app_state, draft))
    if not is_valid_date(draft["date"]):
        return (app_state, "Date must be in YYYY-MM-DD format.", *render_dashboard(app_state, draft))

    history = save_checkin(app_state["history"], draft)
    new_state = {**app_state, "history": history}
    save_state(new_state)
    logger.info("Saved check-in for %s", draft["date"])
    return (new_state, f"Check-in saved for {draft['date']}.", *render_dashboard(new_state, draft))


def reset_draft_action(app_state, draft):
    """Gradio callback: discard unsaved edits."""
    new_draft = reset_draft(app_state["history"], draft)
    msg = f"Reloaded saved check-in for {new_draft['date']}." if new_draft else ""
    return (new_draft, msg, *render_dashboard(app_state, new_draft), *render_form(app_state, new_draft))


# ================== Settings ==================


def set_strictness_action(app_state, draft, strictness: str):
    if strictness not in app_config.STRICTNESS_LEVELS:
        return (app_state, *render_dashboard(app_state, draft))
    new_state = {**app_state, "strictness": strictness}
    save_state(new_state)
    return (new_state, *render_dashboard(new_state, draft))


def set_plan_days_action(app_state, draft, plan_days):
    try:
        days = int(plan_days)
    except (TypeError, ValueError):
        days = app_state["plan_days"]
    if days <= 0:
        days = app_state["plan_days"]
    new_state = {**app_state, "plan_days": days}
    save_state(new_state)
    return (
        new_state,
        gr.update(choices=plan_day_choices(days), value=str(days)),
        *render_dashboard(new_state, draft),
    )


def set_tracked_macros_action(app_state, draft, selected: List[str]):
    selected = selected or []
    new_state = {
        **app_state,
        "tracked_macros": {k: k in selected for k in app_config.MACRO_KEYS},
    }
    save_state(new_state)
    return (new_state, *render_form(new_state, draft))


def reset_all_action(app_state, draft):
    """Gradio callback: wipe everything except macro visibility."""
    new_state = reset_state(app_state)
    save_state(new_state)
    logger.info("All data reset")
    return (
        new_state,
        None,
        "All data reset.",
        *render_dashboard(new_state, None),
        *render_form(new_state, None),
        *render_settings(new_state),
    )


def export_csv_action(app_state):
    if not app_state["history"]:
        return gr.update(value=None, visible=False), "Nothing to export yet."
    path = export_history_csv(app_state["history"])
    return gr.update(value=path, visible=True), f"Exported {len(app_state['history'])} day(s)."


# ================== Urge timer ==================


def urge_timer_text(started_at: Optional[float], now: Optional[float] = None) -> str:
    if started_at is None:
        return "Timer not running."
    now = time.time() if now is None else now
    remaining = max(0, int(URGE_TIMER_SECONDS - (now - started_at)))
    if remaining == 0:
        return "✅ 10 minutes done. The urge peaked and passed."
    return f"⏳ {remaining // 60:02d}:{remaining % 60:02d} left. Ride it out, no phone."


def start_urge_timer_action():
    started_at = time.time()
    return started_at, urge_timer_text(started_at, started_at), gr.Timer(active=True)


def tick_urge_timer_action(started_at):
    now = time.time()
    finished = started_at is None or now - started_at >= URGE_TIMER_SECONDS
    return urge_timer_text(started_at, now), gr.Timer(active=not finished)
