"""
Scoring heuristics for the reset plan.

- compute_dls:   Dopamine Load Score for one day (0-100, higher = more stimulus load).
- compute_nei:   Natural Energy Index over the trailing 7 days (0-100, higher = better baseline).
- coach_tasks:   one Easy / Medium / Hard suggestion for the active day.
- progress_pct:  how far through the plan the logged days are.

Thresholds are fixed product values.
"""

import math
from typing import Any, Dict, List

from .logic_checkin import active_load_count, virtues_count

NEI_WINDOW = 7
NEI_DEFAULT = 50
EARLY_PHASE_MAX_DAY = 10
LATE_PHASE_AFTER_DAY = 40


def clamp(n, lo, hi):
    return max(lo, min(hi, n))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_dls(d: Dict[str, Any]) -> int:
    social = clamp((d["social_minutes"] / 10) * 3, 0, 30)
    caffeine = clamp((d["caffeine_mg"] / 50) * 2.5, 0, 20)
    junk = 10 if d["junk_food"] else 0

    # user-added load items, not a fixed vice list
    extra_load = clamp(active_load_count(d) * 6, 0, 30)
    virtues = clamp(virtues_count(d["virtues"]) * 3, 0, 12)

    workout = -10 if d["workout"] else 0
    good_sleep = -10 if d["sleep_hours"] >= 7.5 else 0

    raw = social + caffeine + junk + extra_load + workout + good_sleep - virtues
    return clamp(round_half_up(raw), 0, 100)


def compute_nei(history: List[Dict[str, Any]]) -> int:
    last7 = history[-NEI_WINDOW:]
    if not last7:
        return NEI_DEFAULT

    avg_energy = sum(x["energy"] for x in last7) / len(last7)
    avg_sleep = sum(x["sleep_hours"] for x in last7) / len(last7)

    load_days = sum(1 for x in last7 if active_load_count(x) > 0)
    virtue_days = sum(1 for x in last7 if virtues_count(x["virtues"]) >= 1)

    score = avg_energy * 10
    if avg_sleep >= 7.5:
        score += 5
    if load_days >= 3:
        score -= 8
    if virtue_days >= 4:
        score += 6

    return clamp(round_half_up(score), 0, 100)


def _task(level: str, text: str, why: str) -> Dict[str, str]:
    return {"level": level, "text": text, "why": why}


def coach_tasks(today: Dict[str, Any], day_number: int, strictness: str) -> List[Dict[str, str]]:
    """
    Pick one task per level from a fixed decision table.

    day_number is the count of logged days; it only decides the plan phase
    (early <= 10, late > 40, mid otherwise).
    """
    tasks: List[Dict[str, str]] = []

    dls = compute_dls(today)
    early = day_number <= EARLY_PHASE_MAX_DAY
    late = day_number > LATE_PHASE_AFTER_DAY

    # EASY
    if early:
        tasks.append(_task(
            "Easy",
            "5-minute grounding walk (no phone).",
            "Early resets succeed through tiny stable habits, not intensity.",
        ))
    elif not late:
        tasks.append(_task(
            "Easy",
            "Set a 60-minute stimulus-free focus block.",
            "Mid-phase: extend clarity windows gradually.",
        ))
    else:
        tasks.append(_task(
            "Easy",
            "Plan tomorrow’s top 3 in 90 seconds.",
            "Late-phase: optimize momentum, not restriction.",
        ))

    # MEDIUM
    if today["sleep_hours"] < 7:
        tasks.append(_task(
            "Medium",
            "Lights-out time tonight + 20-minute wind-down.",
            "Sleep debt amplifies cravings and worsens baseline stability.",
        ))
    elif today["caffeine_mg"] > 200:
        tasks.append(_task(
            "Medium",
            "Cap caffeine by 2PM; swap one dose for water.",
            "Caffeine can mask fatigue and distort natural calibration.",
        ))
    else:
        tasks.append(_task(
            "Medium",
            "2–3 sets of light movement (push-ups or squats).",
            "Light training boosts dopamine tone without spiking it.",
        ))

    # HARD
    any_load = active_load_count(today) > 0
    if dls > 70:
        tasks.append(_task(
            "Hard",
            "Full evening detox: no social media after 8PM.",
            "High-load days benefit most from removing high-density stimuli.",
        ))
    elif any_load:
        tasks.append(_task(
            "Hard",
            "Recovery protocol: 20-min walk + protein + early bed.",
            "A structured rebound stabilizes the next 48 hours.",
        ))
    elif strictness == "Hard":
        tasks.append(_task(
            "Hard",
            "Phone out of bedroom + no screens final 45 minutes.",
            "Hard mode uses environment control to maximize consistency.",
        ))
    elif late:
        tasks.append(_task(
            "Hard",
            "24-hour low-stimulus cycle (no shortform content).",
            "Late-phase: deepen discipline with bigger resets.",
        ))
    else:
        tasks.append(_task(
            "Hard",
            "No phone in bed tonight.",
            "Prevents unconscious dopamine loops at night.",
        ))

    return tasks


def progress_pct(day_number: int, plan_days: int) -> int:
    if plan_days <= 0:
        return 0
    return clamp(round_half_up((day_number / plan_days) * 100), 0, 100)
