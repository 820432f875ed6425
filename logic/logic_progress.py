import os
import logging
from typing import Any, Dict, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

import storage
from storage import parse_date, today_str
from .logic_checkin import VIRTUE_KEYS, FLOAT_FIELDS, INT_FIELDS, BOOL_FIELDS
from .logic_scoring import compute_dls

logger = logging.getLogger(__name__)

CHART_WINDOW = 14


def chart_rows(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Last 14 days as {"day": "MM-DD", "DLS", "Energy", "Sleep"} rows."""
    return [
        {
            "day": x["date"][5:],
            "DLS": compute_dls(x),
            "Energy": x["energy"],
            "Sleep": round(float(x["sleep_hours"]), 1),
        }
        for x in history[-CHART_WINDOW:]
    ]


def _release(fig):
    """Drop pyplot's reference to a finished figure; it still renders via savefig."""
    plt.close(fig)
    return fig


def dls_figure(rows: List[Dict[str, Any]]):
    fig, ax = plt.subplots(figsize=(9, 4))
    ax.plot([r["day"] for r in rows], [r["DLS"] for r in rows], linewidth=2)
    ax.set_ylim(0, 100)
    ax.grid(linestyle="--", linewidth=0.5)
    ax.set_title("Last 14 Days — Dopamine Load")
    ax.tick_params(axis="x", labelrotation=35)
    fig.tight_layout()
    return _release(fig)


def energy_sleep_figure(rows: List[Dict[str, Any]]):
    days = [r["day"] for r in rows]
    fig, ax_energy = plt.subplots(figsize=(9, 4))
    ax_energy.plot(days, [r["Energy"] for r in rows], linewidth=2, label="Energy")
    ax_energy.set_ylim(0, 10)
    ax_energy.set_ylabel("Energy")
    ax_energy.grid(linestyle="--", linewidth=0.5)

    ax_sleep = ax_energy.twinx()
    ax_sleep.plot(days, [r["Sleep"] for r in rows], linewidth=2, color="tab:orange", label="Sleep")
    ax_sleep.set_ylim(3, 10)
    ax_sleep.set_ylabel("Sleep (h)")

    ax_energy.set_title("Energy & Sleep (context)")
    ax_energy.tick_params(axis="x", labelrotation=35)
    fig.legend(loc="upper left")
    fig.tight_layout()
    return _release(fig)


# ================== Streaks ==================


def virtue_streaks(history: List[Dict[str, Any]]) -> Dict[str, Dict[str, int]]:
    """
    Per virtue: {"current": n, "best": m}.

    A streak counts consecutive calendar days with the virtue on; a missing
    date or a day with it off breaks it. "current" is the run that ends on the
    latest logged day.
    """
    out = {}
    for key in VIRTUE_KEYS:
        best = 0
        run = 0
        prev = None
        for x in history:
            d = parse_date(x["date"])
            on = bool(x["virtues"].get(key))
            contiguous = prev is not None and d is not None and (d - prev).days == 1
            if on:
                run = run + 1 if contiguous else 1
            else:
                run = 0
            best = max(best, run)
            prev = d
        out[key] = {"current": run, "best": best}
    return out


# ================== CSV export ==================


def history_frame(history: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for x in history:
        row = {"date": x["date"]}
        for key in FLOAT_FIELDS + INT_FIELDS + BOOL_FIELDS:
            row[key] = x[key]
        for key in VIRTUE_KEYS:
            row[key] = bool(x["virtues"].get(key))
        row["load_items_on"] = ";".join(i["label"] for i in x["load_items"] if i["value"])
        row["notes"] = x["notes"]
        row["dls"] = compute_dls(x)
        rows.append(row)
    columns = (
        ["date"] + list(FLOAT_FIELDS + INT_FIELDS + BOOL_FIELDS) + list(VIRTUE_KEYS)
        + ["load_items_on", "notes", "dls"]
    )
    return pd.DataFrame(rows, columns=columns)


def export_history_csv(history: List[Dict[str, Any]], directory: str = None) -> str:
    """Write history to <data dir>/exports/drc_history_<today>.csv and return the path."""
    directory = directory or os.path.join(storage.BASE_DIR, "exports")
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"drc_history_{today_str()}.csv")
    history_frame(history).to_csv(path, index=False)
    logger.info("Exported %d day(s) to %s", len(history), path)
    return path
