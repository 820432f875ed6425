MICRO_PRESCRIPTION_TXT = """
### Micro-Prescription

**If cravings spike:**

- 10-minute walk (no phone)
- Water + protein (hunger masquerades as craving)
- Push-ups to mild fatigue
- Phone out of bedroom
"""

ABOUT_TXT = """
## ℹ️ About – Dopamine Reset Coach

A personal, local-only habit tracker for a 30- or 100-day "dopamine reset".
You log one short check-in per day; the app turns it into two scores and three coaching tasks.

---

### 🧭 What this app does (current version)

- **Daily check-ins**
  Sleep (hours + quality), caffeine, social media minutes, mood, energy, workout, junk food, notes,
  and optional nutrition macros.

- **Three core virtues, and only three**
  Study, Gym, Meditate. Toggle each on or off per day.

- **User-defined load items**
  There is no built-in vice list. Add anything you want to cut down on (e.g. “TikTok”, “Sugar”)
  and switch it on for the days it happened.

- **Two heuristic scores**
  - **Dopamine Load Score (DLS, 0–100)** for the active day. Higher = more stimulus load.
  - **Natural Energy Index (NEI, 0–100)** over your last 7 saved days. Higher = better baseline.

- **Coach tasks**
  One Easy, one Medium and one Hard task picked from a fixed table, based on plan phase
  (days 1–10 early, 41+ late), sleep, caffeine, DLS, load items and strictness.

- **Progress**
  Charts for the last 14 days, virtue streaks, and CSV export.

- **Local, file-based storage**
  Everything lives in one JSON file under `user_data/` (see below). Nothing leaves this machine.

---

### 🧑‍💻 How to use the UI

1. Click **+ Add Day**. The first day is today; each later click adds the day after the latest one.
2. Fill in the **Check-In** tab. Scores and tasks update as you edit.
3. Click **Save Check-In**. Saving a date that already exists replaces it.
4. **Reset** throws away unsaved edits. **− Remove Day** drops the latest day.
5. Use **Settings** for strictness (Light / Standard / Hard), plan length (30 / 100) and
   which macros appear in the check-in. **Reset All Data** deletes the stored file.

---

### 🧮 How the scores work

**DLS** (rounded, clamped to 0–100):

| Part | Points |
|---|---|
| Social minutes ÷ 10 × 3 | up to +30 |
| Caffeine mg ÷ 50 × 2.5 | up to +20 |
| Junk food | +10 |
| 6 per load item switched on | up to +30 |
| 3 per virtue switched on | down to −12 |
| Workout | −10 |
| Sleep ≥ 7.5h | −10 |

**NEI** (rounded, clamped to 0–100, 50 when nothing is saved yet):
average energy × 10, +5 if average sleep ≥ 7.5h, −8 if 3+ of the 7 days had a load item on,
+6 if 4+ of the 7 days had at least one virtue on.

---

### 📂 Data layout on disk

```text
user_data/
  drc_v1.json              # history, plan length, strictness, tracked macros
  exports/
    drc_history_<date>.csv # written by "Export to CSV"
```

The directory and file name can be changed with `DRC_DATA_DIR` / `DRC_STORAGE_KEY`
or `python app.py --data-dir <dir>`. If the file is unreadable it is ignored and the app starts blank.
"""
