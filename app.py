import argparse
import logging
import sys

import gradio as gr

import app_config
import storage
from storage import ensure_base_dir
from logic.logic_checkin import VIRTUE_KEYS, title_case
from logic.logic_tracker import (
    load_app_action,
    add_day_action,
    remove_day_action,
    update_draft_action,
    add_load_item_action,
    remove_load_item_action,
    save_checkin_action,
    reset_draft_action,
    set_strictness_action,
    set_plan_days_action,
    set_tracked_macros_action,
    reset_all_action,
    export_csv_action,
    start_urge_timer_action,
    tick_urge_timer_action,
    plan_day_choices,
)

from dash_board import ABOUT_TXT, MICRO_PRESCRIPTION_TXT

_parser = argparse.ArgumentParser(add_help=False)
_parser.add_argument("--data-dir", type=str, default=None)
_parser.add_argument("--port", type=int, default=None)
_args, _unknown = _parser.parse_known_args(sys.argv[1:])
if _args.data_dir is not None:
    storage.BASE_DIR = _args.data_dir

logging.basicConfig(
    level=app_config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

ensure_base_dir()

with gr.Blocks(title="Dopamine Reset Coach") as demo:
    # Global states
    app_state = gr.State({})   # persisted: history, plan_days, strictness, tracked_macros
    draft_state = gr.State(None)  # in-progress check-in, not persisted until saved
    urge_started_state = gr.State(None)

    # ========== Header ==========
    with gr.Row():
        with gr.Column(scale=3):
            gr.Markdown("## ✨ Dopamine Reset Coach `Prototype`")
            gr.Markdown(
                "Core virtues only (Study/Gym/Meditate). Load items are user-added only. Starts blank."
            )
        with gr.Column(scale=2):
            header_md = gr.Markdown("")
            with gr.Row():
                add_day_btn = gr.Button("+ Add Day")
                remove_day_btn = gr.Button("− Remove Day", variant="secondary")
    status_md = gr.Markdown("")

    # ========== Top cards ==========
    with gr.Row():
        with gr.Column():
            progress_md = gr.Markdown("")
            with gr.Row():
                plan30_btn = gr.Button("30", size="sm")
                plan100_btn = gr.Button("100", size="sm")
        with gr.Column():
            scores_md = gr.Markdown("")
        with gr.Column():
            tasks_md = gr.Markdown("")

    with gr.Tabs(selected="checkin"):
        # Active
        with gr.Tab("📅 Active", id="today"):
            with gr.Row():
                with gr.Column(scale=2):
                    snapshot_md = gr.Markdown("")
                with gr.Column(scale=1):
                    gr.Markdown(MICRO_PRESCRIPTION_TXT)
                    urge_btn = gr.Button("Start 10-minute Urge Timer", variant="primary")
                    urge_md = gr.Markdown("")
                    urge_timer = gr.Timer(1.0, active=False)

        # Check-In
        with gr.Tab("📝 Check-In", id="checkin"):
            gr.Markdown("### Daily Check-In (fast)")
            checkin_notice = gr.Markdown("")
            with gr.Column(visible=False) as checkin_form:
                f_date = gr.Textbox(label="Date (YYYY-MM-DD)")
                with gr.Row():
                    f_sleep_hours = gr.Slider(3, 10, step=0.1, value=7.5, label="Sleep Hours")
                    f_sleep_quality = gr.Slider(1, 10, step=1, value=7, label="Sleep Quality (/10)")
                with gr.Row():
                    f_caffeine = gr.Number(label="Caffeine (mg)", value=0)
                    f_social = gr.Number(label="Social Minutes", value=0)
                with gr.Row():
                    f_mood = gr.Slider(1, 10, step=1, value=7, label="Mood (/10)")
                    f_energy = gr.Slider(1, 10, step=1, value=7, label="Energy (/10)")

                f_virtues = gr.CheckboxGroup(
                    label="Core Virtues (only these three)",
                    choices=[(title_case(k), k) for k in VIRTUE_KEYS],
                )

                gr.Markdown(
                    "#### Load Items\nAnything you want to reduce (user-added only; no core vices)."
                )
                f_load_items = gr.CheckboxGroup(label="On for this day", choices=[])
                with gr.Row():
                    new_item_box = gr.Textbox(
                        label="Add load item",
                        placeholder="e.g., TikTok, Sugar, Nicotine, Late-night scrolling",
                        scale=3,
                    )
                    add_item_btn = gr.Button("Add", scale=1)
                with gr.Row():
                    remove_item_dropdown = gr.Dropdown(label="Remove load item", choices=[], scale=3)
                    remove_item_btn = gr.Button("Remove", scale=1)

                with gr.Row():
                    f_workout = gr.Checkbox(label="Workout (strength/cardio)")
                    f_junk = gr.Checkbox(label="Junk Food (processed/sugary)")

                gr.Markdown("#### Nutrition")
                with gr.Row():
                    f_calories = gr.Number(label="Calories", value=0)
                    f_protein = gr.Number(label="Protein (g)", value=0)
                    f_carbs = gr.Number(label="Carbs (g)", value=0, visible=False)
                    f_fat = gr.Number(label="Fat (g)", value=0, visible=False)

                f_notes = gr.Textbox(label="Notes (optional)", lines=3)
                with gr.Row():
                    save_checkin_btn = gr.Button("Save Check-In", variant="primary", scale=3)
                    reset_draft_btn = gr.Button("Reset", scale=1)

        # Progress
        with gr.Tab("📊 Progress", id="progress"):
            dls_plot = gr.Plot(label="Last 14 Days — Dopamine Load")
            energy_plot = gr.Plot(label="Energy & Sleep (context)")
            streaks_md = gr.Markdown("")
            with gr.Row():
                export_btn = gr.Button("Export to CSV")
                export_file = gr.File(label="CSV export", visible=False)

        # Settings
        with gr.Tab("⚙️ Settings", id="settings"):
            strictness_radio = gr.Radio(
                label="Strictness",
                choices=list(app_config.STRICTNESS_LEVELS),
                value=app_config.DEFAULT_STRICTNESS,
                info="Hard mode raises expectations (tighter windows, stricter bedtime, etc.).",
            )
            plan_radio = gr.Radio(
                label="Plan length",
                choices=plan_day_choices(app_config.DEFAULT_PLAN_DAYS),
                value=str(app_config.DEFAULT_PLAN_DAYS),
                info="Progress is based on how many days you add (manual + button).",
            )
            macros_group = gr.CheckboxGroup(
                label="Nutrition tracker",
                choices=list(app_config.MACRO_KEYS),
                info="Toggle which macros appear in your daily check-in.",
            )
            reset_all_btn = gr.Button("Reset All Data", variant="stop")

        # About
        with gr.Tab("ℹ️ About", id="about"):
            gr.Markdown(ABOUT_TXT)

    gr.Markdown(
        "<small>Prototype note: data is saved locally in a JSON file on this machine.</small>"
    )

    # ====== Output groups ======
    dashboard_outputs = [
        header_md,
        progress_md,
        scores_md,
        tasks_md,
        snapshot_md,
        dls_plot,
        energy_plot,
        streaks_md,
    ]
    form_outputs = [
        checkin_notice,
        checkin_form,
        f_date,
        f_sleep_hours,
        f_sleep_quality,
        f_caffeine,
        f_social,
        f_mood,
        f_energy,
        f_virtues,
        f_load_items,
        remove_item_dropdown,
        f_workout,
        f_junk,
        f_calories,
        f_protein,
        f_carbs,
        f_fat,
        f_notes,
    ]
    settings_outputs = [strictness_radio, plan_radio, macros_group]
    form_inputs = [
        f_date,
        f_sleep_hours,
        f_sleep_quality,
        f_caffeine,
        f_social,
        f_mood,
        f_energy,
        f_virtues,
        f_load_items,
        f_workout,
        f_junk,
        f_calories,
        f_protein,
        f_carbs,
        f_fat,
        f_notes,
    ]

    # ====== Event bindings ======

    demo.load(
        load_app_action,
        inputs=None,
        outputs=[app_state, draft_state] + dashboard_outputs + form_outputs + settings_outputs,
    )

    # Day lifecycle
    add_day_btn.click(
        add_day_action,
        inputs=[app_state, draft_state],
        outputs=[app_state, draft_state, status_md] + dashboard_outputs + form_outputs,
    )

    remove_day_btn.click(
        remove_day_action,
        inputs=[app_state, draft_state],
        outputs=[app_state, draft_state, status_md] + dashboard_outputs + form_outputs,
    )

    # Draft editing: only user edits, so programmatic form refreshes don't loop back
    gr.on(
        triggers=[
            f_date.input,
            f_sleep_hours.release,
            f_sleep_quality.release,
            f_caffeine.input,
            f_social.input,
            f_mood.release,
            f_energy.release,
            f_virtues.input,
            f_load_items.input,
            f_workout.input,
            f_junk.input,
            f_calories.input,
            f_protein.input,
            f_carbs.input,
            f_fat.input,
            f_notes.input,
        ],
        fn=update_draft_action,
        inputs=[app_state, draft_state] + form_inputs,
        outputs=[draft_state] + dashboard_outputs,
    )

    add_item_btn.click(
        add_load_item_action,
        inputs=[app_state, draft_state, new_item_box],
        outputs=[draft_state, status_md, new_item_box] + dashboard_outputs + form_outputs,
    )
    new_item_box.submit(
        add_load_item_action,
        inputs=[app_state, draft_state, new_item_box],
        outputs=[draft_state, status_md, new_item_box] + dashboard_outputs + form_outputs,
    )

    remove_item_btn.click(
        remove_load_item_action,
        inputs=[app_state, draft_state, remove_item_dropdown],
        outputs=[draft_state, status_md] + dashboard_outputs + form_outputs,
    )

    save_checkin_btn.click(
        save_checkin_action,
        inputs=[app_state, draft_state],
        outputs=[app_state, status_md] + dashboard_outputs,
    )

    reset_draft_btn.click(
        reset_draft_action,
        inputs=[app_state, draft_state],
        outputs=[draft_state, status_md] + dashboard_outputs + form_outputs,
    )

    # Settings
    strictness_radio.input(
        set_strictness_action,
        inputs=[app_state, draft_state, strictness_radio],
        outputs=[app_state] + dashboard_outputs,
    )

    plan_radio.input(
        set_plan_days_action,
        inputs=[app_state, draft_state, plan_radio],
        outputs=[app_state, plan_radio] + dashboard_outputs,
    )

    plan30_btn.click(
        lambda s, d: set_plan_days_action(s, d, 30),
        inputs=[app_state, draft_state],
        outputs=[app_state, plan_radio] + dashboard_outputs,
    )

    plan100_btn.click(
        lambda s, d: set_plan_days_action(s, d, 100),
        inputs=[app_state, draft_state],
        outputs=[app_state, plan_radio] + dashboard_outputs,
    )

    macros_group.input(
        set_tracked_macros_action,
        inputs=[app_state, draft_state, macros_group],
        outputs=[app_state] + form_outputs,
    )

    reset_all_btn.click(
        reset_all_action,
        inputs=[app_state, draft_state],
        outputs=[app_state, draft_state, status_md]
        + dashboard_outputs
        + form_outputs
        + settings_outputs,
    )

    # Progress export
    export_btn.click(
        export_csv_action,
        inputs=[app_state],
        outputs=[export_file, status_md],
    )

    # Urge timer
    urge_btn.click(
        start_urge_timer_action,
        inputs=None,
        outputs=[urge_started_state, urge_md, urge_timer],
    )

    urge_timer.tick(
        tick_urge_timer_action,
        inputs=[urge_started_state],
        outputs=[urge_md, urge_timer],
    )

if __name__ == "__main__":
    demo.launch(
        server_name=app_config.SERVER_NAME,
        server_port=_args.port or app_config.SERVER_PORT,
    )
