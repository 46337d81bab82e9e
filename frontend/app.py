import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import requests
import streamlit as st
from dotenv import load_dotenv

load_dotenv()

# If BACKEND_URL is not set, run in local mode (call Python modules directly)
BACKEND_URL = os.getenv("BACKEND_URL", "").strip()
LOCAL_MODE = BACKEND_URL == ""

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from backend.models import EXPERIENCE_LEVELS, GOALS, INTENSITIES, STYLES  # noqa: E402
from frontend.view import (  # noqa: E402
    FORM_DEFAULTS,
    block_lines,
    build_payload,
    day_blocks,
    day_heading,
    error_message,
    fetch_workout_entries,
    week_days,
)

if LOCAL_MODE:
    # Load secrets into environment for SDKs that read os.environ
    try:
        for name in ("OPENAI_API_KEY", "OPENAI_MODEL", "PLAN_TIMEOUT_SECONDS"):
            if name in st.secrets:
                os.environ[name] = str(st.secrets[name]).strip()
    except FileNotFoundError:
        # no secrets.toml, rely on the environment
        pass
    from pydantic import ValidationError
    from backend.errors import PlanGenerationError
    from backend.models import PlanDay
    from backend.planner import PlanGenerationClient
    from backend.totals import plan_day_to_workouts
    from backend.validator import normalize_request
    if "planner" not in st.session_state:
        st.session_state.planner = PlanGenerationClient()


def generate(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Same envelope in both modes: {success, data} or {success, error}."""
    if LOCAL_MODE:
        try:
            week = asyncio.run(st.session_state.planner.generate_week(normalize_request(payload)))
        except PlanGenerationError as e:
            return {"success": False, "error": e.user_message}
        return {"success": True, "data": {"week": week}}
    try:
        resp = requests.post(f"{BACKEND_URL}/plan-week", json=payload, timeout=30)
    except requests.RequestException as e:
        return {"success": False, "error": f"Network error: {e}"}
    try:
        body = resp.json()
    except ValueError:
        return {"success": False, "error": error_message(None)}
    if not resp.ok:
        return {"success": False, "error": error_message(body)}
    return body


def workout_entries(day: Dict[str, Any], intensity: str) -> List[Dict[str, Any]]:
    if LOCAL_MODE:
        try:
            plan_day = PlanDay.model_validate(day)
        except ValidationError:
            return []
        return [w.model_dump() for w in plan_day_to_workouts(plan_day, intensity)]
    return fetch_workout_entries(BACKEND_URL, day, intensity)


st.set_page_config(page_title="Weekly Plan", page_icon="💪", layout="wide")

st.title("💪 Weekly Plan")
st.caption("Generate a week of workouts for your goal, style and equipment.")

with st.sidebar:
    st.header("Configuration")
    mode_label = "Local (in-app)" if LOCAL_MODE else f"Remote: {BACKEND_URL}"
    st.write(f"Mode: {mode_label}")
    if not LOCAL_MODE and st.button("Health Check"):
        try:
            r = requests.get(f"{BACKEND_URL}/health", timeout=5)
            st.success(f"API OK: {r.json()}")
        except requests.RequestException as e:
            st.error(f"API not reachable: {e}")

col1, col2, col3 = st.columns(3)
with col1:
    goal = st.selectbox("Goal", GOALS, index=GOALS.index(FORM_DEFAULTS["goal"]))
    style = st.selectbox("Style", STYLES, index=STYLES.index(FORM_DEFAULTS["style"]))
with col2:
    intensity = st.selectbox("Intensity", INTENSITIES, index=INTENSITIES.index(FORM_DEFAULTS["intensity"]))
    experience = st.selectbox(
        "Experience", EXPERIENCE_LEVELS, index=EXPERIENCE_LEVELS.index(FORM_DEFAULTS["experience"])
    )
with col3:
    days = st.slider("Days", min_value=2, max_value=10, value=FORM_DEFAULTS["days"])
    minutes = st.slider("Minutes per session", min_value=20, max_value=90, value=FORM_DEFAULTS["minutes"], step=5)

focus_text = st.text_input("Focus areas (optional, comma-separated)", placeholder="e.g., glutes, pull-ups, engine")
equipment = st.multiselect(
    "Equipment",
    ["barbell", "dumbbell", "kettlebell", "pull-up bar", "rower", "bike", "bands", "bodyweight"],
    default=[],
)

if st.button("Generate Plan", type="primary"):
    payload = build_payload(minutes, days, goal, style, intensity, experience, focus_text, equipment)
    with st.spinner("Generating your plan..."):
        result = generate(payload)

    if not result.get("success"):
        st.error(error_message(result))
        st.stop()

    schedule = week_days(result.get("data"))
    st.success(f"Plan generated: {len(schedule)} day(s).")

    for i, day in enumerate(schedule):
        with st.expander(day_heading(day, i), expanded=i == 0):
            if day.get("summary"):
                st.caption(day["summary"])
            blocks = day_blocks(day)
            if not blocks:
                st.info("No blocks for this day.")
            for block in blocks:
                st.markdown("  \n".join(block_lines(block)))
            entries = workout_entries(day, intensity)
            if entries:
                burned = sum(e.get("calories_burned") or 0 for e in entries)
                st.caption(f"Adds {len(entries)} workout entries, about {burned} cal burned.")

    st.download_button(
        "Download Plan (JSON)",
        data=json.dumps(result.get("data"), indent=2),
        file_name="weekly_plan.json",
        mime="application/json",
    )
