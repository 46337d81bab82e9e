from typing import Any, Dict, List, Optional

import requests

FORM_DEFAULTS: Dict[str, Any] = {
    "minutes": 40,
    "days": 3,
    "goal": "recomp",
    "style": "hybrid",
    "intensity": "moderate",
    "experience": "intermediate",
}


def split_tags(text: str) -> List[str]:
    return [s.strip() for s in (text or "").split(",") if s.strip()]


def build_payload(
    minutes: int,
    days: int,
    goal: str,
    style: str,
    intensity: str,
    experience: str,
    focus_text: str = "",
    equipment: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "minutes": int(minutes),
        "days": int(days),
        "goal": goal,
        "style": style,
        "intensity": intensity,
        "experience": experience,
        "focus": split_tags(focus_text),
        "equipment": list(equipment or []),
    }


def error_message(resp_json: Any, fallback: str = "Failed to generate plan") -> str:
    if isinstance(resp_json, dict) and resp_json.get("error"):
        return str(resp_json["error"])
    return fallback


def week_days(data: Any) -> List[Dict[str, Any]]:
    """Days from a success payload; anything that is not a day object is dropped."""
    week = (data or {}).get("week") if isinstance(data, dict) else None
    if not isinstance(week, list):
        return []
    return [d for d in week if isinstance(d, dict)]


def day_heading(day: Dict[str, Any], index: int) -> str:
    title = day.get("title") or f"Day {index + 1}"
    minutes = day.get("minutes")
    return f"{title} ({minutes} min)" if minutes else str(title)


def day_blocks(day: Dict[str, Any]) -> List[Dict[str, Any]]:
    blocks = day.get("blocks")
    if not isinstance(blocks, list):
        return []
    return [b for b in blocks if isinstance(b, dict) and b.get("text")]


def block_lines(block: Dict[str, Any]) -> List[str]:
    """Markdown lines for a block; optional parts are left out when missing."""
    kind = str(block.get("kind") or "workout").upper()
    minutes = block.get("minutes")
    head = f"**{kind}**" + (f" · {minutes} min" if minutes else "")
    lines = [head, str(block.get("text"))]
    if block.get("loadRx"):
        lines.append(f"_Load: {block['loadRx']}_")
    equipment = block.get("equipment")
    if isinstance(equipment, list) and equipment:
        lines.append("Equipment: " + ", ".join(str(e) for e in equipment))
    if block.get("scale"):
        lines.append(f"Scale: {block['scale']}")
    if block.get("coach"):
        lines.append(f"_{block['coach']}_")
    return lines


def fetch_workout_entries(backend_url: str, day: Dict[str, Any], intensity: str) -> List[Dict[str, Any]]:
    """Workout log entries for a day from the API; an unreachable or failing API gives none."""
    try:
        r = requests.post(f"{backend_url}/plan-day/workouts", json={"day": day, "intensity": intensity}, timeout=10)
        if not r.ok:
            return []
        entries = r.json()
    except (requests.RequestException, ValueError):
        return []
    return entries if isinstance(entries, list) else []
