from __future__ import annotations

from typing import Any, Dict

from .models import RawPlanRequest, PlanRequest

MIN_MINUTES, MAX_MINUTES, DEFAULT_MINUTES = 20, 90, 40
MIN_DAYS, MAX_DAYS, DEFAULT_DAYS = 2, 10, 3

DEFAULTS = {
    "goal": "recomp",
    "style": "hybrid",
    "intensity": "moderate",
    "experience": "intermediate",
}


def _clamp(value: int | None, low: int, high: int, default: int) -> int:
    # zero counts as absent, same as a missing field
    if not value:
        value = default
    return max(low, min(high, value))


def normalize_request(raw: RawPlanRequest | Dict[str, Any] | None) -> PlanRequest:
    """Fill defaults and clamp the numeric fields. Never raises for a dict or model input."""
    if raw is None:
        raw = RawPlanRequest()
    elif not isinstance(raw, RawPlanRequest):
        raw = RawPlanRequest.model_validate(raw)

    return PlanRequest(
        minutes=_clamp(raw.minutes, MIN_MINUTES, MAX_MINUTES, DEFAULT_MINUTES),
        days=_clamp(raw.days, MIN_DAYS, MAX_DAYS, DEFAULT_DAYS),
        goal=raw.goal or DEFAULTS["goal"],
        style=raw.style or DEFAULTS["style"],
        intensity=raw.intensity or DEFAULTS["intensity"],
        experience=raw.experience or DEFAULTS["experience"],
        focus=list(raw.focus or []),
        equipment=list(raw.equipment or []),
    )
