import pytest
import requests

import frontend.view as view
from frontend.view import (
    block_lines,
    build_payload,
    day_blocks,
    day_heading,
    error_message,
    split_tags,
    week_days,
)

from conftest import make_day


def test_build_payload_splits_focus_text():
    payload = build_payload(45, 4, "lean", "emom", "high", "beginner", " glutes, ,core ", ["bands"])
    assert payload == {
        "minutes": 45,
        "days": 4,
        "goal": "lean",
        "style": "emom",
        "intensity": "high",
        "experience": "beginner",
        "focus": ["glutes", "core"],
        "equipment": ["bands"],
    }
    assert split_tags("") == []


def test_error_message_prefers_server_text():
    assert error_message({"success": False, "error": "Request timeout - please try again"}) == (
        "Request timeout - please try again"
    )
    assert error_message({"success": False}) == "Failed to generate plan"
    assert error_message(None) == "Failed to generate plan"


def test_week_days_drops_non_objects():
    assert week_days({"week": [make_day(1), "junk", 3]}) == [make_day(1)]
    assert week_days({"week": {"not": "a list"}}) == []
    assert week_days(None) == []


def test_day_heading_tolerates_missing_fields():
    assert day_heading(make_day(1), 0) == "Day 1: Full Body (40 min)"
    assert day_heading({}, 2) == "Day 3"


def test_missing_blocks_render_as_nothing():
    assert day_blocks({"title": "Rest"}) == []
    assert day_blocks({"blocks": "stretch"}) == []
    assert day_blocks({"blocks": [{"kind": "skill"}, {"kind": "skill", "text": "L-sit"}]}) == [
        {"kind": "skill", "text": "L-sit"}
    ]


def test_block_lines_include_only_present_parts():
    full = block_lines(make_day(1)["blocks"][1])
    assert full[0] == "**STRENGTH** · 20 min"
    assert "_Load: 70% 1RM_" in full
    assert "Equipment: barbell" in full
    assert "Scale: Goblet squat" in full
    assert "_Brace before each rep_" in full

    bare = block_lines({"text": "Walk"})
    assert bare == ["**WORKOUT**", "Walk"]


class _Reply:
    def __init__(self, status, body):
        self.ok = status < 400
        self._body = body

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


def test_fetch_workout_entries_returns_api_list(monkeypatch):
    sent = {}

    def fake_post(url, json, timeout):
        sent.update(url=url, json=json)
        return _Reply(200, [{"activity": "warmup: Row 500m easy"}])

    monkeypatch.setattr(view.requests, "post", fake_post)

    entries = view.fetch_workout_entries("http://api", make_day(1), "low")

    assert entries == [{"activity": "warmup: Row 500m easy"}]
    assert sent["url"] == "http://api/plan-day/workouts"
    assert sent["json"]["intensity"] == "low"


def test_fetch_workout_entries_survives_unreachable_api(monkeypatch):
    def down(url, json, timeout):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(view.requests, "post", down)
    assert view.fetch_workout_entries("http://api", make_day(1), "low") == []


@pytest.mark.parametrize("reply", [_Reply(500, {"detail": "boom"}), _Reply(200, ValueError("not json")), _Reply(200, {})])
def test_fetch_workout_entries_ignores_bad_replies(monkeypatch, reply):
    monkeypatch.setattr(view.requests, "post", lambda url, json, timeout: reply)
    assert view.fetch_workout_entries("http://api", make_day(1), "low") == []
