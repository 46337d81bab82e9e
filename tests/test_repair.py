import json
import logging

import pytest

from backend.errors import PlanErrorKind, PlanGenerationError
from backend.repair import parse_reply, repair_reply, unwrap, validate_week

from conftest import fenced, make_day, make_week


@pytest.mark.parametrize("lang", ["json", "JSON", ""])
def test_fenced_reply_yields_every_day(lang):
    week = make_week(4)
    days = validate_week(parse_reply(fenced(week, lang)), expected_days=4)

    assert days is not None
    assert len(days) == 4
    first = days[0]
    assert first.id == "day-1"
    assert first.title == "Day 1: Full Body"
    assert first.summary == "Strength then a short metcon"
    assert first.minutes == 40
    assert first.focus == ["legs", "engine"]
    assert [b.kind for b in first.blocks] == ["warmup", "strength", "metcon", "cooldown"]
    squat = first.blocks[1]
    assert squat.load_rx == "70% 1RM"
    assert squat.equipment == ["barbell"]
    assert squat.scale == "Goblet squat"
    assert squat.coach == "Brace before each rep"


def test_bare_json_is_parsed_unchanged():
    week = make_week(2)
    assert parse_reply(json.dumps(week)) == week


def test_prose_around_the_array_is_dropped():
    week = make_week(2)
    reply = "Here is your plan:\n\n" + fenced(week) + "\n\nLet me know if you want changes!"
    assert parse_reply(reply) == week


def test_unwrap_handles_whitespace_and_crlf():
    assert unwrap("  \r\n```json\r\n[1, 2]\r\n```  \n") == "[1, 2]"


def test_invalid_json_is_malformed_response():
    reply = "```json\n[{\"id\": \"day-1\", \"title\": \n```"
    with pytest.raises(PlanGenerationError) as exc:
        parse_reply(reply)
    assert exc.value.kind is PlanErrorKind.MALFORMED_RESPONSE
    assert exc.value.raw == reply
    assert exc.value.http_status == 502
    assert "day-1" not in exc.value.user_message


def test_plain_prose_is_malformed_response():
    with pytest.raises(PlanGenerationError) as exc:
        parse_reply("Sorry, I can't help with that.")
    assert exc.value.kind is PlanErrorKind.MALFORMED_RESPONSE


def test_wrong_shape_passes_through_with_warning(caplog):
    doc = [{"id": "day-1", "title": "Rest"}]
    with caplog.at_level(logging.WARNING, logger="backend.repair"):
        result = repair_reply(json.dumps(doc), expected_days=3)
    assert result == doc
    assert "requested 3" in caplog.text
    assert "does not match the expected shape" in caplog.text


def test_object_instead_of_list_passes_through(caplog):
    doc = {"week": make_week(2)}
    with caplog.at_level(logging.WARNING, logger="backend.repair"):
        assert repair_reply(fenced(doc)) == doc
    assert validate_week(doc) is None
    assert "expected a list of days" in caplog.text


def test_day_without_blocks_is_flagged(caplog):
    with caplog.at_level(logging.WARNING, logger="backend.repair"):
        days = validate_week([make_day(1, blocks=[])])
    assert days is not None and days[0].blocks == []
    assert "has no blocks" in caplog.text


def test_numeric_day_ids_are_read_as_text():
    days = validate_week([make_day(1, id=7)])
    assert days[0].id == "7"


def test_sign_off_after_fenced_array_is_dropped():
    week = make_week(3)
    assert parse_reply(fenced(week) + "\nEnjoy your training!") == week


def test_sign_off_after_bare_array_is_dropped():
    week = make_week(2)
    assert parse_reply(json.dumps(week) + "\n\nHope this helps!") == week


def test_prose_on_both_sides_of_an_object():
    doc = {"week": make_week(1)}
    assert parse_reply("Sure!\n" + json.dumps(doc) + "\nAnything else?") == doc
