"""Turn the model's free-form reply into a JSON plan document.

The reply is treated as untrusted input. Repair runs in two stages:

1. every function in ``WRAPPER_STRIPPERS`` is applied in order, each one
   peeling off a wrapper convention (markdown fences, chatty prose);
2. the remaining text is parsed as JSON.

New wrapper conventions are supported by adding a stripper to the list.
Shape checks afterwards only log; they never reject a parsed document.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from .errors import PlanErrorKind, PlanGenerationError
from .models import PlanDay

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```[\w+-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```\s*$")
_CLOSERS = {"[": "]", "{": "}"}


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json (or bare ```) marker and a trailing ``` marker."""
    text = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1)


def strip_surrounding_prose(text: str) -> str:
    """Keep only the outermost JSON array/object when the model chatted around it."""
    stripped = text.strip()
    starts = [i for i in (stripped.find("["), stripped.find("{")) if i != -1]
    if not starts:
        return stripped
    start = min(starts)
    end = stripped.rfind(_CLOSERS[stripped[start]])
    if end <= start:
        return stripped
    return stripped[start:end + 1]


def strip_whitespace(text: str) -> str:
    return text.strip()


WRAPPER_STRIPPERS: List[Callable[[str], str]] = [
    strip_code_fences,
    strip_surrounding_prose,
    strip_whitespace,
]


def unwrap(text: str) -> str:
    for stripper in WRAPPER_STRIPPERS:
        text = stripper(text)
    return text


def parse_reply(text: str) -> Any:
    """Unwrap and parse. Raises PlanGenerationError(MALFORMED_RESPONSE) on bad JSON."""
    cleaned = unwrap(text)
    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Model reply is not valid JSON ({e}); raw reply: {text!r}")
        raise PlanGenerationError(
            PlanErrorKind.MALFORMED_RESPONSE,
            "Failed to parse OpenAI response as JSON",
            raw=text,
        ) from e


def validate_week(doc: Any, expected_days: Optional[int] = None) -> Optional[List[PlanDay]]:
    """Typed view of a parsed plan, or None when it drifts from the PlanDay shape.

    Drift is logged as a warning; nothing is raised.
    """
    if not isinstance(doc, list):
        logger.warning(f"Plan document is a {type(doc).__name__}, expected a list of days")
        return None

    if expected_days is not None and len(doc) != expected_days:
        logger.warning(f"Plan has {len(doc)} day(s), requested {expected_days}")

    days: List[PlanDay] = []
    conforms = True
    for i, item in enumerate(doc):
        try:
            day = PlanDay.model_validate(item)
        except ValidationError as e:
            logger.warning(f"Plan day {i} does not match the expected shape: {e.error_count()} error(s)")
            conforms = False
            continue
        if not day.blocks:
            logger.warning(f"Plan day {i} ({day.title!r}) has no blocks")
        days.append(day)
    return days if conforms else None


def repair_reply(text: str, expected_days: Optional[int] = None) -> Any:
    """Parse the reply and pass the document through, logging any shape drift."""
    doc = parse_reply(text)
    validate_week(doc, expected_days)
    return doc
