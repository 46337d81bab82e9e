import asyncio
import json

import pytest
from langchain_core.messages import AIMessage

from backend.config import Settings


def make_day(n: int, **overrides):
    day = {
        "id": f"day-{n}",
        "title": f"Day {n}: Full Body",
        "summary": "Strength then a short metcon",
        "minutes": 40,
        "focus": ["legs", "engine"],
        "tags": ["hybrid"],
        "blocks": [
            {"kind": "warmup", "text": "Row 500m easy", "minutes": 5, "equipment": ["rower"]},
            {
                "kind": "strength",
                "text": "Back squat 5x5",
                "minutes": 20,
                "loadRx": "70% 1RM",
                "equipment": ["barbell"],
                "scale": "Goblet squat",
                "coach": "Brace before each rep",
            },
            {"kind": "metcon", "text": "AMRAP 10: 10 burpees, 15 KB swings", "minutes": 10},
            {"kind": "cooldown", "text": "Hip flexor stretch", "minutes": 5, "loadRx": None},
        ],
    }
    day.update(overrides)
    return day


def make_week(days: int):
    return [make_day(i + 1) for i in range(days)]


def fenced(doc, lang: str = "json") -> str:
    return f"```{lang}\n{json.dumps(doc, indent=2)}\n```"


class StubChatModel:
    """Stands in for ChatOpenAI: records calls and replays a canned reply."""

    def __init__(self, content="", delay: float = 0.0, error: Exception | None = None):
        self.content = content
        self.delay = delay
        self.error = error
        self.calls = []
        self.cancelled = False

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.content)


class StubFactory:
    def __init__(self, model: StubChatModel):
        self.model = model
        self.calls = 0

    def __call__(self, settings):
        self.calls += 1
        return self.model


@pytest.fixture
def settings():
    return Settings(openai_api_key="sk-test", timeout_seconds=0.2)
