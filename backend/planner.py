from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, List, Optional

import openai
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from .config import Settings, get_settings
from .errors import PlanErrorKind, PlanGenerationError
from .models import PlanRequest
from .repair import repair_reply

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a professional fitness coach. Return only valid JSON, no markdown or explanations."

PLAN_PROMPT = """Create a {days}-day workout plan with the following parameters:
- Goal: {goal}
- Style: {style}
- Experience: {experience}
- Intensity: {intensity}
- Minutes per session: {minutes}
- Focus areas: {focus}
- Equipment: {equipment}

Return a JSON array with {days} workout days. Each day should have:
- id: unique string
- title: descriptive name (e.g., "Day 1: Upper Body Strength")
- summary: brief description of the workout
- minutes: estimated duration
- focus: array of focus areas
- tags: array of relevant tags
- blocks: array of workout blocks, each with:
  - kind: one of warmup, strength, metcon, skill, finisher, cooldown, circuit, workout
  - text: description of the exercise
  - minutes: duration for this block
  - loadRx: optional load prescription
  - equipment: array of equipment needed
  - scale: optional scaling options
  - coach: optional coaching cue

Return only the JSON array, with no prose before or after it.
Make the workouts practical, safe, and appropriate for {experience} level."""


def build_prompt(req: PlanRequest) -> str:
    return PLAN_PROMPT.format(
        days=req.days,
        goal=req.goal,
        style=req.style,
        experience=req.experience,
        intensity=req.intensity,
        minutes=req.minutes,
        focus=", ".join(req.focus) or "general fitness",
        equipment=", ".join(req.equipment) or "bodyweight",
    )


def build_messages(req: PlanRequest) -> List[BaseMessage]:
    return [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=build_prompt(req))]


def default_chat_model(settings: Settings, http_async_client: Any = None) -> ChatOpenAI:
    # retries disabled: one attempt per request, the deadline is enforced by the caller
    return ChatOpenAI(
        model=settings.chat_model,
        temperature=settings.temperature,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        timeout=settings.timeout_seconds,
        max_retries=0,
        http_async_client=http_async_client,
    )


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        content = "".join(parts)
    return content if isinstance(content, str) else ""


class PlanGenerationClient:
    """Asks the chat model for a week of training days.

    Each call is independent: it builds its own chat model, its own message
    list and its own deadline, so one client can serve concurrent requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        chat_model_factory: Optional[Callable[[Settings], Any]] = None,
    ) -> None:
        self.settings = settings
        self.chat_model_factory = chat_model_factory or default_chat_model

    def _current_settings(self) -> Settings:
        return self.settings or get_settings()

    async def generate_week(self, req: PlanRequest) -> Any:
        settings = self._current_settings()
        if not settings.has_credential:
            logger.warning("Plan requested but OPENAI_API_KEY is missing or still the placeholder")
            raise PlanGenerationError(PlanErrorKind.CONFIGURATION, "OpenAI API key not configured")

        llm = self.chat_model_factory(settings)
        messages = build_messages(req)
        deadline = settings.timeout_seconds

        logger.info(f"Requesting {req.days}-day plan from {settings.chat_model} (deadline {deadline}s)")
        start = time.perf_counter()
        try:
            # wait_for cancels the pending call on expiry, which closes its connection
            reply = await asyncio.wait_for(llm.ainvoke(messages), timeout=deadline)
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            logger.warning(f"Plan request timed out after {time.perf_counter() - start:.1f}s")
            raise PlanGenerationError(PlanErrorKind.TIMEOUT, "Plan request timed out") from e
        except openai.APIStatusError as e:
            logger.warning(f"Provider returned HTTP {e.status_code}")
            raise PlanGenerationError(
                PlanErrorKind.PROVIDER, f"OpenAI API error: {e.status_code}", status_code=e.status_code
            ) from e
        except openai.OpenAIError as e:
            logger.warning(f"Provider call failed: {e}")
            raise PlanGenerationError(PlanErrorKind.PROVIDER, f"OpenAI API error: {e}") from e
        except IndexError as e:
            # reply with an empty "choices" list: langchain has no first generation to return
            logger.warning("Provider reply had no choices")
            raise PlanGenerationError(PlanErrorKind.EMPTY_RESPONSE, "No content in OpenAI response") from e

        logger.info(f"Provider replied in {time.perf_counter() - start:.2f}s")

        content = _message_text(reply)
        if not content.strip():
            logger.warning("Provider reply had no content")
            raise PlanGenerationError(PlanErrorKind.EMPTY_RESPONSE, "No content in OpenAI response")

        return repair_reply(content, expected_days=req.days)
