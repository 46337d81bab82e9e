import json
import logging
from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import get_settings
from .errors import PlanGenerationError
from .models import (
    DayTotals,
    DayTotalsRequest,
    PlanDayWorkoutsRequest,
    PlanWeekData,
    PlanWeekResponse,
    WorkoutItem,
)
from .planner import PlanGenerationClient
from .totals import compute_day_totals, plan_day_to_workouts
from .validator import normalize_request

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

app = FastAPI(title="Weekly Plan API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Registered after CORSMiddleware so it runs first: every preflight gets a 200.
@app.middleware("http")
async def answer_preflight(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    return await call_next(request)


planner = PlanGenerationClient()


def _failure(status_code: int, message: str) -> JSONResponse:
    body = PlanWeekResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/plan-week", response_model=PlanWeekResponse)
async def plan_week(request: Request):
    raw = await request.body()
    try:
        body = json.loads(raw) if raw.strip() else {}
    except ValueError:
        return _failure(400, "Invalid request body")
    if not isinstance(body, dict):
        return _failure(400, "Invalid request body")

    plan_request = normalize_request(body)
    try:
        week = await planner.generate_week(plan_request)
    except PlanGenerationError as e:
        logger.warning(f"Plan generation failed ({e.kind.value}): {e}")
        return _failure(e.http_status, e.user_message)

    # week goes out exactly as parsed, nulls included
    body = PlanWeekResponse(success=True, data=PlanWeekData(week=week))
    return JSONResponse(content=body.model_dump(exclude={"error"}))


@app.post("/day-totals", response_model=DayTotals)
def day_totals(body: DayTotalsRequest):
    return compute_day_totals(body.foods, body.workouts, body.targets)


@app.post("/plan-day/workouts", response_model=List[WorkoutItem])
def plan_day_workouts(body: PlanDayWorkoutsRequest):
    return plan_day_to_workouts(body.day, body.intensity)
