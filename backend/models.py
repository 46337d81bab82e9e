import math
from typing import List, Optional, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]

BlockKind = Literal["warmup", "strength", "metcon", "skill", "finisher", "cooldown", "circuit", "workout"]

GOALS = ("cut", "lean", "bulk", "recomp")
STYLES = (
    "strength", "hybrid", "bodyweight", "cardio", "crossfit", "emom", "tabata",
    "interval", "conditioning", "finisher", "mobility", "skill", "circuit",
)
INTENSITIES = ("low", "moderate", "high")
EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced")


def _lenient_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    return None


def _lenient_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    return None


def _lenient_tags(value: Any) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple)):
        return None
    return [str(v) for v in value if v is not None]


class RawPlanRequest(BaseModel):
    """Inbound request as sent by the client. Every field may be missing."""
    minutes: Optional[int] = Field(default=None, description="minutes per session")
    days: Optional[int] = Field(default=None, description="training days in the plan")
    goal: Optional[str] = Field(default=None, description="cut | lean | bulk | recomp")
    style: Optional[str] = Field(default=None, description="training style, e.g. hybrid, strength, emom")
    intensity: Optional[str] = Field(default=None, description="low | moderate | high")
    experience: Optional[str] = Field(default=None, description="beginner | intermediate | advanced")
    focus: Optional[List[str]] = None
    equipment: Optional[List[str]] = None

    # wrong types count as absent, the validator fills in defaults
    @field_validator("minutes", "days", mode="before")
    @classmethod
    def _coerce_int(cls, v: Any) -> Optional[int]:
        return _lenient_int(v)

    @field_validator("goal", "style", "intensity", "experience", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Optional[str]:
        return _lenient_text(v)

    @field_validator("focus", "equipment", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> Optional[List[str]]:
        return _lenient_tags(v)


class PlanRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    goal: str
    style: str
    intensity: str
    experience: str
    minutes: int = Field(ge=20, le=90)
    days: int = Field(ge=2, le=10)
    focus: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)


class PlanBlock(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    kind: BlockKind
    text: str
    minutes: Optional[Number] = None
    load_rx: Optional[str] = Field(default=None, alias="loadRx")
    equipment: Optional[List[str]] = None
    scale: Optional[str] = None
    coach: Optional[str] = None


class PlanDay(BaseModel):
    id: str
    title: str
    summary: Optional[str] = None
    minutes: Optional[Number] = None
    focus: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    blocks: List[PlanBlock]

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class PlanWeekData(BaseModel):
    week: Any


class PlanWeekResponse(BaseModel):
    success: bool
    data: Optional[PlanWeekData] = None
    error: Optional[str] = None


# --- daily log ---

class FoodItem(BaseModel):
    name: str
    calories: Number


class WorkoutItem(BaseModel):
    activity: str
    minutes: Optional[Number] = None
    calories_burned: Optional[Number] = None
    intensity: Optional[str] = None
    notes: Optional[str] = None
    order_index: Optional[int] = None
    source: Optional[Literal["plan", "manual"]] = None


class Targets(BaseModel):
    calories: Number = 2000
    protein: Number = 150
    carbs: Number = 200
    fat: Number = 67
    label: Optional[str] = None


class DayTotals(BaseModel):
    food_cals: Number
    workout_cals: Number
    allowance: Number
    remaining: Number


class DayTotalsRequest(BaseModel):
    foods: List[FoodItem] = Field(default_factory=list)
    workouts: List[WorkoutItem] = Field(default_factory=list)
    targets: Targets = Field(default_factory=Targets)


class PlanDayWorkoutsRequest(BaseModel):
    day: PlanDay
    intensity: Optional[str] = None
