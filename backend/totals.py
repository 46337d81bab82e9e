from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .models import DayTotals, FoodItem, PlanDay, Targets, WorkoutItem

DEFAULT_BLOCK_MINUTES = 10
CALORIES_PER_MINUTE = 7


def compute_day_totals(
    foods: Sequence[FoodItem],
    workouts: Sequence[WorkoutItem],
    targets: Optional[Targets] = None,
) -> DayTotals:
    """Burned calories raise the allowance; eaten calories come off it."""
    targets = targets or Targets()
    food_cals = sum(f.calories for f in foods)
    workout_cals = sum(w.calories_burned or 0 for w in workouts)
    allowance = targets.calories + workout_cals
    return DayTotals(
        food_cals=food_cals,
        workout_cals=workout_cals,
        allowance=allowance,
        remaining=allowance - food_cals,
    )


def plan_day_to_workouts(day: PlanDay, intensity: Optional[str] = None) -> List[WorkoutItem]:
    """One workout log entry per block of a generated day."""
    items: List[WorkoutItem] = []
    for i, block in enumerate(day.blocks):
        minutes = block.minutes or DEFAULT_BLOCK_MINUTES
        items.append(
            WorkoutItem(
                activity=f"{block.kind}: {block.text}",
                minutes=minutes,
                calories_burned=math.floor(minutes * CALORIES_PER_MINUTE + 0.5),
                intensity=intensity,
                notes=block.coach or "",
                order_index=i,
                source="plan",
            )
        )
    return items
