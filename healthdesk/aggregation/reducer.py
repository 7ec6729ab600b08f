"""
Derived metrics over classified health records.

Payload values are recorded as free-form numeric strings, so every reading
goes through `parse_float`/`parse_int`, which accept a leading number and
ignore trailing text ("72 bpm" -> 72). Unparsable values become None.
"""
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from healthdesk.models.dashboard import RecentActivity, VitalStat, VitalsStats
from healthdesk.models.diet import DietGoal, NutritionTotals

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")

DEFAULT_PROGRESS = 50
DEFAULT_BMR = 2000
# Mifflin-St Jeor with a fixed age of 30 and the male offset.
BMR_ASSUMED_AGE = 30

HEART_RATE_TARGET = 80
SYSTOLIC_TARGET = 120
BLOOD_SUGAR_TARGET = 100

DIET_GOALS: List[DietGoal] = [
    DietGoal(
        value="weight_loss",
        label="Weight Loss",
        description="Reduced calories to promote gradual weight loss",
        calorieModifier=-500,
    ),
    DietGoal(
        value="maintenance",
        label="Maintenance",
        description="Balanced calories to maintain current weight",
        calorieModifier=0,
    ),
    DietGoal(
        value="muscle_gain",
        label="Muscle Gain",
        description="Increased calories and protein to support muscle growth",
        calorieModifier=500,
    ),
]

ACTIVITY_DESCRIPTIONS = {
    "vitals": "Updated vital signs",
    "body_measurements": "Updated body measurements",
    "lab_results": "Added lab test results",
    "diet_plan": "Created diet plan",
}


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def parse_float(value: Any) -> Optional[float]:
    """Parse the leading decimal number of a value, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _finite(float(value))
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return None
    return _finite(float(match.group(0)))


def parse_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a value, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value) if math.isfinite(value) else None
    match = _INT_PREFIX.match(str(value))
    if not match:
        return None
    return int(match.group(0))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_progress(current: Any, target: Any, lower_is_better: bool = False) -> int:
    """
    Score a reading against its target on a 0-100 scale.

    Missing, zero or unparsable readings and targets score 50.
    """
    current_value = parse_float(current)
    target_value = parse_float(target)
    if not current_value or not target_value:
        return DEFAULT_PROGRESS

    ratio = current_value / target_value * 100
    if lower_is_better:
        progress = max(0.0, 100 - ratio)
    else:
        progress = min(100.0, ratio)

    return min(100, max(0, round_half_up(progress)))


def status_class(progress: int) -> str:
    if progress > 90:
        return "text-green-500"
    if progress > 70:
        return "text-blue-500"
    if progress > 40:
        return "text-yellow-500"
    return "text-red-500"


def _display(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _below(value: Any, threshold: int) -> bool:
    parsed = parse_int(value)
    return parsed is not None and parsed < threshold


def _stat(label: str, value: Optional[str], unit: str, target: str, progress: int, trend: str) -> VitalStat:
    return VitalStat(
        label=label,
        value=value,
        unit=unit,
        target=target,
        progress=progress,
        status=status_class(progress),
        trend=trend,
    )


def build_vitals_stats(vitals: List[Dict[str, Any]]) -> Optional[VitalsStats]:
    """Build dashboard cards from the most recent vitals record."""
    if not vitals:
        return None

    latest = vitals[0]
    data: Mapping[str, Any] = latest.get("data") or {}

    heart_rate = data.get("heartRate")
    heart_rate_stat = _stat(
        "Heart Rate",
        _display(heart_rate),
        "BPM",
        "60-100 BPM",
        calculate_progress(heart_rate, HEART_RATE_TARGET),
        "down" if _below(heart_rate, HEART_RATE_TARGET) else "up",
    )

    weight = parse_float(data.get("weight"))
    weight_target = f"{round_half_up(weight * 0.9)} kg" if weight is not None else "--"
    weight_stat = _stat(
        "Weight",
        _display(data.get("weight")),
        "kg",
        weight_target,
        calculate_progress(weight, weight * 1.1 if weight is not None else None, lower_is_better=True),
        "down",
    )

    systolic = data.get("bloodPressureSystolic")
    diastolic = data.get("bloodPressureDiastolic")
    pressure_progress = calculate_progress(
        SYSTOLIC_TARGET, parse_int(systolic) or SYSTOLIC_TARGET, lower_is_better=True
    )
    pressure_stat = _stat(
        "Blood Pressure",
        f"{_display(systolic) or '--'}/{_display(diastolic) or '--'}",
        "mmHg",
        "<120/80 mmHg",
        pressure_progress,
        "down" if _below(systolic, SYSTOLIC_TARGET) else "up",
    )

    blood_sugar = data.get("bloodSugar")
    sugar_progress = calculate_progress(
        parse_int(blood_sugar) or BLOOD_SUGAR_TARGET, BLOOD_SUGAR_TARGET, lower_is_better=True
    )
    sugar_stat = _stat(
        "Blood Sugar",
        _display(blood_sugar),
        "mg/dL",
        "70-100 mg/dL",
        sugar_progress,
        "down" if _below(blood_sugar, BLOOD_SUGAR_TARGET) else "up",
    )

    return VitalsStats(
        heart_rate=heart_rate_stat,
        weight=weight_stat,
        blood_pressure=pressure_stat,
        blood_sugar=sugar_stat,
        record_date=latest.get("record_date"),
    )


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def nutrition_totals(meals: Iterable[Any]) -> NutritionTotals:
    """Sum calories and macros across meals (dicts or Meal models)."""
    totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0}
    for meal in meals:
        for key in totals:
            totals[key] += parse_float(_field(meal, key)) or 0.0
    return NutritionTotals(**totals)


def plan_calories_consistent(plan: Any) -> bool:
    """Whether a plan's stored totalCalories equals the sum of its meal calories."""
    meals = _field(plan, "meals") or []
    stored = parse_float(_field(plan, "totalCalories")) or 0.0
    return math.isclose(nutrition_totals(meals).calories, stored, abs_tol=1e-6)


def estimate_bmr(weight: Any, height: Any) -> int:
    """Estimate BMR from weight (kg) and height (cm); 2000 when unknown."""
    weight_value = parse_float(weight)
    height_value = parse_float(height)
    if not weight_value or not height_value:
        return DEFAULT_BMR
    return round_half_up(10 * weight_value + 6.25 * height_value - 5 * BMR_ASSUMED_AGE + 5)


def get_diet_goal(value: Optional[str]) -> Optional[DietGoal]:
    for goal in DIET_GOALS:
        if goal.value == value:
            return goal
    return None


def calorie_target(bmr: int, goal: Optional[str]) -> int:
    diet_goal = get_diet_goal(goal) if goal else None
    if diet_goal is None:
        return bmr
    return bmr + diet_goal.calorieModifier


def build_recent_activity(records: List[Dict[str, Any]], limit: int = 5) -> List[RecentActivity]:
    """Describe the newest raw records as activity feed entries."""
    activities = []
    for record in records[:limit]:
        record_type = record.get("record_type")
        activities.append(RecentActivity(
            id=str(record.get("id")),
            type="nutrition" if record_type == "diet_plan" else "health_record",
            description=ACTIVITY_DESCRIPTIONS.get(record_type, "Updated health record"),
            date=record.get("created_at"),
            status="completed",
        ))
    return activities
