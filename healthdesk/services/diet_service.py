import logging
import time
from typing import List, Optional

from fastapi import Depends
from google.cloud.firestore import Client
from pydantic import ValidationError

from healthdesk.aggregation.classifier import decode_payload
from healthdesk.aggregation.reducer import (
    DIET_GOALS,
    calorie_target,
    estimate_bmr,
    nutrition_totals,
    plan_calories_consistent,
)
from healthdesk.database import get_db
from healthdesk.models.diet import (
    CalorieTarget,
    DietGoal,
    DietPlan,
    DietPlanCreate,
    DietPlanPayload,
    DietPlanSummary,
    Meal,
)
from healthdesk.models.health import RecordType
from healthdesk.services.health_service import HealthRecordNotFoundError, HealthService

logger = logging.getLogger(__name__)


class DietPlanNotFoundError(Exception):
    pass


class UnknownDietGoalError(Exception):
    pass


MEAL_TEMPLATES = {
    "weight_loss": [
        Meal(id="wl-1", name="Breakfast: Greek Yogurt Bowl", calories=300, protein=25, carbs=30, fat=10,
             description="Greek yogurt with berries and a sprinkle of granola"),
        Meal(id="wl-2", name="Lunch: Grilled Chicken Salad", calories=400, protein=35, carbs=20, fat=15,
             description="Mixed greens with grilled chicken, vegetables, and light dressing"),
        Meal(id="wl-3", name="Dinner: Baked Salmon & Vegetables", calories=450, protein=30, carbs=25, fat=20,
             description="Baked salmon fillet with steamed vegetables and quinoa"),
        Meal(id="wl-4", name="Snack: Apple with Almond Butter", calories=200, protein=5, carbs=20, fat=10,
             description="Apple slices with 1 tablespoon of almond butter"),
    ],
    "maintenance": [
        Meal(id="m-1", name="Breakfast: Avocado Toast", calories=450, protein=15, carbs=45, fat=20,
             description="Whole grain toast with avocado, eggs, and tomato"),
        Meal(id="m-2", name="Lunch: Grain Bowl", calories=550, protein=25, carbs=65, fat=18,
             description="Quinoa with roasted vegetables, chicken, and tahini sauce"),
        Meal(id="m-3", name="Dinner: Turkey Chili", calories=500, protein=35, carbs=50, fat=15,
             description="Lean turkey chili with beans, vegetables, and brown rice"),
        Meal(id="m-4", name="Snack: Smoothie", calories=300, protein=15, carbs=40, fat=5,
             description="Protein smoothie with banana, berries, and spinach"),
    ],
    "muscle_gain": [
        Meal(id="mg-1", name="Breakfast: Protein Oatmeal", calories=600, protein=40, carbs=70, fat=15,
             description="Oatmeal with protein powder, banana, and peanut butter"),
        Meal(id="mg-2", name="Lunch: Steak & Sweet Potato", calories=700, protein=45, carbs=65, fat=20,
             description="Grilled steak with sweet potato and steamed broccoli"),
        Meal(id="mg-3", name="Dinner: Chicken Pasta", calories=750, protein=50, carbs=80, fat=20,
             description="Whole wheat pasta with chicken, vegetables, and olive oil"),
        Meal(id="mg-4", name="Snack: Protein Shake with Nuts", calories=350, protein=30, carbs=15, fat=15,
             description="Protein shake with a handful of mixed nuts"),
    ],
}


class DietService:
    """Diet plans stored as diet_plan health records."""

    def __init__(self, health_service: HealthService):
        self.health_service = health_service

    @staticmethod
    def goals() -> List[DietGoal]:
        return list(DIET_GOALS)

    @staticmethod
    def meal_template(goal: str) -> List[Meal]:
        if goal not in MEAL_TEMPLATES:
            raise UnknownDietGoalError(f"Unknown diet goal '{goal}'")
        return [meal.model_copy() for meal in MEAL_TEMPLATES[goal]]

    @staticmethod
    def build_payload(plan: DietPlanCreate) -> DietPlanPayload:
        """Assign ids to custom meals and fix totalCalories to the meal sum."""
        meals = []
        for index, meal in enumerate(plan.meals):
            meal_id = meal.id or f"custom-{int(time.time() * 1000)}-{index}"
            meals.append(Meal(**{**meal.model_dump(), "id": meal_id}))

        totals = nutrition_totals(meals)
        return DietPlanPayload(
            name=plan.name,
            goal=plan.goal,
            totalCalories=totals.calories,
            meals=meals,
        )

    async def save_plan(self, user_id: str, plan: DietPlanCreate) -> DietPlan:
        payload = self.build_payload(plan)
        record = await self.health_service.insert_record(
            user_id, RecordType.DIET_PLAN, payload.model_dump()
        )
        return DietPlan(id=record.id, **payload.model_dump())

    @staticmethod
    def summarize(plan: DietPlan) -> DietPlanSummary:
        return DietPlanSummary(
            plan=plan,
            totals=nutrition_totals(plan.meals),
            calories_consistent=plan_calories_consistent(plan),
        )

    async def list_plans(self, user_id: str) -> List[DietPlanSummary]:
        """Saved plans, newest first. Plans whose payload no longer parses are skipped."""
        records = await self.health_service.fetch_records(user_id, RecordType.DIET_PLAN)
        summaries = []
        for record in records:
            payload = decode_payload(record.get("description"))
            if payload is None:
                logger.warning(f"Skipping diet plan {record['id']}: description is not a JSON object")
                continue
            try:
                plan = DietPlan(**{**payload, "id": record["id"]})
            except ValidationError as e:
                logger.warning(f"Skipping diet plan {record['id']}: {e.error_count()} invalid field(s)")
                continue
            summaries.append(self.summarize(plan))
        return summaries

    async def delete_plan(self, user_id: str, plan_id: str) -> None:
        try:
            record = await self.health_service.get_record(user_id, plan_id)
        except HealthRecordNotFoundError:
            raise DietPlanNotFoundError(f"Diet plan {plan_id} not found")
        if record.record_type != RecordType.DIET_PLAN.value:
            raise DietPlanNotFoundError(f"Diet plan {plan_id} not found")
        await self.health_service.delete_record(user_id, plan_id)

    async def get_calorie_target(self, user_id: str, goal: Optional[str] = None) -> CalorieTarget:
        """Daily calorie target from the latest height and weight readings."""
        if goal and goal not in MEAL_TEMPLATES:
            raise UnknownDietGoalError(f"Unknown diet goal '{goal}'")

        body = await self.health_service.latest_payload(user_id, RecordType.BODY_MEASUREMENTS)
        vitals = await self.health_service.latest_payload(user_id, RecordType.VITALS)

        height = body.get("height") if body else None
        weight = vitals.get("weight") if vitals else None
        bmr = estimate_bmr(weight, height)

        return CalorieTarget(bmr=bmr, goal=goal, target=calorie_target(bmr, goal))


def get_diet_service(db: Client = Depends(get_db)) -> DietService:
    return DietService(HealthService(db))
