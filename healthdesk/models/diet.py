"""
Diet plan models.

A diet plan is stored as a `diet_plan` health record whose description holds
the JSON form of `DietPlanPayload`.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class Meal(BaseModel):
    id: str = Field(..., description="Meal identifier (template id or custom-<ms>)")
    name: str = Field(..., min_length=1)
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    description: Optional[str] = ""


class MealCreate(BaseModel):
    """A meal as submitted by the user; id is assigned when missing."""
    id: Optional[str] = None
    name: str = Field(..., min_length=1, description="Meal name")
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fat: float = Field(0, ge=0)
    description: Optional[str] = ""


class DietPlanCreate(BaseModel):
    """Request model for saving a diet plan."""
    name: str = Field(..., min_length=1, max_length=200, description="Plan name")
    goal: str = Field("", description="Diet goal value, e.g. weight_loss")
    meals: List[MealCreate] = Field(..., min_length=1, description="At least one meal")

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Cutting week",
                "goal": "weight_loss",
                "meals": [
                    {"name": "Breakfast: Greek Yogurt Bowl", "calories": 300,
                     "protein": 25, "carbs": 30, "fat": 10}
                ]
            }
        }
    }


class DietPlanPayload(BaseModel):
    """JSON payload persisted in the record description."""
    name: str
    goal: str = ""
    totalCalories: float = 0
    meals: List[Meal] = []


class DietPlan(DietPlanPayload):
    """Saved plan as returned to clients."""
    id: str


class NutritionTotals(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class DietGoal(BaseModel):
    value: str
    label: str
    description: str
    calorieModifier: int


class CalorieTarget(BaseModel):
    bmr: int = Field(..., description="Estimated basal metabolic rate")
    goal: Optional[str] = None
    target: int = Field(..., description="Daily calorie target for the goal")


class DietPlanSummary(BaseModel):
    """A saved plan with its recomputed totals."""
    plan: DietPlan
    totals: NutritionTotals
    calories_consistent: bool = Field(
        ...,
        description="Whether the stored totalCalories still equals the sum of meal calories"
    )
