"""
Diet planner endpoints. Plans are persisted as diet_plan health records.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from healthdesk.dependencies import verify_user_access
from healthdesk.models.diet import CalorieTarget, DietPlan, DietPlanCreate, DietPlanSummary
from healthdesk.services.diet_service import (
    DietPlanNotFoundError,
    DietService,
    UnknownDietGoalError,
    get_diet_service,
)

diet_router = APIRouter(prefix="/users", tags=["diet"])


@diet_router.post(
    "/{user_id}/diet-plans",
    response_model=DietPlan,
    status_code=status.HTTP_201_CREATED,
    summary="Save a diet plan",
    description="""
    Save a meal plan. `totalCalories` is set to the sum of the meal
    calories at save time. Meals without an id get a `custom-` id.
    """
)
async def save_diet_plan(
    user_id: str,
    plan: DietPlanCreate,
    verified_user_id: str = Depends(verify_user_access),
    diet_service: DietService = Depends(get_diet_service)
):
    return await diet_service.save_plan(user_id, plan)


@diet_router.get("/{user_id}/diet-plans", response_model=List[DietPlanSummary])
async def list_diet_plans(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    diet_service: DietService = Depends(get_diet_service)
):
    """Saved plans with nutrition totals, newest first."""
    return await diet_service.list_plans(user_id)


@diet_router.delete("/{user_id}/diet-plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_diet_plan(
    user_id: str,
    plan_id: str,
    verified_user_id: str = Depends(verify_user_access),
    diet_service: DietService = Depends(get_diet_service)
):
    try:
        await diet_service.delete_plan(user_id, plan_id)
    except DietPlanNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@diet_router.get(
    "/{user_id}/calorie-target",
    response_model=CalorieTarget,
    summary="Daily calorie target",
    description="""
    Estimate BMR from the latest weight and height readings and apply the
    goal's calorie modifier. Falls back to 2000 kcal without both readings.
    """
)
async def get_calorie_target(
    user_id: str,
    goal: Optional[str] = Query(None, description="weight_loss, maintenance or muscle_gain"),
    verified_user_id: str = Depends(verify_user_access),
    diet_service: DietService = Depends(get_diet_service)
):
    try:
        return await diet_service.get_calorie_target(user_id, goal)
    except UnknownDietGoalError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
