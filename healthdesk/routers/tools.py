"""
Public health calculators, hospital finder and diet reference data.
"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from healthdesk.models.diet import DietGoal, Meal
from healthdesk.models.tools import (
    BMIRequest,
    BMIResult,
    CalorieRequest,
    CalorieResult,
    Hospital,
    WaterIntakeRequest,
    WaterIntakeResult,
)
from healthdesk.services import tools_service
from healthdesk.services.diet_service import DietService, UnknownDietGoalError

tools_router = APIRouter(prefix="/tools", tags=["tools"])


@tools_router.post("/bmi", response_model=BMIResult)
async def calculate_bmi(request: BMIRequest):
    return tools_service.calculate_bmi(request)


@tools_router.post("/calories", response_model=CalorieResult)
async def calculate_calories(request: CalorieRequest):
    """Maintenance, weight-loss and weight-gain calories (Mifflin-St Jeor)."""
    return tools_service.calculate_daily_calories(request)


@tools_router.post("/water-intake", response_model=WaterIntakeResult)
async def calculate_water_intake(request: WaterIntakeRequest):
    return tools_service.calculate_water_intake(request)


@tools_router.get(
    "/hospitals",
    response_model=List[Hospital],
    summary="Find hospitals",
    description="""
    Filter hospitals by free text (name, city or specialty) and specialty.
    When both `lat` and `lng` are given, only hospitals within `radius_km`
    are returned, nearest first, with `distance` in km.
    """
)
async def find_hospitals(
    q: str = Query("", description="Free-text search"),
    specialty: Optional[str] = Query(None, description="Specialty, or 'all'"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius_km: float = Query(tools_service.DEFAULT_RADIUS_KM, gt=0, le=20000),
):
    return tools_service.search_hospitals(q, specialty, lat, lng, radius_km)


@tools_router.get("/hospitals/specialties", response_model=List[str])
async def list_specialties():
    return tools_service.list_specialties()


@tools_router.get("/diet-goals", response_model=List[DietGoal])
async def list_diet_goals():
    return DietService.goals()


@tools_router.get("/diet-goals/{goal}/meals", response_model=List[Meal])
async def get_meal_template(goal: str):
    """Template meals for a diet goal."""
    try:
        return DietService.meal_template(goal)
    except UnknownDietGoalError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
