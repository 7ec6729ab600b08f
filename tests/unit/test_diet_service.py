"""
Unit tests for DietService.
"""
import json
import pytest
from unittest.mock import AsyncMock, Mock

from healthdesk.models.diet import DietPlanCreate, MealCreate
from healthdesk.models.health import RecordType
from healthdesk.services.diet_service import (
    DietPlanNotFoundError,
    DietService,
    UnknownDietGoalError,
)
from healthdesk.services.health_service import HealthRecordNotFoundError


@pytest.fixture
def health_service():
    return Mock()


@pytest.fixture
def diet_service(health_service):
    return DietService(health_service)


def stored_plan(record_id, payload):
    return {"id": record_id, "record_type": "diet_plan", "description": json.dumps(payload)}


class TestBuildPayload:
    """Tests for plan payload construction."""

    def test_total_calories_is_meal_sum(self):
        plan = DietPlanCreate(
            name="Cutting week",
            goal="weight_loss",
            meals=[MealCreate(name="Breakfast", calories=300), MealCreate(name="Lunch", calories=450.5)],
        )

        payload = DietService.build_payload(plan)

        assert payload.totalCalories == 750.5

    def test_custom_meals_get_ids(self):
        plan = DietPlanCreate(
            name="Plan",
            meals=[MealCreate(id="wl-1", name="Template"), MealCreate(name="Custom")],
        )

        payload = DietService.build_payload(plan)

        assert payload.meals[0].id == "wl-1"
        assert payload.meals[1].id.startswith("custom-")

    def test_plan_requires_a_meal(self):
        with pytest.raises(ValueError):
            DietPlanCreate(name="Empty", meals=[])


class TestSavePlan:
    @pytest.mark.asyncio
    async def test_save_plan_stores_diet_plan_record(self, diet_service, health_service):
        health_service.insert_record = AsyncMock(return_value=Mock(id="plan1"))
        plan = DietPlanCreate(name="Plan", meals=[MealCreate(name="A", calories=200), MealCreate(name="B", calories=100)])

        result = await diet_service.save_plan("user123", plan)

        assert result.id == "plan1"
        assert result.totalCalories == 300
        args = health_service.insert_record.call_args[0]
        assert args[0] == "user123"
        assert args[1] == RecordType.DIET_PLAN
        assert args[2]["totalCalories"] == 300


class TestListPlans:
    """Tests for reading plans back with totals."""

    @pytest.mark.asyncio
    async def test_summaries_and_consistency(self, diet_service, health_service):
        meals = [{"id": "a", "name": "A", "calories": 300}, {"id": "b", "name": "B", "calories": 200}]
        health_service.fetch_records = AsyncMock(return_value=[
            stored_plan("p1", {"name": "Good", "totalCalories": 500, "meals": meals}),
            stored_plan("p2", {"name": "Edited", "totalCalories": 650, "meals": meals}),
        ])

        summaries = await diet_service.list_plans("user123")

        assert [s.plan.id for s in summaries] == ["p1", "p2"]
        assert summaries[0].totals.calories == 500
        assert summaries[0].calories_consistent is True
        assert summaries[1].calories_consistent is False

    @pytest.mark.asyncio
    async def test_invalid_plans_are_skipped(self, diet_service, health_service):
        health_service.fetch_records = AsyncMock(return_value=[
            {"id": "broken", "record_type": "diet_plan", "description": "{nope"},
            stored_plan("no-name", {"meals": []}),
            stored_plan("ok", {"name": "Fine", "meals": []}),
        ])

        summaries = await diet_service.list_plans("user123")

        assert [s.plan.id for s in summaries] == ["ok"]


class TestDeletePlan:
    @pytest.mark.asyncio
    async def test_delete_non_plan_record(self, diet_service, health_service):
        health_service.get_record = AsyncMock(return_value=Mock(record_type="vitals"))
        health_service.delete_record = AsyncMock()

        with pytest.raises(DietPlanNotFoundError):
            await diet_service.delete_plan("user123", "rec1")
        health_service.delete_record.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_missing_plan(self, diet_service, health_service):
        health_service.get_record = AsyncMock(side_effect=HealthRecordNotFoundError("missing"))

        with pytest.raises(DietPlanNotFoundError):
            await diet_service.delete_plan("user123", "nope")

    @pytest.mark.asyncio
    async def test_delete_plan(self, diet_service, health_service):
        health_service.get_record = AsyncMock(return_value=Mock(record_type="diet_plan"))
        health_service.delete_record = AsyncMock()

        await diet_service.delete_plan("user123", "p1")

        health_service.delete_record.assert_awaited_once_with("user123", "p1")


class TestCalorieTarget:
    @pytest.mark.asyncio
    async def test_target_from_latest_readings(self, diet_service, health_service):
        async def latest(user_id, record_type):
            return {"height": "175"} if record_type == RecordType.BODY_MEASUREMENTS else {"weight": "70"}
        health_service.latest_payload = latest

        result = await diet_service.get_calorie_target("user123", "muscle_gain")

        assert result.bmr == 1649
        assert result.target == 2149

    @pytest.mark.asyncio
    async def test_default_bmr_without_readings(self, diet_service, health_service):
        health_service.latest_payload = AsyncMock(return_value=None)

        result = await diet_service.get_calorie_target("user123", "weight_loss")

        assert result.bmr == 2000
        assert result.target == 1500

    @pytest.mark.asyncio
    async def test_unknown_goal(self, diet_service):
        with pytest.raises(UnknownDietGoalError):
            await diet_service.get_calorie_target("user123", "bulk_forever")


class TestTemplates:
    def test_meal_template(self):
        meals = DietService.meal_template("maintenance")
        assert [m.id for m in meals] == ["m-1", "m-2", "m-3", "m-4"]

    def test_unknown_template(self):
        with pytest.raises(UnknownDietGoalError):
            DietService.meal_template("keto")

    def test_goals(self):
        assert [g.value for g in DietService.goals()] == ["weight_loss", "maintenance", "muscle_gain"]
