"""
Unit tests for the health calculators and hospital finder.
"""
import pytest
from pydantic import ValidationError

from healthdesk.models.tools import BMIRequest, CalorieRequest, WaterIntakeRequest
from healthdesk.services.tools_service import (
    bmi_category,
    calculate_bmi,
    calculate_daily_calories,
    calculate_water_intake,
    haversine_km,
    list_specialties,
    search_hospitals,
)


class TestBMI:
    def test_metric(self):
        result = calculate_bmi(BMIRequest(weight=70, height=175))

        assert result.bmi == 22.9
        assert result.category == "Normal weight"

    def test_imperial_units(self):
        result = calculate_bmi(BMIRequest(weight=154, height=5.75, weight_unit="lbs", height_unit="ft"))

        assert result.bmi == 22.7

    def test_meters(self):
        result = calculate_bmi(BMIRequest(weight=100, height=1.8, height_unit="m"))

        assert result.bmi == 30.9
        assert result.category == "Obese"

    def test_categories(self):
        assert bmi_category(18.4) == "Underweight"
        assert bmi_category(18.5) == "Normal weight"
        assert bmi_category(25) == "Overweight"
        assert bmi_category(30) == "Obese"

    def test_rejects_non_positive_input(self):
        with pytest.raises(ValidationError):
            BMIRequest(weight=0, height=175)


class TestDailyCalories:
    def test_male_moderate(self):
        result = calculate_daily_calories(CalorieRequest(age=30, weight=70, height=175))

        assert result.bmr == 1648.8
        assert result.daily_calories == 2556
        assert result.weight_loss_calories == 2044
        assert result.weight_gain_calories == 3067

    def test_female_sedentary(self):
        result = calculate_daily_calories(
            CalorieRequest(age=30, weight=70, height=175, gender="female", activity_level="sedentary")
        )

        assert result.daily_calories == 1779


class TestWaterIntake:
    def test_moderate_default(self):
        result = calculate_water_intake(WaterIntakeRequest(weight=70))

        assert result.liters == 2.5
        assert result.glasses == 10

    def test_sedentary(self):
        result = calculate_water_intake(WaterIntakeRequest(weight=80, activity_level="sedentary"))

        assert result.liters == 2.4
        assert result.glasses == 10


class TestHospitalSearch:
    """Tests for filtering and distance sorting."""

    def test_no_filters_returns_catalogue(self):
        assert len(search_hospitals()) == 3

    def test_query_matches_specialty_case_insensitive(self):
        names = [h.name for h in search_hospitals("cardiology")]

        assert names == ["General Hospital", "Community Hospital"]

    def test_query_matches_city(self):
        assert [h.city for h in search_hospitals("boston")] == ["Boston"]

    def test_specialty_filter(self):
        assert [h.id for h in search_hospitals(specialty="Oncology")] == ["2"]
        assert len(search_hospitals(specialty="all")) == 3

    def test_radius_filter(self):
        results = search_hospitals(lat=40.7128, lng=-74.0060)

        assert [h.id for h in results] == ["1"]
        assert results[0].distance == 0

    def test_sorted_by_distance(self):
        results = search_hospitals(lat=40.7128, lng=-74.0060, radius_km=2000)

        assert [h.id for h in results] == ["1", "2", "3"]
        assert results[1].distance < results[2].distance

    def test_search_does_not_mutate_catalogue(self):
        search_hospitals(lat=40.7128, lng=-74.0060, radius_km=2000)

        assert all(h.distance is None for h in search_hospitals())

    def test_haversine_new_york_to_boston(self):
        assert haversine_km(40.7128, -74.0060, 42.3601, -71.0589) == pytest.approx(306, abs=2)

    def test_specialties(self):
        assert list_specialties() == ["Cardiology", "Geriatrics", "Neurology", "Oncology", "Orthopedics", "Pediatrics"]
