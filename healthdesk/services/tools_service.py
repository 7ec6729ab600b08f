"""
Stateless health calculators and the hospital finder.
"""
import math
from typing import List, Optional

from healthdesk.models.tools import (
    BMIRequest,
    BMIResult,
    CalorieRequest,
    CalorieResult,
    Hospital,
    WaterIntakeRequest,
    WaterIntakeResult,
)

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}

WATER_ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.0,
    "light": 1.1,
    "moderate": 1.2,
    "active": 1.3,
    "very_active": 1.4,
}

WATER_ML_PER_KG = 30
GLASSES_PER_LITER = 4
EARTH_RADIUS_KM = 6371
DEFAULT_RADIUS_KM = 50

HOSPITALS = [
    Hospital(
        id="1",
        name="General Hospital",
        address="123 Main St",
        city="New York",
        state="NY",
        zip_code="10001",
        specialties=["Cardiology", "Neurology", "Orthopedics"],
        lat=40.7128,
        lng=-74.0060,
    ),
    Hospital(
        id="2",
        name="Medical Center",
        address="456 Oak Ave",
        city="Boston",
        state="MA",
        zip_code="02108",
        specialties=["Oncology", "Pediatrics"],
        lat=42.3601,
        lng=-71.0589,
    ),
    Hospital(
        id="3",
        name="Community Hospital",
        address="789 Pine Rd",
        city="Chicago",
        state="IL",
        zip_code="60601",
        specialties=["Cardiology", "Geriatrics"],
        lat=41.8781,
        lng=-87.6298,
    ),
]


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal weight"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def calculate_bmi(request: BMIRequest) -> BMIResult:
    weight_kg = request.weight * 0.453592 if request.weight_unit == "lbs" else request.weight
    if request.height_unit == "cm":
        height_m = request.height / 100
    elif request.height_unit == "ft":
        height_m = request.height * 0.3048
    else:
        height_m = request.height

    bmi = weight_kg / (height_m * height_m)
    return BMIResult(bmi=round(bmi, 1), category=bmi_category(bmi))


def calculate_daily_calories(request: CalorieRequest) -> CalorieResult:
    """Mifflin-St Jeor BMR scaled by the activity multiplier."""
    bmr = 10 * request.weight + 6.25 * request.height - 5 * request.age
    bmr += 5 if request.gender == "male" else -161

    daily = bmr * ACTIVITY_MULTIPLIERS.get(request.activity_level, 1.55)
    return CalorieResult(
        bmr=round(bmr, 1),
        daily_calories=round(daily),
        weight_loss_calories=round(daily * 0.8),
        weight_gain_calories=round(daily * 1.2),
    )


def calculate_water_intake(request: WaterIntakeRequest) -> WaterIntakeResult:
    multiplier = WATER_ACTIVITY_MULTIPLIERS.get(request.activity_level, 1.2)
    liters = round(request.weight * WATER_ML_PER_KG * multiplier / 1000, 1)
    return WaterIntakeResult(liters=liters, glasses=round(liters * GLASSES_PER_LITER))


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def search_hospitals(
    query: str = "",
    specialty: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[Hospital]:
    """
    Filter the hospital catalogue.

    The free-text query matches name, city or any specialty. With a location
    only hospitals inside the radius are kept, nearest first.
    """
    needle = query.strip().lower()
    results = []
    for hospital in HOSPITALS:
        if needle and not (
            needle in hospital.name.lower()
            or needle in hospital.city.lower()
            or any(needle in s.lower() for s in hospital.specialties)
        ):
            continue
        if specialty and specialty != "all" and specialty not in hospital.specialties:
            continue
        results.append(hospital.model_copy())

    if lat is None or lng is None:
        return results

    nearby = []
    for hospital in results:
        if hospital.lat is None or hospital.lng is None:
            continue
        hospital.distance = round(haversine_km(lat, lng, hospital.lat, hospital.lng), 1)
        if hospital.distance <= radius_km:
            nearby.append(hospital)
    nearby.sort(key=lambda h: h.distance)
    return nearby


def list_specialties() -> List[str]:
    return sorted({s for hospital in HOSPITALS for s in hospital.specialties})
