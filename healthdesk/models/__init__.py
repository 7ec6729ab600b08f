"""
Models package - organizes all Pydantic models.

User models (user.py): registration, login, profile, tokens, admin users.
Health models (health.py): health records and their typed payloads.
Dashboard models (dashboard.py): vitals stats, chart series, activity feed.
Diet models (diet.py): meals, diet plans, goals and calorie targets.
Medication models (medication.py), yoga models (yoga.py).
Community models (community.py): doctors, appointments, initiatives.
Tool models (tools.py): health calculators and hospital search.
"""
from .user import CreateUser, Login, Profile, Token, UserBase
from .health import (
    HealthRecordCreate,
    HealthRecordResponse,
    HealthRecordUpdate,
    PaginatedHealthRecordResponse,
    RecordType,
)
from .dashboard import ChartPoint, DashboardResponse, VitalStat, VitalsStats
from .diet import DietPlan, DietPlanCreate, Meal, NutritionTotals
from .community import Appointment, AppointmentStatus, Doctor, Initiative

__all__ = [
    # User models
    "CreateUser",
    "Login",
    "Profile",
    "UserBase",
    "Token",
    # Health models
    "HealthRecordCreate",
    "HealthRecordResponse",
    "HealthRecordUpdate",
    "PaginatedHealthRecordResponse",
    "RecordType",
    # Dashboard models
    "ChartPoint",
    "DashboardResponse",
    "VitalStat",
    "VitalsStats",
    # Diet models
    "DietPlan",
    "DietPlanCreate",
    "Meal",
    "NutritionTotals",
    # Community models
    "Appointment",
    "AppointmentStatus",
    "Doctor",
    "Initiative",
]
