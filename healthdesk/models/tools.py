"""
Health calculator and hospital finder models.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]


class BMIRequest(BaseModel):
    weight: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    weight_unit: Literal["kg", "lbs"] = "kg"
    height_unit: Literal["m", "cm", "ft"] = "cm"


class BMIResult(BaseModel):
    bmi: float = Field(..., description="Body mass index rounded to one decimal")
    category: str


class CalorieRequest(BaseModel):
    age: int = Field(..., gt=0, le=130)
    weight: float = Field(..., gt=0, description="Weight in kg")
    height: float = Field(..., gt=0, description="Height in cm")
    gender: Literal["male", "female"] = "male"
    activity_level: ActivityLevel = "moderate"


class CalorieResult(BaseModel):
    bmr: float
    daily_calories: int
    weight_loss_calories: int = Field(..., description="80% of maintenance")
    weight_gain_calories: int = Field(..., description="120% of maintenance")


class WaterIntakeRequest(BaseModel):
    weight: float = Field(..., gt=0, description="Weight in kg")
    activity_level: ActivityLevel = "moderate"


class WaterIntakeResult(BaseModel):
    liters: float
    glasses: int = Field(..., description="250ml glasses per day")


class Hospital(BaseModel):
    id: str
    name: str
    address: str
    city: str
    state: str
    zip_code: str
    specialties: List[str] = []
    lat: Optional[float] = None
    lng: Optional[float] = None
    distance: Optional[float] = Field(None, description="Distance in km from the search location")
