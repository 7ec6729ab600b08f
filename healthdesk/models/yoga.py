from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class YogaSessionCreate(BaseModel):
    """Request model for logging a yoga or fitness session."""
    session_name: str = Field(..., min_length=1, max_length=200, examples=["Vinyasa Flow"])
    duration: int = Field(..., gt=0, description="Duration in minutes", examples=[45])
    calories_burned: Optional[int] = Field(None, ge=0, examples=[180])
    notes: Optional[str] = None


class YogaSessionResponse(BaseModel):
    id: str
    user_id: str
    session_name: str
    duration: int
    calories_burned: Optional[int] = None
    date: datetime
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class YogaStats(BaseModel):
    totalSessions: int = 0
    totalDuration: int = 0
    totalCalories: int = 0
    averageDuration: float = 0.0
