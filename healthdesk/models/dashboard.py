"""
Dashboard models: derived vitals statistics, chart series and activity feed.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TimeRange = Literal["week", "month", "quarter"]


class VitalStat(BaseModel):
    """One dashboard card."""
    label: str
    value: Optional[str] = Field(None, description="Latest reading as recorded, None when missing")
    unit: str
    target: str = Field(..., description="Human-readable target")
    progress: int = Field(..., ge=0, le=100, description="0-100 progress score")
    status: str = Field(..., description="Status class for the progress score")
    trend: Literal["up", "down"]


class VitalsStats(BaseModel):
    heart_rate: VitalStat
    weight: VitalStat
    blood_pressure: VitalStat
    blood_sugar: VitalStat
    record_date: Optional[str] = None


class ChartPoint(BaseModel):
    """One point of the vitals trend chart."""
    name: str = Field(..., description="M/D label", examples=["1/8"])
    weight: float = 0
    heartRate: float = 0
    systolic: float = 0
    diastolic: float = 0
    bloodSugar: float = 0


class RecentActivity(BaseModel):
    id: str
    type: str
    description: str
    date: Optional[datetime] = None
    status: str = "completed"


class RecordCounts(BaseModel):
    vitals: int = 0
    body_measurements: int = 0
    lab_results: int = 0
    diet_plans: int = 0


class DashboardResponse(BaseModel):
    """Aggregated dashboard for one user."""
    time_range: TimeRange
    stats: Optional[VitalsStats] = Field(None, description="None when no vitals are recorded")
    series: List[ChartPoint]
    counts: RecordCounts
    recent_activity: List[RecentActivity]

    model_config = {
        "json_schema_extra": {
            "example": {
                "time_range": "week",
                "stats": None,
                "series": [
                    {"name": "1/8", "weight": 70, "heartRate": 72, "systolic": 118,
                     "diastolic": 79, "bloodSugar": 95}
                ],
                "counts": {"vitals": 1, "body_measurements": 0, "lab_results": 0, "diet_plans": 0},
                "recent_activity": []
            }
        }
    }
