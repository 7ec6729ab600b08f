"""
Health record models.

A health record stores its measurements as a JSON-encoded payload in the
`description` field. The payload shape depends on `record_type`.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RecordType(str, Enum):
    VITALS = "vitals"
    BODY_MEASUREMENTS = "body_measurements"
    LAB_RESULTS = "lab_results"
    DIET_PLAN = "diet_plan"


class _NumericStringPayload(BaseModel):
    """Form payload where every field is an optional numeric string."""
    model_config = ConfigDict(extra="allow")

    @field_validator("*", mode="before")
    @classmethod
    def coerce_numbers(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return v


class VitalsPayload(_NumericStringPayload):
    heartRate: Optional[str] = Field(None, description="Heart rate (BPM)", examples=["72"])
    bloodPressureSystolic: Optional[str] = Field(None, description="Systolic pressure (mmHg)", examples=["120"])
    bloodPressureDiastolic: Optional[str] = Field(None, description="Diastolic pressure (mmHg)", examples=["80"])
    bloodSugar: Optional[str] = Field(None, description="Blood sugar (mg/dL)", examples=["95"])
    weight: Optional[str] = Field(None, description="Weight (kg)", examples=["70"])
    temperature: Optional[str] = Field(None, description="Body temperature", examples=["36.8"])


class LabResultsPayload(_NumericStringPayload):
    cholesterolTotal: Optional[str] = None
    cholesterolLDL: Optional[str] = None
    cholesterolHDL: Optional[str] = None
    triglycerides: Optional[str] = None
    hemoglobin: Optional[str] = None
    whiteBloodCellCount: Optional[str] = None


class BodyMeasurementsPayload(_NumericStringPayload):
    height: Optional[str] = Field(None, description="Height (cm)")
    waist: Optional[str] = None
    hip: Optional[str] = None
    bmi: Optional[str] = None
    bodyFat: Optional[str] = None


PAYLOAD_MODELS = {
    RecordType.VITALS: VitalsPayload,
    RecordType.LAB_RESULTS: LabResultsPayload,
    RecordType.BODY_MEASUREMENTS: BodyMeasurementsPayload,
}


class HealthRecordCreate(BaseModel):
    """Request model for submitting a measurement record."""
    record_type: RecordType = Field(..., description="Kind of measurement", examples=["vitals"])
    record_date: Optional[date] = Field(
        None,
        description="Date the measurement was taken (defaults to today)",
        examples=["2026-01-08"]
    )
    data: Dict[str, Any] = Field(..., description="Measurement payload for the record type")

    @model_validator(mode="after")
    def validate_payload(self) -> "HealthRecordCreate":
        if self.record_type == RecordType.DIET_PLAN:
            raise ValueError("Diet plans are created through the diet plan endpoints")
        payload_model = PAYLOAD_MODELS[self.record_type]
        self.data = payload_model.model_validate(self.data).model_dump(exclude_none=False)
        return self

    @field_validator("record_date")
    @classmethod
    def validate_record_date(cls, v: Optional[date]) -> Optional[date]:
        if v is not None and v > date.today():
            raise ValueError("Record date cannot be in the future")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "record_type": "vitals",
                "record_date": "2026-01-08",
                "data": {"heartRate": "72", "weight": "70"}
            }
        }
    }


class HealthRecordUpdate(BaseModel):
    """Fields that may be changed on an existing record."""
    record_date: Optional[date] = None
    data: Optional[Dict[str, Any]] = None
    status: Optional[str] = Field(None, max_length=50)


class HealthRecordResponse(BaseModel):
    """Stored health record."""
    id: str
    user_id: str
    record_type: str
    record_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    description: str = Field(..., description="JSON-encoded payload")
    status: str = "active"
    created_at: datetime
    updated_at: Optional[datetime] = None


class PaginatedHealthRecordResponse(BaseModel):
    """Paginated response model for health records."""
    data: List[HealthRecordResponse]
    next_cursor: Optional[str] = Field(None, description="Cursor for next page (null if no more pages)")
    has_more: bool = Field(..., description="Whether there are more results available")
    limit: int = Field(..., description="Number of items per page")
