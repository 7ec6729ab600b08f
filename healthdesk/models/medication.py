from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MedicationCreate(BaseModel):
    """Request model for adding or replacing a medication."""
    name: str = Field(..., min_length=1, max_length=200, description="Medication name")
    dosage: Optional[str] = Field(None, max_length=100, examples=["500mg"])
    frequency: Optional[str] = Field(None, max_length=100, examples=["Twice daily"])
    expiry_date: Optional[date] = Field(None, examples=["2026-12-31"])
    notes: Optional[str] = None


class MedicationResponse(BaseModel):
    id: str
    user_id: str
    name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    expiry_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class ExpirySummary(BaseModel):
    """Medications grouped by expiry state relative to today."""
    expired: List[MedicationResponse]
    expiring_soon: List[MedicationResponse] = Field(..., description="Expiring within 30 days")
