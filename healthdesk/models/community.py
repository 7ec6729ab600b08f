"""
Community models: volunteer doctors, appointments, initiatives and the
notifications sent to doctors when an admin reviews them.
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DoctorCreate(BaseModel):
    """Volunteer doctor registration form."""
    full_name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=3, max_length=50)
    specialty: str = Field(..., min_length=1, max_length=100)
    experience: int = Field(..., ge=0, le=80, description="Years of experience")
    location: str = Field(..., min_length=1, max_length=200)
    availability: str = Field(..., min_length=1, max_length=200, examples=["Mon, Wed, Fri (9am-5pm)"])
    bio: str = Field("", max_length=2000)

    model_config = {
        "json_schema_extra": {
            "example": {
                "full_name": "Dr. Robert Wilson",
                "email": "robert.wilson@example.com",
                "phone": "(555) 222-3333",
                "specialty": "Dermatology",
                "experience": 7,
                "location": "Boston, MA",
                "availability": "Mon, Thu (9am-6pm)",
                "bio": "Affordable skin care for underserved communities."
            }
        }
    }


class Doctor(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str
    specialty: str
    experience: int
    location: str
    availability: str
    bio: str = ""
    image_url: Optional[str] = None
    verified: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None


class DoctorSummary(BaseModel):
    full_name: str
    specialty: str


class DoctorReview(BaseModel):
    approve: bool = Field(..., description="True to verify the doctor, False to reject")


class DoctorReviewResult(BaseModel):
    doctor_id: str
    verified: bool
    notified: bool = Field(..., description="Whether the doctor notification was written")


class DoctorNotification(BaseModel):
    id: str
    doctor_id: str
    message: str
    read: bool = False
    created_at: datetime


class AppointmentCreate(BaseModel):
    """Appointment booking form. The patient is the authenticated user."""
    doctor_id: str = Field(..., min_length=1)
    patient_name: str = Field(..., min_length=2, max_length=200)
    patient_email: EmailStr
    patient_phone: str = Field(..., min_length=3, max_length=50)
    appointment_date: date
    medical_issue: str = Field(..., min_length=1, max_length=2000)
    financial_status: str = Field("", max_length=500)


class Appointment(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    patient_name: str
    patient_email: str
    patient_phone: str
    appointment_date: date
    medical_issue: str
    financial_status: str = ""
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: datetime
    doctor: Optional[DoctorSummary] = Field(None, description="None when the doctor reference is orphaned")


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class InitiativeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    date: str = Field(..., description="Free-form schedule text", examples=["Next camp: June 15, 2025"])
    organizer: str = Field(..., min_length=1, max_length=200)
    image: str = Field("", description="Image URL")


class InitiativeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    date: Optional[str] = None
    organizer: Optional[str] = Field(None, min_length=1, max_length=200)
    image: Optional[str] = None


class Initiative(BaseModel):
    id: str
    title: str
    description: str
    date: str
    organizer: str
    image: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
