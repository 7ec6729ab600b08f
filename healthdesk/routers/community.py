"""
Community endpoints: volunteer doctors, appointment requests and initiatives.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from healthdesk.dependencies import get_current_user, verify_user_access
from healthdesk.models.community import (
    Appointment,
    AppointmentCreate,
    Doctor,
    DoctorCreate,
    Initiative,
)
from healthdesk.services.community_service import (
    CommunityService,
    DoctorNotFoundError,
    DoctorNotVerifiedError,
    get_community_service,
)

community_router = APIRouter(prefix="/community", tags=["community"])
patient_router = APIRouter(prefix="/users", tags=["community"])


@community_router.get("/doctors", response_model=List[Doctor])
async def list_verified_doctors(
    community_service: CommunityService = Depends(get_community_service)
):
    """Verified volunteer doctors. Public."""
    return await community_service.list_verified_doctors()


@community_router.post(
    "/doctors",
    response_model=Doctor,
    status_code=status.HTTP_201_CREATED,
    summary="Register as a volunteer doctor",
    description="""
    Register a doctor profile. New registrations are unverified and are not
    listed publicly until an admin approves them.
    """
)
async def register_doctor(
    doctor: DoctorCreate,
    current_user: dict = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.register_doctor(doctor)


@community_router.post(
    "/appointments",
    response_model=Appointment,
    status_code=status.HTTP_201_CREATED,
    summary="Request an appointment",
    description="""
    Book an appointment with a verified volunteer doctor. The request starts
    `pending` until an admin approves or rejects it. Unverified doctors
    cannot be booked (409).
    """
)
async def book_appointment(
    appointment: AppointmentCreate,
    current_user: dict = Depends(get_current_user),
    community_service: CommunityService = Depends(get_community_service)
):
    try:
        return await community_service.book_appointment(current_user["user_id"], appointment)
    except DoctorNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DoctorNotVerifiedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@community_router.get("/initiatives", response_model=List[Initiative])
async def list_initiatives(
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.list_initiatives()


@patient_router.get("/{user_id}/appointments", response_model=List[Appointment])
async def list_my_appointments(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    community_service: CommunityService = Depends(get_community_service)
):
    """Appointments the user has requested, newest first."""
    return await community_service.patient_appointments(user_id)
