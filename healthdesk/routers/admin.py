"""
Admin endpoints: doctor verification, appointment review, initiatives and
admin membership. Everything except login requires an admin_users entry.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from google.cloud.firestore import Client
from starlette.concurrency import run_in_threadpool

from healthdesk.database import get_db
from healthdesk.dependencies import is_admin, require_admin
from healthdesk.models.community import (
    Appointment,
    AppointmentStatusUpdate,
    Doctor,
    DoctorReview,
    DoctorReviewResult,
    Initiative,
    InitiativeCreate,
    InitiativeUpdate,
)
from healthdesk.models.user import AdminUser, AdminUserCreate, Login, Token
from healthdesk.routers.auth import issue_token
from healthdesk.services.admin_service import (
    AdminService,
    AdminUserNotFoundError,
    AppointmentNotFoundError,
    InvalidTransitionError,
    get_admin_service,
)
from healthdesk.services.community_service import (
    CommunityService,
    DoctorNotFoundError,
    InitiativeNotFoundError,
    get_community_service,
)
from healthdesk.services.user_service import InvalidCredentialsError, UserService, get_user_service

admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.post("/login", response_model=Token)
async def admin_login(
    credentials: Login,
    user_service: UserService = Depends(get_user_service),
    db: Client = Depends(get_db)
):
    """Login for admins. Valid credentials without admin membership get 403."""
    try:
        user = await user_service.verify_user_credentials(credentials.email, credentials.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not await run_in_threadpool(is_admin, db, user["id"]):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin privileges required")

    return issue_token(user["id"], user["email"])


@admin_router.get("/doctors", response_model=List[Doctor])
async def list_all_doctors(
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.list_all_doctors()


@admin_router.get("/doctors/pending", response_model=List[Doctor])
async def list_pending_doctors(
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.list_pending_doctors()


@admin_router.post(
    "/doctors/{doctor_id}/review",
    response_model=DoctorReviewResult,
    summary="Approve or reject a doctor",
    description="""
    Approving verifies the doctor; rejecting leaves them unverified. Either
    way a notification is written to the doctor. Verified doctors cannot be
    reviewed again (409).

    `notified` is false when the notification could not be written; the
    review itself still stands.
    """
)
async def review_doctor(
    doctor_id: str,
    review: DoctorReview,
    admin: dict = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    try:
        return await admin_service.review_doctor(doctor_id, review.approve)
    except DoctorNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@admin_router.get("/appointments", response_model=List[Appointment])
async def list_appointments(
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.all_appointments()


@admin_router.get("/doctors/{doctor_id}/appointments", response_model=List[Appointment])
async def list_doctor_appointments(
    doctor_id: str,
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.doctor_appointments(doctor_id)


@admin_router.patch(
    "/appointments/{appointment_id}/status",
    response_model=Appointment,
    summary="Approve or reject an appointment",
    description="""
    Only pending appointments can change status, and only to `approved` or
    `rejected`. Anything else is a 409.
    """
)
async def update_appointment_status(
    appointment_id: str,
    update: AppointmentStatusUpdate,
    admin: dict = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    try:
        return await admin_service.update_appointment_status(appointment_id, update.status)
    except AppointmentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@admin_router.post("/initiatives", response_model=Initiative, status_code=status.HTTP_201_CREATED)
async def create_initiative(
    initiative: InitiativeCreate,
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    return await community_service.create_initiative(initiative)


@admin_router.patch("/initiatives/{initiative_id}", response_model=Initiative)
async def update_initiative(
    initiative_id: str,
    changes: InitiativeUpdate,
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    try:
        return await community_service.update_initiative(initiative_id, changes)
    except InitiativeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@admin_router.delete("/initiatives/{initiative_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_initiative(
    initiative_id: str,
    admin: dict = Depends(require_admin),
    community_service: CommunityService = Depends(get_community_service)
):
    try:
        await community_service.delete_initiative(initiative_id)
    except InitiativeNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@admin_router.get("/users", response_model=List[AdminUser])
async def list_admins(
    admin: dict = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return await admin_service.list_admins()


@admin_router.post("/users", response_model=AdminUser, status_code=status.HTTP_201_CREATED)
async def add_admin(
    new_admin: AdminUserCreate,
    admin: dict = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    return await admin_service.add_admin(new_admin.user_id)


@admin_router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_admin(
    user_id: str,
    admin: dict = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service)
):
    if user_id == admin["user_id"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admins cannot remove themselves")
    try:
        await admin_service.remove_admin(user_id)
    except AdminUserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
