"""
Medication expiry tracker endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from healthdesk.dependencies import verify_user_access
from healthdesk.models.medication import ExpirySummary, MedicationCreate, MedicationResponse
from healthdesk.services.medication_service import (
    MedicationNotFoundError,
    MedicationService,
    get_medication_service,
)

medication_router = APIRouter(prefix="/users", tags=["medications"])


@medication_router.post(
    "/{user_id}/medications",
    response_model=MedicationResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_medication(
    user_id: str,
    medication: MedicationCreate,
    verified_user_id: str = Depends(verify_user_access),
    medication_service: MedicationService = Depends(get_medication_service)
):
    return await medication_service.add_medication(user_id, medication)


@medication_router.get("/{user_id}/medications", response_model=List[MedicationResponse])
async def list_medications(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    medication_service: MedicationService = Depends(get_medication_service)
):
    """Medications ordered by expiry date."""
    return await medication_service.list_medications(user_id)


@medication_router.get(
    "/{user_id}/medications/expiry",
    response_model=ExpirySummary,
    summary="Expired and soon-to-expire medications",
    description="""
    - `expired`: expiry date before today
    - `expiring_soon`: expiry date after today and within the next 30 days
    """
)
async def get_expiry_summary(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    medication_service: MedicationService = Depends(get_medication_service)
):
    medications = await medication_service.list_medications(user_id)
    return medication_service.expiry_summary(medications)


@medication_router.put("/{user_id}/medications/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    user_id: str,
    medication_id: str,
    medication: MedicationCreate,
    verified_user_id: str = Depends(verify_user_access),
    medication_service: MedicationService = Depends(get_medication_service)
):
    try:
        return await medication_service.update_medication(user_id, medication_id, medication)
    except MedicationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@medication_router.delete("/{user_id}/medications/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    user_id: str,
    medication_id: str,
    verified_user_id: str = Depends(verify_user_access),
    medication_service: MedicationService = Depends(get_medication_service)
):
    try:
        await medication_service.delete_medication(user_id, medication_id)
    except MedicationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
