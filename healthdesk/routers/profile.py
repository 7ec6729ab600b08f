"""
Per-user preferences stored on the profile.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from healthdesk.dependencies import verify_user_access
from healthdesk.models.user import SavedDiseases
from healthdesk.services.user_service import UserNotFoundError, UserService, get_user_service

profile_router = APIRouter(prefix="/users", tags=["profile"])


@profile_router.get("/{user_id}/saved-diseases", response_model=SavedDiseases)
async def get_saved_diseases(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    user_service: UserService = Depends(get_user_service)
):
    try:
        diseases: List[str] = await user_service.get_saved_diseases(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return SavedDiseases(diseases=diseases)


@profile_router.put("/{user_id}/saved-diseases", response_model=SavedDiseases)
async def set_saved_diseases(
    user_id: str,
    saved: SavedDiseases,
    verified_user_id: str = Depends(verify_user_access),
    user_service: UserService = Depends(get_user_service)
):
    """Replace the bookmarked disease list."""
    try:
        diseases = await user_service.set_saved_diseases(user_id, saved.diseases)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return SavedDiseases(diseases=diseases)
