"""
Yoga and fitness session endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from healthdesk.dependencies import verify_user_access
from healthdesk.models.yoga import YogaSessionCreate, YogaSessionResponse, YogaStats
from healthdesk.services.yoga_service import (
    SESSION_TYPES,
    YogaService,
    YogaSessionNotFoundError,
    get_yoga_service,
)

yoga_router = APIRouter(prefix="/users", tags=["yoga"])


@yoga_router.get("/{user_id}/yoga-sessions/types", response_model=List[str])
async def list_session_types(verified_user_id: str = Depends(verify_user_access)):
    return SESSION_TYPES


@yoga_router.post(
    "/{user_id}/yoga-sessions",
    response_model=YogaSessionResponse,
    status_code=status.HTTP_201_CREATED
)
async def log_session(
    user_id: str,
    session: YogaSessionCreate,
    verified_user_id: str = Depends(verify_user_access),
    yoga_service: YogaService = Depends(get_yoga_service)
):
    """Log a session dated now. Duration must be positive."""
    return await yoga_service.log_session(user_id, session)


@yoga_router.get("/{user_id}/yoga-sessions", response_model=List[YogaSessionResponse])
async def list_sessions(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    yoga_service: YogaService = Depends(get_yoga_service)
):
    return await yoga_service.list_sessions(user_id)


@yoga_router.get("/{user_id}/yoga-sessions/stats", response_model=YogaStats)
async def get_session_stats(
    user_id: str,
    verified_user_id: str = Depends(verify_user_access),
    yoga_service: YogaService = Depends(get_yoga_service)
):
    sessions = await yoga_service.list_sessions(user_id)
    return yoga_service.compute_stats(sessions)


@yoga_router.put("/{user_id}/yoga-sessions/{session_id}", response_model=YogaSessionResponse)
async def update_session(
    user_id: str,
    session_id: str,
    session: YogaSessionCreate,
    verified_user_id: str = Depends(verify_user_access),
    yoga_service: YogaService = Depends(get_yoga_service)
):
    try:
        return await yoga_service.update_session(user_id, session_id, session)
    except YogaSessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@yoga_router.delete("/{user_id}/yoga-sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(
    user_id: str,
    session_id: str,
    verified_user_id: str = Depends(verify_user_access),
    yoga_service: YogaService = Depends(get_yoga_service)
):
    try:
        await yoga_service.delete_session(user_id, session_id)
    except YogaSessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
