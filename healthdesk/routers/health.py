"""
Health record and dashboard endpoints.
Every route is scoped to the authenticated user's own user_id.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import ValidationError

from healthdesk.dependencies import verify_user_access
from healthdesk.models.dashboard import DashboardResponse, TimeRange
from healthdesk.models.health import (
    HealthRecordCreate,
    HealthRecordResponse,
    HealthRecordUpdate,
    PaginatedHealthRecordResponse,
    RecordType,
)
from healthdesk.services.health_service import (
    HealthRecordNotFoundError,
    HealthService,
    InvalidCursorError,
    get_health_service,
)

health_router = APIRouter(prefix="/users", tags=["health"])


@health_router.post(
    "/{user_id}/health-records",
    response_model=HealthRecordResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a health record",
    description="""
    Submit vitals, body measurements or lab results.

    The measurement payload is stored JSON-encoded in `description`.
    Diet plans are created through `/users/{user_id}/diet-plans`.

    **Security:**
    - Requires authentication (Bearer token)
    - The user_id in the path must match the token subject
    """
)
async def create_health_record(
    user_id: str,
    record: HealthRecordCreate,
    verified_user_id: str = Depends(verify_user_access),
    health_service: HealthService = Depends(get_health_service)
):
    return await health_service.create_record(user_id, record)


@health_router.get(
    "/{user_id}/health-records",
    response_model=PaginatedHealthRecordResponse,
    summary="List health records",
    description="""
    Page through a user's health records, newest record_date first.

    **Pagination:**
    - Use `next_cursor` from the response to fetch the next page
    - `has_more` indicates whether more results exist
    """
)
async def list_health_records(
    user_id: str,
    record_type: Optional[RecordType] = Query(None, description="Only records of this type"),
    start_date: Optional[date] = Query(None, description="Earliest record_date (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Latest record_date (YYYY-MM-DD)"),
    cursor: Optional[str] = Query(None, description="Cursor from a previous response's next_cursor"),
    limit: int = Query(50, ge=1, le=100, description="Number of results per page (default: 50, max: 100)"),
    verified_user_id: str = Depends(verify_user_access),
    health_service: HealthService = Depends(get_health_service)
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be before or equal to end_date"
        )

    try:
        return await health_service.list_records(user_id, record_type, start_date, end_date, cursor, limit)
    except InvalidCursorError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@health_router.get("/{user_id}/health-records/{record_id}", response_model=HealthRecordResponse)
async def get_health_record(
    user_id: str,
    record_id: str,
    verified_user_id: str = Depends(verify_user_access),
    health_service: HealthService = Depends(get_health_service)
):
    try:
        return await health_service.get_record(user_id, record_id)
    except HealthRecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@health_router.patch("/{user_id}/health-records/{record_id}", response_model=HealthRecordResponse)
async def update_health_record(
    user_id: str,
    record_id: str,
    changes: HealthRecordUpdate,
    verified_user_id: str = Depends(verify_user_access),
    health_service: HealthService = Depends(get_health_service)
):
    """Edit a record. Measurement payloads are re-validated for the record's type."""
    try:
        return await health_service.update_record(user_id, record_id, changes)
    except HealthRecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False)
        )


@health_router.delete("/{user_id}/health-records/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_health_record(
    user_id: str,
    record_id: str,
    verified_user_id: str = Depends(verify_user_access),
    health_service: HealthService = Depends(get_health_service)
):
    try:
        await health_service.delete_record(user_id, record_id)
    except HealthRecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@health_router.get(
    "/{user_id}/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard aggregates",
    description="""
    Latest vitals with progress scores, the chart series for the selected
    range, record counts per type and the five most recent activities.

    **Time ranges:** `week` (7 readings), `month` (30), `quarter` (90).
    Records whose payload cannot be decoded are left out of every aggregate.
    """
)
async def get_dashboard(
    user_id: str,
    time_range: TimeRange = Query("week", description="Chart window"),
    verified_user_id: str = Depends(verify_user_access),
    health_service: HealthService = Depends(get_health_service)
):
    return await health_service.get_dashboard(user_id, time_range)
