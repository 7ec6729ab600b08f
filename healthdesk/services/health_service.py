import base64
import json
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends
from google.cloud import firestore
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from starlette.concurrency import run_in_threadpool

from healthdesk.aggregation.classifier import classify_records, decode_payload
from healthdesk.aggregation.reducer import build_recent_activity, build_vitals_stats
from healthdesk.aggregation.series import build_vitals_series
from healthdesk.cache import get_cached, invalidate_user, set_cached, view_key
from healthdesk.config import DASHBOARD_CACHE_TTL
from healthdesk.database import get_db
from healthdesk.models.dashboard import DashboardResponse, RecordCounts
from healthdesk.models.health import (
    PAYLOAD_MODELS,
    HealthRecordCreate,
    HealthRecordResponse,
    HealthRecordUpdate,
    PaginatedHealthRecordResponse,
    RecordType,
)

logger = logging.getLogger(__name__)


class HealthRecordNotFoundError(Exception):
    pass


class InvalidCursorError(Exception):
    pass


def as_utc(value: Any) -> Any:
    """Attach UTC to naive datetimes coming back from Firestore."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def snapshot_to_dict(doc) -> Dict[str, Any]:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    for key in ("created_at", "updated_at"):
        if key in data:
            data[key] = as_utc(data[key])
    return data


class HealthService:
    """Health record storage plus the dashboard aggregation pipeline."""

    COLLECTION_NAME = "health_records"
    MAX_PAGE_SIZE = 100
    DEFAULT_PAGE_SIZE = 50

    def __init__(self, db: Client):
        self.db = db
        self.collection = self.db.collection(self.COLLECTION_NAME)

    @staticmethod
    def encode_cursor(record_date: str, doc_id: str) -> str:
        """Encode pagination cursor from the record date and document ID."""
        cursor_data = {"record_date": record_date, "id": doc_id}
        return base64.urlsafe_b64encode(json.dumps(cursor_data).encode()).decode()

    @staticmethod
    def decode_cursor(cursor: str) -> tuple[str, str]:
        """Decode pagination cursor to record date and document ID."""
        try:
            cursor_data = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
            return cursor_data["record_date"], cursor_data["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise InvalidCursorError(f"Invalid cursor format: {str(e)}")

    async def insert_record(
        self,
        user_id: str,
        record_type: RecordType,
        payload: Dict[str, Any],
        record_date: Optional[date] = None,
    ) -> HealthRecordResponse:
        """Persist a record with its payload JSON-encoded into description."""
        record_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        record_doc = {
            "user_id": user_id,
            "record_type": record_type.value,
            "record_date": (record_date or now.date()).isoformat(),
            "description": json.dumps(payload),
            "status": "active",
            "created_at": now,
            "updated_at": now,
        }

        await run_in_threadpool(self.collection.document(record_id).set, record_doc)
        invalidate_user(user_id)
        logger.info(f"Created {record_type.value} record {record_id} for user {user_id}")

        return HealthRecordResponse(id=record_id, **record_doc)

    async def create_record(self, user_id: str, record: HealthRecordCreate) -> HealthRecordResponse:
        return await self.insert_record(user_id, record.record_type, record.data, record.record_date)

    async def get_record(self, user_id: str, record_id: str) -> HealthRecordResponse:
        doc = await run_in_threadpool(self.collection.document(record_id).get)
        if not doc.exists:
            raise HealthRecordNotFoundError(f"Health record {record_id} not found")

        data = snapshot_to_dict(doc)
        # Other users' records are reported as missing.
        if data.get("user_id") != user_id:
            raise HealthRecordNotFoundError(f"Health record {record_id} not found")
        return HealthRecordResponse(**data)

    async def update_record(self, user_id: str, record_id: str, changes: HealthRecordUpdate) -> HealthRecordResponse:
        """
        Apply an edit to a record.

        Measurement payloads are re-validated against their type. Diet plan
        payloads are stored as given; totalCalories is not recomputed.
        """
        existing = await self.get_record(user_id, record_id)
        updates: Dict[str, Any] = {"updated_at": datetime.now(timezone.utc)}

        if changes.data is not None:
            payload_model = PAYLOAD_MODELS.get(existing.record_type)
            payload = payload_model.model_validate(changes.data).model_dump() if payload_model else changes.data
            updates["description"] = json.dumps(payload)
        if changes.record_date is not None:
            updates["record_date"] = changes.record_date.isoformat()
        if changes.status is not None:
            updates["status"] = changes.status

        await run_in_threadpool(self.collection.document(record_id).update, updates)
        invalidate_user(user_id)

        return existing.model_copy(update=updates)

    async def delete_record(self, user_id: str, record_id: str) -> None:
        await self.get_record(user_id, record_id)
        await run_in_threadpool(self.collection.document(record_id).delete)
        invalidate_user(user_id)
        logger.info(f"Deleted health record {record_id} for user {user_id}")

    def _user_query(self, user_id: str, record_type: Optional[RecordType] = None):
        query = self.collection.where(filter=FieldFilter("user_id", "==", user_id))
        if record_type is not None:
            query = query.where(filter=FieldFilter("record_type", "==", record_type.value))
        return query

    async def fetch_records(
        self,
        user_id: str,
        record_type: Optional[RecordType] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Raw record dicts for a user, newest record_date first."""
        query = self._user_query(user_id, record_type)
        query = query.order_by("record_date", direction=firestore.Query.DESCENDING)
        if limit is not None:
            query = query.limit(limit)

        docs = await run_in_threadpool(list, query.stream())
        return [snapshot_to_dict(doc) for doc in docs]

    async def latest_payload(self, user_id: str, record_type: RecordType) -> Optional[Dict[str, Any]]:
        """Decoded payload of the most recently created record of a type."""
        query = self._user_query(user_id, record_type)
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING).limit(1)
        docs = await run_in_threadpool(list, query.stream())
        if not docs:
            return None
        return decode_payload((docs[0].to_dict() or {}).get("description"))

    async def list_records(
        self,
        user_id: str,
        record_type: Optional[RecordType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        cursor: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> PaginatedHealthRecordResponse:
        """Page through a user's records, newest first."""
        if limit < 1 or limit > self.MAX_PAGE_SIZE:
            limit = self.DEFAULT_PAGE_SIZE

        query = self._user_query(user_id, record_type)
        if start_date:
            query = query.where(filter=FieldFilter("record_date", ">=", start_date.isoformat()))
        if end_date:
            query = query.where(filter=FieldFilter("record_date", "<=", end_date.isoformat()))

        query = query.order_by("record_date", direction=firestore.Query.DESCENDING)
        query = query.order_by("__name__", direction=firestore.Query.DESCENDING)

        if cursor:
            _, cursor_doc_id = self.decode_cursor(cursor)
            cursor_doc = await run_in_threadpool(self.collection.document(cursor_doc_id).get)
            if cursor_doc.exists:
                query = query.start_after(cursor_doc)

        docs = await run_in_threadpool(list, query.limit(limit + 1).stream())

        has_more = len(docs) > limit
        if has_more:
            docs = docs[:limit]

        entries = [HealthRecordResponse(**snapshot_to_dict(doc)) for doc in docs]

        next_cursor = None
        if has_more and entries:
            last = entries[-1]
            next_cursor = self.encode_cursor(last.record_date or "", last.id)

        return PaginatedHealthRecordResponse(
            data=entries,
            next_cursor=next_cursor,
            has_more=has_more,
            limit=limit
        )

    async def get_dashboard(self, user_id: str, time_range: str = "week") -> DashboardResponse:
        """Fetch, classify, reduce and chart a user's records. Cached per record version."""
        cache_key = view_key("dashboard", user_id, time_range)
        cached = get_cached(cache_key)
        if cached:
            return DashboardResponse.model_validate_json(cached)

        records = await self.fetch_records(user_id)
        classified = classify_records(records)
        dropped = len(records) - classified.total()
        if dropped:
            logger.info(f"Dashboard for user {user_id}: {dropped} record(s) not aggregated")

        response = DashboardResponse(
            time_range=time_range,
            stats=build_vitals_stats(classified.vitals),
            series=build_vitals_series(classified.vitals, time_range),
            counts=RecordCounts(
                vitals=len(classified.vitals),
                body_measurements=len(classified.body_measurements),
                lab_results=len(classified.lab_results),
                diet_plans=len(classified.diet_plans),
            ),
            recent_activity=build_recent_activity(records),
        )

        set_cached(cache_key, response.model_dump_json().encode(), ex=DASHBOARD_CACHE_TTL)
        return response


def get_health_service(db: Client = Depends(get_db)) -> HealthService:
    return HealthService(db)
