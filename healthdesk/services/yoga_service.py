import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import Depends
from google.cloud import firestore
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from starlette.concurrency import run_in_threadpool

from healthdesk.database import get_db
from healthdesk.models.yoga import YogaSessionCreate, YogaSessionResponse, YogaStats
from healthdesk.services.health_service import as_utc, snapshot_to_dict

SESSION_TYPES = [
    "Vinyasa Flow",
    "Hatha Yoga",
    "Ashtanga",
    "Power Yoga",
    "Yin Yoga",
    "Restorative Yoga",
    "Kundalini Yoga",
    "Morning Stretch",
    "Evening Relaxation",
    "Cardio Workout",
    "Strength Training",
    "Core Workout",
    "High-Intensity Interval Training",
    "Walking",
    "Running",
    "Cycling",
    "Swimming",
    "Pilates",
    "Meditation",
]


class YogaSessionNotFoundError(Exception):
    pass


class YogaService:
    """Service for yoga and fitness session logging."""

    COLLECTION_NAME = "yoga_sessions"

    def __init__(self, db: Client):
        self.db = db
        self.collection = self.db.collection(self.COLLECTION_NAME)

    async def log_session(self, user_id: str, session: YogaSessionCreate) -> YogaSessionResponse:
        session_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        doc = {
            "user_id": user_id,
            "session_name": session.session_name,
            "duration": session.duration,
            "calories_burned": session.calories_burned,
            "date": now,
            "notes": session.notes or None,
            "created_at": now,
            "updated_at": now,
        }
        await run_in_threadpool(self.collection.document(session_id).set, doc)
        return YogaSessionResponse(id=session_id, **doc)

    async def get_session(self, user_id: str, session_id: str) -> YogaSessionResponse:
        doc = await run_in_threadpool(self.collection.document(session_id).get)
        if not doc.exists:
            raise YogaSessionNotFoundError(f"Session {session_id} not found")
        data = snapshot_to_dict(doc)
        if data.get("user_id") != user_id:
            raise YogaSessionNotFoundError(f"Session {session_id} not found")
        data["date"] = as_utc(data.get("date"))
        return YogaSessionResponse(**data)

    async def update_session(self, user_id: str, session_id: str, session: YogaSessionCreate) -> YogaSessionResponse:
        existing = await self.get_session(user_id, session_id)
        updates = {
            "session_name": session.session_name,
            "duration": session.duration,
            "calories_burned": session.calories_burned,
            "notes": session.notes or None,
            "updated_at": datetime.now(timezone.utc),
        }
        await run_in_threadpool(self.collection.document(session_id).update, updates)
        return existing.model_copy(update=updates)

    async def delete_session(self, user_id: str, session_id: str) -> None:
        await self.get_session(user_id, session_id)
        await run_in_threadpool(self.collection.document(session_id).delete)

    async def list_sessions(self, user_id: str) -> List[YogaSessionResponse]:
        query = self.collection.where(filter=FieldFilter("user_id", "==", user_id))
        query = query.order_by("date", direction=firestore.Query.DESCENDING)
        docs = await run_in_threadpool(list, query.stream())
        sessions = []
        for doc in docs:
            data = snapshot_to_dict(doc)
            data["date"] = as_utc(data.get("date"))
            sessions.append(YogaSessionResponse(**data))
        return sessions

    @staticmethod
    def compute_stats(sessions: List[YogaSessionResponse]) -> YogaStats:
        if not sessions:
            return YogaStats()

        total_duration = sum(session.duration for session in sessions)
        total_calories = sum(session.calories_burned or 0 for session in sessions)
        return YogaStats(
            totalSessions=len(sessions),
            totalDuration=total_duration,
            totalCalories=total_calories,
            averageDuration=total_duration / len(sessions),
        )


def get_yoga_service(db: Client = Depends(get_db)) -> YogaService:
    return YogaService(db)
