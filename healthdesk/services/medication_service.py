import uuid
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from fastapi import Depends
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from starlette.concurrency import run_in_threadpool

from healthdesk.database import get_db
from healthdesk.models.medication import ExpirySummary, MedicationCreate, MedicationResponse
from healthdesk.services.health_service import snapshot_to_dict

EXPIRY_WARNING_DAYS = 30


class MedicationNotFoundError(Exception):
    pass


def _medication_doc(medication: MedicationCreate) -> dict:
    return {
        "name": medication.name,
        "dosage": medication.dosage or None,
        "frequency": medication.frequency or None,
        "expiry_date": medication.expiry_date.isoformat() if medication.expiry_date else None,
        "notes": medication.notes or None,
    }


class MedicationService:
    """Service for the medication expiry tracker."""

    COLLECTION_NAME = "medications"

    def __init__(self, db: Client):
        self.db = db
        self.collection = self.db.collection(self.COLLECTION_NAME)

    async def add_medication(self, user_id: str, medication: MedicationCreate) -> MedicationResponse:
        medication_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        doc = {**_medication_doc(medication), "user_id": user_id, "created_at": now, "updated_at": now}

        await run_in_threadpool(self.collection.document(medication_id).set, doc)
        return MedicationResponse(id=medication_id, **doc)

    async def get_medication(self, user_id: str, medication_id: str) -> MedicationResponse:
        doc = await run_in_threadpool(self.collection.document(medication_id).get)
        if not doc.exists:
            raise MedicationNotFoundError(f"Medication {medication_id} not found")
        data = snapshot_to_dict(doc)
        if data.get("user_id") != user_id:
            raise MedicationNotFoundError(f"Medication {medication_id} not found")
        return MedicationResponse(**data)

    async def update_medication(
        self, user_id: str, medication_id: str, medication: MedicationCreate
    ) -> MedicationResponse:
        existing = await self.get_medication(user_id, medication_id)
        updates = {**_medication_doc(medication), "updated_at": datetime.now(timezone.utc)}

        await run_in_threadpool(self.collection.document(medication_id).update, updates)
        return MedicationResponse(**{**existing.model_dump(), **updates})

    async def delete_medication(self, user_id: str, medication_id: str) -> None:
        await self.get_medication(user_id, medication_id)
        await run_in_threadpool(self.collection.document(medication_id).delete)

    async def list_medications(self, user_id: str) -> List[MedicationResponse]:
        """Medications ordered by expiry date; undated ones last."""
        query = self.collection.where(filter=FieldFilter("user_id", "==", user_id))
        docs = await run_in_threadpool(list, query.stream())
        medications = [MedicationResponse(**snapshot_to_dict(doc)) for doc in docs]
        medications.sort(key=lambda m: (m.expiry_date is None, m.expiry_date or date.max))
        return medications

    @staticmethod
    def expiry_summary(medications: List[MedicationResponse], today: Optional[date] = None) -> ExpirySummary:
        """Split medications into expired and expiring within the warning window."""
        today = today or date.today()
        horizon = today + timedelta(days=EXPIRY_WARNING_DAYS)

        expired = [m for m in medications if m.expiry_date and m.expiry_date <= today]
        expiring_soon = [m for m in medications if m.expiry_date and today < m.expiry_date <= horizon]
        return ExpirySummary(expired=expired, expiring_soon=expiring_soon)


def get_medication_service(db: Client = Depends(get_db)) -> MedicationService:
    return MedicationService(db)
