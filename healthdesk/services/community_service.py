import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Depends
from google.cloud import firestore
from google.cloud.firestore import Client
from google.cloud.firestore_v1.base_query import FieldFilter
from starlette.concurrency import run_in_threadpool

from healthdesk import sample_data
from healthdesk.config import is_sample_mode
from healthdesk.database import get_db
from healthdesk.models.community import (
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    Doctor,
    DoctorCreate,
    DoctorSummary,
    Initiative,
    InitiativeCreate,
    InitiativeUpdate,
)
from healthdesk.services.health_service import snapshot_to_dict

logger = logging.getLogger(__name__)

DOCTORS_COLLECTION = "community_doctors"
APPOINTMENTS_COLLECTION = "community_appointments"
INITIATIVES_COLLECTION = "community_initiatives"


class DoctorNotFoundError(Exception):
    pass


class DoctorNotVerifiedError(Exception):
    pass


class InitiativeNotFoundError(Exception):
    pass


class CommunityService:
    """
    Volunteer doctors, appointment requests and community initiatives.

    Listings serve the bundled demo catalogue in sample mode; writes always
    go to Firestore.
    """

    def __init__(self, db: Client):
        self.db = db
        self.doctors = self.db.collection(DOCTORS_COLLECTION)
        self.appointments = self.db.collection(APPOINTMENTS_COLLECTION)
        self.initiatives = self.db.collection(INITIATIVES_COLLECTION)

    # Doctors

    async def register_doctor(self, doctor: DoctorCreate) -> Doctor:
        """Register a volunteer doctor. New doctors start unverified."""
        doctor_id = str(uuid.uuid4())
        doc = {
            **doctor.model_dump(),
            "verified": False,
            "created_at": datetime.now(timezone.utc),
        }
        await run_in_threadpool(self.doctors.document(doctor_id).set, doc)
        logger.info(f"Registered doctor {doctor_id} pending verification")
        return Doctor(id=doctor_id, **doc)

    async def get_doctor(self, doctor_id: str) -> Doctor:
        doc = await run_in_threadpool(self.doctors.document(doctor_id).get)
        if not doc.exists:
            raise DoctorNotFoundError(f"Doctor {doctor_id} not found")
        return Doctor(**snapshot_to_dict(doc))

    async def _query_doctors(self, verified: Optional[bool] = None) -> List[Doctor]:
        query = self.doctors
        if verified is not None:
            query = query.where(filter=FieldFilter("verified", "==", verified))
        docs = await run_in_threadpool(list, query.stream())
        doctors = [Doctor(**snapshot_to_dict(doc)) for doc in docs]
        doctors.sort(key=lambda d: d.created_at, reverse=True)
        return doctors

    async def list_verified_doctors(self) -> List[Doctor]:
        if is_sample_mode():
            return sample_data.verified_doctors()
        return await self._query_doctors(verified=True)

    async def list_all_doctors(self) -> List[Doctor]:
        if is_sample_mode():
            return sample_data.verified_doctors() + sample_data.pending_doctors()
        return await self._query_doctors()

    async def list_pending_doctors(self) -> List[Doctor]:
        if is_sample_mode():
            return sample_data.pending_doctors()
        return await self._query_doctors(verified=False)

    # Appointments

    async def book_appointment(self, patient_id: str, appointment: AppointmentCreate) -> Appointment:
        """Book an appointment request for the authenticated patient. Always starts pending."""
        doctor = await self.get_doctor(appointment.doctor_id)
        if not doctor.verified:
            raise DoctorNotVerifiedError(f"Doctor {doctor.id} is not verified")

        appointment_id = str(uuid.uuid4())
        doc = {
            **appointment.model_dump(),
            "appointment_date": appointment.appointment_date.isoformat(),
            "patient_id": patient_id,
            "status": AppointmentStatus.PENDING.value,
            "created_at": datetime.now(timezone.utc),
        }
        await run_in_threadpool(self.appointments.document(appointment_id).set, doc)
        logger.info(f"Appointment {appointment_id} requested with doctor {doctor.id}")

        return Appointment(
            id=appointment_id,
            doctor=DoctorSummary(full_name=doctor.full_name, specialty=doctor.specialty),
            **doc,
        )

    async def _doctor_summaries(self, doctor_ids: set) -> Dict[str, DoctorSummary]:
        summaries = {}
        for doctor_id in doctor_ids:
            doc = await run_in_threadpool(self.doctors.document(doctor_id).get)
            if doc.exists:
                data = doc.to_dict() or {}
                summaries[doctor_id] = DoctorSummary(
                    full_name=data.get("full_name", ""),
                    specialty=data.get("specialty", ""),
                )
        return summaries

    async def _appointments_from_query(self, query) -> List[Appointment]:
        """Appointments with their doctor summary attached; orphaned references get None."""
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
        docs = await run_in_threadpool(list, query.stream())
        rows: List[Dict[str, Any]] = [snapshot_to_dict(doc) for doc in docs]

        summaries = await self._doctor_summaries({row.get("doctor_id") for row in rows if row.get("doctor_id")})
        appointments = []
        for row in rows:
            doctor = summaries.get(row.get("doctor_id"))
            if doctor is None:
                logger.warning(f"Appointment {row['id']} references missing doctor {row.get('doctor_id')}")
            appointments.append(Appointment(**{**row, "doctor": doctor}))
        return appointments

    async def patient_appointments(self, patient_id: str) -> List[Appointment]:
        query = self.appointments.where(filter=FieldFilter("patient_id", "==", patient_id))
        return await self._appointments_from_query(query)

    async def doctor_appointments(self, doctor_id: str) -> List[Appointment]:
        query = self.appointments.where(filter=FieldFilter("doctor_id", "==", doctor_id))
        return await self._appointments_from_query(query)

    async def all_appointments(self) -> List[Appointment]:
        if is_sample_mode():
            return sample_data.appointments()
        return await self._appointments_from_query(self.appointments)

    # Initiatives

    async def list_initiatives(self) -> List[Initiative]:
        if is_sample_mode():
            return sample_data.initiatives()
        query = self.initiatives.order_by("created_at", direction=firestore.Query.DESCENDING)
        docs = await run_in_threadpool(list, query.stream())
        return [Initiative(**snapshot_to_dict(doc)) for doc in docs]

    async def create_initiative(self, initiative: InitiativeCreate) -> Initiative:
        initiative_id = str(uuid.uuid4())
        doc = {**initiative.model_dump(), "created_at": datetime.now(timezone.utc)}
        await run_in_threadpool(self.initiatives.document(initiative_id).set, doc)
        return Initiative(id=initiative_id, **doc)

    async def update_initiative(self, initiative_id: str, changes: InitiativeUpdate) -> Initiative:
        ref = self.initiatives.document(initiative_id)
        doc = await run_in_threadpool(ref.get)
        if not doc.exists:
            raise InitiativeNotFoundError(f"Initiative {initiative_id} not found")

        updates = {**changes.model_dump(exclude_none=True), "updated_at": datetime.now(timezone.utc)}
        await run_in_threadpool(ref.update, updates)
        return Initiative(**{**snapshot_to_dict(doc), **updates})

    async def delete_initiative(self, initiative_id: str) -> None:
        ref = self.initiatives.document(initiative_id)
        doc = await run_in_threadpool(ref.get)
        if not doc.exists:
            raise InitiativeNotFoundError(f"Initiative {initiative_id} not found")
        await run_in_threadpool(ref.delete)


def get_community_service(db: Client = Depends(get_db)) -> CommunityService:
    return CommunityService(db)
