import logging
import uuid
from datetime import datetime, timezone
from typing import List

from fastapi import Depends
from google.api_core import exceptions as gcp_exceptions
from google.cloud.firestore import Client
from starlette.concurrency import run_in_threadpool

from healthdesk.database import get_db
from healthdesk.dependencies import ADMIN_COLLECTION
from healthdesk.models.community import (
    Appointment,
    AppointmentStatus,
    DoctorNotification,
    DoctorReviewResult,
)
from healthdesk.models.user import AdminUser
from healthdesk.services.community_service import (
    APPOINTMENTS_COLLECTION,
    DOCTORS_COLLECTION,
    DoctorNotFoundError,
)
from healthdesk.services.health_service import snapshot_to_dict

logger = logging.getLogger(__name__)

NOTIFICATIONS_COLLECTION = "doctor_notifications"

APPROVAL_MESSAGE = "Your doctor registration has been approved. You can now receive appointment requests."
REJECTION_MESSAGE = "Your doctor registration has been rejected. Please contact support for more details."


class AppointmentNotFoundError(Exception):
    pass


class AdminUserNotFoundError(Exception):
    pass


class InvalidTransitionError(Exception):
    pass


class AdminService:
    """
    Admin review workflow.

    Doctors move one way from unverified to verified. Appointments move from
    pending to approved or rejected and stay there. Each transition is a
    plain read, check and write; concurrent reviews are last write wins.
    """

    def __init__(self, db: Client):
        self.db = db
        self.doctors = self.db.collection(DOCTORS_COLLECTION)
        self.appointments = self.db.collection(APPOINTMENTS_COLLECTION)
        self.notifications = self.db.collection(NOTIFICATIONS_COLLECTION)
        self.admins = self.db.collection(ADMIN_COLLECTION)

    async def notify_doctor(self, doctor_id: str, message: str) -> DoctorNotification:
        notification_id = str(uuid.uuid4())
        doc = {
            "doctor_id": doctor_id,
            "message": message,
            "read": False,
            "created_at": datetime.now(timezone.utc),
        }
        await run_in_threadpool(self.notifications.document(notification_id).set, doc)
        return DoctorNotification(id=notification_id, **doc)

    async def review_doctor(self, doctor_id: str, approve: bool) -> DoctorReviewResult:
        """
        Approve or reject a pending doctor and notify them.

        The notification is written after the verification update. If it
        fails the review still stands and the result reports notified=False.
        """
        ref = self.doctors.document(doctor_id)
        doc = await run_in_threadpool(ref.get)
        if not doc.exists:
            raise DoctorNotFoundError(f"Doctor {doctor_id} not found")
        if (doc.to_dict() or {}).get("verified"):
            raise InvalidTransitionError(f"Doctor {doctor_id} is already verified")

        if approve:
            await run_in_threadpool(
                ref.update, {"verified": True, "updated_at": datetime.now(timezone.utc)}
            )
            logger.info(f"Doctor {doctor_id} verified")
        else:
            logger.info(f"Doctor {doctor_id} rejected")

        notified = True
        try:
            await self.notify_doctor(doctor_id, APPROVAL_MESSAGE if approve else REJECTION_MESSAGE)
        except gcp_exceptions.GoogleAPICallError as e:
            logger.warning(f"Failed to notify doctor {doctor_id}: {e}")
            notified = False

        return DoctorReviewResult(doctor_id=doctor_id, verified=approve, notified=notified)

    async def update_appointment_status(self, appointment_id: str, new_status: AppointmentStatus) -> Appointment:
        """Move a pending appointment to approved or rejected. Only status is written."""
        ref = self.appointments.document(appointment_id)
        doc = await run_in_threadpool(ref.get)
        if not doc.exists:
            raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")

        data = snapshot_to_dict(doc)
        current = data.get("status", AppointmentStatus.PENDING.value)
        if current != AppointmentStatus.PENDING.value or new_status == AppointmentStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot move appointment {appointment_id} from {current} to {new_status.value}"
            )

        await run_in_threadpool(ref.update, {"status": new_status.value})
        logger.info(f"Appointment {appointment_id} {new_status.value}")
        return Appointment(**{**data, "status": new_status})

    async def list_admins(self) -> List[AdminUser]:
        docs = await run_in_threadpool(list, self.admins.stream())
        return [AdminUser(user_id=doc.id, created_at=(doc.to_dict() or {}).get("created_at")) for doc in docs]

    async def add_admin(self, user_id: str) -> AdminUser:
        now = datetime.now(timezone.utc)
        await run_in_threadpool(self.admins.document(user_id).set, {"created_at": now})
        logger.info(f"Granted admin to user {user_id}")
        return AdminUser(user_id=user_id, created_at=now)

    async def remove_admin(self, user_id: str) -> None:
        ref = self.admins.document(user_id)
        doc = await run_in_threadpool(ref.get)
        if not doc.exists:
            raise AdminUserNotFoundError(f"User {user_id} is not an admin")
        await run_in_threadpool(ref.delete)
        logger.info(f"Revoked admin from user {user_id}")


def get_admin_service(db: Client = Depends(get_db)) -> AdminService:
    return AdminService(db)
