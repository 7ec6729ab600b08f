"""
Unit tests for CommunityService.
"""
import pytest
from datetime import date, datetime, timezone
from unittest.mock import Mock

from healthdesk.models.community import AppointmentCreate, AppointmentStatus, DoctorCreate, InitiativeUpdate
from healthdesk.services.community_service import (
    CommunityService,
    DoctorNotFoundError,
    DoctorNotVerifiedError,
    InitiativeNotFoundError,
)

NOW = datetime(2026, 1, 8, tzinfo=timezone.utc)


def doctor_data(verified=True, name="Dr. Vinay Pandey"):
    return {
        "full_name": name,
        "email": "doctor@example.com",
        "phone": "555-0100",
        "specialty": "Cardiology",
        "experience": 12,
        "location": "Prayagraj, India",
        "availability": "Mon, Wed",
        "verified": verified,
        "created_at": NOW,
    }


@pytest.fixture
def collections():
    return {
        "community_doctors": Mock(),
        "community_appointments": Mock(),
        "community_initiatives": Mock(),
    }


@pytest.fixture
def community_service(mock_db, collections):
    mock_db.collection = Mock(side_effect=lambda name: collections[name])
    return CommunityService(mock_db)


class TestDoctors:
    """Tests for doctor registration and listings."""

    @pytest.mark.asyncio
    async def test_register_doctor_starts_unverified(self, community_service, collections):
        doctor = DoctorCreate(
            full_name="Dr. Robert Wilson",
            email="robert.wilson@example.com",
            phone="(555) 222-3333",
            specialty="Dermatology",
            experience=7,
            location="Boston, MA",
            availability="Mon, Thu",
        )

        result = await community_service.register_doctor(doctor)

        assert result.verified is False
        stored = collections["community_doctors"].document.return_value.set.call_args[0][0]
        assert stored["verified"] is False

    @pytest.mark.asyncio
    async def test_list_verified_doctors_queries_firestore(self, community_service, collections, make_doc, make_query):
        query = make_query([make_doc("d1", doctor_data())])
        collections["community_doctors"].where.return_value = query

        result = await community_service.list_verified_doctors()

        assert [d.id for d in result] == ["d1"]
        field_filter = collections["community_doctors"].where.call_args.kwargs["filter"]
        assert field_filter.value is True

    @pytest.mark.asyncio
    async def test_sample_mode_serves_catalogue(self, community_service, collections, monkeypatch):
        monkeypatch.setenv("HEALTHDESK_DATA_MODE", "sample")

        verified = await community_service.list_verified_doctors()
        pending = await community_service.list_pending_doctors()
        everyone = await community_service.list_all_doctors()

        assert all(d.verified for d in verified)
        assert not any(d.verified for d in pending)
        assert len(everyone) == len(verified) + len(pending)
        collections["community_doctors"].where.assert_not_called()
        collections["community_doctors"].stream.assert_not_called()


class TestAppointments:
    """Tests for booking and listing appointments."""

    @pytest.fixture
    def booking(self):
        return AppointmentCreate(
            doctor_id="d1",
            patient_name="John Smith",
            patient_email="john.smith@example.com",
            patient_phone="(555) 666-7777",
            appointment_date=date(2026, 2, 1),
            medical_issue="Regular checkup",
        )

    @pytest.mark.asyncio
    async def test_booking_starts_pending(self, community_service, collections, booking, make_doc):
        collections["community_doctors"].document.return_value.get.return_value = make_doc("d1", doctor_data())

        result = await community_service.book_appointment("user123", booking)

        assert result.status == AppointmentStatus.PENDING
        assert result.patient_id == "user123"
        assert result.doctor.full_name == "Dr. Vinay Pandey"
        stored = collections["community_appointments"].document.return_value.set.call_args[0][0]
        assert stored["status"] == "pending"
        assert stored["appointment_date"] == "2026-02-01"

    @pytest.mark.asyncio
    async def test_booking_unknown_doctor(self, community_service, collections, booking, make_doc):
        collections["community_doctors"].document.return_value.get.return_value = make_doc("d1", None, exists=False)

        with pytest.raises(DoctorNotFoundError):
            await community_service.book_appointment("user123", booking)
        collections["community_appointments"].document.assert_not_called()

    @pytest.mark.asyncio
    async def test_booking_unverified_doctor(self, community_service, collections, booking, make_doc):
        collections["community_doctors"].document.return_value.get.return_value = make_doc(
            "d1", doctor_data(verified=False)
        )

        with pytest.raises(DoctorNotVerifiedError):
            await community_service.book_appointment("user123", booking)
        collections["community_appointments"].document.assert_not_called()

    @pytest.mark.asyncio
    async def test_orphaned_doctor_reference(self, community_service, collections, make_doc, make_query):
        row = {
            "patient_id": "user123",
            "doctor_id": "gone",
            "patient_name": "John Smith",
            "patient_email": "john.smith@example.com",
            "patient_phone": "555",
            "appointment_date": "2026-02-01",
            "medical_issue": "Checkup",
            "status": "approved",
            "created_at": NOW,
        }
        collections["community_appointments"].where.return_value = make_query([make_doc("a1", row)])
        collections["community_doctors"].document.return_value.get.return_value = make_doc("gone", None, exists=False)

        result = await community_service.patient_appointments("user123")

        assert len(result) == 1
        assert result[0].doctor is None
        assert result[0].status == AppointmentStatus.APPROVED


class TestInitiatives:
    @pytest.mark.asyncio
    async def test_update_missing_initiative(self, community_service, collections, make_doc):
        collections["community_initiatives"].document.return_value.get.return_value = make_doc("i1", None, exists=False)

        with pytest.raises(InitiativeNotFoundError):
            await community_service.update_initiative("i1", InitiativeUpdate(title="New"))

    @pytest.mark.asyncio
    async def test_update_sets_only_given_fields(self, community_service, collections, make_doc):
        ref = collections["community_initiatives"].document.return_value
        ref.get.return_value = make_doc("i1", {
            "title": "Old", "description": "Camp", "date": "Soon", "organizer": "Org", "created_at": NOW,
        })

        result = await community_service.update_initiative("i1", InitiativeUpdate(title="New"))

        assert result.title == "New"
        assert result.description == "Camp"
        updates = ref.update.call_args[0][0]
        assert set(updates) == {"title", "updated_at"}
