"""
Demo catalogue served by the community and admin listings when
HEALTHDESK_DATA_MODE=sample. Live mode never reads from here.
"""
from datetime import date, datetime, timedelta, timezone

from healthdesk.models.community import (
    Appointment,
    AppointmentStatus,
    Doctor,
    DoctorSummary,
    Initiative,
)

_CATALOGUE_DATE = datetime(2025, 1, 1, tzinfo=timezone.utc)


def verified_doctors() -> list[Doctor]:
    return [
        Doctor(
            id="1",
            full_name="Dr. Sandeep Budhiraja",
            email="digitalquery@maxhealthcare.com",
            phone="+91 926 888 0303",
            specialty="General Medicine",
            experience=29,
            location="Delhi, India",
            availability="Mon, Wed, Fri (9am-5pm)",
            bio="Preventive care and chronic disease management for underserved communities.",
            verified=True,
            created_at=_CATALOGUE_DATE,
        ),
        Doctor(
            id="2",
            full_name="Dr. Dhananjay Malankar",
            email="enquiry@medicoexperts.com",
            phone="+91 976 951 6280",
            specialty="Pediatrics",
            experience=15,
            location="Mumbai, India",
            availability="Tue, Thu (10am-6pm), Sat (9am-12pm)",
            bio="Child health and development; volunteers at community clinics and schools.",
            verified=True,
            created_at=_CATALOGUE_DATE,
        ),
        Doctor(
            id="3",
            full_name="Dr. Vinay Pandey",
            email="pandeyvinay@example.com",
            phone="+91 738 335 5861",
            specialty="Cardiology",
            experience=12,
            location="Prayagraj, India",
            availability="Mon, Wed, Fri (1pm-8pm)",
            bio="Preventative cardiology and free screening programs in low-income neighborhoods.",
            verified=True,
            created_at=_CATALOGUE_DATE,
        ),
    ]


def pending_doctors() -> list[Doctor]:
    return [
        Doctor(
            id="101",
            full_name="Dr. Robert Wilson",
            email="robert.wilson@example.com",
            phone="(555) 222-3333",
            specialty="Dermatology",
            experience=7,
            location="Boston, MA",
            availability="Mon, Thu (9am-6pm)",
            bio="Affordable skin care services for underserved populations.",
            verified=False,
            created_at=_CATALOGUE_DATE,
        ),
        Doctor(
            id="102",
            full_name="Dr. Elena Rodriguez",
            email="elena.rodriguez@example.com",
            phone="(555) 444-5555",
            specialty="Gynecology",
            experience=9,
            location="Miami, FL",
            availability="Tue, Fri (10am-4pm)",
            bio="Women's health in community clinics across Latin America and the US.",
            verified=False,
            created_at=_CATALOGUE_DATE,
        ),
    ]


def appointments() -> list[Appointment]:
    today = date.today()
    return [
        Appointment(
            id="201",
            patient_id="user-123",
            doctor_id="1",
            patient_name="John Smith",
            patient_email="john.smith@example.com",
            patient_phone="(555) 666-7777",
            appointment_date=today + timedelta(days=1),
            medical_issue="Regular checkup and blood pressure monitoring",
            financial_status="Unemployed, no health insurance",
            status=AppointmentStatus.PENDING,
            created_at=_CATALOGUE_DATE,
            doctor=DoctorSummary(full_name="Dr. Sandeep Budhiraja", specialty="General Medicine"),
        ),
        Appointment(
            id="202",
            patient_id="user-456",
            doctor_id="2",
            patient_name="Maria Garcia",
            patient_email="maria.garcia@example.com",
            patient_phone="(555) 888-9999",
            appointment_date=today + timedelta(days=2),
            medical_issue="Child vaccination and wellness check",
            financial_status="Single parent, part-time employment",
            status=AppointmentStatus.APPROVED,
            created_at=_CATALOGUE_DATE,
            doctor=DoctorSummary(full_name="Dr. Dhananjay Malankar", specialty="Pediatrics"),
        ),
    ]


def initiatives() -> list[Initiative]:
    return [
        Initiative(
            id="1",
            title="Medical Camp in Rural Areas",
            description="Quarterly medical camps providing free healthcare services to rural communities.",
            date="Next camp: June 15, 2025",
            organizer="HealthDesk Foundation",
            image="https://images.unsplash.com/photo-1576091160550-2173dba999ef?q=80&w=600&auto=format&fit=crop",
            created_at=_CATALOGUE_DATE,
        ),
        Initiative(
            id="2",
            title="Free Vaccination Drive",
            description="Immunizing children and adults from low-income communities against preventable diseases.",
            date="Next drive: May 8, 2025",
            organizer="Vaccines For All",
            image="https://images.unsplash.com/photo-1584036561566-baf8f5f1b144?q=80&w=600&auto=format&fit=crop",
            created_at=_CATALOGUE_DATE,
        ),
        Initiative(
            id="3",
            title="Mental Health Awareness Program",
            description="Free counseling and support for those who cannot afford mental health treatment.",
            date="Ongoing every weekend",
            organizer="Mind Matters Initiative",
            image="https://images.unsplash.com/photo-1544027993-37dbfe43562a?q=80&w=600&auto=format&fit=crop",
            created_at=_CATALOGUE_DATE,
        ),
    ]
