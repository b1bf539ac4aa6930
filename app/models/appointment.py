"""Appointment model for the booking system."""

from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Index, Enum as SQLEnum, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from datetime import datetime
import enum
from app.core.database import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"
    NO_SHOW = "NO_SHOW"


# Only these statuses occupy a slot.
ACTIVE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)

_ACTIVE_SLOT_PREDICATE = text("status IN ('PENDING', 'CONFIRMED')")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # At most one active appointment per (branch, date, slot).
        Index(
            "uq_appointments_active_slot",
            "branch_id",
            "appointment_date",
            "time_slot",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_PREDICATE,
            sqlite_where=_ACTIVE_SLOT_PREDICATE,
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_date = Column(Date, nullable=False, index=True)
    time_slot = Column(String(5), nullable=False)  # "HH:MM"
    status = Column(
        SQLEnum(AppointmentStatus, name="appointment_status_enum"),
        default=AppointmentStatus.PENDING,
        nullable=False,
        index=True,
    )
    notes = Column(Text, nullable=True)

    # Patient contact info (user_id is empty for guest bookings)
    patient_name = Column(String, nullable=False)
    patient_phone = Column(String, nullable=False)
    patient_email = Column(String, nullable=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    service_id = Column(UUID(as_uuid=True), ForeignKey("services.id"), nullable=False, index=True)
    branch_id = Column(UUID(as_uuid=True), ForeignKey("branches.id"), nullable=False, index=True)

    admin_notes = Column(Text, nullable=True)
    cancel_reason = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="appointments")
    service = relationship("Service", back_populates="appointments")
    branch = relationship("Branch", back_populates="appointments")
