import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base

ITEM_TYPES = ("test", "injection")
CARE_ITEM_TYPES = ("procedure", "medication")


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class Patient(Base):
    __tablename__ = "patients"

    id = Column(String(36), primary_key=True, default=generate_id)
    patient_number = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    schedules = relationship(
        "PatientSchedule",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="PatientSchedule.next_due_date",
    )


class Item(Base):
    """Schedulable test or injection with a recurrence period"""

    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("type IN ('test', 'injection')", name="ck_items_type"),
        CheckConstraint("period_unit IN ('weeks', 'months')", name="ck_items_period_unit"),
        CheckConstraint("period_value > 0", name="ck_items_period_value"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)  # test, injection
    period_value = Column(Integer, nullable=False)
    period_unit = Column(String(10), nullable=False)  # weeks, months
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    schedules = relationship("PatientSchedule", back_populates="item", cascade="all, delete-orphan")


class CareItem(Base):
    """Catalog entry for a care procedure or medication with an interval in weeks"""

    __tablename__ = "care_items"
    __table_args__ = (
        UniqueConstraint("name", "type", name="care_items_name_type_unique"),
        CheckConstraint("type IN ('procedure', 'medication')", name="ck_care_items_type"),
        CheckConstraint("interval_weeks > 0", name="ck_care_items_interval"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, index=True)  # procedure, medication
    interval_weeks = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class PatientSchedule(Base):
    __tablename__ = "patient_schedules"
    __table_args__ = (
        UniqueConstraint("patient_id", "item_id", name="uq_patient_schedules_patient_item"),
        Index("idx_patient_schedules_active_due", "is_active", "next_due_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    patient_id = Column(
        String(36), ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(String(36), ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)

    first_date = Column(Date, nullable=False)
    next_due_date = Column(Date, nullable=False, index=True)
    last_completed_date = Column(Date, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_notified = Column(Boolean, default=False, nullable=False)  # Due-date notification read

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    patient = relationship("Patient", back_populates="schedules")
    item = relationship("Item", back_populates="schedules")
    history = relationship(
        "ScheduleHistory",
        back_populates="schedule",
        cascade="all, delete-orphan",
        order_by="ScheduleHistory.scheduled_date.desc()",
    )


class ScheduleHistory(Base):
    """One scheduled occurrence of a patient schedule and its outcome"""

    __tablename__ = "schedule_history"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'completed', 'skipped')", name="ck_schedule_history_status"
        ),
        Index("idx_schedule_history_status_date", "status", "scheduled_date"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    patient_schedule_id = Column(
        String(36),
        ForeignKey("patient_schedules.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    scheduled_date = Column(Date, nullable=False, index=True)
    completed_date = Column(Date, nullable=True)  # When it was marked complete
    actual_completion_date = Column(Date, nullable=True)  # When it was actually performed
    status = Column(String(20), default="pending", nullable=False)  # pending, completed, skipped
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    schedule = relationship("PatientSchedule", back_populates="history")
