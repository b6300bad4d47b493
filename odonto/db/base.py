from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base


# Explicitly implement Flask-Login interface without inheriting UserMixin
class User(Base):
    """Login account; `role` is the claim checked by the authorization layer."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="guardian"
    )  # 'admin', 'dentist', 'guardian'
    active_flag: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    @property
    def is_active(self) -> bool:
        # Flask-Login expects this property
        return self.active_flag

    @is_active.setter
    def is_active(self, value: bool) -> None:
        self.active_flag = bool(value)

    def get_id(self):
        """Return user identifier for Flask-Login"""
        return str(self.id)

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class WorkSchedule(Base):
    """Named work schedule (escala de trabalho) a dentist can follow."""

    __tablename__ = "work_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    dentists: Mapped[List["Dentist"]] = relationship(back_populates="schedule")


class Dentist(Base):
    __tablename__ = "dentists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    tax_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    license_number: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    schedule_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("work_schedules.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    schedule: Mapped[Optional[WorkSchedule]] = relationship(back_populates="dentists")
    availability: Mapped[List["AvailabilitySlot"]] = relationship(
        back_populates="dentist",
        cascade="all, delete-orphan",
        order_by="AvailabilitySlot.id",
    )

    def __repr__(self):
        return f"<Dentist(id={self.id}, name='{self.name}')>"


class AvailabilitySlot(Base):
    __tablename__ = "dentist_availability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    dentist_id: Mapped[int] = mapped_column(
        ForeignKey("dentists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    weekday: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    dentist: Mapped[Dentist] = relationship(back_populates="availability")

    def __repr__(self):
        return (
            f"<AvailabilitySlot(dentist_id={self.dentist_id}, weekday='{self.weekday}', "
            f"{self.start_time}-{self.end_time})>"
        )


# ------------------- FAMILIES & APPOINTMENTS -------------------
class Guardian(Base):
    """Parent or legal guardian (responsável) of the children treated."""

    __tablename__ = "guardians"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    tax_id: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    children: Mapped[List["Child"]] = relationship(
        back_populates="guardian", cascade="all, delete-orphan"
    )


class Child(Base):
    __tablename__ = "children"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    guardian_id: Mapped[int] = mapped_column(
        ForeignKey("guardians.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    guardian: Mapped[Guardian] = relationship(back_populates="children")


class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    child_id: Mapped[int] = mapped_column(
        ForeignKey("children.id", ondelete="CASCADE"), nullable=False
    )
    dentist_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("dentists.id", ondelete="SET NULL"), nullable=True
    )
    scheduled_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")


# ------------------- VOLUNTEERS -------------------
class VolunteerApplication(Base):
    """Application sent by a dentist who wants to volunteer."""

    __tablename__ = "volunteer_applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    applicant_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    license_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # 'pending', 'approved', 'rejected'
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    responded_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reviewer_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    seen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return (
            f"<VolunteerApplication(id={self.id}, status='{self.status}', "
            f"seen={self.seen})>"
        )
