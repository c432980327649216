"""SQLAlchemy models for the on-call roster."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Person(Base):
    """Doctor on the on-call roster."""

    __tablename__ = "people"

    person_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(200), nullable=True, unique=True)
    role = Column(String(10), nullable=False, default="USER")  # USER, ADMIN
    group = Column(String(30), nullable=True)  # e.g. MAMA, URGENCIAS; NULL or STANDARD = no conflict
    monthly_cap = Column(Integer, nullable=True)  # NULL = use configured default

    # Relationships
    preferences = relationship("ShiftPreference", back_populates="person", cascade="all, delete-orphan")
    vacations = relationship("Vacation", back_populates="person", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return (self.role or "").upper() == "ADMIN"

    def __repr__(self) -> str:
        return f"<Person(id={self.person_id}, name='{self.name}', group={self.group}, cap={self.monthly_cap})>"


class ShiftPreference(Base):
    """WANT / AVOID / LOCK preference of a person for one date."""

    __tablename__ = "shift_preferences"
    __table_args__ = (UniqueConstraint("person_id", "date", name="uq_preference_person_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(Integer, ForeignKey("people.person_id"), nullable=False)
    date = Column(Date, nullable=False)
    kind = Column(String(10), nullable=False)  # WANT, AVOID, LOCK
    points = Column(Integer, nullable=False, default=0)  # 0-20

    # Relationships
    person = relationship("Person", back_populates="preferences")

    def __repr__(self) -> str:
        return f"<ShiftPreference(person={self.person_id}, date={self.date}, kind={self.kind}, points={self.points})>"


class Vacation(Base):
    """Leave day of a person. Only APPROVED rows make the person unavailable."""

    __tablename__ = "vacations"
    __table_args__ = (UniqueConstraint("person_id", "date", name="uq_vacation_person_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    person_id = Column(Integer, ForeignKey("people.person_id"), nullable=False)
    date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default="APPROVED")  # PENDING, APPROVED, REJECTED

    # Relationships
    person = relationship("Person", back_populates="vacations")

    def __repr__(self) -> str:
        return f"<Vacation(person={self.person_id}, date={self.date}, status={self.status})>"


class Shift(Base):
    """One day's on-call pair. At most one row per date."""

    __tablename__ = "shifts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, unique=True)
    slot1_id = Column(Integer, ForeignKey("people.person_id"), nullable=False)
    slot2_id = Column(Integer, ForeignKey("people.person_id"), nullable=False)
    forced = Column(Boolean, nullable=False, default=False)
    forced_reason = Column(Text, nullable=True)

    # Relationships
    slot1 = relationship("Person", foreign_keys=[slot1_id])
    slot2 = relationship("Person", foreign_keys=[slot2_id])

    def __repr__(self) -> str:
        return f"<Shift(date={self.date}, slot1={self.slot1_id}, slot2={self.slot2_id}, forced={self.forced})>"


class GenerationReport(Base):
    """Immutable record of a successful generation run."""

    __tablename__ = "generation_reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    month = Column(String(7), nullable=False)  # YYYY-MM
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    created_by = Column(Integer, ForeignKey("people.person_id"), nullable=True)
    data = Column(JSON, nullable=False)  # {"month", "shifts": [...], "generated_at", "attempts"}

    # Relationships
    initiator = relationship("Person")

    def __repr__(self) -> str:
        return f"<GenerationReport(id={self.id}, month={self.month}, created_at={self.created_at})>"
