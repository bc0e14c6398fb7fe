"""
Trainee Domain Model.

SQLAlchemy 2.0 ORM model for the clinic's trainee roster.

Design Decisions:
    - ``id`` (UUID string) and ``unique_id`` (human-readable roster code) are
      identity columns assigned here, never taken from imported files
    - ``ssn`` is unique; a second row with the same SSN is a duplicate identity
    - ``age`` is stored denormalised but always derived from ``date_of_birth``
    - Every column other than ``name`` and ``status`` is nullable: roster
      files are sparse and a missing cell is simply not stored
"""
from __future__ import annotations

import secrets
import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from ..db.session import Base
from .enums import TraineeStatus


def _new_trainee_id() -> str:
    return str(uuid.uuid4())


def _new_unique_id() -> str:
    return f"TRN-{secrets.token_hex(4).upper()}"


class Trainee(Base):
    """
    Trainee entity - one person on the clinic roster.

    Attributes:
        Identity: id, unique_id (system-assigned)
        Personal: name parts, ssn, date_of_birth, age (derived), gender, language
        Contact: email, phone, mobile_number, street/city/state/zip/country
        Licensing: license_number, license_type, council_id, occupation_craft
        Physical: height, hair, eyes
        Free text: notes, medical_history
        Media: photo_url, signature_url (references only; storage is external)
        Meta: status, created_by, timestamps
    """

    __tablename__ = "trainees"

    # ==========================================================================
    # IDENTITY
    # ==========================================================================
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_trainee_id,
    )

    unique_id: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        default=_new_unique_id,
        index=True,
        comment="Human-readable roster code, e.g. TRN-1A2B3C4D",
    )

    # ==========================================================================
    # PERSONAL DETAILS
    # ==========================================================================
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    ssn: Mapped[str | None] = mapped_column(
        String(20),
        unique=True,
        nullable=True,
        index=True,
        comment="Social security number; unique across the roster",
    )

    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    age: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Derived from date_of_birth; never written independently",
    )
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    language: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # ==========================================================================
    # CONTACT
    # ==========================================================================
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    mobile_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # ==========================================================================
    # LICENSING & WORK
    # ==========================================================================
    license_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    license_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    council_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    occupation_craft: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # ==========================================================================
    # PHYSICAL DESCRIPTION
    # ==========================================================================
    height: Mapped[str | None] = mapped_column(String(20), nullable=True)
    hair: Mapped[str | None] = mapped_column(String(30), nullable=True)
    eyes: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # ==========================================================================
    # FREE TEXT & MEDIA REFERENCES
    # ==========================================================================
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    medical_history: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    signature_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TraineeStatus.ACTIVE.value,
        server_default=TraineeStatus.ACTIVE.value,
        index=True,
        comment="Lifecycle status: active or inactive",
    )

    created_by: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="Id of the user who created the record",
    )

    # ==========================================================================
    # TIMESTAMPS
    # ==========================================================================
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
    )

    __table_args__ = (
        Index("ix_trainees_last_first", "last_name", "first_name"),
    )

    def __repr__(self) -> str:
        return f"<Trainee(id={self.id}, unique_id='{self.unique_id}', name='{self.name}')>"
