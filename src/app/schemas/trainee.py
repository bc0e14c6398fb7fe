"""
Trainee Domain Schemas.

Pydantic schemas for the canonical trainee record and the edit/read API.
"""
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import TraineeStatus


class TraineeFields(BaseModel):
    """Every user-suppliable trainee field, all optional."""

    name: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    ssn: str | None = Field(default=None, max_length=20)
    email: str | None = None
    phone: str | None = None
    mobile_number: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    language: str | None = None
    license_number: str | None = None
    license_type: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    height: str | None = None
    hair: str | None = None
    eyes: str | None = None
    council_id: str | None = None
    occupation_craft: str | None = None
    status: TraineeStatus | None = None
    notes: str | None = None
    photo_url: str | None = None
    signature_url: str | None = None
    medical_history: str | None = None


class TraineeRecord(TraineeFields):
    """Canonical trainee record: one optional typed slot per canonical field.

    A slot absent from ``model_fields_set`` was not provided by the source,
    which is different from a slot explicitly set to ``None``.  Identity slots
    (``id``, ``unique_id``) are only ever filled from persisted rows.
    """

    model_config = ConfigDict(from_attributes=True, use_enum_values=False)

    id: str | None = None
    unique_id: str | None = None
    age: int | None = Field(default=None, ge=0)
    created_by: str | None = None

    def provided(self) -> dict:
        """Return only the slots the source actually supplied."""
        return self.model_dump(exclude_unset=True)


class TraineeUpdate(TraineeFields):
    """Partial update from the edit screen.

    Only fields present in the request body are touched; sending
    ``"date_of_birth": null`` clears both the birth date and the derived age.
    """


class TraineeResponse(TraineeFields):
    """Trainee as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    unique_id: str
    name: str
    age: int | None = None
    status: TraineeStatus
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
