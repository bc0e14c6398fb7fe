"""
Trainee Repository.

Data access layer for the trainee roster using SQLAlchemy 2.0 async patterns.
Each create commits on its own, so one bad row in a bulk import never rolls
back the rows saved before it.
"""
import logging
from collections.abc import Sequence
from datetime import date
from enum import Enum

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import (
    TraineeAlreadyExistsError,
    TraineeNotFoundError,
    TraineeNotSavedError,
)
from ..core.trainee_utils import compose_display_name, derive_age
from ..models.enums import TraineeStatus
from ..models.trainee import Trainee
from ..schemas.trainee import TraineeRecord, TraineeUpdate

logger = logging.getLogger(__name__)

# Record slots that are never copied onto the ORM row from caller input.
_IDENTITY_SLOTS = frozenset({"id", "unique_id"})


def _column_value(value):
    return value.value if isinstance(value, Enum) else value


class TraineeRepository:
    """
    Repository for Trainee entity database operations.

    Also satisfies the roster importer's writer protocol through
    :meth:`create_trainee`.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with database session."""
        self.session = session

    async def create(self, record: TraineeRecord, actor_id: str | None = None) -> Trainee:
        """
        Persist one trainee built from a canonical record.

        Only the slots the record actually carries are written; identity
        columns are always assigned here.  When the record has no ``name``
        the display name is composed from the name parts.

        Raises:
            TraineeAlreadyExistsError: a uniqueness constraint (SSN) was hit
            TraineeNotSavedError: any other database failure; the session is
                rolled back so later writes can proceed
        """
        values = {
            key: _column_value(value)
            for key, value in record.provided().items()
            if key not in _IDENTITY_SLOTS and value is not None
        }
        if not values.get("name"):
            values["name"] = compose_display_name(
                record.first_name, record.middle_name, record.last_name
            ) or ""
        if actor_id is not None:
            values["created_by"] = actor_id

        trainee = Trainee(**values)
        self.session.add(trainee)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise TraineeAlreadyExistsError(
                ssn=record.ssn, original_error=str(exc.orig)
            ) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Trainee insert failed: {type(exc).__name__}")
            raise TraineeNotSavedError(type(exc).__name__) from exc
        await self.session.refresh(trainee)

        logger.info(f"Created trainee: {trainee.id} ({trainee.unique_id})")

        return trainee

    async def create_trainee(self, record: TraineeRecord, actor_id: str) -> str:
        """Create a trainee and return only its new id."""
        trainee = await self.create(record, actor_id)
        return trainee.id

    async def get_by_id(self, trainee_id: str) -> Trainee | None:
        """Get trainee by internal ID."""
        query = select(Trainee).where(Trainee.id == trainee_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id_or_raise(self, trainee_id: str) -> Trainee:
        """Get trainee by internal ID or raise TraineeNotFoundError."""
        trainee = await self.get_by_id(trainee_id)
        if not trainee:
            raise TraineeNotFoundError(trainee_id=trainee_id)
        return trainee

    async def get_by_ssn(self, ssn: str) -> Trainee | None:
        """Get trainee by SSN."""
        query = select(Trainee).where(Trainee.ssn == ssn.strip())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    def _filtered(self, query, status: TraineeStatus | None, search: str | None):
        if status:
            query = query.where(Trainee.status == status.value)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(
                or_(
                    Trainee.name.ilike(pattern),
                    Trainee.email.ilike(pattern),
                    Trainee.unique_id.ilike(pattern),
                )
            )
        return query

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: TraineeStatus | None = None,
        search: str | None = None,
    ) -> Sequence[Trainee]:
        """
        Get trainees with pagination and optional filtering.

        Args:
            skip: Number of records to skip
            limit: Maximum records to return
            status: Only trainees in this lifecycle status
            search: Case-insensitive match on name, email or unique id
        """
        query = self._filtered(
            select(Trainee).order_by(Trainee.created_at.desc(), Trainee.name),
            status,
            search,
        )
        result = await self.session.execute(query.offset(skip).limit(limit))
        return result.scalars().all()

    async def count(
        self,
        status: TraineeStatus | None = None,
        search: str | None = None,
    ) -> int:
        """Count trainees matching the same filters as :meth:`get_all`."""
        query = self._filtered(select(func.count(Trainee.id)), status, search)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def list_for_export(
        self,
        status: TraineeStatus | None = None,
        search: str | None = None,
    ) -> Sequence[Trainee]:
        """Filtered trainees in a stable order (last name, first name, name)."""
        query = self._filtered(
            select(Trainee).order_by(Trainee.last_name, Trainee.first_name, Trainee.name),
            status,
            search,
        )
        result = await self.session.execute(query)
        return result.scalars().all()

    async def update(
        self,
        trainee_id: str,
        data: TraineeUpdate,
        today: date | None = None,
    ) -> Trainee:
        """
        Apply a partial edit.

        Only fields present in *data* are touched.  Changing ``date_of_birth``
        recomputes ``age``; clearing it clears ``age`` too.

        Raises:
            TraineeNotFoundError: If trainee doesn't exist
            TraineeAlreadyExistsError: If the new SSN belongs to someone else
        """
        trainee = await self.get_by_id_or_raise(trainee_id)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if field == "name" and not value:
                continue
            if field == "status" and value is None:
                continue
            setattr(trainee, field, _column_value(value))

        if "date_of_birth" in update_data:
            birth_date = update_data["date_of_birth"]
            trainee.age = derive_age(birth_date, today or date.today()) if birth_date else None

        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise TraineeAlreadyExistsError(
                ssn=update_data.get("ssn"), original_error=str(exc.orig)
            ) from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(f"Trainee update failed: {trainee_id} ({type(exc).__name__})")
            raise TraineeNotSavedError(type(exc).__name__) from exc
        await self.session.refresh(trainee)

        logger.info(f"Updated trainee: {trainee_id}")

        return trainee
