"""Persistence for Property records."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings.core.errors import InvalidInput, ListingError, PropertyNotFound, StorageFailure
from listings.models.property import Property
from listings.schemas.property import PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)


def _describe(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def _translate(exc: SQLAlchemyError, *, writing: bool) -> ListingError:
    """Connectivity problems are always a 500; a rejected write is a 400."""
    if writing and not isinstance(exc, (OperationalError, InterfaceError)):
        return InvalidInput(_describe(exc))
    return StorageFailure(_describe(exc))


def parse_property_id(value: str | uuid.UUID) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid property id: {value!r}") from None


class PropertyRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self) -> None:
        # Committed here rather than in get_db so the failure is part of the response
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Could not save changes: {_describe(exc)}") from exc

    async def list_all(self) -> list[Property]:
        """Every stored property, in no particular order."""
        try:
            result = await self.session.execute(select(Property))
        except SQLAlchemyError as exc:
            raise _translate(exc, writing=False) from exc
        return list(result.scalars().all())

    async def create(self, fields: PropertyCreate) -> Property:
        prop = Property(**fields.model_dump())
        self.session.add(prop)
        try:
            await self.session.flush()
            await self.session.refresh(prop)
        except SQLAlchemyError as exc:
            raise _translate(exc, writing=True) from exc
        await self._commit()
        logger.info("Created property %s", prop.id)
        return prop

    async def get_by_id(self, property_id: str | uuid.UUID) -> Property:
        pid = parse_property_id(property_id)
        try:
            prop = await self.session.get(Property, pid)
        except SQLAlchemyError as exc:
            raise _translate(exc, writing=False) from exc
        if prop is None:
            raise PropertyNotFound()
        return prop

    async def update(self, property_id: str | uuid.UUID, fields: PropertyUpdate) -> Property:
        prop = await self.get_by_id(property_id)
        changes = fields.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(prop, field, value)
        try:
            await self.session.flush()
            await self.session.refresh(prop)
        except SQLAlchemyError as exc:
            raise _translate(exc, writing=True) from exc
        await self._commit()
        logger.info("Updated property %s (%s)", prop.id, ", ".join(sorted(changes)) or "no changes")
        return prop

    async def delete_by_id(self, property_id: str | uuid.UUID) -> None:
        prop = await self.get_by_id(property_id)
        try:
            await self.session.delete(prop)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise _translate(exc, writing=False) from exc
        await self._commit()
        logger.info("Deleted property %s", prop.id)
