from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from listings.core.database import Database
from listings.repositories.property import PropertyRepository
from listings.services.file_store import FileStore


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


def get_repository(db: AsyncSession = Depends(get_db)) -> PropertyRepository:
    return PropertyRepository(db)


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store
