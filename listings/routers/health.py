from fastapi import APIRouter, Depends

from listings.core.database import Database
from listings.core.deps import get_database

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/health/db")
async def health_db(database: Database = Depends(get_database)):
    await database.ping()
    return {"status": "ok", "database": "connected"}
