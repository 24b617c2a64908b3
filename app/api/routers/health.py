from fastapi import APIRouter
from sqlalchemy import text

from app.db.session_async import AsyncSessionLocal

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
