"""헬스 체크 라우터"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from config import settings
from infrastructure.persistence.database import get_session

router = APIRouter(tags=["시스템"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    database = "ok"
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"DB 헬스 체크 실패: {e}")
        database = "unavailable"
    return {"status": "healthy" if database == "ok" else "degraded", "database": database,
            "service": settings.APP_NAME, "version": settings.APP_VERSION}


@router.get("/")
async def root():
    return {"service": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs", "health": "/health"}
