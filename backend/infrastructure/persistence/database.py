"""
데이터베이스 연결 및 세션 관리

요청 하나가 세션 하나. get_session이 정상 종료 시 커밋, 예외 시 롤백하므로
유스케이스 안의 "상태 변경 + 하위 행 생성"은 하나의 트랜잭션으로 묶인다.
"""
import os
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from config import settings

os.makedirs("./data", exist_ok=True)
os.makedirs("./logs", exist_ok=True)


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite") and ":memory:" in url:
        return {}
    return {"pool_size": 5, "max_overflow": 10}


engine = create_async_engine(
    settings.DB_URL,
    echo=settings.DEBUG,
    future=True,
    **_engine_options(settings.DB_URL),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)

Base = declarative_base()


async def init_db():
    """데이터베이스 초기화"""
    import infrastructure.persistence.models  # noqa: F401  모델 등록

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """비동기 세션 의존성"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db_session():
    """컨텍스트 매니저 형태의 세션"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
