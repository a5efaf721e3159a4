"""사용자 Repository: SQLAlchemy 구현"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import UserEntity
from application.ports.user_repository import UserRepository
from infrastructure.persistence.models.user import User


def to_user_entity(row: User) -> UserEntity:
    return UserEntity(id=row.id, email=row.email, name=row.name, role=row.role,
                      is_active=row.is_active, password_hash=row.password_hash,
                      phone=row.phone, company=row.company,
                      created_at=row.created_at, last_login_at=row.last_login_at)


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        row = await self._session.get(User, user_id)
        return to_user_entity(row) if row else None

    async def get_by_email(self, email: str) -> Optional[UserEntity]:
        result = await self._session.execute(select(User).where(User.email == email))
        row = result.scalar_one_or_none()
        return to_user_entity(row) if row else None

    async def create(self, user: UserEntity) -> UserEntity:
        row = User(email=user.email, password_hash=user.password_hash, name=user.name,
                   phone=user.phone, company=user.company, role=user.role, is_active=user.is_active)
        self._session.add(row)
        await self._session.flush()
        return to_user_entity(row)

    async def update_last_login(self, user_id: int) -> None:
        await self._session.execute(
            update(User).where(User.id == user_id).values(last_login_at=datetime.utcnow())
            .execution_options(synchronize_session=False))
