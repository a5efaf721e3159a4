"""결제 설정 Repository: SQLAlchemy 구현"""
from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from application.ports.settings_repository import SettingsRepository
from infrastructure.persistence.models.payment_setting import PaymentSetting


class SqlAlchemySettingsRepository(SettingsRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_bool(self, key: str) -> Optional[bool]:
        result = await self._session.execute(
            select(PaymentSetting.setting_value).where(PaymentSetting.setting_key == key))
        return result.scalar_one_or_none()

    async def set_bool(self, key: str, value: bool) -> None:
        result = await self._session.execute(select(PaymentSetting).where(PaymentSetting.setting_key == key))
        row = result.scalar_one_or_none()
        if row is None:
            self._session.add(PaymentSetting(setting_key=key, setting_value=value))
        else:
            row.setting_value = value
        await self._session.flush()

    async def get_many(self, keys: Iterable[str]) -> Dict[str, bool]:
        result = await self._session.execute(
            select(PaymentSetting.setting_key, PaymentSetting.setting_value)
            .where(PaymentSetting.setting_key.in_(list(keys))))
        return {k: v for k, v in result.all()}
