"""결제 설정(키-값 불리언) Repository 인터페이스"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional


class SettingsRepository(ABC):
    @abstractmethod
    async def get_bool(self, key: str) -> Optional[bool]: ...
    @abstractmethod
    async def set_bool(self, key: str, value: bool) -> None: ...
    @abstractmethod
    async def get_many(self, keys: Iterable[str]) -> Dict[str, bool]: ...
