"""결제 원장 Repository 인터페이스"""
from abc import ABC, abstractmethod
from typing import List, Optional
from domain.entities.payment import PaymentEntity


class PaymentRepository(ABC):
    @abstractmethod
    async def has_completed_payment(self, user_id: int) -> bool: ...
    @abstractmethod
    async def create_pending(self, payment: PaymentEntity) -> PaymentEntity: ...
    @abstractmethod
    async def get_by_id(self, payment_id: str) -> Optional[PaymentEntity]: ...
    @abstractmethod
    async def get_by_session_id(self, session_id: str) -> Optional[PaymentEntity]: ...
    @abstractmethod
    async def attach_session(self, payment_id: str, session_id: str) -> None: ...
    @abstractmethod
    async def save_status(self, payment: PaymentEntity) -> None: ...
    @abstractmethod
    async def list_by_user(self, user_id: int) -> List[PaymentEntity]: ...
    @abstractmethod
    async def list_all(self) -> List[PaymentEntity]: ...
