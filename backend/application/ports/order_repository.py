"""주문 Repository 인터페이스"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from domain.entities.order import OrderEntity, AdminContentEntity, FeedbackEntity, StoredFileEntity
from domain.enums import OrderStatus


class OrderRepository(ABC):
    @abstractmethod
    async def next_order_code(self) -> str: ...
    @abstractmethod
    async def create(self, order: OrderEntity) -> OrderEntity: ...
    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[OrderEntity]: ...
    @abstractmethod
    async def list_all(self) -> List[OrderEntity]: ...
    @abstractmethod
    async def list_by_client(self, client_id: int) -> List[OrderEntity]: ...
    @abstractmethod
    async def update_status(self, order_id: str, expected: OrderStatus, new: OrderStatus) -> None:
        """expected 상태일 때만 갱신 (compare-and-swap). 불일치 시 StateConflictError"""
    @abstractmethod
    async def add_feedback(self, order_id: str, feedback: FeedbackEntity) -> FeedbackEntity: ...
    @abstractmethod
    async def save_admin_content(self, order_id: str, description: Optional[str],
                                 files: List[StoredFileEntity]) -> AdminContentEntity: ...
    @abstractmethod
    async def find_file(self, path: str) -> Optional[Tuple[StoredFileEntity, str]]:
        """저장 경로로 파일과 소속 주문 ID 조회"""
