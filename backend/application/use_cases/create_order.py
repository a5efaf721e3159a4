"""주문 생성 유스케이스"""
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from loguru import logger

from domain.entities.order import OrderEntity
from domain.entities.user import Identity
from domain.enums import OrderPriority
from domain.exceptions import ValidationError
from domain.order_lifecycle import INITIAL_STATUS
from application.ports.blob_storage import BlobStorage, IncomingFile
from application.ports.order_repository import OrderRepository
from application.use_cases.file_upload import validate_files, store_files, discard_files


@dataclass
class CreateOrderInput:
    client: Identity
    title: str
    description: Optional[str] = None
    priority: OrderPriority = OrderPriority.NORMAL
    due_date: Optional[date] = None
    files: List[IncomingFile] = field(default_factory=list)


class CreateOrderUseCase:
    def __init__(self, order_repo: OrderRepository, storage: BlobStorage,
                 max_file_size: int, max_files: int):
        self._order_repo = order_repo
        self._storage = storage
        self._max_file_size = max_file_size
        self._max_files = max_files

    async def execute(self, input: CreateOrderInput) -> OrderEntity:
        title = (input.title or "").strip()
        if not title:
            raise ValidationError("주문 제목을 입력해주세요.")
        validate_files(input.files, self._max_file_size, self._max_files)

        stored = await store_files(self._storage, input.files, folder="orders")
        try:
            order = OrderEntity(
                id=uuid.uuid4().hex,
                order_code=await self._order_repo.next_order_code(),
                client_id=input.client.user_id,
                title=title,
                description=input.description,
                priority=input.priority,
                due_date=input.due_date,
                status=INITIAL_STATUS,
                files=stored,
            )
            order = await self._order_repo.create(order)
        except Exception:
            await discard_files(self._storage, stored)
            raise

        logger.info(f"주문 생성: {order.order_code} (client={input.client.user_id}, files={len(stored)})")
        return order
