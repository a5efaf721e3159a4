"""관리자 납품 콘텐츠 업로드 유스케이스

업로드는 상태를 바꾸지 않는다. 고객에게 보여줄 준비가 되면 별도로
REQUEST_REVIEW를 호출한다 (부분 작업을 미리 올려둘 수 있도록).
"""
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from domain.entities.order import AdminContentEntity, require_files
from domain.entities.user import Identity
from domain.enums import OrderAction
from domain import order_lifecycle
from application.ports.blob_storage import BlobStorage, IncomingFile
from application.ports.order_repository import OrderRepository
from application.use_cases.file_upload import validate_files, store_files, discard_files
from application.use_cases.order_actions import load_order


@dataclass
class UploadDeliverableInput:
    order_id: str
    actor: Identity
    description: Optional[str] = None
    files: List[IncomingFile] = field(default_factory=list)


class UploadDeliverableUseCase:
    def __init__(self, order_repo: OrderRepository, storage: BlobStorage,
                 max_file_size: int, max_files: int):
        self._order_repo = order_repo
        self._storage = storage
        self._max_file_size = max_file_size
        self._max_files = max_files

    async def execute(self, input: UploadDeliverableInput) -> AdminContentEntity:
        order = await load_order(self._order_repo, input.order_id)

        # 권한 → 첨부 파일 → 상태 순서로 검증
        order_lifecycle.ensure_actor(OrderAction.UPLOAD_CONTENT, input.actor.role)
        require_files(input.files)
        validate_files(input.files, self._max_file_size, self._max_files)
        transition = order.plan(OrderAction.UPLOAD_CONTENT, input.actor.user_id, input.actor.role)

        stored = await store_files(self._storage, input.files, folder="deliverables")
        try:
            content = await self._order_repo.save_admin_content(order.id, input.description, stored)
            if transition.changes_status:
                await self._order_repo.update_status(order.id, transition.from_status, transition.to_status)
                order.apply(transition)
        except Exception:
            await discard_files(self._storage, stored)
            raise

        logger.info(f"납품 콘텐츠 업로드: {order.order_code} ({len(stored)}개 파일, status={order.status.value})")
        return content
