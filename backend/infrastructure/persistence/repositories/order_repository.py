"""주문 Repository: SQLAlchemy 구현"""
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select, insert, update, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.entities.order import AdminContentEntity, FeedbackEntity, OrderEntity, StoredFileEntity
from domain.enums import OrderStatus
from domain.exceptions import OrderNotFoundError, StateConflictError
from application.ports.order_repository import OrderRepository
from infrastructure.persistence.models.order import Order, OrderCodeSequence
from infrastructure.persistence.models.admin_content import AdminContent
from infrastructure.persistence.models.stored_file import StoredFile
from infrastructure.persistence.models.feedback import Feedback


def _file_to_entity(row: StoredFile) -> StoredFileEntity:
    return StoredFileEntity(id=row.id, filename=row.filename, original_name=row.original_name,
                            mimetype=row.mimetype, size=row.size, path=row.path,
                            uploaded_at=row.uploaded_at)


def _content_to_entity(row: AdminContent) -> AdminContentEntity:
    return AdminContentEntity(id=row.id, description=row.description, created_at=row.created_at,
                              files=[_file_to_entity(f) for f in row.files])


def _feedback_to_entity(row: Feedback) -> FeedbackEntity:
    return FeedbackEntity(id=row.id, type=row.type, message=row.message, created_at=row.created_at)


def _to_entity(row: Order) -> OrderEntity:
    return OrderEntity(
        id=row.id, order_code=row.order_code, client_id=row.client_id,
        title=row.title, description=row.description, priority=row.priority,
        due_date=row.due_date, status=row.status,
        created_at=row.created_at, updated_at=row.updated_at,
        files=[_file_to_entity(f) for f in row.files],
        admin_content=_content_to_entity(row.admin_content) if row.admin_content else None,
        feedbacks=[_feedback_to_entity(f) for f in row.feedbacks],
    )


def _new_file_row(entity: StoredFileEntity) -> StoredFile:
    return StoredFile(id=entity.id or uuid.uuid4().hex, filename=entity.filename,
                      original_name=entity.original_name, mimetype=entity.mimetype,
                      size=entity.size, path=entity.path,
                      uploaded_at=entity.uploaded_at or datetime.utcnow())


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    def _query(self):
        return select(Order).options(
            selectinload(Order.files),
            selectinload(Order.admin_content).selectinload(AdminContent.files),
            selectinload(Order.feedbacks),
        )

    async def next_order_code(self) -> str:
        """요청 트랜잭션과 별도의 연결에서 즉시 커밋되는 번호 발급.

        동시에 생성되는 주문끼리 같은 코드를 받지 않는다. 주문 생성이 롤백되면
        번호는 비어 있는 채로 남는다.
        """
        async with self._session.bind.begin() as conn:
            result = await conn.execute(insert(OrderCodeSequence).values(issued_at=datetime.utcnow()))
            seq = result.inserted_primary_key[0]
        return f"ORD-{seq:03d}"

    async def create(self, order: OrderEntity) -> OrderEntity:
        row = Order(id=order.id, order_code=order.order_code, client_id=order.client_id,
                    title=order.title, description=order.description, priority=order.priority,
                    due_date=order.due_date, status=order.status)
        row.files = [_new_file_row(f) for f in order.files]
        self._session.add(row)
        await self._session.flush()
        return await self.get_by_id(order.id)

    async def get_by_id(self, order_id: str) -> Optional[OrderEntity]:
        result = await self._session.execute(
            self._query().where(Order.id == order_id).execution_options(populate_existing=True))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def list_all(self) -> List[OrderEntity]:
        result = await self._session.execute(self._query().order_by(desc(Order.created_at)))
        return [_to_entity(r) for r in result.scalars().all()]

    async def list_by_client(self, client_id: int) -> List[OrderEntity]:
        result = await self._session.execute(
            self._query().where(Order.client_id == client_id).order_by(desc(Order.created_at)))
        return [_to_entity(r) for r in result.scalars().all()]

    async def update_status(self, order_id: str, expected: OrderStatus, new: OrderStatus) -> None:
        result = await self._session.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == expected)
            .values(status=new, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return
        current = (await self._session.execute(
            select(Order.status).where(Order.id == order_id))).scalar_one_or_none()
        if current is None:
            raise OrderNotFoundError(order_id)
        raise StateConflictError(current.value, f"{expected.value}->{new.value}")

    async def add_feedback(self, order_id: str, feedback: FeedbackEntity) -> FeedbackEntity:
        row = Feedback(id=uuid.uuid4().hex, order_id=order_id, type=feedback.type,
                       message=feedback.message, created_at=feedback.created_at)
        self._session.add(row)
        await self._session.flush()
        return _feedback_to_entity(row)

    async def save_admin_content(self, order_id: str, description: Optional[str],
                                 files: List[StoredFileEntity]) -> AdminContentEntity:
        result = await self._session.execute(
            select(AdminContent).options(selectinload(AdminContent.files))
            .where(AdminContent.order_id == order_id))
        content = result.scalar_one_or_none()
        now = datetime.utcnow()
        if content is None:
            content = AdminContent(id=uuid.uuid4().hex, order_id=order_id, description=description,
                                   created_at=now, files=[])
            self._session.add(content)
        else:
            content.description = description
            content.created_at = now
        content.files.extend(_new_file_row(f) for f in files)
        await self._session.execute(
            update(Order).where(Order.id == order_id).values(updated_at=now)
            .execution_options(synchronize_session=False))
        await self._session.flush()
        return _content_to_entity(content)

    async def find_file(self, path: str) -> Optional[Tuple[StoredFileEntity, str]]:
        result = await self._session.execute(
            select(StoredFile, AdminContent.order_id)
            .outerjoin(AdminContent, StoredFile.admin_content_id == AdminContent.id)
            .where(StoredFile.path == path))
        row = result.first()
        if row is None:
            return None
        file_row, content_order_id = row
        return _file_to_entity(file_row), file_row.order_id or content_order_id
