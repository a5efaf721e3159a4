"""결제 원장 Repository: SQLAlchemy 구현"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update, desc
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.payment import PaymentEntity, parse_service_details, dump_service_details
from domain.enums import PaymentStatus, ServiceType
from domain.exceptions import PaymentNotFoundError, StateConflictError
from application.ports.payment_repository import PaymentRepository
from infrastructure.persistence.models.payment import Payment


def _to_entity(row: Payment) -> PaymentEntity:
    try:
        service_type = ServiceType(row.service_type)
    except ValueError:
        service_type = row.service_type
    return PaymentEntity(
        id=row.id, user_id=row.user_id, amount=row.amount, currency=row.currency,
        service_type=service_type, service_name=row.service_name,
        service_details=parse_service_details(row.service_type, row.service_details),
        status=row.status, stripe_session_id=row.stripe_session_id,
        created_at=row.created_at, paid_at=row.paid_at,
    )


class SqlAlchemyPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def has_completed_payment(self, user_id: int) -> bool:
        result = await self._session.execute(
            select(Payment.id)
            .where(Payment.user_id == user_id, Payment.status == PaymentStatus.COMPLETED)
            .limit(1))
        return result.first() is not None

    async def create_pending(self, payment: PaymentEntity) -> PaymentEntity:
        row = Payment(id=payment.id, user_id=payment.user_id, amount=payment.amount,
                      currency=payment.currency, service_type=payment.service_type.value,
                      service_name=payment.service_name,
                      service_details=dump_service_details(payment.service_details),
                      status=PaymentStatus.PENDING)
        self._session.add(row)
        await self._session.flush()
        return _to_entity(row)

    async def get_by_id(self, payment_id: str) -> Optional[PaymentEntity]:
        row = await self._session.get(Payment, payment_id)
        return _to_entity(row) if row else None

    async def get_by_session_id(self, session_id: str) -> Optional[PaymentEntity]:
        result = await self._session.execute(select(Payment).where(Payment.stripe_session_id == session_id))
        row = result.scalar_one_or_none()
        return _to_entity(row) if row else None

    async def attach_session(self, payment_id: str, session_id: str) -> None:
        await self._set(payment_id, stripe_session_id=session_id)

    async def save_status(self, payment: PaymentEntity) -> None:
        # PENDING 행만 정산된다
        result = await self._session.execute(
            update(Payment)
            .where(Payment.id == payment.id, Payment.status == PaymentStatus.PENDING)
            .values(status=payment.status, paid_at=payment.paid_at, updated_at=datetime.utcnow())
            .execution_options(synchronize_session="fetch"))
        if result.rowcount == 1:
            return
        current = await self._session.get(Payment, payment.id, populate_existing=True)
        if current is None:
            raise PaymentNotFoundError(payment.id)
        if current.status != payment.status:
            raise StateConflictError(current.status.value, f"MARK_{payment.status.value}")

    async def _set(self, payment_id: str, **values) -> None:
        result = await self._session.execute(
            update(Payment).where(Payment.id == payment_id)
            .values(updated_at=datetime.utcnow(), **values)
            .execution_options(synchronize_session="fetch"))
        if result.rowcount != 1:
            raise PaymentNotFoundError(payment_id)

    async def list_by_user(self, user_id: int) -> List[PaymentEntity]:
        result = await self._session.execute(
            select(Payment).where(Payment.user_id == user_id).order_by(desc(Payment.created_at)))
        return [_to_entity(r) for r in result.scalars().all()]

    async def list_all(self) -> List[PaymentEntity]:
        result = await self._session.execute(select(Payment).order_by(desc(Payment.created_at)))
        return [_to_entity(r) for r in result.scalars().all()]
