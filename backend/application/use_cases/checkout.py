"""결제(체크아웃) 유스케이스

결제 원장 상태는 PENDING → {COMPLETED, FAILED}.
사용자가 직접 상태를 바꾸는 경로는 없다: 완료/실패는 게이트웨이가 확인해준 경우에만.
"""
import math
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from loguru import logger

from domain.entities.payment import PaymentEntity, build_service_details
from domain.entities.user import Identity
from domain.enums import ServiceType
from domain.exceptions import ForbiddenError, PaymentNotFoundError, ServerError, ValidationError
from application.ports.payment_gateway import CheckoutSession, PaymentGateway
from application.ports.payment_repository import PaymentRepository


EVENT_COMPLETED = "checkout.session.completed"
EVENT_EXPIRED = "checkout.session.expired"
EVENT_ASYNC_FAILED = "checkout.session.async_payment_failed"


@dataclass
class CheckoutInput:
    user: Identity
    service_type: str
    service_name: str
    amount: float
    service_details: Optional[Dict[str, Any]] = None
    embedded: bool = False


@dataclass
class CheckoutOutput:
    payment: PaymentEntity
    session: CheckoutSession


class CreateCheckoutUseCase:
    def __init__(self, payment_repo: PaymentRepository, gateway: PaymentGateway, currency: str):
        self._payment_repo = payment_repo
        self._gateway = gateway
        self._currency = currency

    async def execute(self, input: CheckoutInput) -> CheckoutOutput:
        if not input.service_type or not input.service_name or input.amount is None:
            raise ValidationError("필수 항목이 누락되었습니다.")
        if not math.isfinite(input.amount) or input.amount <= 0:
            raise ValidationError("결제 금액이 올바르지 않습니다.")
        try:
            service_type = ServiceType(input.service_type)
        except ValueError:
            raise ValidationError(f"알 수 없는 서비스 종류입니다: {input.service_type}")

        payment = PaymentEntity(
            id=uuid.uuid4().hex,
            user_id=input.user.user_id,
            amount=float(input.amount),
            currency=self._currency,
            service_type=service_type,
            service_name=input.service_name,
            service_details=build_service_details(service_type, input.service_details),
        )
        payment = await self._payment_repo.create_pending(payment)

        try:
            session = await self._gateway.create_checkout_session(payment, embedded=input.embedded)
        except ServerError:
            raise
        except Exception as e:
            logger.error(f"체크아웃 세션 생성 실패: {payment.id} - {e}")
            raise ServerError("결제 세션 생성에 실패했습니다.")

        await self._payment_repo.attach_session(payment.id, session.session_id)
        payment.stripe_session_id = session.session_id
        logger.info(f"체크아웃 생성: payment={payment.id}, session={session.session_id}, "
                    f"{payment.service_name} {payment.amount} {payment.currency}")
        return CheckoutOutput(payment=payment, session=session)


class HandleGatewayEventUseCase:
    """서명이 검증된 웹훅 이벤트를 결제 원장에 반영"""

    def __init__(self, payment_repo: PaymentRepository, gateway: PaymentGateway):
        self._payment_repo = payment_repo
        self._gateway = gateway

    async def execute(self, payload: bytes, signature: Optional[str]) -> Optional[PaymentEntity]:
        event = self._gateway.parse_webhook(payload, signature)

        if event.type not in (EVENT_COMPLETED, EVENT_EXPIRED, EVENT_ASYNC_FAILED):
            logger.info(f"처리하지 않는 웹훅 이벤트: {event.type}")
            return None

        payment = None
        if event.payment_id:
            payment = await self._payment_repo.get_by_id(event.payment_id)
        if payment is None and event.session_id:
            payment = await self._payment_repo.get_by_session_id(event.session_id)
        if payment is None:
            raise PaymentNotFoundError(event.payment_id or event.session_id or "-")

        changed = payment.mark_completed() if event.type == EVENT_COMPLETED else payment.mark_failed()
        if changed:
            await self._payment_repo.save_status(payment)
            logger.info(f"결제 상태 변경: {payment.id} -> {payment.status.value} ({event.type})")
        else:
            logger.info(f"중복 웹훅 무시: {payment.id} ({event.type})")
        return payment


class CompleteCheckoutUseCase:
    """결제 완료 페이지 복귀 시 세션 확인. 게이트웨이가 결제 완료로 보고할 때만 COMPLETED"""

    def __init__(self, payment_repo: PaymentRepository, gateway: PaymentGateway):
        self._payment_repo = payment_repo
        self._gateway = gateway

    async def execute(self, user: Identity, session_id: str) -> PaymentEntity:
        if not session_id:
            raise ValidationError("session_id가 필요합니다.")
        payment = await self._payment_repo.get_by_session_id(session_id)
        if payment is None:
            raise PaymentNotFoundError(session_id)
        if payment.user_id != user.user_id:
            raise ForbiddenError()

        try:
            paid = await self._gateway.is_session_paid(session_id)
        except Exception as e:
            logger.error(f"결제 세션 조회 실패: {session_id} - {e}")
            raise ServerError("결제 상태를 확인할 수 없습니다.")

        if paid and payment.mark_completed():
            await self._payment_repo.save_status(payment)
            logger.info(f"결제 완료 확인: {payment.id} (user={user.user_id})")
        return payment
