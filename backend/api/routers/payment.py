"""결제 라우터: Stripe 체크아웃 / 웹훅 / 결제 이력"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from config import settings
from domain.entities.user import Identity
from application.ports.payment_gateway import PaymentGateway
from application.use_cases.checkout import (
    CheckoutInput, CreateCheckoutUseCase, CompleteCheckoutUseCase, HandleGatewayEventUseCase,
)
from infrastructure.persistence.repositories.payment_repository import SqlAlchemyPaymentRepository
from api.schemas.common import ResponseBase
from api.schemas.payment import (
    CheckoutRequest, CheckoutResponse, PaymentCompleteRequest, PaymentResponse,
    PaymentHistoryResponse, PaymentStatusResponse, payment_item,
)
from api.dependencies import get_current_identity, get_payment_repo, get_payment_gateway

router = APIRouter(tags=["결제"])


@router.post("/api/payments/create-checkout-session", response_model=CheckoutResponse)
async def create_checkout_session(request: CheckoutRequest,
                                  identity: Identity = Depends(get_current_identity),
                                  payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo),
                                  gateway: PaymentGateway = Depends(get_payment_gateway)):
    result = await CreateCheckoutUseCase(payment_repo, gateway, settings.PAYMENT_CURRENCY).execute(
        CheckoutInput(user=identity, service_type=request.service_type, service_name=request.service_name,
                      amount=request.amount, service_details=request.service_details,
                      embedded=request.embedded))
    return CheckoutResponse(success=True, payment_id=result.payment.id,
                            session_id=result.session.session_id, url=result.session.url,
                            client_secret=result.session.client_secret)


@router.post("/api/payments/complete", response_model=PaymentResponse)
async def complete_payment(request: PaymentCompleteRequest,
                           identity: Identity = Depends(get_current_identity),
                           payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo),
                           gateway: PaymentGateway = Depends(get_payment_gateway)):
    """결제 완료 페이지 복귀 시 호출. 게이트웨이가 결제 완료를 확인한 경우에만 COMPLETED"""
    payment = await CompleteCheckoutUseCase(payment_repo, gateway).execute(identity, request.session_id)
    return PaymentResponse(success=True, message=f"결제 상태: {payment.status.value}",
                           payment=payment_item(payment))


@router.post("/api/payments/webhook", response_model=ResponseBase)
async def stripe_webhook(request: Request,
                         stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
                         payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo),
                         gateway: PaymentGateway = Depends(get_payment_gateway)):
    """Stripe 웹훅 수신. 서명 검증에는 원본 본문 바이트가 필요하다"""
    payload = await request.body()
    await HandleGatewayEventUseCase(payment_repo, gateway).execute(payload, stripe_signature)
    return ResponseBase(success=True, message="received")


@router.get("/api/user/payment-status", response_model=PaymentStatusResponse)
async def get_payment_status(identity: Identity = Depends(get_current_identity),
                             payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo)):
    has_paid = await payment_repo.has_completed_payment(identity.user_id)
    return PaymentStatusResponse(has_paid_service=has_paid, user_id=identity.user_id)


@router.get("/api/payments/history", response_model=PaymentHistoryResponse)
async def get_payment_history(identity: Identity = Depends(get_current_identity),
                              payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo)):
    payments = await payment_repo.list_by_user(identity.user_id)
    return PaymentHistoryResponse(success=True, items=[payment_item(p) for p in payments],
                                  total=len(payments))
