"""결제 관련 스키마"""
from datetime import datetime
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from api.schemas.common import ResponseBase


class CheckoutRequest(BaseModel):
    service_type: str = Field(description="PLAN | OTHER_SERVICE | BUNDLE")
    service_name: str
    amount: float = Field(gt=0, allow_inf_nan=False)
    service_details: Optional[Dict[str, Any]] = None
    embedded: bool = False


class CheckoutResponse(ResponseBase):
    payment_id: str
    session_id: str
    url: Optional[str] = None
    client_secret: Optional[str] = None


class PaymentCompleteRequest(BaseModel):
    session_id: str


class PaymentItem(BaseModel):
    id: str
    user_id: int
    amount: float = Field(gt=0, allow_inf_nan=False)
    currency: str
    service_type: str
    service_name: str
    service_details: Optional[Dict[str, Any]] = None
    status: str
    stripe_session_id: Optional[str]
    created_at: Optional[datetime]
    paid_at: Optional[datetime]


class PaymentResponse(ResponseBase):
    payment: PaymentItem


class PaymentHistoryResponse(ResponseBase):
    items: List[PaymentItem]
    total: int


class PaymentStatusResponse(BaseModel):
    has_paid_service: bool
    user_id: int


def payment_item(payment) -> PaymentItem:
    """PaymentEntity → 응답 항목"""
    service_type = getattr(payment.service_type, "value", payment.service_type)
    details = payment.service_details.to_dict() if payment.service_details is not None else None
    return PaymentItem(
        id=payment.id, user_id=payment.user_id, amount=payment.amount, currency=payment.currency,
        service_type=service_type, service_name=payment.service_name, service_details=details,
        status=payment.status.value, stripe_session_id=payment.stripe_session_id,
        created_at=payment.created_at, paid_at=payment.paid_at)
