"""관리자 스키마"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel
from api.schemas.common import ResponseBase
from api.schemas.payment import PaymentItem


class PaymentSettings(BaseModel):
    client_portal: bool = True
    service_request: bool = True
    sns_settings: bool = True


class PaymentSettingsUpdate(BaseModel):
    client_portal: Optional[bool] = None
    service_request: Optional[bool] = None
    sns_settings: Optional[bool] = None


class PaymentSettingsResponse(ResponseBase):
    settings: PaymentSettings


class PaymentStats(BaseModel):
    total_revenue: float
    total_payments: int
    pending_payments: int
    completed_payments: int
    failed_payments: int


class AdminPaymentsResponse(ResponseBase):
    payments: List[PaymentItem]
    stats: PaymentStats


class UserSummary(BaseModel):
    id: int
    email: str
    name: str
    company: Optional[str]
    phone: Optional[str]
    role: str
    created_at: datetime


class UserPaymentsResponse(ResponseBase):
    user: UserSummary
    payments: List[PaymentItem]
    stats: PaymentStats
