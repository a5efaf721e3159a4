"""페이지 접근(결제 게이트) 스키마"""
from pydantic import BaseModel


class PageAccessResponse(BaseModel):
    page: str
    has_access: bool
    reason: str
    requires_payment: bool
    has_paid_service: bool
