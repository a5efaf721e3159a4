"""결제 게이트 페이지 접근 확인 라우터"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from config import settings
from domain.entities.user import Identity
from domain.enums import AccessReason
from application.use_cases.check_page_access import CheckPageAccessUseCase
from infrastructure.persistence.repositories.payment_repository import SqlAlchemyPaymentRepository
from infrastructure.persistence.repositories.settings_repository import SqlAlchemySettingsRepository
from api.schemas.access import PageAccessResponse
from api.dependencies import get_optional_identity, get_payment_repo, get_settings_repo

router = APIRouter(tags=["접근 제어"])


@router.get("/api/user/page-access", response_model=PageAccessResponse)
async def check_page_access(page: str = Query(..., description="client-portal | service-request | sns-settings"),
                            identity: Optional[Identity] = Depends(get_optional_identity),
                            settings_repo: SqlAlchemySettingsRepository = Depends(get_settings_repo),
                            payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo)):
    """익명 요청도 200으로 응답하고 has_access=false로 거부한다. 조회 오류만 500"""
    decision = await CheckPageAccessUseCase(settings_repo, payment_repo, settings.GATED_PAGES).execute(
        identity, page)
    body = PageAccessResponse(page=page, has_access=decision.allowed, reason=decision.reason.value,
                              requires_payment=decision.requires_payment,
                              has_paid_service=decision.has_paid_service)
    if decision.reason == AccessReason.SERVER_ERROR:
        return JSONResponse(status_code=500, content=body.model_dump())
    return body
