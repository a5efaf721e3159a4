"""관리자 라우터: 결제 게이트 설정 / 결제 현황"""
from typing import List

from fastapi import APIRouter, Depends
from loguru import logger

from config import settings
from domain.entities.payment import PaymentEntity
from domain.entities.user import Identity
from domain.enums import PaymentStatus
from domain.exceptions import UserNotFoundError
from infrastructure.persistence.repositories.payment_repository import SqlAlchemyPaymentRepository
from infrastructure.persistence.repositories.settings_repository import SqlAlchemySettingsRepository
from infrastructure.persistence.repositories.user_repository import SqlAlchemyUserRepository
from api.schemas.admin import (
    PaymentSettings, PaymentSettingsUpdate, PaymentSettingsResponse,
    PaymentStats, AdminPaymentsResponse, UserSummary, UserPaymentsResponse,
)
from api.schemas.payment import payment_item
from api.dependencies import get_admin_identity, get_payment_repo, get_settings_repo, get_user_repo

router = APIRouter(prefix="/api/admin", tags=["관리자"])

# 응답 필드 (게이트 페이지 id의 "-" → "_") → payment_settings 키
SETTING_FIELDS = {page.replace("-", "_"): key for page, key in settings.GATED_PAGES.items()}


def payment_stats(payments: List[PaymentEntity]) -> PaymentStats:
    completed = [p for p in payments if p.status == PaymentStatus.COMPLETED]
    return PaymentStats(
        total_revenue=sum(p.amount for p in completed),
        total_payments=len(payments),
        pending_payments=sum(1 for p in payments if p.status == PaymentStatus.PENDING),
        completed_payments=len(completed),
        failed_payments=sum(1 for p in payments if p.status == PaymentStatus.FAILED),
    )


async def _load_settings(settings_repo: SqlAlchemySettingsRepository) -> PaymentSettings:
    stored = await settings_repo.get_many(SETTING_FIELDS.values())
    # 행이 없으면 결제 필요(true)
    return PaymentSettings(**{field: stored.get(key, True) for field, key in SETTING_FIELDS.items()})


@router.get("/payment-settings", response_model=PaymentSettingsResponse)
async def get_payment_settings(admin: Identity = Depends(get_admin_identity),
                               settings_repo: SqlAlchemySettingsRepository = Depends(get_settings_repo)):
    return PaymentSettingsResponse(success=True, settings=await _load_settings(settings_repo))


@router.post("/payment-settings", response_model=PaymentSettingsResponse)
async def update_payment_settings(request: PaymentSettingsUpdate,
                                  admin: Identity = Depends(get_admin_identity),
                                  settings_repo: SqlAlchemySettingsRepository = Depends(get_settings_repo)):
    for field, value in request.model_dump(exclude_none=True).items():
        if field not in SETTING_FIELDS:
            continue
        await settings_repo.set_bool(SETTING_FIELDS[field], value)
        logger.info(f"결제 설정 변경: {SETTING_FIELDS[field]}={value} (admin={admin.user_id})")
    return PaymentSettingsResponse(success=True, message="결제 설정이 저장되었습니다.",
                                   settings=await _load_settings(settings_repo))


@router.get("/payments", response_model=AdminPaymentsResponse)
async def list_payments(admin: Identity = Depends(get_admin_identity),
                        payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo)):
    payments = await payment_repo.list_all()
    return AdminPaymentsResponse(success=True, payments=[payment_item(p) for p in payments],
                                 stats=payment_stats(payments))


@router.get("/user-payments/{user_id}", response_model=UserPaymentsResponse)
async def get_user_payments(user_id: int,
                            admin: Identity = Depends(get_admin_identity),
                            user_repo: SqlAlchemyUserRepository = Depends(get_user_repo),
                            payment_repo: SqlAlchemyPaymentRepository = Depends(get_payment_repo)):
    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise UserNotFoundError()
    payments = await payment_repo.list_by_user(user_id)
    return UserPaymentsResponse(
        success=True,
        user=UserSummary(id=user.id, email=user.email, name=user.name, company=user.company,
                         phone=user.phone, role=user.role.value, created_at=user.created_at),
        payments=[payment_item(p) for p in payments],
        stats=payment_stats(payments))
