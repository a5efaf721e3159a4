"""결제 게이트 페이지 접근 판정 유스케이스"""
from typing import Dict, Optional

from loguru import logger

from domain.entities.access import AccessDecision, decide_access
from domain.entities.user import Identity
from domain.enums import AccessReason
from application.ports.payment_repository import PaymentRepository
from application.ports.settings_repository import SettingsRepository


class CheckPageAccessUseCase:
    """(사용자, 페이지) → 접근 허용 여부. 상태를 변경하지 않으며 반복 호출해도 결과가 같다.

    - 미인증 사용자는 항상 거부
    - 설정 행이 없거나 알 수 없는 페이지는 결제 필요로 간주
    - 조회 중 오류는 SERVER_ERROR로 거부 (fail closed)
    """

    def __init__(self, settings_repo: SettingsRepository, payment_repo: PaymentRepository,
                 gated_pages: Dict[str, str]):
        self._settings_repo = settings_repo
        self._payment_repo = payment_repo
        self._gated_pages = gated_pages

    async def execute(self, user: Optional[Identity], page_id: str) -> AccessDecision:
        if user is None:
            return AccessDecision.deny(AccessReason.NOT_AUTHENTICATED)

        try:
            requires_payment = await self._requires_payment(page_id)
            if not requires_payment:
                return decide_access(requires_payment=False, has_paid_service=False)
            has_paid = await self._payment_repo.has_completed_payment(user.user_id)
            return decide_access(requires_payment=True, has_paid_service=has_paid)
        except Exception:
            logger.exception(f"페이지 접근 확인 실패: page={page_id}, user={user.user_id}")
            return AccessDecision.deny(AccessReason.SERVER_ERROR)

    async def _requires_payment(self, page_id: str) -> bool:
        setting_key = self._gated_pages.get(page_id)
        if setting_key is None:
            return True
        value = await self._settings_repo.get_bool(setting_key)
        return True if value is None else value
