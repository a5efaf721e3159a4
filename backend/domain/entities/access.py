"""결제 게이트 접근 판정 값 객체"""
from dataclasses import dataclass

from domain.enums import AccessReason


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    reason: AccessReason
    requires_payment: bool = True
    has_paid_service: bool = False

    @classmethod
    def deny(cls, reason: AccessReason) -> "AccessDecision":
        return cls(allowed=False, reason=reason)


def decide_access(requires_payment: bool, has_paid_service: bool) -> AccessDecision:
    """인증된 사용자에 대한 순수 판정 (설정값 + 결제 이력)"""
    if not requires_payment:
        return AccessDecision(allowed=True, reason=AccessReason.PAYMENT_NOT_REQUIRED,
                              requires_payment=False, has_paid_service=has_paid_service)
    if has_paid_service:
        return AccessDecision(allowed=True, reason=AccessReason.PAYMENT_COMPLETED,
                              requires_payment=True, has_paid_service=True)
    return AccessDecision(allowed=False, reason=AccessReason.PAYMENT_REQUIRED,
                          requires_payment=True, has_paid_service=False)
