"""결제 게이트웨이 포트 인터페이스"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from domain.entities.payment import PaymentEntity


@dataclass
class CheckoutSession:
    session_id: str
    url: Optional[str] = None
    client_secret: Optional[str] = None


@dataclass
class GatewayEvent:
    """검증된 게이트웨이 이벤트 중 상태 머신에 필요한 부분만"""
    type: str
    payment_id: Optional[str] = None
    session_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):
    @abstractmethod
    async def create_checkout_session(self, payment: PaymentEntity, embedded: bool = False) -> CheckoutSession: ...
    @abstractmethod
    async def is_session_paid(self, session_id: str) -> bool: ...
    @abstractmethod
    def parse_webhook(self, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        """서명 검증 후 이벤트 반환. 검증 실패 시 ValidationError"""
