"""결제 도메인 엔티티"""
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from domain.enums import PaymentStatus, ServiceType
from domain.exceptions import StateConflictError, ValidationError


# ==================== 서비스 상세 (태그드 유니온) ====================

@dataclass(frozen=True)
class PlanService:
    """월 구독 플랜 (Starter / Growth / Pro Marketing)"""
    description: str = ""
    features: List[str] = field(default_factory=list)
    kind: ServiceType = ServiceType.PLAN

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "features": list(self.features)}


@dataclass(frozen=True)
class OtherService:
    """단건 서비스 (포스터 디자인, 촬영 등)"""
    description: str = ""
    unit: Optional[str] = None
    kind: ServiceType = ServiceType.OTHER_SERVICE

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "unit": self.unit}


@dataclass(frozen=True)
class BundleService:
    """플랜 + 단건 서비스 묶음"""
    description: str = ""
    unit: Optional[str] = None
    includes: List[str] = field(default_factory=list)
    kind: ServiceType = ServiceType.BUNDLE

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "unit": self.unit, "includes": list(self.includes)}


@dataclass(frozen=True)
class LegacyServiceDetails:
    """구조를 알 수 없는 과거 데이터: 원문 그대로 보존"""
    raw: str = ""
    kind: Optional[ServiceType] = None

    @property
    def description(self) -> str:
        return self.raw

    def to_dict(self) -> Dict[str, Any]:
        return {"raw": self.raw}


ServiceDetails = Union[PlanService, OtherService, BundleService, LegacyServiceDetails]


def build_service_details(service_type: ServiceType, data: Optional[Dict[str, Any]]) -> ServiceDetails:
    """요청 본문의 serviceDetails(dict)를 서비스 종류에 맞는 타입으로 변환"""
    data = data or {}
    description = str(data.get("description") or "")
    if service_type == ServiceType.PLAN:
        return PlanService(description=description, features=[str(f) for f in data.get("features") or []])
    if service_type == ServiceType.OTHER_SERVICE:
        return OtherService(description=description, unit=data.get("unit"))
    if service_type == ServiceType.BUNDLE:
        return BundleService(description=description, unit=data.get("unit"),
                             includes=[str(i) for i in data.get("includes") or []])
    raise ValidationError(f"알 수 없는 서비스 종류입니다: {service_type}")


def parse_service_details(service_type: Optional[str], raw: Optional[str]) -> Optional[ServiceDetails]:
    """DB에 저장된 JSON 문자열 복원. 해석할 수 없으면 LegacyServiceDetails"""
    if raw is None:
        return None
    try:
        kind = ServiceType(service_type)
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("service details must be an object")
        return build_service_details(kind, data)
    except (ValueError, TypeError, ValidationError):
        return LegacyServiceDetails(raw=raw)


def dump_service_details(details: Optional[ServiceDetails]) -> Optional[str]:
    if details is None:
        return None
    if isinstance(details, LegacyServiceDetails):
        return details.raw
    return json.dumps(details.to_dict(), ensure_ascii=False)


# ==================== 결제 ====================

@dataclass
class PaymentEntity:
    """결제 원장 항목. PENDING → {COMPLETED, FAILED}, 게이트웨이 콜백으로만 전이"""
    id: str
    user_id: int
    amount: float
    service_type: ServiceType
    service_name: str
    currency: str = "usd"
    service_details: Optional[ServiceDetails] = None
    status: PaymentStatus = PaymentStatus.PENDING
    stripe_session_id: Optional[str] = None
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @property
    def amount_minor_units(self) -> int:
        """게이트웨이 전송용 최소 화폐 단위 (센트)"""
        return int(round(self.amount * 100))

    def _settle(self, target: PaymentStatus) -> bool:
        """전이가 실제로 일어났으면 True, 동일 상태 재전달이면 False"""
        if self.status == target:
            return False
        if self.status != PaymentStatus.PENDING:
            raise StateConflictError(self.status.value, f"MARK_{target.value}")
        self.status = target
        return True

    def mark_completed(self, paid_at: Optional[datetime] = None) -> bool:
        changed = self._settle(PaymentStatus.COMPLETED)
        if changed:
            self.paid_at = paid_at or datetime.utcnow()
        return changed

    def mark_failed(self) -> bool:
        return self._settle(PaymentStatus.FAILED)
