"""주문 도메인 엔티티"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from domain.enums import FeedbackType, OrderAction, OrderPriority, OrderStatus, UserRole
from domain.exceptions import ForbiddenError, ValidationError
from domain import order_lifecycle
from domain.order_lifecycle import Transition


@dataclass
class StoredFileEntity:
    """업로드된 파일 메타데이터 (주문 또는 관리자 콘텐츠에 소속)"""
    filename: str
    original_name: str
    mimetype: str
    size: int
    path: str
    id: Optional[str] = None
    uploaded_at: Optional[datetime] = None


@dataclass
class FeedbackEntity:
    type: FeedbackType
    message: Optional[str] = None
    id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class AdminContentEntity:
    """관리자 납품 콘텐츠: 주문당 1개, 업로드마다 설명/시각 갱신 + 파일 추가"""
    description: Optional[str]
    id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    files: List[StoredFileEntity] = field(default_factory=list)


@dataclass
class OrderEntity:
    """Order 도메인 엔티티: 상태 전이 규칙은 order_lifecycle 표를 따른다"""
    id: str
    order_code: str              # "ORD-001"
    client_id: int
    title: str
    description: Optional[str] = None
    priority: OrderPriority = OrderPriority.NORMAL
    due_date: Optional[date] = None
    status: OrderStatus = OrderStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    files: List[StoredFileEntity] = field(default_factory=list)
    admin_content: Optional[AdminContentEntity] = None
    feedbacks: List[FeedbackEntity] = field(default_factory=list)

    def is_owned_by(self, user_id: int) -> bool:
        return self.client_id == user_id

    def ensure_visible_to(self, user_id: int, role: UserRole) -> None:
        """관리자 또는 주문한 클라이언트만 조회 가능"""
        if role != UserRole.ADMIN and not self.is_owned_by(user_id):
            raise ForbiddenError("본인의 주문만 조회할 수 있습니다.")

    def plan(self, action: OrderAction, actor_id: int, actor_role: UserRole) -> Transition:
        """권한 → 상태 순으로 검증하고 적용할 전이를 반환 (엔티티는 변경하지 않음)"""
        order_lifecycle.ensure_actor(action, actor_role)
        if actor_role == UserRole.CLIENT and not self.is_owned_by(actor_id):
            raise ForbiddenError("본인의 주문만 처리할 수 있습니다.")
        return order_lifecycle.plan_transition(self.status, action)

    def apply(self, transition: Transition) -> None:
        self.status = transition.to_status
        self.updated_at = datetime.utcnow()

    def available_actions(self, user_id: int, role: UserRole) -> List[OrderAction]:
        if role == UserRole.CLIENT and not self.is_owned_by(user_id):
            return []
        return order_lifecycle.allowed_actions(self.status, role)


def require_files(files: list) -> None:
    if not files:
        raise ValidationError("최소 1개 이상의 파일을 첨부해야 합니다.")


def require_message(message: Optional[str]) -> str:
    if message is None or not message.strip():
        raise ValidationError("수정 요청 내용을 입력해주세요.")
    return message.strip()
