"""
주문 라이프사이클 상태 머신

  PENDING      --START_WORK-------> IN_PROGRESS   (관리자)
  IN_PROGRESS  --UPLOAD_CONTENT---> IN_PROGRESS   (관리자, 상태 유지)
  IN_PROGRESS  --REQUEST_REVIEW---> REVIEW        (관리자)
  REVIEW       --APPROVE----------> COMPLETED     (클라이언트, 승인 피드백 생성)
  REVIEW       --REQUEST_REVISION-> REVISION      (클라이언트, 수정 요청 피드백 생성)
  REVISION     --UPLOAD_CONTENT---> REVISION      (관리자, 상태 유지)
  REVISION     --REQUEST_REVIEW---> REVIEW        (관리자)

상태 전이는 이 모듈의 TRANSITIONS 표가 유일한 기준이다.
표에 없는 (상태, 동작) 조합은 모두 StateConflictError.
COMPLETED는 종료 상태로 취급한다 (재오픈 여부는 제품 결정 대기).
"""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from domain.enums import OrderAction, OrderStatus, UserRole
from domain.exceptions import ForbiddenError, StateConflictError


INITIAL_STATUS = OrderStatus.PENDING
TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED})

# 동작별 수행 주체
ACTION_ACTORS: Dict[OrderAction, UserRole] = {
    OrderAction.START_WORK: UserRole.ADMIN,
    OrderAction.UPLOAD_CONTENT: UserRole.ADMIN,
    OrderAction.REQUEST_REVIEW: UserRole.ADMIN,
    OrderAction.APPROVE: UserRole.CLIENT,
    OrderAction.REQUEST_REVISION: UserRole.CLIENT,
}

# (현재 상태, 동작) → 다음 상태
TRANSITIONS: Dict[Tuple[OrderStatus, OrderAction], OrderStatus] = {
    (OrderStatus.PENDING, OrderAction.START_WORK): OrderStatus.IN_PROGRESS,
    (OrderStatus.IN_PROGRESS, OrderAction.UPLOAD_CONTENT): OrderStatus.IN_PROGRESS,
    (OrderStatus.IN_PROGRESS, OrderAction.REQUEST_REVIEW): OrderStatus.REVIEW,
    (OrderStatus.REVIEW, OrderAction.APPROVE): OrderStatus.COMPLETED,
    (OrderStatus.REVIEW, OrderAction.REQUEST_REVISION): OrderStatus.REVISION,
    (OrderStatus.REVISION, OrderAction.UPLOAD_CONTENT): OrderStatus.REVISION,
    (OrderStatus.REVISION, OrderAction.REQUEST_REVIEW): OrderStatus.REVIEW,
}


@dataclass(frozen=True)
class Transition:
    """검증을 통과한 단일 상태 전이"""
    action: OrderAction
    from_status: OrderStatus
    to_status: OrderStatus

    @property
    def changes_status(self) -> bool:
        return self.from_status != self.to_status


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def ensure_actor(action: OrderAction, role: UserRole) -> None:
    """동작 수행 권한 확인 (관리자 전용 / 클라이언트 전용)"""
    required = ACTION_ACTORS[action]
    if role != required:
        if required == UserRole.ADMIN:
            raise ForbiddenError("관리자 권한이 필요합니다.")
        raise ForbiddenError("주문한 클라이언트만 수행할 수 있는 동작입니다.")


def plan_transition(status: OrderStatus, action: OrderAction) -> Transition:
    """현재 상태에서 동작을 적용했을 때의 전이를 계산한다.

    상태를 변경하지 않는 순수 함수. 허용되지 않는 조합이면 StateConflictError.
    """
    try:
        target = TRANSITIONS[(status, action)]
    except KeyError:
        raise StateConflictError(status.value, action.value)
    return Transition(action=action, from_status=status, to_status=target)


def allowed_actions(status: OrderStatus, role: UserRole) -> List[OrderAction]:
    """현재 상태에서 해당 역할이 수행할 수 있는 동작 목록 (UI 버튼 렌더링용)"""
    return [action for (src, action) in TRANSITIONS
            if src == status and ACTION_ACTORS[action] == role]
