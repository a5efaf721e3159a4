"""주문 상태 전이 유스케이스: 작업 시작 / 검토 요청 / 승인 / 수정 요청

상태 변경과 피드백 생성은 같은 세션에서 flush되고, 요청 단위 트랜잭션
(get_session)에서 함께 커밋되거나 함께 롤백된다.
"""
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from domain.entities.order import FeedbackEntity, OrderEntity, require_message
from domain.entities.user import Identity
from domain.enums import FeedbackType, OrderAction
from domain.exceptions import OrderNotFoundError
from domain import order_lifecycle
from application.ports.order_repository import OrderRepository


@dataclass
class OrderActionInput:
    order_id: str
    actor: Identity
    message: Optional[str] = None


async def load_order(order_repo: OrderRepository, order_id: str) -> OrderEntity:
    order = await order_repo.get_by_id(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


class OrderActionUseCase:
    """피드백 외 부수효과가 없는 전이 (업로드는 UploadDeliverableUseCase)"""

    def __init__(self, order_repo: OrderRepository):
        self._order_repo = order_repo

    async def _transition(self, input: OrderActionInput, action: OrderAction,
                          feedback: Optional[FeedbackEntity] = None) -> OrderEntity:
        order = await load_order(self._order_repo, input.order_id)
        transition = order.plan(action, input.actor.user_id, input.actor.role)

        if transition.changes_status:
            await self._order_repo.update_status(order.id, transition.from_status, transition.to_status)
        if feedback is not None:
            order.feedbacks.insert(0, await self._order_repo.add_feedback(order.id, feedback))
        order.apply(transition)

        logger.info(f"주문 {order.order_code}: {transition.from_status.value} -> "
                    f"{transition.to_status.value} ({action.value}, user={input.actor.user_id})")
        if order_lifecycle.is_terminal(order.status):
            logger.info(f"주문 완료: {order.order_code} (client={order.client_id})")
        return order

    async def start_work(self, input: OrderActionInput) -> OrderEntity:
        return await self._transition(input, OrderAction.START_WORK)

    async def request_review(self, input: OrderActionInput) -> OrderEntity:
        return await self._transition(input, OrderAction.REQUEST_REVIEW)

    async def approve(self, input: OrderActionInput) -> OrderEntity:
        message = input.message.strip() if input.message and input.message.strip() else None
        return await self._transition(input, OrderAction.APPROVE,
                                      FeedbackEntity(type=FeedbackType.APPROVAL, message=message))

    async def request_revision(self, input: OrderActionInput) -> OrderEntity:
        order_lifecycle.ensure_actor(OrderAction.REQUEST_REVISION, input.actor.role)
        message = require_message(input.message)
        return await self._transition(input, OrderAction.REQUEST_REVISION,
                                      FeedbackEntity(type=FeedbackType.REVISION, message=message))

    async def available_actions(self, order_id: str, actor: Identity) -> List[OrderAction]:
        order = await load_order(self._order_repo, order_id)
        order.ensure_visible_to(actor.user_id, actor.role)
        return order.available_actions(actor.user_id, actor.role)
