"""주문 상태 머신 (순수 도메인)"""
import itertools

import pytest

from domain import order_lifecycle
from domain.entities.order import OrderEntity
from domain.enums import OrderAction, OrderStatus, UserRole
from domain.exceptions import ForbiddenError, StateConflictError


EXPECTED = {
    (OrderStatus.PENDING, OrderAction.START_WORK): OrderStatus.IN_PROGRESS,
    (OrderStatus.IN_PROGRESS, OrderAction.UPLOAD_CONTENT): OrderStatus.IN_PROGRESS,
    (OrderStatus.IN_PROGRESS, OrderAction.REQUEST_REVIEW): OrderStatus.REVIEW,
    (OrderStatus.REVIEW, OrderAction.APPROVE): OrderStatus.COMPLETED,
    (OrderStatus.REVIEW, OrderAction.REQUEST_REVISION): OrderStatus.REVISION,
    (OrderStatus.REVISION, OrderAction.UPLOAD_CONTENT): OrderStatus.REVISION,
    (OrderStatus.REVISION, OrderAction.REQUEST_REVIEW): OrderStatus.REVIEW,
}

ILLEGAL = [pair for pair in itertools.product(OrderStatus, OrderAction) if pair not in EXPECTED]


@pytest.mark.parametrize("status,action", list(EXPECTED))
def test_allowed_transitions(status, action):
    transition = order_lifecycle.plan_transition(status, action)
    assert transition.from_status == status
    assert transition.to_status == EXPECTED[(status, action)]


@pytest.mark.parametrize("status,action", ILLEGAL)
def test_every_other_pair_is_a_conflict(status, action):
    with pytest.raises(StateConflictError):
        order_lifecycle.plan_transition(status, action)


def test_upload_never_changes_status():
    for status in (OrderStatus.IN_PROGRESS, OrderStatus.REVISION):
        assert not order_lifecycle.plan_transition(status, OrderAction.UPLOAD_CONTENT).changes_status


def test_completed_is_terminal():
    assert order_lifecycle.is_terminal(OrderStatus.COMPLETED)
    assert order_lifecycle.INITIAL_STATUS == OrderStatus.PENDING
    for role in UserRole:
        assert order_lifecycle.allowed_actions(OrderStatus.COMPLETED, role) == []


@pytest.mark.parametrize("action", [OrderAction.START_WORK, OrderAction.UPLOAD_CONTENT,
                                    OrderAction.REQUEST_REVIEW])
def test_admin_actions_reject_client(action):
    with pytest.raises(ForbiddenError):
        order_lifecycle.ensure_actor(action, UserRole.CLIENT)


@pytest.mark.parametrize("action", [OrderAction.APPROVE, OrderAction.REQUEST_REVISION])
def test_client_actions_reject_admin(action):
    with pytest.raises(ForbiddenError):
        order_lifecycle.ensure_actor(action, UserRole.ADMIN)


def test_allowed_actions_by_role():
    assert order_lifecycle.allowed_actions(OrderStatus.REVIEW, UserRole.CLIENT) == [
        OrderAction.APPROVE, OrderAction.REQUEST_REVISION]
    assert order_lifecycle.allowed_actions(OrderStatus.REVIEW, UserRole.ADMIN) == []
    assert order_lifecycle.allowed_actions(OrderStatus.REVISION, UserRole.ADMIN) == [
        OrderAction.UPLOAD_CONTENT, OrderAction.REQUEST_REVIEW]


def _order(status=OrderStatus.REVIEW, client_id=2):
    return OrderEntity(id="o1", order_code="ORD-001", client_id=client_id, title="로고 디자인", status=status)


def test_plan_checks_role_before_state():
    # 상태도 틀렸지만 권한 오류가 먼저
    with pytest.raises(ForbiddenError):
        _order(OrderStatus.PENDING).plan(OrderAction.APPROVE, actor_id=1, actor_role=UserRole.ADMIN)


def test_plan_rejects_other_client():
    with pytest.raises(ForbiddenError):
        _order().plan(OrderAction.APPROVE, actor_id=99, actor_role=UserRole.CLIENT)


def test_plan_does_not_mutate_order():
    order = _order()
    transition = order.plan(OrderAction.APPROVE, actor_id=2, actor_role=UserRole.CLIENT)
    assert order.status == OrderStatus.REVIEW
    order.apply(transition)
    assert order.status == OrderStatus.COMPLETED
    assert order.updated_at is not None


def test_available_actions_hidden_from_other_client():
    assert _order().available_actions(99, UserRole.CLIENT) == []
    assert _order().available_actions(2, UserRole.CLIENT) == [OrderAction.APPROVE,
                                                              OrderAction.REQUEST_REVISION]
