"""결제 원장 / 체크아웃 / 웹훅 처리"""
import hashlib
import hmac
import json
import time

import pytest
from pydantic import ValidationError as SchemaValidationError

from domain.entities.payment import (
    BundleService, LegacyServiceDetails, PaymentEntity, PlanService,
    dump_service_details, parse_service_details,
)
from domain.enums import PaymentStatus, ServiceType
from domain.exceptions import (
    ForbiddenError, PaymentNotFoundError, ServerError, StateConflictError, ValidationError,
)
from application.ports.payment_gateway import GatewayEvent
from application.use_cases.checkout import (
    EVENT_ASYNC_FAILED, EVENT_COMPLETED, EVENT_EXPIRED,
    CheckoutInput, CompleteCheckoutUseCase, CreateCheckoutUseCase, HandleGatewayEventUseCase,
)
from infrastructure.payment.stripe_gateway import StripeClient, StripeGateway, verify_stripe_signature
from api.schemas.payment import CheckoutRequest

SECRET = "whsec_unit"


def _sign(payload: bytes, secret: str = SECRET, timestamp: int = None) -> str:
    ts = timestamp if timestamp is not None else int(time.time())
    digest = hmac.new(secret.encode(), f"{ts}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


# ==================== 원장 엔티티 ====================

def _pending(**kwargs):
    values = dict(id="pay1", user_id=2, amount=19.99, service_type=ServiceType.PLAN,
                  service_name="Starter Plan")
    values.update(kwargs)
    return PaymentEntity(**values)


def test_completion_is_recorded_once():
    payment = _pending()
    assert payment.mark_completed() is True
    paid_at = payment.paid_at
    assert payment.status == PaymentStatus.COMPLETED and paid_at is not None

    assert payment.mark_completed() is False
    assert payment.paid_at == paid_at


def test_settled_payment_cannot_flip():
    completed = _pending()
    completed.mark_completed()
    with pytest.raises(StateConflictError):
        completed.mark_failed()

    failed = _pending()
    failed.mark_failed()
    with pytest.raises(StateConflictError):
        failed.mark_completed()


def test_amount_in_minor_units():
    assert _pending(amount=19.99).amount_minor_units == 1999
    assert _pending(amount=250).amount_minor_units == 25000


def test_service_details_are_typed():
    details = parse_service_details("BUNDLE", json.dumps({"description": "Growth + 촬영",
                                                          "includes": ["Growth", "촬영 1회"]}))
    assert isinstance(details, BundleService)
    assert details.includes == ["Growth", "촬영 1회"]

    plan = PlanService(description="월 8회 포스팅", features=["SNS 운영"])
    assert parse_service_details("PLAN", dump_service_details(plan)) == plan


def test_unparseable_service_details_are_kept_verbatim():
    details = parse_service_details("PLAN", "Starter - 월 4회")
    assert isinstance(details, LegacyServiceDetails)
    assert details.description == "Starter - 월 4회"
    assert dump_service_details(details) == "Starter - 월 4회"
    assert isinstance(parse_service_details("SOMETHING_OLD", "{}"), LegacyServiceDetails)


# ==================== 체크아웃 생성 ====================

async def test_checkout_creates_pending_payment(payment_repo, gateway, client_user):
    use_case = CreateCheckoutUseCase(payment_repo, gateway, "usd")
    result = await use_case.execute(CheckoutInput(
        user=client_user, service_type="PLAN", service_name="Growth Plan", amount=149,
        service_details={"description": "월 12회", "features": ["SNS", "광고"]}))

    stored = payment_repo.payments[result.payment.id]
    assert stored.status == PaymentStatus.PENDING
    assert stored.user_id == client_user.user_id
    assert stored.stripe_session_id == result.session.session_id
    assert isinstance(stored.service_details, PlanService)
    assert result.session.url


async def test_embedded_checkout_returns_client_secret(payment_repo, gateway, client_user):
    result = await CreateCheckoutUseCase(payment_repo, gateway, "usd").execute(CheckoutInput(
        user=client_user, service_type="OTHER_SERVICE", service_name="포스터 디자인", amount=30,
        embedded=True))
    assert result.session.client_secret
    assert result.session.url is None


@pytest.mark.parametrize("service_type,amount", [
    ("COUPON", 10), ("PLAN", 0), ("PLAN", -5), ("PLAN", float("nan")), ("PLAN", float("inf")),
])
async def test_checkout_rejects_bad_input(payment_repo, gateway, client_user, service_type, amount):
    with pytest.raises(ValidationError):
        await CreateCheckoutUseCase(payment_repo, gateway, "usd").execute(CheckoutInput(
            user=client_user, service_type=service_type, service_name="X", amount=amount))
    assert payment_repo.payments == {}


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity", "0", "-1"])
def test_checkout_request_rejects_bad_amount(amount):
    with pytest.raises(SchemaValidationError):
        CheckoutRequest.model_validate_json(
            f'{{"service_type": "PLAN", "service_name": "Starter", "amount": {amount}}}')


# ==================== 웹훅 ====================

async def _checkout(payment_repo, gateway, user):
    result = await CreateCheckoutUseCase(payment_repo, gateway, "usd").execute(CheckoutInput(
        user=user, service_type="PLAN", service_name="Starter Plan", amount=49))
    return result.payment.id, result.session.session_id


async def test_completed_event_settles_payment(payment_repo, gateway, client_user):
    payment_id, session_id = await _checkout(payment_repo, gateway, client_user)
    gateway.next_event = GatewayEvent(type=EVENT_COMPLETED, payment_id=payment_id, session_id=session_id)

    payment = await HandleGatewayEventUseCase(payment_repo, gateway).execute(b"{}", "sig")

    assert payment.status == PaymentStatus.COMPLETED
    assert payment_repo.payments[payment_id].paid_at is not None
    assert await payment_repo.has_completed_payment(client_user.user_id)


async def test_redelivered_event_is_a_no_op(payment_repo, gateway, client_user):
    payment_id, _ = await _checkout(payment_repo, gateway, client_user)
    gateway.next_event = GatewayEvent(type=EVENT_COMPLETED, payment_id=payment_id)
    handler = HandleGatewayEventUseCase(payment_repo, gateway)

    await handler.execute(b"{}", "sig")
    paid_at = payment_repo.payments[payment_id].paid_at
    await handler.execute(b"{}", "sig")

    assert payment_repo.payments[payment_id].status == PaymentStatus.COMPLETED
    assert payment_repo.payments[payment_id].paid_at == paid_at


@pytest.mark.parametrize("event_type", [EVENT_EXPIRED, EVENT_ASYNC_FAILED])
async def test_failure_events_mark_failed(payment_repo, gateway, client_user, event_type):
    payment_id, _ = await _checkout(payment_repo, gateway, client_user)
    gateway.next_event = GatewayEvent(type=event_type, payment_id=payment_id)
    await HandleGatewayEventUseCase(payment_repo, gateway).execute(b"{}", "sig")
    assert payment_repo.payments[payment_id].status == PaymentStatus.FAILED
    assert not await payment_repo.has_completed_payment(client_user.user_id)


async def test_expiry_after_completion_is_rejected(payment_repo, gateway, client_user):
    payment_id, _ = await _checkout(payment_repo, gateway, client_user)
    handler = HandleGatewayEventUseCase(payment_repo, gateway)
    gateway.next_event = GatewayEvent(type=EVENT_COMPLETED, payment_id=payment_id)
    await handler.execute(b"{}", "sig")

    gateway.next_event = GatewayEvent(type=EVENT_EXPIRED, payment_id=payment_id)
    with pytest.raises(StateConflictError):
        await handler.execute(b"{}", "sig")
    assert payment_repo.payments[payment_id].status == PaymentStatus.COMPLETED


async def test_event_matched_by_session_id(payment_repo, gateway, client_user):
    payment_id, session_id = await _checkout(payment_repo, gateway, client_user)
    gateway.next_event = GatewayEvent(type=EVENT_COMPLETED, payment_id=None, session_id=session_id)
    await HandleGatewayEventUseCase(payment_repo, gateway).execute(b"{}", "sig")
    assert payment_repo.payments[payment_id].status == PaymentStatus.COMPLETED


async def test_unhandled_event_type_is_ignored(payment_repo, gateway, client_user):
    payment_id, _ = await _checkout(payment_repo, gateway, client_user)
    gateway.next_event = GatewayEvent(type="customer.created", payment_id=payment_id)
    assert await HandleGatewayEventUseCase(payment_repo, gateway).execute(b"{}", "sig") is None
    assert payment_repo.payments[payment_id].status == PaymentStatus.PENDING


async def test_event_for_unknown_payment(payment_repo, gateway):
    gateway.next_event = GatewayEvent(type=EVENT_COMPLETED, payment_id="nope", session_id="cs_nope")
    with pytest.raises(PaymentNotFoundError):
        await HandleGatewayEventUseCase(payment_repo, gateway).execute(b"{}", "sig")


# ==================== 결제 완료 확인 ====================

async def test_complete_requires_gateway_confirmation(payment_repo, gateway, client_user):
    payment_id, session_id = await _checkout(payment_repo, gateway, client_user)
    use_case = CompleteCheckoutUseCase(payment_repo, gateway)

    assert (await use_case.execute(client_user, session_id)).status == PaymentStatus.PENDING

    gateway.paid_sessions.add(session_id)
    assert (await use_case.execute(client_user, session_id)).status == PaymentStatus.COMPLETED
    assert payment_repo.payments[payment_id].status == PaymentStatus.COMPLETED


async def test_complete_rejects_other_user(payment_repo, gateway, client_user, other_client):
    _, session_id = await _checkout(payment_repo, gateway, client_user)
    gateway.paid_sessions.add(session_id)
    with pytest.raises(ForbiddenError):
        await CompleteCheckoutUseCase(payment_repo, gateway).execute(other_client, session_id)


# ==================== Stripe 서명 / 게이트웨이 ====================

def test_valid_signature_passes():
    payload = b'{"type": "checkout.session.completed"}'
    verify_stripe_signature(payload, _sign(payload), SECRET, tolerance=300)


@pytest.mark.parametrize("header", [None, "", "garbage", "t=abc,v1=00"])
def test_malformed_signature_header(header):
    with pytest.raises(ValidationError):
        verify_stripe_signature(b"{}", header, SECRET, tolerance=300)


def test_signature_with_wrong_secret():
    payload = b"{}"
    with pytest.raises(ValidationError):
        verify_stripe_signature(payload, _sign(payload, secret="whsec_other"), SECRET, tolerance=300)


def test_tampered_payload():
    with pytest.raises(ValidationError):
        verify_stripe_signature(b'{"amount": 1}', _sign(b'{"amount": 100}'), SECRET, tolerance=300)


def test_stale_signature():
    payload = b"{}"
    old = int(time.time()) - 3600
    with pytest.raises(ValidationError):
        verify_stripe_signature(payload, _sign(payload, timestamp=old), SECRET, tolerance=300)


def _gateway(secret_key=""):
    return StripeGateway(client=StripeClient(secret_key=secret_key), webhook_secret=SECRET, currency="usd",
                         success_url="https://studio.example.com/ok?session_id={CHECKOUT_SESSION_ID}",
                         cancel_url="https://studio.example.com/cancel", tolerance=300)


def test_parse_webhook_extracts_payment_reference():
    payload = json.dumps({"type": EVENT_COMPLETED, "data": {"object": {
        "id": "cs_live_1", "client_reference_id": "pay-ref", "metadata": {"paymentId": "pay1"}}}}).encode()
    event = _gateway().parse_webhook(payload, _sign(payload))
    assert event.type == EVENT_COMPLETED
    assert event.payment_id == "pay1"
    assert event.session_id == "cs_live_1"


def test_parse_webhook_without_secret_is_server_error():
    gateway = StripeGateway(client=StripeClient(secret_key=""), webhook_secret="")
    with pytest.raises(ServerError):
        gateway.parse_webhook(b"{}", "t=1,v1=00")


async def test_unconfigured_gateway_returns_mock_session():
    gateway = _gateway()
    session = await gateway.create_checkout_session(_pending())
    assert session.session_id.startswith("cs_test_mock_")
    assert session.url == f"https://studio.example.com/ok?session_id={session.session_id}"
    assert await gateway.is_session_paid(session.session_id) is False


def test_session_form_modes():
    gateway = _gateway(secret_key="sk_test_x")
    payment = _pending(service_details=PlanService(description="월 4회"))

    hosted = dict(gateway._session_form(payment, embedded=False))
    assert hosted["line_items[0][price_data][unit_amount]"] == "1999"
    assert hosted["metadata[paymentId]"] == "pay1"
    assert hosted["line_items[0][price_data][product_data][description]"] == "월 4회"
    assert "success_url" in hosted and "ui_mode" not in hosted

    embedded = dict(gateway._session_form(payment, embedded=True))
    assert embedded["ui_mode"] == "embedded"
    assert "success_url" not in embedded
