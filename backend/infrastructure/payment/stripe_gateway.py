"""Stripe Checkout API 클라이언트"""
import hashlib
import hmac
import json
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

import httpx
from loguru import logger

from config import settings
from domain.entities.payment import PaymentEntity
from domain.exceptions import ServerError, ValidationError
from application.ports.payment_gateway import CheckoutSession, GatewayEvent, PaymentGateway


class StripeClient:
    """Stripe REST API (form-encoded, Bearer 인증)"""

    def __init__(self, secret_key: str = None, api_url: str = None):
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.api_url = api_url or settings.STRIPE_API_URL

    def _get_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.secret_key}",
                "Content-Type": "application/x-www-form-urlencoded"}

    async def create_checkout_session(self, form: List[Tuple[str, str]]) -> Dict[str, Any]:
        url = f"{self.api_url}/checkout/sessions"
        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(url, headers=self._get_headers(), data=dict(form), timeout=30)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Stripe 세션 생성 실패: {e.response.text}")
                raise ServerError("결제 세션 생성에 실패했습니다.")
            except httpx.RequestError as e:
                logger.error(f"Stripe 연결 실패: {e}")
                raise ServerError("결제 서버에 연결할 수 없습니다.")

    async def retrieve_checkout_session(self, session_id: str) -> Dict[str, Any]:
        url = f"{self.api_url}/checkout/sessions/{session_id}"
        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(url, headers=self._get_headers(), timeout=30)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Stripe 세션 조회 실패: {e.response.text}")
                raise ServerError("결제 세션 조회에 실패했습니다.")
            except httpx.RequestError as e:
                logger.error(f"Stripe 연결 실패: {e}")
                raise ServerError("결제 서버에 연결할 수 없습니다.")


def verify_stripe_signature(payload: bytes, header: Optional[str], secret: str,
                            tolerance: int, now: Optional[int] = None) -> None:
    """Stripe-Signature 헤더 (t=<ts>,v1=<hex>[,v1=...]) 검증. 실패 시 ValidationError"""
    if not header:
        raise ValidationError("Webhook 서명이 없습니다.")
    timestamp = None
    signatures = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            timestamp = value
        elif key == "v1":
            signatures.append(value)
    if timestamp is None or not signatures:
        raise ValidationError("Webhook 서명 형식이 올바르지 않습니다.")
    try:
        ts = int(timestamp)
    except ValueError:
        raise ValidationError("Webhook 서명 형식이 올바르지 않습니다.")

    signed = f"{timestamp}.".encode() + payload
    expected = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    if not any(hmac.compare_digest(expected, s) for s in signatures):
        raise ValidationError("Webhook 서명 검증에 실패했습니다.")
    if tolerance and abs((now or int(time.time())) - ts) > tolerance:
        raise ValidationError("Webhook 타임스탬프가 허용 범위를 벗어났습니다.")


class StripeGateway(PaymentGateway):
    def __init__(self, client: StripeClient = None, webhook_secret: str = None,
                 currency: str = None, success_url: str = None, cancel_url: str = None,
                 tolerance: int = None):
        self.client = client or StripeClient()
        self.webhook_secret = webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET
        self.currency = currency or settings.PAYMENT_CURRENCY
        self.success_url = success_url or settings.CHECKOUT_SUCCESS_URL
        self.cancel_url = cancel_url or settings.CHECKOUT_CANCEL_URL
        self.tolerance = settings.STRIPE_WEBHOOK_TOLERANCE if tolerance is None else tolerance

    @property
    def configured(self) -> bool:
        return bool(self.client.secret_key)

    def _session_form(self, payment: PaymentEntity, embedded: bool) -> List[Tuple[str, str]]:
        description = ""
        if payment.service_details is not None:
            description = payment.service_details.description
        form = [
            ("mode", "payment"),
            ("payment_method_types[0]", "card"),
            ("line_items[0][quantity]", "1"),
            ("line_items[0][price_data][currency]", payment.currency or self.currency),
            ("line_items[0][price_data][unit_amount]", str(payment.amount_minor_units)),
            ("line_items[0][price_data][product_data][name]", payment.service_name),
            ("line_items[0][price_data][product_data][description]",
             description or f"Payment for {payment.service_name}"),
            ("client_reference_id", payment.id),
            ("metadata[paymentId]", payment.id),
            ("metadata[serviceName]", payment.service_name),
            ("metadata[serviceType]", payment.service_type.value),
        ]
        if embedded:
            form += [("ui_mode", "embedded"), ("redirect_on_completion", "never")]
        else:
            form += [("success_url", self.success_url), ("cancel_url", self.cancel_url)]
        return form

    async def create_checkout_session(self, payment: PaymentEntity, embedded: bool = False) -> CheckoutSession:
        if not self.configured:
            # 개발 환경: STRIPE_SECRET_KEY 미설정 시 목업 세션
            logger.warning("Stripe 키 미설정: 목업 체크아웃 세션 사용")
            session_id = f"cs_test_mock_{uuid.uuid4().hex[:12]}"
            return CheckoutSession(session_id=session_id,
                                   url=self.success_url.replace("{CHECKOUT_SESSION_ID}", session_id))

        data = await self.client.create_checkout_session(self._session_form(payment, embedded))
        if embedded and data.get("client_secret"):
            return CheckoutSession(session_id=data["id"], client_secret=data["client_secret"])
        return CheckoutSession(session_id=data["id"], url=data.get("url"))

    async def is_session_paid(self, session_id: str) -> bool:
        if not self.configured:
            return False
        data = await self.client.retrieve_checkout_session(session_id)
        return data.get("payment_status") == "paid"

    def parse_webhook(self, payload: bytes, signature: Optional[str]) -> GatewayEvent:
        if not self.webhook_secret:
            raise ServerError("Stripe 웹훅 시크릿이 설정되지 않았습니다.")
        verify_stripe_signature(payload, signature, self.webhook_secret, self.tolerance)
        try:
            event = json.loads(payload)
        except ValueError:
            raise ValidationError("Webhook 본문이 올바른 JSON이 아닙니다.")

        obj = (event.get("data") or {}).get("object") or {}
        metadata = obj.get("metadata") or {}
        return GatewayEvent(
            type=event.get("type", ""),
            payment_id=metadata.get("paymentId") or obj.get("client_reference_id"),
            session_id=obj.get("id"),
            raw=event,
        )
