"""결제 게이트 페이지 접근 판정"""
from datetime import datetime

import pytest

from domain.entities.payment import PaymentEntity
from domain.entities.user import Identity
from domain.enums import AccessReason, PaymentStatus, ServiceType, UserRole
from application.use_cases.check_page_access import CheckPageAccessUseCase

from fakes import BrokenPaymentRepository

GATED_PAGES = {
    "client-portal": "require_payment_client_portal",
    "service-request": "require_payment_service_request",
    "sns-settings": "require_payment_sns_settings",
}


def _payment(user_id, status):
    return PaymentEntity(id=f"pay-{user_id}-{status.value}", user_id=user_id, amount=49.0,
                         service_type=ServiceType.PLAN, service_name="Starter", status=status,
                         created_at=datetime.utcnow())


@pytest.fixture
def use_case(settings_repo, payment_repo):
    return CheckPageAccessUseCase(settings_repo, payment_repo, GATED_PAGES)


async def test_anonymous_is_denied_without_lookups(use_case, settings_repo, payment_repo):
    decision = await use_case.execute(None, "client-portal")
    assert not decision.allowed
    assert decision.reason == AccessReason.NOT_AUTHENTICATED
    assert settings_repo.reads == 0
    assert payment_repo.completed_queries == 0


async def test_missing_setting_row_requires_payment(use_case, client_user):
    decision = await use_case.execute(client_user, "client-portal")
    assert not decision.allowed
    assert decision.reason == AccessReason.PAYMENT_REQUIRED
    assert decision.requires_payment


async def test_disabled_setting_skips_payment_lookup(use_case, settings_repo, payment_repo, client_user):
    settings_repo.values["require_payment_sns_settings"] = False
    decision = await use_case.execute(client_user, "sns-settings")
    assert decision.allowed
    assert decision.reason == AccessReason.PAYMENT_NOT_REQUIRED
    assert not decision.requires_payment
    assert payment_repo.completed_queries == 0


async def test_unknown_page_requires_payment(use_case, settings_repo, client_user):
    for key in GATED_PAGES.values():
        settings_repo.values[key] = False
    decision = await use_case.execute(client_user, "billing-dashboard")
    assert not decision.allowed
    assert decision.reason == AccessReason.PAYMENT_REQUIRED


async def test_completed_payment_grants_access(use_case, payment_repo, client_user):
    payment_repo.payments["p1"] = _payment(client_user.user_id, PaymentStatus.COMPLETED)
    decision = await use_case.execute(client_user, "client-portal")
    assert decision.allowed
    assert decision.reason == AccessReason.PAYMENT_COMPLETED
    assert decision.has_paid_service


@pytest.mark.parametrize("status", [PaymentStatus.PENDING, PaymentStatus.FAILED])
async def test_unsettled_payment_does_not_count(use_case, payment_repo, client_user, status):
    payment_repo.payments["p1"] = _payment(client_user.user_id, status)
    decision = await use_case.execute(client_user, "service-request")
    assert not decision.allowed
    assert decision.reason == AccessReason.PAYMENT_REQUIRED


async def test_someone_elses_payment_does_not_count(use_case, payment_repo, client_user, other_client):
    payment_repo.payments["p1"] = _payment(other_client.user_id, PaymentStatus.COMPLETED)
    decision = await use_case.execute(client_user, "client-portal")
    assert not decision.allowed


async def test_repeated_checks_are_identical(use_case, settings_repo, payment_repo, client_user):
    settings_repo.values["require_payment_client_portal"] = True
    payment_repo.payments["p1"] = _payment(client_user.user_id, PaymentStatus.COMPLETED)
    before = (dict(settings_repo.values), {k: p.status for k, p in payment_repo.payments.items()})

    decisions = [await use_case.execute(client_user, "client-portal") for _ in range(3)]

    assert decisions[0] == decisions[1] == decisions[2]
    assert (dict(settings_repo.values), {k: p.status for k, p in payment_repo.payments.items()}) == before


async def test_admin_is_gated_like_anyone_else(use_case):
    admin = Identity(user_id=1, role=UserRole.ADMIN)
    decision = await use_case.execute(admin, "client-portal")
    assert decision.reason == AccessReason.PAYMENT_REQUIRED


async def test_lookup_failure_fails_closed(settings_repo, client_user):
    use_case = CheckPageAccessUseCase(settings_repo, BrokenPaymentRepository(), GATED_PAGES)
    decision = await use_case.execute(client_user, "client-portal")
    assert not decision.allowed
    assert decision.reason == AccessReason.SERVER_ERROR
