"""공용 픽스처

HTTP 테스트는 테스트마다 임시 SQLite 파일을 만들고 get_session 등 의존성을
app.dependency_overrides로 교체한다. TestClient를 with 없이 써서 lifespan
(init_db)이 실제 DB 파일을 건드리지 않게 한다.
"""
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

import infrastructure.persistence.models  # noqa: F401  모델 등록
from domain.entities.user import Identity
from domain.enums import PaymentStatus, UserRole
from infrastructure.persistence.database import Base, get_session
from infrastructure.persistence.models import Payment, PaymentSetting, User
from infrastructure.payment.stripe_gateway import StripeClient, StripeGateway
from infrastructure.storage.local_storage import LocalBlobStorage
from api.dependencies import get_blob_storage, get_payment_gateway
from api.routers.files import get_local_storage
from main import app

from fakes import (
    WEBHOOK_SECRET, FakeGateway, InMemoryBlobStorage, InMemoryOrderRepository,
    InMemoryPaymentRepository, InMemorySettingsRepository, auth_headers,
)



# ==================== 유스케이스용 ====================

@pytest.fixture
def admin():
    return Identity(user_id=1, role=UserRole.ADMIN, email="admin@example.com", name="관리자")


@pytest.fixture
def client_user():
    return Identity(user_id=2, role=UserRole.CLIENT, email="client@example.com", name="고객")


@pytest.fixture
def other_client():
    return Identity(user_id=3, role=UserRole.CLIENT, email="other@example.com", name="다른 고객")


@pytest.fixture
def order_repo():
    return InMemoryOrderRepository()


@pytest.fixture
def payment_repo():
    return InMemoryPaymentRepository()


@pytest.fixture
def settings_repo():
    return InMemorySettingsRepository()


@pytest.fixture
def storage():
    return InMemoryBlobStorage()


@pytest.fixture
def gateway():
    return FakeGateway()


# ==================== HTTP 테스트용 ====================

class Database:
    """임시 SQLite 파일 + 동기 시드 헬퍼"""

    def __init__(self, path):
        self.sync_engine = create_engine(f"sqlite:///{path}")
        self.async_url = f"sqlite+aiosqlite:///{path}"
        Base.metadata.create_all(self.sync_engine)

    def add_user(self, email: str, role: UserRole = UserRole.CLIENT, name: str = "테스트",
                 is_active: bool = True) -> int:
        with Session(self.sync_engine) as s:
            user = User(email=email, password_hash="not-a-real-hash", name=name, role=role,
                        is_active=is_active)
            s.add(user)
            s.commit()
            return user.id

    def add_payment(self, payment_id: str, user_id: int, status: PaymentStatus,
                    amount: float = 99.0) -> None:
        with Session(self.sync_engine) as s:
            s.add(Payment(id=payment_id, user_id=user_id, amount=amount, currency="usd",
                          service_type="PLAN", service_name="Starter Plan", status=status,
                          paid_at=datetime.utcnow() if status == PaymentStatus.COMPLETED else None))
            s.commit()

    def set_setting(self, key: str, value: bool) -> None:
        with Session(self.sync_engine) as s:
            s.add(PaymentSetting(setting_key=key, setting_value=value))
            s.commit()

    def payment_status(self, payment_id: str) -> PaymentStatus:
        with Session(self.sync_engine) as s:
            return s.get(Payment, payment_id).status


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    yield database
    database.sync_engine.dispose()


@pytest.fixture
def stripe_gateway():
    # 시크릿 키 없음 → 목업 체크아웃 세션, 웹훅 서명 검증은 실제 로직
    return StripeGateway(client=StripeClient(secret_key=""), webhook_secret=WEBHOOK_SECRET,
                         tolerance=300)


@pytest.fixture
def api(db, tmp_path, stripe_gateway):
    engine = create_async_engine(db.async_url, poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    local_storage = LocalBlobStorage(str(tmp_path / "uploads"))
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_blob_storage] = lambda: local_storage
    app.dependency_overrides[get_local_storage] = lambda: local_storage
    app.dependency_overrides[get_payment_gateway] = lambda: stripe_gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(db):
    """사용자를 만들고 (user_id, Authorization 헤더) 반환"""
    def _login(email: str, role: UserRole = UserRole.CLIENT):
        user_id = db.add_user(email, role)
        return user_id, auth_headers(user_id)
    return _login


@pytest.fixture
def admin_headers(login_as):
    return login_as("admin@example.com", UserRole.ADMIN)[1]


@pytest.fixture
def client_headers(login_as):
    return login_as("client@example.com")[1]
