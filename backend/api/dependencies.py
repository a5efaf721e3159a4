"""
FastAPI 의존성 주입 (Depends)

모든 라우터에서 사용하는 공통 의존성을 정의한다.
Repository / 스토리지 / 결제 게이트웨이는 여기서 조립되며,
테스트에서는 app.dependency_overrides로 교체한다.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from domain.entities.user import Identity
from domain.enums import UserRole
from domain.exceptions import ForbiddenError, NotAuthenticatedError
from infrastructure.persistence.database import get_session
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories.order_repository import SqlAlchemyOrderRepository
from infrastructure.persistence.repositories.payment_repository import SqlAlchemyPaymentRepository
from infrastructure.persistence.repositories.settings_repository import SqlAlchemySettingsRepository
from infrastructure.persistence.repositories.user_repository import SqlAlchemyUserRepository
from infrastructure.auth.jwt_service import decode_token
from infrastructure.storage.local_storage import LocalBlobStorage
from infrastructure.payment.stripe_gateway import StripeGateway
from application.ports.blob_storage import BlobStorage
from application.ports.payment_gateway import PaymentGateway

security = HTTPBearer(auto_error=False)

TOKEN_COOKIE = "token"


def _extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Authorization: Bearer 헤더 우선, 없으면 token 쿠키"""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(TOKEN_COOKIE)


async def _load_user(token: Optional[str], session: AsyncSession) -> Optional[User]:
    if not token:
        return None
    payload = decode_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    try:
        user_id = int(payload.get("sub"))
    except (ValueError, TypeError):
        return None
    return await session.get(User, user_id)


def _to_identity(user: User) -> Identity:
    # 역할은 토큰이 아닌 DB 기준 (권한 변경 즉시 반영)
    return Identity(user_id=user.id, role=user.role, email=user.email, name=user.name)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> User:
    """현재 인증된 사용자 반환"""
    user = await _load_user(_extract_token(request, credentials), session)
    if user is None:
        raise NotAuthenticatedError()
    if not user.is_active:
        raise ForbiddenError("비활성화된 계정입니다.")
    return user


async def get_current_identity(current_user: User = Depends(get_current_user)) -> Identity:
    return _to_identity(current_user)


async def get_optional_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session)
) -> Optional[Identity]:
    """토큰이 없거나 무효하면 None (익명)"""
    user = await _load_user(_extract_token(request, credentials), session)
    if user is None or not user.is_active:
        return None
    return _to_identity(user)


async def get_admin_identity(identity: Identity = Depends(get_current_identity)) -> Identity:
    """관리자 사용자 확인"""
    if identity.role != UserRole.ADMIN:
        raise ForbiddenError("관리자 권한이 필요합니다.")
    return identity


# ==================== Repository / 외부 협력자 ====================

def get_order_repo(session: AsyncSession = Depends(get_session)) -> SqlAlchemyOrderRepository:
    return SqlAlchemyOrderRepository(session)


def get_payment_repo(session: AsyncSession = Depends(get_session)) -> SqlAlchemyPaymentRepository:
    return SqlAlchemyPaymentRepository(session)


def get_settings_repo(session: AsyncSession = Depends(get_session)) -> SqlAlchemySettingsRepository:
    return SqlAlchemySettingsRepository(session)


def get_user_repo(session: AsyncSession = Depends(get_session)) -> SqlAlchemyUserRepository:
    return SqlAlchemyUserRepository(session)


def get_blob_storage() -> BlobStorage:
    return LocalBlobStorage(settings.UPLOAD_DIR)


def get_payment_gateway() -> PaymentGateway:
    return StripeGateway()
