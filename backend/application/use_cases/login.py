"""로그인 / 회원가입 유스케이스"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from domain.entities.user import UserEntity
from domain.enums import UserRole
from domain.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError
from application.ports.user_repository import UserRepository


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class LoginOutput:
    user_id: int
    email: str
    name: str
    role: UserRole


class LoginUseCase:
    def __init__(self, user_repo: UserRepository, verify_password_fn):
        self._user_repo = user_repo
        self._verify_password = verify_password_fn

    async def execute(self, input: LoginInput) -> LoginOutput:
        user = await self._user_repo.get_by_email(input.email.lower())
        if user is None:
            raise InvalidCredentialsError()
        if not self._verify_password(input.password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise InvalidCredentialsError()
        await self._user_repo.update_last_login(user.id)
        logger.info(f"사용자 로그인: {user.email}")
        return LoginOutput(user_id=user.id, email=user.email, name=user.name, role=user.role)


@dataclass
class SignupInput:
    email: str
    password: str
    name: str
    phone: Optional[str] = None
    company: Optional[str] = None


class SignupUseCase:
    """신규 가입자는 항상 CLIENT. 관리자는 tools/admin.py로만 지정"""

    def __init__(self, user_repo: UserRepository, hash_password_fn):
        self._user_repo = user_repo
        self._hash_password = hash_password_fn

    async def execute(self, input: SignupInput) -> UserEntity:
        email = input.email.lower()
        if await self._user_repo.get_by_email(email):
            raise EmailAlreadyRegisteredError()
        user = UserEntity(id=0, email=email, name=input.name, role=UserRole.CLIENT,
                          password_hash=self._hash_password(input.password),
                          phone=input.phone, company=input.company)
        user = await self._user_repo.create(user)
        logger.info(f"새 사용자 가입: {user.email}")
        return user
