"""사용자 도메인 엔티티"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.enums import UserRole


@dataclass
class UserEntity:
    """User 도메인 엔티티: ORM 모델이 아닌 비즈니스 로직용"""
    id: int
    email: str
    name: str
    role: UserRole
    is_active: bool = True
    password_hash: str = ""
    phone: Optional[str] = None
    company: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class Identity:
    """인증된 요청 주체 (토큰에서 복원)"""
    user_id: int
    role: UserRole
    email: str = ""
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
