"""JWT 토큰 발급 / 검증"""
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt

from config import settings


def _encode(data: dict, token_type: str, expire: datetime) -> str:
    to_encode = data.copy()
    to_encode.update({
        "exp": expire,
        "type": token_type,
        "sub": str(to_encode.get("sub", ""))  # subject를 문자열로 변환
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """액세스 토큰 생성"""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return _encode(data, "access", expire)


def create_refresh_token(data: dict) -> str:
    """리프레시 토큰 생성"""
    return _encode(data, "refresh", datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> Optional[dict]:
    """토큰 디코딩. 서명/만료 오류는 None"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
