"""
스튜디오 포털 서비스 설정
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 앱 기본 설정
    APP_NAME: str = "Studio Portal API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 데이터베이스 설정
    DB_URL: str = "sqlite+aiosqlite:///./data/studio.db"

    # JWT 설정
    SECRET_KEY: str = "your-super-secret-key-change-in-production-32chars"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24시간
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7  # 7일
    COOKIE_SECURE: bool = False  # HTTPS 배포 시 True

    # Stripe 설정 (키가 비어 있으면 개발용 목업 세션 사용)
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_API_URL: str = "https://api.stripe.com/v1"
    STRIPE_WEBHOOK_TOLERANCE: int = 300  # 초
    PAYMENT_CURRENCY: str = "usd"
    CHECKOUT_SUCCESS_URL: str = "http://localhost:3000/payment/success?session_id={CHECKOUT_SESSION_ID}"
    CHECKOUT_CANCEL_URL: str = "http://localhost:3000/portfolio"

    # 파일 업로드 설정
    UPLOAD_DIR: str = "./uploads"
    MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50MB
    MAX_FILES_PER_UPLOAD: int = 20

    # 결제 게이트 페이지 → payment_settings 키
    GATED_PAGES: dict = {
        "client-portal": "require_payment_client_portal",
        "service-request": "require_payment_service_request",
        "sns-settings": "require_payment_sns_settings",
    }

    # CORS 설정
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # 로깅 설정
    LOG_LEVEL: str = "DEBUG"
    LOG_FILE: str = "./logs/app.log"

    class Config:
        env_file = ".env.backend"  # 백엔드 전용 환경 변수 파일
        case_sensitive = True
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()


# 설정 인스턴스
settings = get_settings()
