"""
스튜디오 포털 서비스 - FastAPI 메인 애플리케이션

주문(요청 → 작업 → 검토 → 승인/수정) 워크플로, Stripe 결제,
결제 여부에 따른 페이지 접근 제어를 제공한다.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import settings
from domain.exceptions import DomainError
from infrastructure.persistence.database import init_db
from api.routers import access, admin, auth, files, health, orders, payment

# 로깅 설정
os.makedirs("./logs", exist_ok=True)
logger.add(
    settings.LOG_FILE,
    rotation="10 MB",
    retention="30 days",
    level=settings.LOG_LEVEL
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 수명 주기 관리"""
    logger.info("서비스 시작...")
    await init_db()
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info("데이터베이스 초기화 완료")

    yield

    logger.info("서비스 종료...")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="스튜디오 포털 - 주문 워크플로 / 결제 / 결제 기반 접근 제어",
    lifespan=lifespan
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """도메인 예외 → {success, error, message} 응답"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.code}: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.code}: {exc}")
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, headers=headers,
                        content={"success": False, "error": exc.code, "message": str(exc)})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} - 처리되지 않은 예외: {exc}")
    return JSONResponse(status_code=500,
                        content={"success": False, "error": "server_error",
                                 "message": "서버 오류가 발생했습니다."})


app.include_router(auth.router)
app.include_router(orders.router)
app.include_router(files.router)
app.include_router(payment.router)
app.include_router(access.router)
app.include_router(admin.router)
app.include_router(health.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
