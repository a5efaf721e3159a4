"""인증 라우터"""
from fastapi import APIRouter, Depends, Response

from config import settings
from infrastructure.persistence.models.user import User
from infrastructure.persistence.repositories.user_repository import SqlAlchemyUserRepository
from infrastructure.auth.password_service import hash_password, verify_password
from infrastructure.auth.jwt_service import create_access_token, create_refresh_token
from application.use_cases.login import LoginInput, LoginUseCase, SignupInput, SignupUseCase
from api.schemas.common import ResponseBase
from api.schemas.auth import (
    UserSignupRequest, UserLoginRequest, TokenResponse, UserResponse,
)
from api.dependencies import TOKEN_COOKIE, get_current_user, get_user_repo

router = APIRouter(prefix="/api/auth", tags=["인증"])


@router.post("/signup", response_model=ResponseBase)
async def signup(request: UserSignupRequest,
                 user_repo: SqlAlchemyUserRepository = Depends(get_user_repo)):
    await SignupUseCase(user_repo, hash_password).execute(SignupInput(
        email=request.email, password=request.password, name=request.name,
        phone=request.phone, company=request.company))
    return ResponseBase(success=True, message="회원가입이 완료되었습니다.")


@router.post("/login", response_model=TokenResponse)
async def login(request: UserLoginRequest, response: Response,
                user_repo: SqlAlchemyUserRepository = Depends(get_user_repo)):
    result = await LoginUseCase(user_repo, verify_password).execute(
        LoginInput(email=request.email, password=request.password))

    access_token = create_access_token({"sub": result.user_id})
    refresh_token = create_refresh_token({"sub": result.user_id})
    # 브라우저 페이지 요청용 세션 쿠키 (API 클라이언트는 Bearer 헤더 사용)
    response.set_cookie(TOKEN_COOKIE, access_token, max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
                        httponly=True, samesite="lax", secure=settings.COOKIE_SECURE, path="/")
    return TokenResponse(access_token=access_token, refresh_token=refresh_token,
                         expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
                         role=result.role.value)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse(
        id=current_user.id, email=current_user.email, name=current_user.name,
        phone=current_user.phone, company=current_user.company,
        role=current_user.role.value, created_at=current_user.created_at)


@router.post("/logout", response_model=ResponseBase)
async def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE, path="/", httponly=True, samesite="lax",
                           secure=settings.COOKIE_SECURE)
    return ResponseBase(success=True, message="로그아웃되었습니다.")
