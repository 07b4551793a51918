"""인증 API - 로그인/로그아웃/현재 사용자"""
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.auth import (
    create_session,
    revoke_session,
    set_session_cookie,
    clear_session_cookie,
    require_user,
)
from app.core.errors import Unauthorized
from app.core.security import verify_password
from app.database import get_db
from app.models import User
from app.schemas.auth import LoginRequest, UserResponse

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
):
    """로그인 - 성공 시 HttpOnly 쿠키 설정"""
    stmt = select(User).where(User.username == data.username)
    user = db.execute(stmt).scalar_one_or_none()
    if not user or not verify_password(data.password, user.password_hash):
        raise Unauthorized(error="Invalid username or password")
    session_id = create_session(db, user)
    set_session_cookie(response, session_id)
    return {"ok": True, "user": UserResponse.model_validate(user)}


@router.post("/logout")
def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """로그아웃 - 서버 세션 삭제 후 쿠키 제거"""
    session_id = request.cookies.get(get_settings().session_cookie_name)
    if session_id:
        revoke_session(db, session_id)
    clear_session_cookie(response)
    return {"ok": True}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(require_user)):
    """현재 로그인 사용자 정보"""
    return current_user
