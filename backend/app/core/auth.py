"""세션 기반 인증 - HttpOnly 쿠키, DB 세션

읽기 API는 인증 없이 열려 있고, 설정 저장만 `require_user`로 막는다.
역할 구분은 없다: 유효한 세션이 있으면 쓰기 가능.
"""
from datetime import datetime, timedelta, timezone
from typing import Annotated

import structlog
from fastapi import Depends, Request, Response
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.errors import Unauthorized
from app.core.security import generate_session_id
from app.database import get_db
from app.models import User, DbSession

settings = get_settings()
log = structlog.get_logger(__name__)


def _get_expires_at() -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age_seconds)


def create_session(db: Session, user: User) -> str:
    """세션 생성, session_id 반환. 만료된 세션 레코드는 이때 정리"""
    db.execute(delete(DbSession).where(DbSession.expires_at <= datetime.now(timezone.utc)))
    session_id = generate_session_id()
    db.add(DbSession(session_id=session_id, user_id=user.id, expires_at=_get_expires_at()))
    db.commit()
    return session_id


def revoke_session(db: Session, session_id: str) -> None:
    """서버 측 세션 레코드 삭제"""
    db.execute(delete(DbSession).where(DbSession.session_id == session_id))
    db.commit()


def authorize(request: Request, db: Session) -> User | None:
    """요청 쿠키의 세션으로 사용자 조회. 없거나 만료 시 None."""
    session_id = request.cookies.get(settings.session_cookie_name)
    if not session_id:
        return None
    stmt = (
        select(DbSession)
        .join(User)
        .where(DbSession.session_id == session_id)
        .where(DbSession.expires_at > datetime.now(timezone.utc))
    )
    row = db.execute(stmt).scalar_one_or_none()
    if row is None:
        log.info("session_rejected")
        return None
    return row.user


def get_user_from_session(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """의존성: 세션 사용자 또는 None"""
    return authorize(request, db)


def require_user(
    request: Request,
    user: Annotated[User | None, Depends(get_user_from_session)],
) -> User:
    """인증 필수 - 로그인 필요. 무효 세션 쿠키는 401 응답에서 삭제"""
    if user is None:
        stale = bool(request.cookies.get(settings.session_cookie_name))
        raise Unauthorized(clear_cookie=stale)
    return user


def set_session_cookie(response: Response, session_id: str) -> None:
    """HttpOnly + Secure + SameSite=Lax 쿠키 설정"""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
        domain=settings.cookie_domain if settings.cookie_domain != "localhost" else None,
    )


def clear_session_cookie(response: Response) -> None:
    """세션 쿠키 삭제"""
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
    )
