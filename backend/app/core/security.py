"""비밀번호 해시와 세션 ID 생성"""
import secrets

from passlib.context import CryptContext

SESSION_ID_BYTES = 32

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """비밀번호 검증. 해시 형식이 잘못된 경우도 실패로 처리"""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def generate_session_id() -> str:
    """세션 ID 생성 (암호학적으로 안전)"""
    return secrets.token_urlsafe(SESSION_ID_BYTES)
