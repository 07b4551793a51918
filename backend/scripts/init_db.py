"""초기 DB 설정 - 관리자 사용자 생성 (마이그레이션 후 실행)

ADMIN_USERNAME / ADMIN_PASSWORD 환경 변수로 계정 지정.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from app.database import SessionLocal
from app.models import User
from app.core.security import hash_password


def main():
    username = os.getenv("ADMIN_USERNAME", "admin")
    password = os.getenv("ADMIN_PASSWORD", "admin123")
    db = SessionLocal()
    try:
        existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if existing:
            print(f"{username} 사용자가 이미 존재합니다.")
            return
        db.add(User(username=username, password_hash=hash_password(password), display_name="관리자"))
        db.commit()
        print(f"{username} 사용자 생성 완료")
    finally:
        db.close()


if __name__ == "__main__":
    main()
