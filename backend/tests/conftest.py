"""공용 픽스처 - SQLite 메모리 DB, 의존성 오버라이드"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.core.auth import create_session
from app.database import Base, get_db
from app.main import app
from app.models import User
from app.services.cache import CacheInvalidator, get_cache_invalidator


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture()
def invalidations():
    return []


@pytest.fixture()
def invalidator(invalidations):
    def record(scope, kind):
        invalidations.append((scope, kind))

    return CacheInvalidator([record])


@pytest.fixture()
def client(db, session_factory, invalidator):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_invalidator] = lambda: invalidator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def user(db):
    user = User(username="editor", password_hash="unused", display_name="Editor")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def auth_client(client, db, user):
    """로그인된 클라이언트 (세션 쿠키 설정)"""
    session_id = create_session(db, user)
    client.cookies.set(get_settings().session_cookie_name, session_id)
    return client
