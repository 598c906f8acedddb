import os

# ✅ 앱 임포트 전에 테스트용 설정 주입 (MySQL 대신 SQLite)
os.environ["SQLITE_PATH"] = ":memory:"
os.environ["AUTH_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from models.enums import UserRole
from models.users import User as UserModel
from utils.security import create_access_token


@pytest.fixture()
def db_engine():
    # 모든 커넥션이 같은 인메모리 DB를 보도록 StaticPool 사용
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_user(db, username, role):
    user = UserModel(
        username=username,
        email=f"{username}@university.edu",
        first_name=username.capitalize(),
        last_name="Tester",
        role=role,
    )
    user.set_password("secret123")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def make_user(db):
    def _factory(username, role=UserRole.STUDENT):
        return _make_user(db, username, role)
    return _factory


@pytest.fixture()
def professor(make_user):
    return make_user("prof", UserRole.PROFESSOR)


@pytest.fixture()
def other_professor(make_user):
    return make_user("prof2", UserRole.PROFESSOR)


@pytest.fixture()
def student(make_user):
    return make_user("alice", UserRole.STUDENT)


@pytest.fixture()
def admin(make_user):
    return make_user("admin", UserRole.ADMIN)


@pytest.fixture()
def headers():
    return auth_header
