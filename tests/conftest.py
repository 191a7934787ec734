import itertools
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from sso_admin.database import Base, get_db, make_engine
from sso_admin.models import permission, role, user, client, client_user  # 預加載所有模型
from sso_admin.models.client import Client
from sso_admin.models.role import ADMIN, USER
from sso_admin.models.user import User
from sso_admin.security import Principal, create_access_token
from sso_admin.seed import seed_identity_store
from main import app

# 使用獨立的測試資料庫
TEST_DB_PATH = "./test_sso_admin.db"
SQLALCHEMY_DATABASE_URL = f"sqlite:///{TEST_DB_PATH}"

engine = make_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def cleanup_database():
    yield
    engine.dispose()  # 關閉所有連接以釋放文件
    if os.path.exists(TEST_DB_PATH):
        try:
            os.remove(TEST_DB_PATH)
        except PermissionError:
            pass


@pytest.fixture
def db_session():
    # 每個測試都重建資料表，路由內的 commit/rollback 不影響其他測試
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    del app.dependency_overrides[get_db]


@pytest.fixture
def roles(db_session):
    return seed_identity_store(db_session)


@pytest.fixture
def superadmin(db_session, roles):
    return db_session.query(User).filter(User.email == "superadmin@example.com").one()


@pytest.fixture
def admin(db_session, roles):
    return db_session.query(User).filter(User.email == "admin@example.com").one()


@pytest.fixture
def other_admin(db_session, roles):
    user = User(email="other.admin@example.com", name="Other Admin", role=roles[ADMIN])
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def regular_user(db_session, roles):
    user = User(email="someone@example.com", name="Someone", role=roles[USER])
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def headers_for():
    def _headers(user):
        token = create_access_token(Principal.from_user(user))
        return {"Cookie": f"access_token=Bearer {token}"}
    return _headers


@pytest.fixture
def make_client(db_session):
    counter = itertools.count(1)

    def _make(owner, name="Test Client", **kwargs):
        values = {
            "client_id": f"client_test{next(counter):05d}",
            "client_secret": "secret_testsecret",
            "description": "",
            "scopes": ["open_id"],
            "grant_types": ["authorization_code"],
        }
        values.update(kwargs)
        record = Client(name=name, owner_id=owner.id, **values)
        db_session.add(record)
        db_session.commit()
        return record
    return _make
