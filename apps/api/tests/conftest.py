import os

# The app module builds its own engine at import time; keep it off postgres.
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kinship.core.db import enable_sqlite_foreign_keys, get_db
from kinship.main import app
from kinship.models import audit, family  # noqa: F401
from kinship.models.base import Base
from kinship.services.members import MemberStore


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_member(db_session):
    store = MemberStore(db_session)

    def _make(first_name: str, last_name: str = "Koum", **extra):
        data = {"first_name": first_name, "last_name": last_name, "gender": extra.pop("gender", "other")}
        data.update(extra)
        return store.create(data)

    return _make
