"""
Shared fixtures: one SQLite file per test under tmp_path, actors of each role,
and a TestClient bound to the same database.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

_R2_VARS = ("R2_ENDPOINT", "R2_ACCESS_KEY", "R2_SECRET_KEY", "R2_BUCKET", "R2_PUBLIC_URL")


@pytest.fixture(autouse=True)
def _env(tmp_path, monkeypatch):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "test.db"))
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("APP_ENV", "development")
    monkeypatch.setenv("SCHEDULER_ENABLED", "0")
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    for var in _R2_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def db(tmp_path):
    from sekolah_cms import database
    database.configure(f"sqlite:///{tmp_path / 'test.db'}")
    database.init_db()
    session = database.new_session()
    try:
        yield session
    finally:
        session.close()


def make_user(db, role="EDITOR", email=None, password="rahasia123", name=None):
    from sekolah_cms.models import UserDB
    from sekolah_cms.security import hash_password
    user = UserDB(
        name=name or f"{role.title()} Sekolah",
        email=email or f"{role.lower()}@sekolah.sch.id",
        password=hash_password(password),
        role=role,
    )
    db.add(user); db.commit(); db.refresh(user)
    return user


def ctx_for(user):
    from sekolah_cms.context import Actor, RequestContext
    return RequestContext(actor=Actor.from_user(user))


@pytest.fixture
def editor(db):
    return ctx_for(make_user(db, "EDITOR"))


@pytest.fixture
def admin(db):
    return ctx_for(make_user(db, "ADMIN"))


@pytest.fixture
def superadmin(db):
    return ctx_for(make_user(db, "SUPERADMIN"))


@pytest.fixture
def anon():
    from sekolah_cms.context import RequestContext
    return RequestContext()


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient
    from sekolah_cms.api.main import app
    with TestClient(app) as c:
        yield c
