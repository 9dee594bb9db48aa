import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from webforms.app import create_app
from webforms.config import Settings
from webforms.infra.db import Database
from webforms.infra.form_repo import FormRepository
from webforms.infra.user_repo import UserRepository

TEST_SECRET = "test-secret-key-0123456789abcdef"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key=TEST_SECRET,
        database_url=f"sqlite:///{tmp_path / 'webforms.db'}",
    )


@pytest.fixture()
def db(settings: Settings):
    d = Database(settings.database_url)
    d.init_schema()
    yield d
    d.dispose()


@pytest.fixture()
def users(db: Database) -> UserRepository:
    return UserRepository(db)


@pytest.fixture()
def forms(db: Database) -> FormRepository:
    return FormRepository(db)


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    # Context manager runs the lifespan (schema creation).
    with TestClient(app, follow_redirects=False) as c:
        yield c


@pytest.fixture()
def signup(client: TestClient):
    """Register + log in a user; returns the session cookie value and leaves the jar empty."""

    def _signup(username: str, password: str) -> str:
        r = client.post("/register", data={"username": username, "password": password})
        assert r.status_code == 303
        r = client.post("/login", data={"username": username, "password": password})
        assert r.status_code == 303
        value = r.cookies["session_id"]
        client.cookies.clear()
        return value

    return _signup


@pytest.fixture()
def use_cookie(client: TestClient):
    """Make ``client`` present exactly this session cookie."""

    def _use(value: str) -> None:
        client.cookies.clear()
        client.cookies.set("session_id", value)

    return _use
