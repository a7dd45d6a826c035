import pytest
from fastapi.testclient import TestClient

import schemas
from core.database import create_db_engine, init_db, make_session_factory
from crud import user as crud_user
from main import create_app
from utils.config import Settings

PASSWORD = "pw123456"

# ============================================================================
# Test Database Setup
# ============================================================================
# sqlite:// is an in-memory database; create_db_engine gives it a StaticPool
# so every session in one test shares the same database, and a fresh engine
# per test keeps tests isolated.


def _test_settings() -> Settings:
    return Settings(database_url="sqlite://", cors_origins=[], log_level="WARNING")


@pytest.fixture(name="db")
def db_fixture():
    """ORM session on a fresh, seeded in-memory store."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    session = make_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(name="make_user")
def make_user_fixture(db):
    """Create users directly through the store."""
    def _make(username: str = "alice", email: str = None):
        data = schemas.UserCreate(username=username, email=email or f"{username}@x.com", password=PASSWORD)
        return crud_user.create_user(db, data)
    return _make


@pytest.fixture(name="app")
def app_fixture():
    return create_app(_test_settings())


@pytest.fixture(name="client")
def client_fixture(app):
    # context manager runs the lifespan: tables created, categories seeded
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="other_client")
def other_client_fixture(app, client):
    """A second browser with its own cookie jar against the same app."""
    return TestClient(app)


def _register(client: TestClient, username: str = "alice", email: str = None, password: str = PASSWORD):
    return client.post(
        "/api/register",
        data={"username": username, "email": email or f"{username}@x.com", "password": password},
    )


def _login(client: TestClient, email: str = "alice@x.com", password: str = PASSWORD):
    return client.post("/api/login", data={"email": email, "password": password})


@pytest.fixture(name="register")
def register_fixture():
    return _register


@pytest.fixture(name="login")
def login_fixture():
    return _login


@pytest.fixture(name="signup")
def signup_fixture():
    """Register and log in `username` on the given client."""
    def _signup(client: TestClient, username: str = "alice"):
        email = f"{username}@x.com"
        assert _register(client, username, email).status_code == 201
        assert _login(client, email).status_code == 200
        return email
    return _signup
