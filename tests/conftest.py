import os

# Must be set before the backend modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "10")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlmodel.pool import StaticPool

from backend.auth import AuthService
from backend.database import get_session
from backend.main import app
from backend.repository import TodoRepository
from backend.schemas import TodoCreate
from backend.security import create_user_token


# Use in-memory SQLite for testing
@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(engine, session):
    def get_test_session():
        yield session

    app.dependency_overrides = {get_session: get_test_session}

    yield TestClient(app)

    app.dependency_overrides = {}


@pytest.fixture(name="test_user")
def test_user_fixture(session):
    """Create a test user for testing."""
    return AuthService(session).register("test@example.com", "testpassword")


@pytest.fixture(name="other_user")
def other_user_fixture(session):
    """A second account, used to check that users cannot see each other's data."""
    return AuthService(session).register("other@example.com", "otherpassword")


@pytest.fixture(name="test_todo")
def test_todo_fixture(session, test_user):
    """Create a test todo for testing."""
    return TodoRepository(session).create(test_user.id, TodoCreate(text="Test Todo"))


@pytest.fixture(name="other_todo")
def other_todo_fixture(session, other_user):
    return TodoRepository(session).create(other_user.id, TodoCreate(text="Other user's todo"))


@pytest.fixture(name="user_token_headers")
def user_token_headers_fixture(test_user):
    """Create authorization headers with user JWT token."""
    return {"Authorization": f"Bearer {create_user_token(test_user.id, test_user.email)}"}


@pytest.fixture(name="other_token_headers")
def other_token_headers_fixture(other_user):
    return {"Authorization": f"Bearer {create_user_token(other_user.id, other_user.email)}"}
