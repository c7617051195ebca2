"""
Shared fixtures. The app runs against a fresh repository per test.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from main import app
from models.user_models import UserEntity
from repositories import InMemoryUserRepository, SqlUserRepository, get_user_repository


class FakeLinks:
    """LinkGenerator that builds relative links without a running app."""

    def user_url(self, user_id):
        return f"/api/users/{user_id}"

    def users_page_url(self, page_number, page_size):
        return f"/api/users?pageNumber={page_number}&pageSize={page_size}"


@pytest.fixture
def repository():
    return InMemoryUserRepository()


@pytest.fixture
def sql_engine():
    """In-memory SQLite shared by every session of the test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_repository(sql_engine):
    db = sessionmaker(bind=sql_engine)()
    try:
        yield SqlUserRepository(db)
    finally:
        db.close()


@pytest.fixture
def links():
    return FakeLinks()


def _client_for(repository):
    app.dependency_overrides[get_user_repository] = lambda: repository
    return TestClient(app)


@pytest.fixture
def client(repository):
    yield _client_for(repository)
    app.dependency_overrides.clear()


@pytest.fixture(params=["memory", "sql"])
def backend(request):
    """(client, repository) for each repository implementation"""
    fixture = "repository" if request.param == "memory" else "sql_repository"
    repository = request.getfixturevalue(fixture)
    yield _client_for(repository), repository
    app.dependency_overrides.clear()


@pytest.fixture
def john(repository):
    """A stored user"""
    return repository.insert(UserEntity(login="johndoe375", first_name="John", last_name="Doe"))
