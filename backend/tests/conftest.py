"""
Test configuration and fixtures for task tracker tests.

Provides:
- Test database with SQLite in-memory for speed
- A throwaway TokenService signing key
- FastAPI test client with database dependency override
- Core service fixtures (authenticator, resolver, lifecycle, ...)
- Common fixtures for users, projects and tasks
"""

import os
import sys
import logging
from typing import Generator, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Settings
from database import Base, build_engine, build_session_factory, get_db, init_db
from api import create_app
import models
from auth.permissions import OwnershipResolver
from auth.security import TokenService, hash_password
from auth.service import Authenticator
from repositories import UserRepository, ProjectRepository, TaskRepository
from services.projects import ProjectAggregator, ProjectService
from services.tasks import TaskLifecycle

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logger = logging.getLogger(__name__)

# SQLite in-memory database for fast testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
TEST_SECRET_KEY = "test-secret-key-not-for-production"


@pytest.fixture(scope="function")
def test_db() -> Generator[Session, None, None]:
    """
    Create a fresh in-memory SQLite database for each test.

    This ensures test isolation and fast execution.
    """
    logger.debug("Creating test database")

    engine = build_engine(SQLALCHEMY_TEST_DATABASE_URL, poolclass=StaticPool)
    init_db(engine)

    TestingSessionLocal = build_session_factory(engine)
    db = TestingSessionLocal()

    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()
        logger.debug("Test database cleaned up")


@pytest.fixture(scope="function")
def settings() -> Settings:
    return Settings(
        jwt_secret_key=TEST_SECRET_KEY,
        database_url="sqlite://",
        access_token_expire_minutes=60,
    )


@pytest.fixture(scope="function")
def token_service(settings: Settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture(scope="function")
def client(test_db: Session, settings: Settings) -> Generator[TestClient, None, None]:
    """
    Create FastAPI test client with database dependency override.
    """
    app = create_app(settings)

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============== Core services ==============


@pytest.fixture(scope="function")
def authenticator(test_db: Session, token_service: TokenService) -> Authenticator:
    return Authenticator(UserRepository(test_db), token_service)


@pytest.fixture(scope="function")
def resolver(test_db: Session) -> OwnershipResolver:
    return OwnershipResolver(
        UserRepository(test_db), ProjectRepository(test_db), TaskRepository(test_db)
    )


@pytest.fixture(scope="function")
def aggregator(test_db: Session) -> ProjectAggregator:
    return ProjectAggregator(TaskRepository(test_db))


@pytest.fixture(scope="function")
def project_service(
    test_db: Session, resolver: OwnershipResolver, aggregator: ProjectAggregator
) -> ProjectService:
    return ProjectService(resolver, ProjectRepository(test_db), aggregator)


@pytest.fixture(scope="function")
def lifecycle(test_db: Session, resolver: OwnershipResolver) -> TaskLifecycle:
    return TaskLifecycle(resolver, TaskRepository(test_db))


# ============== Data fixtures ==============


def make_user(db: Session, name: str, email: str, password: str) -> models.User:
    user = models.User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {email} with ID: {user.id}")
    return user


def make_project(db: Session, owner: models.User, title: str = "Test Project") -> models.Project:
    project = models.Project(title=title, owner_id=owner.id)
    db.add(project)
    db.commit()
    db.refresh(project)
    return project


def make_task(
    db: Session,
    project: models.Project,
    title: str,
    status: models.TaskStatus = models.TaskStatus.PENDING,
    **kwargs,
) -> models.Task:
    task = models.Task(project_id=project.id, title=title, status=status, **kwargs)
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


@pytest.fixture(scope="function")
def alice(test_db: Session) -> models.User:
    return make_user(test_db, "Alice", "alice@example.com", "alice-password")


@pytest.fixture(scope="function")
def bob(test_db: Session) -> models.User:
    return make_user(test_db, "Bob", "bob@example.com", "bob-password")


@pytest.fixture(scope="function")
def alice_project(test_db: Session, alice: models.User) -> models.Project:
    return make_project(test_db, alice, "Alice Project")


@pytest.fixture(scope="function")
def bob_project(test_db: Session, bob: models.User) -> models.Project:
    return make_project(test_db, bob, "Bob Project")


@pytest.fixture(scope="function")
def alice_task(test_db: Session, alice_project: models.Project) -> models.Task:
    return make_task(test_db, alice_project, "Alice Task")


@pytest.fixture(scope="function")
def bob_task(test_db: Session, bob_project: models.Project) -> models.Task:
    return make_task(test_db, bob_project, "Bob Task")


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def alice_headers(alice: models.User, token_service: TokenService) -> Dict[str, str]:
    return bearer(token_service.issue(alice.email))


@pytest.fixture(scope="function")
def bob_headers(bob: models.User, token_service: TokenService) -> Dict[str, str]:
    return bearer(token_service.issue(bob.email))
