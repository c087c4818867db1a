"""Pytest fixtures for DocFlow tests.

Provides reusable fixtures for:
- A SQLite database file per test (tables created from the models)
- A session factory for tests that need more than one session
- Users for each role and documents in a given status
- Authenticated test clients with JWT tokens

Usage:
    def test_manager_approves(manager_client, submitted_document):
        response = manager_client.post(
            f"/api/v1/documents/{submitted_document.id}/approval",
            json={"action": "APPROVE"},
        )
        assert response.status_code == 200
"""

import os

# Set environment variables BEFORE any docflow imports so settings pick them up
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from docflow.auth.jwt import create_access_token
from docflow.auth.roles import UserRole
from docflow.database import get_db as database_get_db
from docflow.dependencies import get_storage
from docflow.domain.documents.document_status import DocumentStatus
from docflow.models import Base, Document, User
from docflow.storage.local_storage import LocalDocumentStorage


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Engine bound to a fresh SQLite file; all tables created."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'docflow.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine) -> sessionmaker:
    """Factory for additional, independent sessions on the test database."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Session used by fixtures and assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def storage(tmp_path) -> LocalDocumentStorage:
    """File storage below the test's temporary directory."""
    return LocalDocumentStorage(tmp_path / "files")


def _create_user(db: Session, email: str, name: str, role: UserRole) -> User:
    user = User(email=email, name=name, role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db_session: Session) -> User:
    """Create an ADMIN user (uploads and owns documents)."""
    return _create_user(db_session, "admin@test.com", "Admin User", UserRole.ADMIN)


@pytest.fixture(scope="function")
def manager_user(db_session: Session) -> User:
    """Create a MANAGER user (first-stage reviewer)."""
    return _create_user(db_session, "manager@test.com", "Manager User", UserRole.MANAGER)


@pytest.fixture(scope="function")
def standardization_user(db_session: Session) -> User:
    """Create a STANDARDIZATION user (final reviewer)."""
    return _create_user(db_session, "std@test.com", "Standardization User", UserRole.STANDARDIZATION)


@pytest.fixture(scope="function")
def make_document(db_session: Session, admin_user: User) -> Callable[..., Document]:
    """Factory creating a committed document in a given status.

    Example:
        doc = make_document(DocumentStatus.PENDING, title="QM Manual")
    """

    def _make(status: DocumentStatus = DocumentStatus.SUBMITTED, title: str = "Quality Manual") -> Document:
        document = Document(
            title=title,
            description="Company quality manual",
            file_path="uploads/1704067200000-quality_manual.pdf",
            file_type="pdf",
            file_size=1024,
            status=status.value,
            version=1,
            creator_id=admin_user.id,
        )
        db_session.add(document)
        db_session.commit()
        db_session.refresh(document)
        return document

    return _make


@pytest.fixture(scope="function")
def submitted_document(make_document) -> Document:
    return make_document(DocumentStatus.SUBMITTED)


@pytest.fixture(scope="function")
def pending_document(make_document) -> Document:
    return make_document(DocumentStatus.PENDING)


@pytest.fixture(scope="function")
def drafted_document(make_document) -> Document:
    return make_document(DocumentStatus.DRAFTED)


@pytest.fixture(scope="function")
def app(session_factory, storage):
    """FastAPI app wired to the test database and storage.

    Each request gets its own session, like production.
    """
    from docflow.main import app as docflow_app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    docflow_app.dependency_overrides[database_get_db] = override_get_db
    docflow_app.dependency_overrides[get_storage] = lambda: storage
    yield docflow_app
    docflow_app.dependency_overrides.clear()


def _client_for(app, user: User) -> TestClient:
    token = create_access_token(user_id=user.id, role=UserRole(user.role), email=user.email)
    client = TestClient(app)
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client


@pytest.fixture(scope="function")
def client(app) -> TestClient:
    """Unauthenticated test client."""
    return TestClient(app)


@pytest.fixture(scope="function")
def admin_client(app, admin_user: User) -> TestClient:
    """Test client authenticated as the ADMIN user."""
    return _client_for(app, admin_user)


@pytest.fixture(scope="function")
def manager_client(app, manager_user: User) -> TestClient:
    """Test client authenticated as the MANAGER user."""
    return _client_for(app, manager_user)


@pytest.fixture(scope="function")
def standardization_client(app, standardization_user: User) -> TestClient:
    """Test client authenticated as the STANDARDIZATION user."""
    return _client_for(app, standardization_user)
