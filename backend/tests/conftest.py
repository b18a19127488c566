"""Pytest fixtures for organization closure testing.

Provides reusable test fixtures for:
- In-memory SQLite database session, recreated for every test
- Owner and non-owner users, an active organization and its projects
- Document factory (document + version + stored file of a given size)
- Closure checker registry and service bound to the test session
- Test clients authenticated as the owner or as another user

Usage:
    def test_preview(owner_client, org):
        response = owner_client.get(f"/api/v1/organizations/{org.id}/closure-preview")
        assert response.status_code == 200
"""

import sys
import os
from pathlib import Path

# Set environment variables BEFORE any imports to ensure they take effect.
# database.py builds its engine at import time from DATABASE_URL.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

if "JWT_SECRET" not in os.environ:
    os.environ["JWT_SECRET"] = "test-jwt-secret-key-256-bits-minimum-length-required-for-security"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from models.base import Base
from models.user import User
from models.org import Org, OrgMember
from models.project import Project
from models.document import Document, DocumentVersion, FileObject
from auth.jwt import create_access_token
from closure.checkers import build_default_registry
from closure.service import OrganizationClosureService


# One shared in-memory connection so every session sees the same data
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


# Import the actual get_db from database to use for dependency override
from database import get_db as database_get_db


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    Each test gets a clean database state.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def owner(db_session: Session) -> User:
    """Create the user that owns the test organization."""
    user = User(email="owner@test.com", name="Owner User", status="ACTIVE")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def other_user(db_session: Session) -> User:
    """Create a user that does not own the test organization."""
    user = User(email="member@test.com", name="Member User", status="ACTIVE")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def org(db_session: Session, owner: User) -> Org:
    """Create an active organization owned by `owner`, with the owner as a member."""
    org = Org(slug="test-org", name="Test Organization", owner_id=owner.id)
    db_session.add(org)
    db_session.flush()

    db_session.add(OrgMember(org_id=org.id, user_id=owner.id, role="owner"))
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture(scope="function")
def project(db_session: Session, org: Org) -> Project:
    """Create a project in the test organization."""
    project = Project(org_id=org.id, title="Website Redesign")
    db_session.add(project)
    db_session.commit()
    db_session.refresh(project)
    return project


@pytest.fixture(scope="function")
def make_document(db_session: Session, org: Org):
    """Factory creating a document with one version, optionally backed by a stored file.

    Usage:
        doc = make_document(project, title="Brief", size_bytes=1024)
        no_file = make_document(project, title="Notes", size_bytes=None)
        draft = make_document(project, title="Draft", versioned=False)
    """
    def _make(
        project: Project,
        title: str = "Brief",
        size_bytes=1024,
        doc_type: str = "brief",
        versioned: bool = True,
    ) -> Document:
        doc = Document(project_id=project.id, title=title, type=doc_type)
        db_session.add(doc)
        db_session.flush()

        if versioned:
            file_id = None
            if size_bytes is not None:
                file = FileObject(
                    org_id=org.id,
                    filename=f"{title.lower()}.pdf",
                    mime_type="application/pdf",
                    size_bytes=size_bytes,
                    storage_url=f"{org.id}/2026/03/{doc.id}.pdf",
                )
                db_session.add(file)
                db_session.flush()
                file_id = file.id
            db_session.add(DocumentVersion(document_id=doc.id, file_id=file_id, version=1))

        db_session.commit()
        db_session.refresh(doc)
        return doc

    return _make


@pytest.fixture(scope="function")
def registry(db_session: Session):
    """Default checker registry bound to the test session (no object storage)."""
    return build_default_registry(db_session)


@pytest.fixture(scope="function")
def service(db_session: Session, registry) -> OrganizationClosureService:
    return OrganizationClosureService(db=db_session, registry=registry)


@pytest.fixture(scope="function")
def client(db_session: Session):
    """Create an unauthenticated test client using the test session."""
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


def _authenticated(client: TestClient, user: User) -> TestClient:
    token = create_access_token(user_id=user.id, email=user.email)
    client.headers = {"Authorization": f"Bearer {token}"}
    return client


@pytest.fixture(scope="function")
def owner_client(client: TestClient, owner: User) -> TestClient:
    """Test client authenticated as the organization owner."""
    return _authenticated(client, owner)


@pytest.fixture(scope="function")
def other_client(client: TestClient, other_user: User) -> TestClient:
    """Test client authenticated as a user who does not own the organization."""
    return _authenticated(client, other_user)
