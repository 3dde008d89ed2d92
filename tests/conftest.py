import os

# Settings are read at import time; provide test values before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_school_records.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-school-records")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from app.database import get_db
from app.models.base import Base
from app.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from app.models.user import User
from app.models.school import School
from app.models.school_membership import SchoolMembership
from app.models.school_invitation import SchoolInvitation  # noqa: F401
from app.models.school_context import CallerIdentity
from app.models.role import SchoolRole
# Import FastAPI app AFTER model imports
from app.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: str = "test-user-123",
    email: str | None = None,
    expired: bool = False,
    full_name: str | None = None,
) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        email: Email claim (omitted when None)
        expired: If True, create expired token
        full_name: Optional display name ('name' claim)

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": user_id, "exp": exp, "iat": datetime.now(UTC)}
    if email is not None:
        payload["email"] = email
    if full_name is not None:
        payload["name"] = full_name

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(user: User) -> dict:
    """Authorization headers for an existing user"""
    token = create_test_token(user_id=user.auth_user_id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


def make_user(db_session, auth_user_id: str, email: str | None) -> User:
    user = User(auth_user_id=auth_user_id, email=email)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def add_member(db_session, school: School, user: User, role: SchoolRole) -> SchoolMembership:
    membership = SchoolMembership(school_id=school.id, user_id=user.id, role=role)
    db_session.add(membership)
    db_session.commit()
    db_session.refresh(membership)
    return membership


@pytest.fixture
def founder(db_session):
    """User who created the test school"""
    return make_user(db_session, "founder-1", "founder@greenvalley.org")


@pytest.fixture
def school(db_session, founder):
    """Test school owned by founder"""
    school = School(name="Green Valley High", code="GVH-001", created_by=founder.id)
    db_session.add(school)
    db_session.commit()
    db_session.refresh(school)
    return school


@pytest.fixture
def other_school(db_session, founder):
    """Second school for isolation tests"""
    school = School(name="Riverside Technical", code="RST-002", created_by=founder.id)
    db_session.add(school)
    db_session.commit()
    db_session.refresh(school)
    return school


@pytest.fixture
def super_admin_membership(db_session, school, founder):
    return add_member(db_session, school, founder, SchoolRole.SUPER_ADMIN)


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, "admin-1", "admin@greenvalley.org")


@pytest.fixture
def admin_membership(db_session, school, admin_user):
    return add_member(db_session, school, admin_user, SchoolRole.ADMIN)


@pytest.fixture
def teacher_user(db_session):
    return make_user(db_session, "teacher-1", "teacher@greenvalley.org")


@pytest.fixture
def teacher_membership(db_session, school, teacher_user):
    return add_member(db_session, school, teacher_user, SchoolRole.TEACHER)


@pytest.fixture
def viewer_user(db_session):
    return make_user(db_session, "viewer-1", "viewer@greenvalley.org")


@pytest.fixture
def viewer_membership(db_session, school, viewer_user):
    return add_member(db_session, school, viewer_user, SchoolRole.VIEWER)


@pytest.fixture
def existing_user(db_session):
    """Registered account that does not belong to the test school"""
    return make_user(db_session, "existing-1", "existing@x.com")


@pytest.fixture
def super_admin_headers(founder, super_admin_membership):
    return headers_for(founder)


@pytest.fixture
def admin_headers(admin_user, admin_membership):
    return headers_for(admin_user)


@pytest.fixture
def teacher_headers(teacher_user, teacher_membership):
    return headers_for(teacher_user)


@pytest.fixture
def viewer_headers(viewer_user, viewer_membership):
    return headers_for(viewer_user)


@pytest.fixture
def admin_caller(admin_user, admin_membership):
    """CallerIdentity for service-level tests"""
    return CallerIdentity(user=admin_user, email=admin_user.email)


@pytest.fixture
def teacher_caller(teacher_user, teacher_membership):
    return CallerIdentity(user=teacher_user, email=teacher_user.email)
