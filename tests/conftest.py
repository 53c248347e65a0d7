"""
Test configuration for pytest
"""

import pytest
import os
import uuid
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session
from typing import Callable, Dict, Generator

# Test environment variables
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEBUG"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"

from fastapi.testclient import TestClient  # noqa: E402

from ashram_connect.core.auth import create_access_token, hash_password  # noqa: E402
from ashram_connect.core.database import get_session  # noqa: E402
from ashram_connect.main import app  # noqa: E402
from ashram_connect.models import (  # noqa: E402
    AppRole, Ashram, AshramAdmin, ChildrenNeed, NeedCategory, NeedUrgency, Profile, User, UserRole
)


# Create test engine using in-memory SQLite; one shared connection so the
# app's worker threads see the tables created here
test_engine = create_engine(
    "sqlite://",
    echo=False,
    future=True,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    # Create all tables
    SQLModel.metadata.create_all(test_engine)

    # Create session
    with Session(test_engine) as session:
        yield session

    # Cleanup
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client bound to the test session"""
    def override_get_session():
        yield db

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Factory creating an account with profile and global role"""
    def _make_user(email: str = None, role: AppRole = AppRole.USER, full_name: str = "Test User") -> User:
        email = email or f"user-{uuid.uuid4().hex[:8]}@ashramconnect.org"
        user = User(email=email, password_hash=hash_password("password123"))
        db.add(user)
        db.flush()
        db.add(Profile(user_id=user.id, full_name=full_name, email=email))
        db.add(UserRole(user_id=user.id, role=role))
        db.commit()
        db.refresh(user)
        return user
    return _make_user


@pytest.fixture
def auth_headers() -> Callable[..., Dict[str, str]]:
    """Bearer header for a user, with the role baked into the token"""
    def _auth_headers(user: User, role: AppRole = AppRole.USER) -> Dict[str, str]:
        token = create_access_token(user_id=user.id, role=role.value)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
def test_ashram(db: Session) -> Ashram:
    """Create a test ashram"""
    ashram = Ashram(name="Sunrise Ashram", slug="sunrise", city="Pune", primary_color="#f97316")
    db.add(ashram)
    db.commit()
    db.refresh(ashram)
    return ashram


@pytest.fixture
def other_ashram(db: Session) -> Ashram:
    """A second tenant for isolation checks"""
    ashram = Ashram(name="Riverside Ashram", slug="riverside", city="Nashik")
    db.add(ashram)
    db.commit()
    db.refresh(ashram)
    return ashram


@pytest.fixture
def user(make_user) -> User:
    return make_user(email="donor@ashramconnect.org")


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(email="admin@ashramconnect.org", role=AppRole.ADMIN)


@pytest.fixture
def sub_admin_user(make_user) -> User:
    return make_user(email="staff@ashramconnect.org", role=AppRole.SUB_ADMIN)


@pytest.fixture
def tenant_admin_user(db: Session, make_user, test_ashram: Ashram) -> User:
    """Plain user who administers the test ashram"""
    user = make_user(email="warden@ashramconnect.org")
    db.add(AshramAdmin(ashram_id=test_ashram.id, user_id=user.id))
    db.commit()
    return user


@pytest.fixture
def make_need(db: Session) -> Callable[..., ChildrenNeed]:
    def _make_need(
        ashram: Ashram = None,
        title: str = "School notebooks",
        category: NeedCategory = NeedCategory.EDUCATION,
        urgency: NeedUrgency = NeedUrgency.MEDIUM,
        quantity_needed: int = 50,
        quantity_fulfilled: int = 0,
        is_active: bool = True,
    ) -> ChildrenNeed:
        need = ChildrenNeed(
            ashram_id=ashram.id if ashram else None,
            title=title,
            category=category,
            urgency=urgency,
            quantity_needed=quantity_needed,
            quantity_fulfilled=quantity_fulfilled,
            is_active=is_active,
        )
        db.add(need)
        db.commit()
        db.refresh(need)
        return need
    return _make_need
