"""
Shared fixtures: in-memory database, API client and user factories.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.core.security import create_access_token, get_password_hash
from app.db.base import Base
from app.db.session import get_db, init_db
from app.models import User, UserRole
from app.services.sequence_service import next_id, USERS

DEFAULT_PASSWORD = "password123"


@pytest.fixture
def engine():
    # One shared connection; the id allocator commits on it as well
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Insert a user directly, bypassing invites."""
    def _make(name, role=UserRole.EMPLOYEE, manager_id=None, email=None, password=DEFAULT_PASSWORD):
        user = User(
            id=next_id(USERS, db),
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            role=role,
            manager_id=manager_id,
            hashed_password=get_password_hash(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def team(make_user):
    """Admin, a manager and an employee reporting to the manager."""
    admin = make_user("Admin", UserRole.ADMIN)
    manager = make_user("John Manager", UserRole.MANAGER)
    employee = make_user("Sarah Employee", UserRole.EMPLOYEE, manager_id=manager.id)
    return admin, manager, employee


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token(data={"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}
    return _headers
