import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth_service.app.main import app as auth_app
from lab_service.app.main import app as lab_app
from shared.core.auth import token_for_user
from shared.core.database import AuthBase, Base, get_auth_db, get_lab_db
from shared.models.users import Users
from shared.utils.enums import UserRole


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    AuthBase.metadata.create_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    AuthBase.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


def _override(session):
    def _get_db():
        yield session
    return _get_db


@pytest.fixture
def lab_client(db_session):
    lab_app.dependency_overrides[get_lab_db] = _override(db_session)
    lab_app.dependency_overrides[get_auth_db] = _override(db_session)
    yield TestClient(lab_app)
    lab_app.dependency_overrides.clear()


@pytest.fixture
def auth_client(db_session):
    auth_app.dependency_overrides[get_auth_db] = _override(db_session)
    yield TestClient(auth_app)
    auth_app.dependency_overrides.clear()


@pytest.fixture
def today():
    return datetime.now(timezone.utc).date()


@pytest.fixture
def make_user(db_session):
    def _make(role=UserRole.LAB_ASSISTANT.value, name="Test User", email=None,
              skills=None, is_approved=True, is_active=True, password=None):
        user = Users(
            name=name,
            email=email or f"{uuid.uuid4().hex[:10]}@uni.edu",
            role=role,
            skills=skills or [],
            is_active=is_active,
            is_approved=is_approved,
            password_hash="!",
        )
        if password:
            user.set_password(password)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {token_for_user(user)}"}
    return _headers


@pytest.fixture
def assistant(make_user):
    return make_user(role=UserRole.LAB_ASSISTANT.value, name="Asha Assistant")


@pytest.fixture
def technician(make_user):
    return make_user(role=UserRole.LAB_TECHNICIAN.value, name="Tomas Technician",
                     skills=["electronics", "calibration"])


@pytest.fixture
def lab_admin(make_user):
    return make_user(role=UserRole.LAB_ADMIN.value, name="Ada Admin")


@pytest.fixture
def assistant_headers(assistant, headers_for):
    return headers_for(assistant)


@pytest.fixture
def technician_headers(technician, headers_for):
    return headers_for(technician)


@pytest.fixture
def admin_headers(lab_admin, headers_for):
    return headers_for(lab_admin)


@pytest.fixture
def create_asset(lab_client, assistant_headers):
    def _create(**overrides):
        payload = {
            "asset_name": "Oscilloscope",
            "category": "Electronics",
            "asset_type": "non-consumable",
            "serial_number": f"SN-{uuid.uuid4().hex[:8]}",
            "lab_location": "Lab A",
        }
        payload.update(overrides)
        response = lab_client.post("/api/assets/", json=payload, headers=assistant_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _create
