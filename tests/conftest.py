"""Shared test configuration and fixtures for Booking User Fields tests"""

import logging
import os

from tests.config import test_config

# The application reads its configuration at import time
os.environ.setdefault("DATABASE_URL", test_config["database_url"])
os.environ.setdefault("JWT_SECRET_KEY", test_config["jwt_secret_key"])
os.environ.setdefault("ADMIN_API_KEY", test_config["admin_api_key"])

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import booking_fields.models  # noqa: F401
from booking_fields.auth.jwt_utils import jwt_utils
from booking_fields.auth.models import EDIT_CALENDARS, MANAGE_BOOKINGS, MANAGE_OPTIONS
from booking_fields.hooks import FieldHooks
from booking_fields.main import app
from booking_fields.models.database import get_db, get_redis
from booking_fields.services.booking_field_service import BookingFieldService
from booking_fields.services.editor_state_manager import EditorStateManager
from booking_fields.services.field_renderer import FieldRenderer
from booking_fields.services.field_resolver import FieldResolver
from booking_fields.services.field_settings_service import FieldSettingsService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALL_PERMISSIONS = [MANAGE_OPTIONS, EDIT_CALENDARS, MANAGE_BOOKINGS]


@pytest.fixture
def _db_session():
    """Private DB session for fixtures only.

    Each test gets a fresh in-memory SQLite database. Prefer the service
    fixtures below over using this session directly.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    session = Session(engine)

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def redis_client():
    """In-memory Redis replacement shared by a single test"""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def hooks():
    return FieldHooks()


@pytest.fixture
def settings_service(_db_session, hooks):
    return FieldSettingsService(_db_session, test_config, hooks)


@pytest.fixture
def resolver(settings_service):
    return FieldResolver(settings_service)


@pytest.fixture
def renderer(hooks):
    return FieldRenderer(hooks=hooks)


@pytest.fixture
def booking_field_service(_db_session, resolver):
    return BookingFieldService(_db_session, resolver)


@pytest.fixture
def editor_state_manager(redis_client):
    return EditorStateManager(redis_client=redis_client, ttl_seconds=1800)


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a token with the given permissions"""

    def _make(permissions=None, user_id="admin-test"):
        if permissions is None:
            permissions = ALL_PERMISSIONS
        token = jwt_utils.create_access_token(user_id, permissions)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def client(_db_session, redis_client, hooks):
    """Test client using the test database, fake Redis and the test's hooks"""
    original_overrides = app.dependency_overrides.copy()
    original_hooks = getattr(app.state, "field_hooks", None)

    def get_test_db():
        return _db_session

    def get_test_redis():
        return redis_client

    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_redis] = get_test_redis
    app.state.field_hooks = hooks

    yield TestClient(app)

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)
    app.state.field_hooks = original_hooks
