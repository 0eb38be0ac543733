"""Pytest configuration and fixtures."""
import os

# Settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("MONGODB_DB_NAME", "performance_track_test")

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport


COLLECTIONS = (
    "users",
    "goals",
    "feedback",
    "goal_completion_approvals",
    "notifications",
    "audit_logs",
)

EMPLOYEE_ID = ObjectId()
MANAGER_ID = ObjectId()
OTHER_MANAGER_ID = ObjectId()


def _mock_collection():
    collection = AsyncMock()
    collection.insert_one.side_effect = lambda *args, **kwargs: MagicMock(inserted_id=ObjectId())

    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=[])
    collection.find = MagicMock(return_value=cursor)
    collection.cursor = cursor
    return collection


@pytest.fixture
def mock_db():
    """
    Motor database stand-in.

    - ``mock_db.collections[name]`` is an AsyncMock collection
    - ``collection.cursor.to_list`` controls what ``find`` returns
    - ``mock_db.session`` is the session handed out by ``start_session``
    """
    db = MagicMock()
    db.collections = {name: _mock_collection() for name in COLLECTIONS}
    db.__getitem__.side_effect = lambda name: db.collections[name]

    session = MagicMock()
    session.__aenter__.return_value = session
    db.client.start_session = AsyncMock(return_value=session)
    db.session = session
    return db


@pytest.fixture
def employee_doc():
    """Stored employee user document."""
    return {
        "_id": EMPLOYEE_ID,
        "email": "emma@example.com",
        "name": "Emma",
        "role": "EMPLOYEE",
        "hashed_password": "x",
        "created_at": datetime(2025, 1, 1),
        "updated_at": datetime(2025, 1, 1),
    }


@pytest.fixture
def manager_doc():
    """Stored manager user document."""
    return {
        "_id": MANAGER_ID,
        "email": "mark@example.com",
        "name": "Mark",
        "role": "MANAGER",
        "hashed_password": "x",
        "created_at": datetime(2025, 1, 1),
        "updated_at": datetime(2025, 1, 1),
    }


@pytest.fixture
def make_goal_doc():
    """Factory for stored goal documents; keyword arguments override fields."""

    def factory(**overrides):
        doc = {
            "_id": ObjectId(),
            "title": "Ship the reporting API",
            "description": "Deliver v1 of the reporting endpoints",
            "category": "TECHNICAL",
            "priority": "HIGH",
            "assigned_to_user": {"id": str(EMPLOYEE_ID), "name": "Emma"},
            "assigned_manager": {"id": str(MANAGER_ID), "name": "Mark"},
            "start_date": datetime(2025, 1, 1),
            "end_date": datetime(2025, 1, 10),
            "status": "PENDING",
            "request_changes": False,
            "created_at": datetime(2025, 1, 1, 9, 0),
            "updated_at": datetime(2025, 1, 1, 9, 0),
        }
        doc.update(overrides)
        return doc

    return factory


@pytest.fixture
def submitted_goal_doc(make_goal_doc):
    """A goal waiting for the manager's completion decision."""
    return make_goal_doc(
        status="PENDING_COMPLETION_APPROVAL",
        approved_by=str(MANAGER_ID),
        approved_date=datetime(2025, 1, 2),
        evidence_link="https://x",
        evidence_link_description="Release notes",
        completion_submitted_date=datetime(2025, 1, 9),
        completion_approval_status="PENDING",
        evidence_link_verification_status="NOT_VERIFIED",
    )


@pytest.fixture
def goal_service(mock_db):
    """GoalService with mocked audit and notification collaborators."""
    from performance_track.services.goal_service import GoalService

    return GoalService(mock_db, notifications=AsyncMock(), audit=AsyncMock())


def auth_headers(user_id, role="EMPLOYEE"):
    """Bearer header for a user."""
    from performance_track.utils.auth import create_access_token

    token = create_access_token(user_id=str(user_id), role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Build bearer headers: ``headers_for(user_id, role)``."""
    return auth_headers


@pytest_asyncio.fixture
async def app_client(mock_db):
    """
    Async HTTP client against the app, with the database replaced by ``mock_db``.

    The lifespan is not run, so no MongoDB connection is made.
    """
    from performance_track.database import get_database
    from performance_track.main import app

    app.dependency_overrides[get_database] = lambda: mock_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def employee_id():
    return str(EMPLOYEE_ID)


@pytest.fixture
def manager_id():
    return str(MANAGER_ID)


@pytest.fixture
def other_manager_id():
    return str(OTHER_MANAGER_ID)
