"""Shared fixtures: in-memory Mongo, users with tokens, a frozen clock."""

from datetime import date, datetime, timezone
from typing import Any, Callable, Dict

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from saloneasy.core.auth import create_access_token
from saloneasy.core.clock import get_clock
from saloneasy.db.mongodb import create_indexes, db
from saloneasy.main import app
from saloneasy.schemas.salon import SalonCreate, WorkingDay, WorkingHours
from saloneasy.schemas.service import ServiceCreate
from saloneasy.services.catalog_service import create_service
from saloneasy.services.salon_service import create_salon

# Sunday morning; the next day is a Monday
FROZEN_NOW = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)
MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)
SUNDAY = date(2026, 3, 8)


@pytest.fixture
async def mongo():
    mongomock_motor = pytest.importorskip("mongomock_motor")
    client = mongomock_motor.AsyncMongoMockClient()
    db.client = client
    db.db = client["saloneasy_test"]
    await create_indexes()
    yield db.db
    db.client = None
    db.db = None


@pytest.fixture
def make_user(mongo) -> Callable:
    """Insert a user and return it with a Bearer header for it."""

    async def _make_user(role: str = "customer", name: str = "Test User") -> Dict[str, Any]:
        user_id = ObjectId()
        await mongo.users.insert_one({
            "_id": user_id,
            "name": name,
            "email": f"{user_id}@saloneasy.test",
            "role": role,
            "isVerified": True,
        })
        token = create_access_token(data={"sub": str(user_id)})
        return {
            "id": str(user_id),
            "role": role,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _make_user


@pytest.fixture
async def owner(make_user):
    return await make_user("salon_owner", "Olivia Owner")


@pytest.fixture
async def customer(make_user):
    return await make_user("customer", "Carl Customer")


@pytest.fixture
async def salon(owner):
    """Open Monday 09:00-12:00 only."""
    hours = WorkingHours(
        monday=WorkingDay(open="09:00", close="12:00", isOpen=True),
        tuesday=WorkingDay(isOpen=False),
        wednesday=WorkingDay(isOpen=False),
        thursday=WorkingDay(isOpen=False),
        friday=WorkingDay(isOpen=False),
        saturday=WorkingDay(isOpen=False),
    )
    return await create_salon(
        SalonCreate(
            name="Shear Bliss",
            description="Cuts and colour",
            address="1 Main St",
            phone="555-0100",
            email="hello@shearbliss.test",
            workingHours=hours,
        ),
        owner["id"],
    )


@pytest.fixture
async def haircut(salon, owner):
    return await create_service(
        ServiceCreate(
            salon=salon["id"],
            name="Haircut",
            description="Wash and cut",
            price=40,
            duration=60,
            category="Hair",
        ),
        owner["id"],
    )


@pytest.fixture
def frozen_clock():
    app.dependency_overrides[get_clock] = lambda: (lambda: FROZEN_NOW)
    yield FROZEN_NOW
    app.dependency_overrides.pop(get_clock, None)


@pytest.fixture
async def client(mongo, frozen_clock):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
