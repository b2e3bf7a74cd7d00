"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import pytest
import pytest_asyncio
import sys
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.database.connection import Base
from app.models.user import User, AgentProfile
from app.models.property import Property
from app.utils.security import get_password_hash, create_access_token

# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "StrongPass123!"

MODULES_TO_PATCH = [
    'app.services.auth_service',
    'app.services.property_service',
    'app.services.real_estate_agent_service',
    'app.services.real_estate_agent.profile_service',
    'app.services.real_estate_agent.dashboard_service',
    'app.services.contact_service',
    'app.services.upload_service',
    'app.services.admin_dashboard_service',
    'app.database.connection',
]


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a fresh database for each test"""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session):
    """Create test HTTP client whose services all share the test session"""

    class TestSessionContext:
        def __init__(self, session):
            self.session = session

        async def __aenter__(self):
            return self.session

        async def __aexit__(self, *args):
            pass

    def make_test_session_local(session):
        return lambda: TestSessionContext(session)

    patches = []
    for module_name in MODULES_TO_PATCH:
        if module_name in sys.modules:
            module = sys.modules[module_name]
            if hasattr(module, 'AsyncSessionLocal'):
                patches.append(patch.object(module, 'AsyncSessionLocal', make_test_session_local(db_session)))

    for p in patches:
        p.start()

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        for p in patches:
            p.stop()


async def create_user(
    db_session,
    name: str = "Test User",
    email: str = None,
    role: str = "user",
    is_agent: bool = False,
    is_verified_agent: bool = True,
    **profile_fields,
) -> User:
    """Insert a user directly; agents get an agent profile"""
    user = User(
        id=str(uuid.uuid4()),
        name=name,
        email=(email or f"user_{uuid.uuid4().hex[:10]}@example.com").lower(),
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=role,
        is_agent=is_agent,
        is_active=True,
    )
    if is_agent:
        user.agent_profile = AgentProfile(
            id=str(uuid.uuid4()),
            specializations=profile_fields.pop("specializations", ["residential"]),
            phone=profile_fields.pop("phone", "+919876543210"),
            is_verified=is_verified_agent,
            **profile_fields,
        )
    db_session.add(user)
    await db_session.commit()
    return user


def auth_headers(user: User) -> dict:
    """Bearer header for a user, without going through /login"""
    token = create_access_token(data={"sub": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


async def create_property(db_session, agent: User, minutes_ago: int = 0, **overrides) -> Property:
    """Insert a property owned by `agent`; created_at is set explicitly for ordering"""
    fields = dict(
        id=str(uuid.uuid4()),
        agent_id=agent.id,
        title="Spacious family home near the park",
        description="A bright and airy home with a large garden, modern kitchen and plenty of storage.",
        type="house",
        listing_type="sale",
        status="active",
        featured=False,
        price_amount=250000,
        street="12 MG Road",
        city="Delhi",
        state="Delhi",
        zip_code="110001",
        bedrooms=3,
        bathrooms=2,
        area_value=1500,
        contact_phone="+919876543210",
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )
    fields.update(overrides)
    prop = Property(**fields)
    db_session.add(prop)
    await db_session.commit()
    return prop


async def _login(client: AsyncClient, user: User):
    resp = await client.post("/api/auth/login", json={
        "email": user.email,
        "password": TEST_PASSWORD
    })
    assert resp.status_code == 200, resp.text
    token = resp.json()["token"]
    client.headers.update({"Authorization": f"Bearer {token}"})


@pytest_asyncio.fixture(scope="function")
async def authenticated_user(client: AsyncClient, db_session):
    """Create and authenticate a plain user for testing"""
    user = await create_user(db_session, name="Test User")
    await _login(client, user)
    return client, user


@pytest_asyncio.fixture(scope="function")
async def authenticated_agent(client: AsyncClient, db_session):
    """Create and authenticate a verified real estate agent for testing"""
    agent = await create_user(db_session, name="Test Agent", role="agent", is_agent=True, city="Delhi")
    await _login(client, agent)
    return client, agent


@pytest_asyncio.fixture(scope="function")
async def authenticated_admin(client: AsyncClient, db_session):
    """Create and authenticate an admin user for testing"""
    admin = await create_user(db_session, name="System Administrator", email="admin@example.com", role="admin")
    await _login(client, admin)
    return client, admin


@pytest.fixture
def property_payload():
    """A valid create-property request body"""
    return {
        "title": "Modern 3BHK Apartment in Sector 21",
        "description": "A well maintained apartment with two balconies, covered parking and round the clock security.",
        "type": "apartment",
        "listing_type": "sale",
        "price": {"amount": 7500000, "currency": "INR", "price_type": "total"},
        "address": {
            "street": "Tower B, Sector 21",
            "city": "Gurgaon",
            "state": "Haryana",
            "zip_code": "122016",
            "country": "India",
            "coordinates": {"latitude": 28.4595, "longitude": 77.0266},
        },
        "specifications": {
            "bedrooms": 3,
            "bathrooms": 2,
            "area": {"value": 1450, "unit": "sqft"},
            "parking": 1,
            "furnished": "semi-furnished",
        },
        "amenities": ["gym", "security"],
        "contact_info": {"phone": "+919876543210", "email": "owner@example.com"},
    }
