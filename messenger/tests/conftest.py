# messenger/tests/conftest.py

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from messenger.api import dependencies
from messenger.config import AppConfig
from messenger.gateways.chat_gateway import ChatGateway
from messenger.gateways.message_gateway import MessageGateway
from messenger.gateways.participant_gateway import ParticipantGateway
from messenger.gateways.profile_gateway import ProfileGateway
from messenger.infrastructure.database import create_database
from messenger.infrastructure.security import SecurityService
from messenger.infrastructure.uow import UnitOfWork
from messenger.main import Application

API = "/api/v1"


@pytest.fixture(scope="function")
def app_config():
    """
    Provide a test configuration with an in-memory SQLite database.
    """
    return AppConfig(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        IDENTITY_SECRET_KEY="test-identity-secret-key-for-hs256-tokens",
        PROJECT_NAME="Test Messenger API",
        API_V1_STR=API,
        ALGORITHM="HS256",
        ACCESS_TOKEN_EXPIRE_MINUTES=5,
        SEED_DEMO_DATA=False,
    )


@pytest.fixture(scope="function")
async def engine(app_config):
    """Create a SQLAlchemy engine for testing with shared in-memory SQLite."""
    engine = create_async_engine(
        app_config.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        from messenger.infrastructure import models

        await conn.run_sync(models.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine):
    """Provide a SQLAlchemy session for testing."""
    async_session_factory = async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False
    )
    session = async_session_factory()
    yield session
    await session.close()


@pytest.fixture(scope="function")
async def uow():
    return UnitOfWork()


@pytest.fixture
def profile_gateway(db_session, uow):
    return ProfileGateway(db_session, uow)


@pytest.fixture
def chat_gateway(db_session, uow):
    return ChatGateway(db_session, uow)


@pytest.fixture
def participant_gateway(db_session, uow):
    return ParticipantGateway(db_session, uow)


@pytest.fixture
def message_gateway(db_session, uow):
    return MessageGateway(db_session, uow)


@pytest.fixture
def security_service(app_config):
    return SecurityService(app_config)


@pytest.fixture(scope="function")
def override_get_db(db_session):
    """Override the get_session dependency to use the test session."""

    async def _override_get_db():
        yield db_session

    return _override_get_db


@pytest.fixture(scope="function")
async def app(app_config, engine):
    """Create the FastAPI app with the test database."""
    application = Application(config=app_config)
    application.database = create_database(engine)
    return application.create_app()


@pytest.fixture(scope="function")
async def app_with_db(app, override_get_db):
    app.dependency_overrides[dependencies.get_session] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app_with_db):
    async with AsyncClient(
        transport=ASGITransport(app=app_with_db), base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def make_auth_header(security_service):
    """Mint a bearer header the way the identity provider would."""

    def _make(user_id: str, **claims):
        token, _ = security_service.create_access_token({"sub": user_id, **claims})
        return {"Authorization": f"Bearer {token}"}

    return _make


async def _sign_in(client, make_auth_header, user_id, first_name):
    headers = make_auth_header(
        user_id, first_name=first_name, email=f"{first_name.lower()}@example.com"
    )
    response = await client.get(f"{API}/profile/", headers=headers)
    assert response.status_code == 200, response.text
    return {"id": user_id, "headers": headers, "profile": response.json()}


@pytest.fixture
async def alice(client, make_auth_header):
    return await _sign_in(client, make_auth_header, "user_alice", "Alice")


@pytest.fixture
async def bob(client, make_auth_header):
    return await _sign_in(client, make_auth_header, "user_bob", "Bob")


@pytest.fixture
async def carol(client, make_auth_header):
    return await _sign_in(client, make_auth_header, "user_carol", "Carol")
