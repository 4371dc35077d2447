"""
Pytest configuration and fixtures for tests.
Provides reusable test fixtures for database, users, clients and chat setup.
"""
import pytest
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from devfolio.main import app
from devfolio.core.database import get_db
from devfolio.core.rate_limit import limiter
from devfolio.core.security import create_access_token, hash_password
from devfolio.models.base import Base
from devfolio.models.user import User, MessagePermission


# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    TestSessionLocal = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Start every test with empty rate-limit counters."""
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture
def test_password() -> str:
    """Plaintext password of every fixture user."""
    return TEST_PASSWORD


@pytest.fixture
def password_hash() -> str:
    """One bcrypt hash shared by all fixture users."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def make_user(db_session: AsyncSession, password_hash: str):
    """Factory creating committed users with optional privacy settings."""

    async def _make_user(
        username: str,
        message_permission: MessagePermission = MessagePermission.EVERYONE,
        allow_messages: bool = True,
        **fields
    ) -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            avatar=f"https://example.com/{username}.png",
            message_permission=message_permission,
            allow_messages=allow_messages,
            **fields
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def test_user(make_user) -> User:
    """Create a test user."""
    return await make_user("alice")


@pytest.fixture
async def test_user_2(make_user) -> User:
    """Create a second test user."""
    return await make_user("bob")


@pytest.fixture
async def test_user_3(make_user) -> User:
    """Create a third test user."""
    return await make_user("carol")


@pytest.fixture
def auth_headers_for():
    """Build bearer headers for any user."""

    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def auth_headers(test_user, auth_headers_for) -> dict:
    """Authentication headers for test_user."""
    return auth_headers_for(test_user)


@pytest.fixture
def auth_headers_2(test_user_2, auth_headers_for) -> dict:
    """Authentication headers for test_user_2."""
    return auth_headers_for(test_user_2)


@pytest.fixture(scope="function")
async def unauth_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client WITHOUT authentication (for testing unauthorized access)."""

    async def override_get_db():
        yield db_session

    # Only override database, authentication runs for real
    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    # Clear overrides after test
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(unauth_client: AsyncClient, auth_headers: dict) -> AsyncClient:
    """Create test HTTP client authenticated as test_user."""
    unauth_client.headers.update(auth_headers)
    return unauth_client


@pytest.fixture
async def test_conversation(db_session: AsyncSession, test_user, test_user_2):
    """Create a conversation between test_user and test_user_2."""
    from devfolio.repositories.conversation_repo import ConversationRepository

    conversation = await ConversationRepository(db_session).insert_if_absent(
        test_user.id, test_user_2.id
    )
    await db_session.commit()
    return conversation


@pytest.fixture
async def test_project(db_session: AsyncSession, test_user):
    """Create a project owned by test_user."""
    from devfolio.models.project import Project, ProjectCategory

    project = Project(
        title="Pixel Garden",
        description="A cozy browser game about growing pixel plants.",
        thumbnail="https://example.com/pixel-garden.png",
        images=["https://example.com/1.png", "https://example.com/2.png"],
        technologies=["React", "Phaser"],
        category=ProjectCategory.GAME,
        author_id=test_user.id,
    )
    db_session.add(project)
    await db_session.commit()
    await db_session.refresh(project)
    return project


@pytest.fixture
async def test_thread(db_session: AsyncSession, test_user):
    """Create a discussion thread started by test_user."""
    from devfolio.models.thread import Thread, ThreadCategory

    thread = Thread(
        title="Favourite terminal fonts?",
        content="Looking for a monospace font with good ligatures.",
        category=ThreadCategory.QUESTIONS,
        tags=["fonts", "terminal"],
        author_id=test_user.id,
    )
    db_session.add(thread)
    await db_session.commit()
    await db_session.refresh(thread)
    return thread
