"""
Pytest configuration and fixtures.
"""
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import Base, create_engine_from_url, get_db
from app.core.exceptions import StorageError
from app.core.security import create_access_token
from app.main import app
from app.models.user import User
from app.services.storage_factory import get_storage
from app.services.storage_interface import build_public_url, key_from_public_url

TEST_BUCKET_URL = "https://photos.test"


class FakeBlobStore:
    """In-memory StorageInterface that records every call."""

    def __init__(self, base_url: str = TEST_BUCKET_URL):
        self.base_url = base_url
        self.objects = {}
        self.puts = []
        self.deletes = []
        self.fail_put = False
        self.fail_delete = False

    def put(self, key, data, content_type="application/octet-stream"):
        self.puts.append(key)
        if self.fail_put:
            raise StorageError(key, "simulated outage")
        self.objects[key] = (data, content_type)

    def delete(self, key):
        self.deletes.append(key)
        if self.fail_delete:
            raise StorageError(key, "simulated outage")
        self.objects.pop(key, None)

    def public_url(self, key):
        return build_public_url(self.base_url, key)

    def key_from_url(self, url):
        return key_from_public_url(self.base_url, url)


@pytest.fixture(scope="function")
async def engine(tmp_path):
    """File-backed SQLite so every connection sees the same schema."""
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def test_db(session_factory):
    """Create test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return FakeBlobStore()


@pytest.fixture
async def users(test_db):
    """Two account rows: the owner of everything under test, and a stranger."""
    owner = User(email="owner@example.com", username="owner")
    stranger = User(email="stranger@example.com", username="stranger")
    test_db.add_all([owner, stranger])
    await test_db.commit()
    return owner, stranger


@pytest.fixture
def owner(users):
    return users[0]


@pytest.fixture
def stranger(users):
    return users[1]


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner.id)


@pytest.fixture
def stranger_headers(stranger):
    return auth_headers(stranger.id)


@pytest.fixture(scope="function")
async def client(session_factory, storage):
    """Create test client with test database and in-memory blob store."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
