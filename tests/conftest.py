"""
Test configuration and fixtures for the plot catalog API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os
import tempfile

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["ADMIN_EMAILS"] = "Admin@Test.com, ops@test.com"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="plot-catalog-storage-"))

import io
import uuid
from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers, UploadFile

from plot_catalog.config import settings
from plot_catalog.database import Base, get_db
from plot_catalog.main import app
from plot_catalog.models.listing import DealType, ListingStatus, UserListing
from plot_catalog.models.plot import Plot
from plot_catalog.models.user import User
from plot_catalog.repositories.listing import ListingRepository
from plot_catalog.repositories.plot import PlotRepository
from plot_catalog.repositories.user import UserRepository
from plot_catalog.services.storage import PhotoStorage, get_photo_storage
from plot_catalog.utils.auth import create_access_token


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"
ADMIN_EMAIL = "admin@test.com"


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path) -> PhotoStorage:
    """Photo bucket rooted in a temporary directory."""
    return PhotoStorage(settings.model_copy(update={"storage_dir": str(tmp_path)}))


@pytest.fixture
async def async_client(session_factory, storage) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with database and storage overrides."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_photo_storage] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# Repository fixtures
@pytest.fixture
def user_repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def plot_repository(db_session: AsyncSession) -> PlotRepository:
    return PlotRepository(db_session)


@pytest.fixture
def listing_repository(db_session: AsyncSession) -> ListingRepository:
    return ListingRepository(db_session)


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create_user(
        user_repo: UserRepository,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        full_name: str = "Test User",
        is_active: bool = True
    ) -> User:
        return await user_repo.create_user({
            "email": email or f"test{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "full_name": full_name,
            "is_active": is_active
        })


class PlotFactory:
    """Factory for creating catalog plots."""

    @staticmethod
    def create_plot_data(**overrides) -> Dict:
        data = {
            "title": "Terreno en Frutillar",
            "location": "Frutillar, Los Lagos",
            "price_usd": 45000.0,
            "area_m2": 5000.0,
            "status": "available",
            "type": "residential",
            "description": "Vista al lago",
            "image_url": None,
            "image_urls": [],
            "lat": -41.12,
            "lng": -73.05,
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_plot(plot_repo: PlotRepository, **overrides) -> Plot:
        return await plot_repo.create(PlotFactory.create_plot_data(**overrides))


class ListingFactory:
    """Factory for creating user submissions."""

    @staticmethod
    async def create_listing(
        listing_repo: ListingRepository,
        user_id: uuid.UUID,
        **overrides
    ) -> UserListing:
        data = {
            "title": "Parcela en Osorno",
            "location": "Osorno, Los Lagos",
            "price_usd": 30000.0,
            "area_m2": 5000.0,
            "type": "agrarian",
            "deal_type": DealType.SALE.value,
            "description": "Con pozo profundo",
            "image_urls": [],
            "lat": -40.57,
            "lng": -73.13,
            "status": ListingStatus.PENDING.value,
            "user_id": user_id,
        }
        data.update(overrides)
        return await listing_repo.create(data)


def png_bytes(color: str = "green") -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_upload(filename: str, content: bytes, content_type: str = "image/png") -> UploadFile:
    """UploadFile as FastAPI builds it from a multipart part."""
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type})
    )


def store_photos(storage: PhotoStorage, namespace: str, names: List[str]) -> None:
    """Write objects straight into the bucket, as a previous upload would have."""
    directory = storage.root / namespace
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(png_bytes())


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def test_user(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email="user@test.com", full_name="Ana Rojas")


@pytest.fixture
async def test_admin(user_repository: UserRepository) -> User:
    return await UserFactory.create_user(user_repository, email=ADMIN_EMAIL, full_name="Admin")


@pytest.fixture
async def test_listing(listing_repository: ListingRepository, test_user: User) -> UserListing:
    return await ListingFactory.create_listing(listing_repository, test_user.id)


@pytest.fixture
def user_headers(test_user: User) -> Dict[str, str]:
    return auth_headers(test_user)


@pytest.fixture
def admin_headers(test_admin: User) -> Dict[str, str]:
    return auth_headers(test_admin)
