import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OCR_SIMULATED_DELAY_SECONDS", "0")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from food_journal import models  # noqa: F401
from food_journal.api.deps import get_ocr_service, get_photo_storage
from food_journal.db.base import Base, get_db
from food_journal.main import app
from food_journal.models import User, UserSession
from food_journal.schemas.review import ReviewRow
from food_journal.services.ocr_service import MockMenuOCRService
from food_journal.services.photo_storage import PhotoStorage

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_row(
    restaurant_id=None,
    restaurant_name="Joe's Pizza",
    dish_name="Margherita",
    would_order_again=True,
    minutes_ago=0,
    **overrides
):
    """Joined review row with sensible defaults."""
    values = dict(
        id=uuid.uuid4(),
        menu_item_id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        rating=None,
        would_order_again=would_order_again,
        notes=None,
        photo_url=None,
        visited_at=None,
        created_at=NOW - timedelta(minutes=minutes_ago),
        dish_name=dish_name,
        category=None,
        restaurant_id=restaurant_id or uuid.uuid4(),
        restaurant_name=restaurant_name,
        city="New York",
        restaurant_photo_url=None,
    )
    values.update(overrides)
    return ReviewRow(**values)


class MemoryPhotoStorage(PhotoStorage):
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = {}

    async def upload(self, key, data):
        if self.fail:
            raise OSError("bucket unavailable")
        self.uploads[key] = data
        return f"https://photos.test/{key}"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def user(db):
    user = User(email="diner@example.com", display_name="Diner")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def token(db, user):
    session = UserSession(token="test-token", user_id=user.id)
    db.add(session)
    await db.commit()
    return session.token


@pytest.fixture
def photo_storage():
    return MemoryPhotoStorage()


@pytest.fixture
async def client(db, photo_storage):
    async def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ocr_service] = lambda: MockMenuOCRService(delay_seconds=0)
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
