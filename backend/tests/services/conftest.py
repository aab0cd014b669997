"""Service test fixtures — in-memory DB, fake image store and an ASGI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - The app is built around an injected AppContext; no dependency overrides
    - FakeImageStore records every upload and delete; failures are switchable

Design Decisions:
    - StaticPool: one shared connection so the app's sessions and test_db see
      the same in-memory database
    - Real ReportlabLabelRenderer: export tests assert on actual PDF/SVG output
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from closetmap.config import Settings
from closetmap.core.collaborator_protocols import StoredImage
from closetmap.core.domain_types import AuthMode
from closetmap.core.errors import ImageStorageError
from closetmap.db.base import Base
from closetmap.infrastructure.app_context import AppContext
from closetmap.infrastructure.database import DatabaseSessionManager
from closetmap.infrastructure.identity import HeaderCallerVerifier
from closetmap.infrastructure.label_renderer import ReportlabLabelRenderer
from closetmap.main import create_app
from closetmap.models.bag import Bag
from closetmap.models.cloth import Cloth

# Smallest valid payload: 1x1 GIF
TINY_IMAGE = "R0lGODlhAQABAAAAACw="
EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)


class FakeImageStore:
    """In-memory ImageStore."""

    def __init__(self):
        self.uploads: list[tuple[str, str]] = []
        self.deleted: list[str] = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def upload(self, image_base64: str, folder: str) -> StoredImage:
        if self.fail_uploads:
            raise ImageStorageError("provider unavailable", "upload")
        self.uploads.append((image_base64, folder))
        public_id = f"{folder}/img{len(self.uploads)}"
        return StoredImage(url=f"https://images.test/{public_id}.jpg", public_id=public_id)

    async def delete(self, public_id: str) -> None:
        if self.fail_deletes:
            raise ImageStorageError("provider unavailable", "delete")
        self.deleted.append(public_id)


class Seeder:
    """Direct inserts for arranging state the API cannot produce (fixed ids, times)."""

    def __init__(self, db):
        self.db = db
        self._tick = 0

    def _next_time(self) -> datetime:
        self._tick += 1
        return EPOCH + timedelta(minutes=self._tick)

    async def bag(
        self, owner_id: str, bag_id: str, name: str | None = None,
        barcode_value: str | None = None, created_at: datetime | None = None,
    ) -> dict:
        bag = Bag(
            bag_id=bag_id,
            name=name or f"Bag {bag_id}",
            barcode_value=barcode_value or f"BAG-{owner_id[:4].upper():0>4}{bag_id[1:]:0>4}",
            owner_id=owner_id,
            created_at=created_at or self._next_time(),
        )
        self.db.add(bag)
        await self.db.commit()
        return {"bag_id": bag.bag_id, "name": bag.name, "barcode_value": bag.barcode_value}

    async def cloth(self, owner_id: str, bag_id: str, cloth_id: str, **fields) -> dict:
        when = fields.pop("created_at", None) or self._next_time()
        values = {
            "name": "Shirt", "color": "white", "owner": "", "category": "",
            "notes": "", "favorite": False,
            "image_url": f"https://images.test/{cloth_id}.jpg",
            "image_public_id": f"closetmap/{owner_id}/clothes/{cloth_id}",
            "last_moved_timestamp": when,
        }
        values.update(fields)
        cloth = Cloth(
            cloth_id=cloth_id, owner_id=owner_id, container_bag_id=bag_id,
            created_at=when, **values,
        )
        self.db.add(cloth)
        await self.db.commit()
        return {"cloth_id": cloth_id, **values}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        auth_mode=AuthMode.HEADER,
        max_image_bytes=64 * 1024,
        barcode_max_attempts=3,
        log_format="text",
    )


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def context(test_engine, settings, image_store):
    return AppContext(
        settings=settings,
        db=DatabaseSessionManager.from_engine(test_engine),
        image_store=image_store,
        verifier=HeaderCallerVerifier(),
        label_renderer=ReportlabLabelRenderer(),
    )


@pytest.fixture
async def test_db(context):
    async with context.db.session() as session:
        yield session


@pytest.fixture
def seed(test_db):
    return Seeder(test_db)


@pytest.fixture
async def client(context):
    app = create_app(context)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


def _headers(owner_id: str) -> dict:
    return {"Authorization": "Bearer dev-token", "X-User-Id": owner_id}


@pytest.fixture
def alice():
    return _headers("alice")


@pytest.fixture
def bob():
    return _headers("bob")


@pytest.fixture
def tiny_image():
    return TINY_IMAGE


@pytest.fixture
def fetch(context):
    """Read rows through a fresh session, bypassing any identity-map state."""
    async def _fetch(model, **criteria):
        async with context.db.session() as session:
            result = await session.execute(select(model).filter_by(**criteria))
            return list(result.scalars().all())
    return _fetch
