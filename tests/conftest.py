"""Shared test fixtures for the CMS bootstrap.

Provides:
- An in-memory host (``FakeHost``) whose services are AsyncMocks backed by
  simple dict storage, so call counts and arguments can be asserted
- A seed upload directory and dataset factories
- Async PostgreSQL test database for the SQLAlchemy host (skipped when
  the database is not reachable)
"""

from __future__ import annotations

import itertools
import os

# Set test environment BEFORE any package imports so Settings() picks them up.
os.environ.setdefault("ENVIRONMENT", "development")

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from cms_bootstrap.config import Settings
from cms_bootstrap.host.contracts import Host, StoredValue
from cms_bootstrap.models import Base
from cms_bootstrap.schemas.seed import (
    ArticleSeed,
    CategorySeed,
    GlobalSeed,
    SeedDataset,
    SeoSeed,
    WriterSeed,
)

# A 1x1 PNG; contents are never inspected by the bootstrap
PIXEL = bytes.fromhex(
    "89504e470d0a1a0a0000000d49484452000000010000000108060000001f15c489"
    "0000000d4944415478da636460f85f0f0002870180eb47ba920000000049454e44ae426082"
)

# ---------------------------------------------------------------------------
# In-memory host
# ---------------------------------------------------------------------------


class InMemorySettingsStore:
    """Versioned key-value store with the same compare-and-set rules as core_store."""

    def __init__(self):
        self.data: dict[str, StoredValue] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        current = self.data.get(key)
        self.data[key] = StoredValue(value, 1 if current is None else current.version + 1)

    async def compare_and_set(self, key, value, expected_version):
        current = self.data.get(key)
        if expected_version is None:
            if current is not None:
                return False
        elif current is None or current.version != expected_version:
            return False
        await self.set(key, value)
        return True


class FakeHost(Host):
    """Host whose services record every call. Records live in ``created``."""

    def __init__(self, *, public_role=True, admin_exists=False, super_admin=True):
        ids = itertools.count(1)
        asset_ids = itertools.count(100)
        self.created: list[tuple[str, dict]] = []
        self.permissions: list[tuple[str, int]] = []
        self.uploaded: list[tuple[object, dict]] = []

        def _create(model, fields):
            record = {"id": next(ids), **fields}
            self.created.append((model, fields))
            return record

        def _upload(file, file_info):
            self.uploaded.append((file, file_info))
            return [{"id": next(asset_ids), "name": file_info["name"]}]

        def _grant(action, role_id):
            self.permissions.append((action, role_id))
            return {"id": len(self.permissions), "action": action, "role": role_id}

        content = AsyncMock()
        content.create = AsyncMock(side_effect=_create)
        uploads = AsyncMock()
        uploads.upload = AsyncMock(side_effect=_upload)
        roles = AsyncMock()
        roles.find_role = AsyncMock(
            return_value={"id": 2, "name": "Public", "type": "public"} if public_role else None
        )
        roles.create_permission = AsyncMock(side_effect=_grant)
        admin_users = AsyncMock()
        admin_users.exists = AsyncMock(return_value=admin_exists)
        admin_users.create = AsyncMock(return_value={"id": 1})
        admin_roles = AsyncMock()
        admin_roles.get_super_admin = AsyncMock(
            return_value={"id": 1, "code": "strapi-super-admin"} if super_admin else None
        )
        admin_roles.create = AsyncMock(return_value={"id": 1})

        super().__init__(
            store=InMemorySettingsStore(),
            content=content,
            uploads=uploads,
            roles=roles,
            admin_users=admin_users,
            admin_roles=admin_roles,
        )


@pytest.fixture
def host():
    return FakeHost()


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


def make_settings(**overrides) -> Settings:
    """Settings instance with bootstrap-relevant fields overridden."""
    s = Settings()
    s.ADMIN_CREATE = True
    s.BOOTSTRAP_CONTENT = True
    s.ADMIN_USERNAME = "admin"
    s.ADMIN_EMAIL = "admin@example.com"
    s.ADMIN_FN = "Ada"
    s.ADMIN_LN = "Admin"
    s.ADMIN_PASS = "Str0ngPassword!"
    s.SEED_CONCURRENCY = 4
    for key, value in overrides.items():
        setattr(s, key, value)
    return s


def make_dataset() -> SeedDataset:
    """2 categories, 1 writer, 1 article, 1 global record."""
    return SeedDataset(
        categories=[
            CategorySeed(name="news", slug="news"),
            CategorySeed(name="tech", slug="tech"),
        ],
        writers=[WriterSeed(name="David Doe", email="daviddoe@example.com")],
        articles=[
            ArticleSeed(
                title="Hello world",
                slug="hello-world",
                description="First post",
                content="Body",
                category="tech",
                author="daviddoe@example.com",
            )
        ],
        global_=GlobalSeed(
            site_name="My Blog",
            default_seo=SeoSeed(meta_title="Page", meta_description="A blog"),
        ),
    )


@pytest.fixture
def dataset():
    return make_dataset()


@pytest.fixture
def upload_dir(tmp_path):
    """Upload directory holding every file ``make_dataset`` refers to."""
    d = tmp_path / "uploads"
    d.mkdir()
    for name in (
        "daviddoe@example.com.jpg",
        "hello-world.jpg",
        "favicon.png",
        "default-image.png",
    ):
        (d / name).write_bytes(PIXEL)
    return d


@pytest.fixture
def seed_dir(tmp_path, upload_dir):
    """SEED_DATA_DIR layout: data.json next to uploads/."""
    (tmp_path / "data.json").write_text(
        make_dataset().model_dump_json(by_alias=True), encoding="utf-8"
    )
    return tmp_path


# ---------------------------------------------------------------------------
# Database (SQLAlchemy host)
# ---------------------------------------------------------------------------


def _test_db_url() -> str:
    user = os.getenv("POSTGRES_USER", "cms")
    password = os.getenv("POSTGRES_PASSWORD", "cms")
    host = os.getenv("POSTGRES_HOST", "localhost")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("TEST_POSTGRES_DB", "cms_test")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine and all tables. Drops tables at teardown.

    Sync fixture so the engine is not bound to one event loop; NullPool
    opens a fresh asyncpg connection on whatever loop is current.
    """
    url = _test_db_url()
    engine = create_async_engine(url, echo=False, poolclass=NullPool)

    async def _setup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    async def _teardown():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()

    try:
        asyncio.run(_setup())
    except Exception as exc:
        asyncio.run(engine.dispose())
        pytest.skip(f"Test database not available ({exc})")

    yield engine

    asyncio.run(_teardown())


@pytest.fixture
async def session_factory(test_engine):
    """Session factory over the test database; tables are emptied after each test.

    The host services open and commit their own sessions, so the savepoint
    rollback pattern does not apply here.
    """
    factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    async with test_engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session
