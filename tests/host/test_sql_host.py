"""Integration tests for the SQLAlchemy host services.

Require a PostgreSQL test database; skipped when none is reachable.
"""

from __future__ import annotations

import asyncio

import bcrypt
import pytest
from sqlalchemy import func, select

from cms_bootstrap.core.permissions import SUPER_ADMIN_CODE, SUPER_ADMIN_ROLE
from cms_bootstrap.host import build_sql_host
from cms_bootstrap.host.admin import SqlAdminRoleService, SqlAdminUserService
from cms_bootstrap.host.content import SqlContentStore, UnknownContentTypeError
from cms_bootstrap.host.roles import SqlRoleStore, seed_default_roles
from cms_bootstrap.host.store import SqlSettingsStore
from cms_bootstrap.host.upload import LocalUploadProvider, SqlUploadService
from cms_bootstrap.models import AdminUser, Article, Category, UpPermission, UpRole, UploadFile
from cms_bootstrap.schemas.seed import FileDescriptor
from cms_bootstrap.services.bootstrap import BootstrapState, bootstrap
from cms_bootstrap.services.first_run import is_first_run
from tests.conftest import PIXEL, make_settings


class TestSqlSettingsStore:
    async def test_missing_key(self, session_factory):
        store = SqlSettingsStore(session_factory, "development")
        assert await store.get("nope") is None

    async def test_set_bumps_version(self, session_factory):
        store = SqlSettingsStore(session_factory, "development")
        await store.set("k", {"a": 1})
        await store.set("k", {"a": 2})
        stored = await store.get("k")
        assert stored.value == {"a": 2}
        assert stored.version == 2

    async def test_insert_if_absent_only_once(self, session_factory):
        store = SqlSettingsStore(session_factory, "development")
        assert await store.compare_and_set("k", True, None) is True
        assert await store.compare_and_set("k", True, None) is False

    async def test_stale_version_rejected(self, session_factory):
        store = SqlSettingsStore(session_factory, "development")
        await store.set("k", False)
        assert await store.compare_and_set("k", True, 1) is True
        assert await store.compare_and_set("k", True, 1) is False

    async def test_keys_are_scoped_by_environment(self, session_factory):
        dev = SqlSettingsStore(session_factory, "development")
        prod = SqlSettingsStore(session_factory, "production")
        await dev.set("k", True)
        assert await prod.get("k") is None

    async def test_concurrent_first_run_has_one_winner(self, session_factory):
        store = SqlSettingsStore(session_factory, "development")
        results = await asyncio.gather(*(is_first_run(store) for _ in range(5)))
        assert results.count(True) == 1


class TestSqlContentStore:
    async def test_create_category(self, session_factory, db):
        store = SqlContentStore(session_factory)
        created = await store.create("category", {"name": "news", "slug": "news"})

        assert created["id"]
        assert created["slug"] == "news"
        count = await db.scalar(select(func.count()).select_from(Category))
        assert count == 1

    async def test_create_article_with_relations(self, session_factory, db):
        store = SqlContentStore(session_factory)
        cat = await store.create("category", {"name": "tech", "slug": "tech"})
        await store.create(
            "article", {"title": "Hi", "slug": "hi", "category_id": cat["id"]}
        )
        article = await db.scalar(select(Article))
        assert article.category_id == cat["id"]

    async def test_unknown_model(self, session_factory):
        with pytest.raises(UnknownContentTypeError):
            await SqlContentStore(session_factory).create("recipe", {})


class TestSqlRoleStore:
    async def test_seed_default_roles_is_idempotent(self, db):
        await seed_default_roles(db)
        await seed_default_roles(db)
        count = await db.scalar(select(func.count()).select_from(UpRole))
        assert count == 2

    async def test_find_and_grant(self, session_factory, db):
        await seed_default_roles(db)
        roles = SqlRoleStore(session_factory)

        public = await roles.find_role(type="public")
        perm = await roles.create_permission("api::article.article.find", public["id"])

        assert perm["role"] == public["id"]
        stored = await db.scalar(select(UpPermission))
        assert stored.action == "api::article.article.find"

    async def test_missing_role(self, session_factory):
        assert await SqlRoleStore(session_factory).find_role(type="public") is None


class TestSqlAdminServices:
    async def test_super_admin_round_trip(self, session_factory):
        service = SqlAdminRoleService(session_factory)
        assert await service.get_super_admin() is None

        created = await service.create(SUPER_ADMIN_ROLE)
        found = await service.get_super_admin()

        assert found["id"] == created["id"]
        assert found["code"] == SUPER_ADMIN_CODE

    async def test_create_admin_hashes_password_and_links_role(self, session_factory, db):
        role = await SqlAdminRoleService(session_factory).create(SUPER_ADMIN_ROLE)
        users = SqlAdminUserService(session_factory)
        assert await users.exists() is False

        created = await users.create(
            {
                "username": "admin",
                "email": "Admin@Example.com",
                "password": "Str0ngPassword!",
                "is_active": True,
                "roles": [role["id"]],
            }
        )

        assert await users.exists() is True
        assert created["roles"] == [role["id"]]
        user = await db.scalar(select(AdminUser))
        assert user.email == "admin@example.com"
        assert bcrypt.checkpw(b"Str0ngPassword!", user.password_hash.encode())

    async def test_email_required(self, session_factory):
        with pytest.raises(ValueError, match="email"):
            await SqlAdminUserService(session_factory).create({"username": "admin"})


class TestSqlUploadService:
    async def test_upload_stores_file_and_record(self, session_factory, db, tmp_path):
        src = tmp_path / "favicon.png"
        src.write_bytes(PIXEL)
        out = tmp_path / "public"
        service = SqlUploadService(session_factory, LocalUploadProvider(out))
        descriptor = FileDescriptor(
            path=str(src), name="favicon.png", size=len(PIXEL), type="image/png"
        )

        [asset] = await service.upload(
            descriptor,
            {"alternative_text": "favicon", "caption": "favicon", "name": "favicon"},
        )

        assert asset["id"]
        assert asset["ext"] == ".png"
        assert asset["provider"] == "local"
        assert asset["url"].startswith("/uploads/favicon_")
        assert (out / asset["url"].rsplit("/", 1)[1]).read_bytes() == PIXEL
        count = await db.scalar(select(func.count()).select_from(UploadFile))
        assert count == 1


class TestFullBootstrap:
    async def test_bundled_dataset_against_postgres(self, session_factory, db, tmp_path):
        await seed_default_roles(db)
        settings = make_settings(ENVIRONMENT="development", UPLOAD_DIR=str(tmp_path))
        host = build_sql_host(session_factory, settings)

        first = await bootstrap(host, settings)
        second = await bootstrap(host, settings)

        assert first.state is BootstrapState.SEEDED
        assert first.report.failed == 0
        assert second.state is BootstrapState.ALREADY_SEEDED
        articles = (await db.scalars(select(Article))).all()
        assert articles
        assert all(a.published_at is not None for a in articles)
        assert all(a.category_id and a.author_id and a.image_id for a in articles)
        assert await db.scalar(select(func.count()).select_from(AdminUser)) == 1
