from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from cms_bootstrap.config import APP_VERSION, settings
from cms_bootstrap.core.logging_config import configure_logging
from cms_bootstrap.core.metrics import app_info
from cms_bootstrap.database import async_session, engine
from cms_bootstrap.models import Base

logger = logging.getLogger(__name__)

app_info.info({"version": APP_VERSION, "environment": settings.ENVIRONMENT})


def _run_alembic_stamp(alembic_cfg, revision):
    """Run alembic stamp in a thread-safe way."""
    from alembic import command
    command.stamp(alembic_cfg, revision)


def _run_alembic_upgrade(alembic_cfg, revision):
    """Run alembic upgrade in a thread-safe way."""
    from alembic import command
    command.upgrade(alembic_cfg, revision)


async def prepare_database() -> None:
    """Create tables on a fresh database, migrate an existing one."""
    from alembic.config import Config
    from sqlalchemy import inspect as sa_inspect
    from sqlalchemy import text

    alembic_cfg = Config("alembic.ini")

    async with engine.connect() as conn:
        has_alembic = await conn.run_sync(
            lambda sync_conn: sa_inspect(sync_conn).has_table("alembic_version")
        )
        alembic_version = None
        if has_alembic:
            row = await conn.execute(text("SELECT version_num FROM alembic_version LIMIT 1"))
            first = row.first()
            alembic_version = first[0] if first else None

    if not has_alembic or alembic_version is None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await asyncio.to_thread(_run_alembic_stamp, alembic_cfg, "head")
    else:
        try:
            await asyncio.to_thread(_run_alembic_upgrade, alembic_cfg, "head")
        except Exception:
            logger.exception("Alembic migration failed")
            raise
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.ENVIRONMENT, settings.LOG_LEVEL)

    await prepare_database()

    from cms_bootstrap.host import build_sql_host
    from cms_bootstrap.host.roles import seed_default_roles
    from cms_bootstrap.services.bootstrap import bootstrap

    # The public role must exist before permissions can be granted to it
    async with async_session() as db:
        await seed_default_roles(db)

    host = build_sql_host(async_session, settings)
    result = await bootstrap(host, settings)
    logger.info("Bootstrap finished: %s", result.state.value)

    yield

    close = getattr(getattr(host.uploads, "provider", None), "close", None)
    if close is not None:
        await close()
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": APP_VERSION}


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
