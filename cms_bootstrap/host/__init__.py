from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_bootstrap.config import Settings
from cms_bootstrap.host.admin import SqlAdminRoleService, SqlAdminUserService
from cms_bootstrap.host.content import SqlContentStore
from cms_bootstrap.host.contracts import Host
from cms_bootstrap.host.roles import SqlRoleStore
from cms_bootstrap.host.store import SqlSettingsStore
from cms_bootstrap.host.upload import SqlUploadService, build_upload_provider


def build_sql_host(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> Host:
    """Wire the SQLAlchemy-backed host services for one deployment environment."""
    return Host(
        store=SqlSettingsStore(session_factory, settings.ENVIRONMENT),
        content=SqlContentStore(session_factory),
        uploads=SqlUploadService(session_factory, build_upload_provider(settings)),
        roles=SqlRoleStore(session_factory),
        admin_users=SqlAdminUserService(session_factory),
        admin_roles=SqlAdminRoleService(session_factory),
    )


__all__ = ["Host", "build_sql_host"]
