"""Users-permissions role store and default role seeding."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_bootstrap.core.permissions import DEFAULT_ROLES
from cms_bootstrap.models.users_permissions import UpPermission, UpRole


class SqlRoleStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_role(self, *, type: str) -> dict[str, Any] | None:
        async with self._session_factory() as db:
            result = await db.execute(select(UpRole).where(UpRole.type == type))
            role = result.scalar_one_or_none()
            if role is None:
                return None
            return {"id": role.id, "name": role.name, "type": role.type}

    async def create_permission(self, action: str, role_id: int) -> dict[str, Any]:
        async with self._session_factory() as db:
            perm = UpPermission(action=action, role_id=role_id)
            db.add(perm)
            await db.commit()
            await db.refresh(perm)
            return {"id": perm.id, "action": perm.action, "role": perm.role_id}


async def seed_default_roles(db: AsyncSession) -> None:
    """Add the public and authenticated roles if they are missing."""
    result = await db.execute(select(UpRole.type))
    existing = {row[0] for row in result.all()}

    for role in DEFAULT_ROLES:
        if role["type"] in existing:
            continue
        db.add(UpRole(name=role["name"], type=role["type"], description=role["description"]))

    await db.commit()
