"""Admin identity and admin role services."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_bootstrap.core.permissions import SUPER_ADMIN_CODE
from cms_bootstrap.core.security import hash_password
from cms_bootstrap.models.admin import AdminRole, AdminUser


def _role_dict(role: AdminRole) -> dict[str, Any]:
    return {"id": role.id, "name": role.name, "code": role.code, "description": role.description}


class SqlAdminRoleService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_super_admin(self) -> dict[str, Any] | None:
        async with self._session_factory() as db:
            result = await db.execute(select(AdminRole).where(AdminRole.code == SUPER_ADMIN_CODE))
            role = result.scalar_one_or_none()
            return _role_dict(role) if role else None

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        async with self._session_factory() as db:
            role = AdminRole(
                name=fields["name"], code=fields["code"], description=fields.get("description")
            )
            db.add(role)
            await db.commit()
            await db.refresh(role)
            return _role_dict(role)


class SqlAdminUserService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def exists(self) -> bool:
        async with self._session_factory() as db:
            result = await db.execute(select(AdminUser.id).limit(1))
            return result.scalar_one_or_none() is not None

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        if not fields.get("email"):
            raise ValueError("Admin email is required")
        password = fields.get("password")

        async with self._session_factory() as db:
            roles: list[AdminRole] = []
            if fields.get("roles"):
                result = await db.execute(
                    select(AdminRole).where(AdminRole.id.in_(fields["roles"]))
                )
                roles = list(result.scalars().all())

            user = AdminUser(
                firstname=fields.get("firstname"),
                lastname=fields.get("lastname"),
                username=fields.get("username"),
                email=fields["email"].lower(),
                password_hash=hash_password(password) if password else None,
                is_active=bool(fields.get("is_active", False)),
                blocked=bool(fields.get("blocked", False)),
                registration_token=fields.get("registration_token"),
                roles=roles,
            )
            db.add(user)
            await db.commit()
            await db.refresh(user)
            return {
                "id": user.id,
                "email": user.email,
                "username": user.username,
                "roles": [r.id for r in roles],
            }
