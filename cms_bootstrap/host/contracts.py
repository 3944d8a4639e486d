"""Interfaces of the host platform services the bootstrap routine consumes.

Records cross these boundaries as plain dicts carrying at least an ``id``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from cms_bootstrap.schemas.seed import FileDescriptor


@dataclass(frozen=True)
class StoredValue:
    value: Any
    version: int


class SettingsStore(Protocol):
    async def get(self, key: str) -> StoredValue | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def compare_and_set(self, key: str, value: Any, expected_version: int | None) -> bool:
        """Write ``value`` only if the stored version still equals ``expected_version``.

        ``expected_version=None`` means the key must not exist yet.
        """
        ...


class ContentStore(Protocol):
    async def create(self, model: str, fields: dict[str, Any]) -> dict[str, Any]: ...


class UploadService(Protocol):
    async def upload(
        self, file: FileDescriptor, file_info: dict[str, str]
    ) -> list[dict[str, Any]]: ...


class RoleStore(Protocol):
    async def find_role(self, *, type: str) -> dict[str, Any] | None: ...

    async def create_permission(self, action: str, role_id: int) -> dict[str, Any]: ...


class AdminUserService(Protocol):
    async def exists(self) -> bool: ...

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]: ...


class AdminRoleService(Protocol):
    async def get_super_admin(self) -> dict[str, Any] | None: ...

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]: ...


@dataclass
class Host:
    store: SettingsStore
    content: ContentStore
    uploads: UploadService
    roles: RoleStore
    admin_users: AdminUserService
    admin_roles: AdminRoleService
