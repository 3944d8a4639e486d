"""Key-value settings store backed by the ``core_store`` table."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_bootstrap.host.contracts import StoredValue
from cms_bootstrap.models.core_store import CoreStore


class SqlSettingsStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], environment: str):
        self._session_factory = session_factory
        self.environment = environment

    def _where(self, key: str):
        return (CoreStore.key == key, CoreStore.environment == self.environment)

    async def get(self, key: str) -> StoredValue | None:
        async with self._session_factory() as db:
            result = await db.execute(select(CoreStore).where(*self._where(key)))
            row = result.scalar_one_or_none()
            if row is None:
                return None
            return StoredValue(value=row.value, version=row.version)

    async def set(self, key: str, value: Any) -> None:
        async with self._session_factory() as db:
            result = await db.execute(select(CoreStore).where(*self._where(key)))
            row = result.scalar_one_or_none()
            if row is None:
                db.add(CoreStore(key=key, environment=self.environment, value=value, version=1))
            else:
                row.value = value
                row.version = row.version + 1
            await db.commit()

    async def compare_and_set(self, key: str, value: Any, expected_version: int | None) -> bool:
        async with self._session_factory() as db:
            if expected_version is None:
                db.add(CoreStore(key=key, environment=self.environment, value=value, version=1))
                try:
                    await db.commit()
                except IntegrityError:
                    # Someone else inserted the key first
                    await db.rollback()
                    return False
                return True

            result = await db.execute(
                update(CoreStore)
                .where(*self._where(key), CoreStore.version == expected_version)
                .values(value=value, version=expected_version + 1)
            )
            await db.commit()
            return result.rowcount == 1
