"""Typed content store: creates entries of the registered content types."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_bootstrap.models.content import CONTENT_TYPES


class UnknownContentTypeError(LookupError):
    pass


class SqlContentStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, model: str, fields: dict[str, Any]) -> dict[str, Any]:
        cls = CONTENT_TYPES.get(model)
        if cls is None:
            raise UnknownContentTypeError(f"Unknown content type: {model}")

        async with self._session_factory() as db:
            record = cls(**fields)
            db.add(record)
            await db.commit()
            await db.refresh(record)
            return {"id": record.id, **fields}
