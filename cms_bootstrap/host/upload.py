"""Binary asset store: provider-backed file upload plus ``upload_files`` rows.

Development writes to the local disk; production pushes to Cloudinary.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import re
import time
import uuid
from pathlib import Path
from typing import Any, Protocol

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cms_bootstrap.config import Settings
from cms_bootstrap.models.upload_file import UploadFile
from cms_bootstrap.schemas.seed import FileDescriptor

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]+")


def file_hash(name: str) -> str:
    """Storage key: sanitised base name plus a short random suffix."""
    base = _UNSAFE_CHARS.sub("_", Path(name).stem).strip("_") or "file"
    return f"{base}_{uuid.uuid4().hex[:10]}"


class UploadProvider(Protocol):
    name: str

    async def upload(self, data: bytes, *, hash: str, ext: str, mime: str) -> dict[str, Any]: ...


class LocalUploadProvider:
    name = "local"

    def __init__(self, upload_dir: str | Path, base_url: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.base_url = base_url.rstrip("/")

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, data: bytes, *, hash: str, ext: str, mime: str) -> dict[str, Any]:
        filename = f"{hash}{ext}"
        await asyncio.to_thread(self._write, self.upload_dir / filename, data)
        return {"url": f"{self.base_url}/{filename}", "provider_metadata": None}


class CloudinaryUploadProvider:
    """Signed uploads against the Cloudinary REST API."""

    name = "cloudinary"
    API_BASE = "https://api.cloudinary.com/v1_1"

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.API_BASE, timeout=60.0)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def sign(self, params: dict[str, str]) -> str:
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1((to_sign + self.api_secret).encode()).hexdigest()

    async def upload(self, data: bytes, *, hash: str, ext: str, mime: str) -> dict[str, Any]:
        params = {"public_id": hash, "timestamp": str(int(time.time()))}
        form = {**params, "api_key": self.api_key, "signature": self.sign(params)}
        client = await self._get_client()
        resp = await client.post(
            f"/{self.cloud_name}/auto/upload",
            data=form,
            files={"file": (f"{hash}{ext}", data, mime)},
        )
        resp.raise_for_status()
        body = resp.json()
        return {
            "url": body["secure_url"],
            "provider_metadata": {
                "public_id": body.get("public_id"),
                "resource_type": body.get("resource_type"),
            },
        }


def build_upload_provider(settings: Settings) -> UploadProvider:
    if settings.use_cloud_uploads:
        return CloudinaryUploadProvider(
            settings.CLOUDINARY_NAME, settings.CLOUDINARY_KEY, settings.CLOUDINARY_SECRET
        )
    return LocalUploadProvider(settings.UPLOAD_DIR)


class SqlUploadService:
    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], provider: UploadProvider
    ):
        self._session_factory = session_factory
        self.provider = provider

    async def upload(
        self, file: FileDescriptor, file_info: dict[str, str]
    ) -> list[dict[str, Any]]:
        data = await asyncio.to_thread(Path(file.path).read_bytes)
        ext = Path(file.name).suffix.lower()
        key = file_hash(file_info.get("name") or file.name)

        stored = await self.provider.upload(data, hash=key, ext=ext, mime=file.type)
        logger.debug("Uploaded %s via %s", file.name, self.provider.name)

        async with self._session_factory() as db:
            record = UploadFile(
                name=file_info.get("name") or file.name,
                alternative_text=file_info.get("alternative_text"),
                caption=file_info.get("caption"),
                hash=key,
                ext=ext,
                mime=file.type,
                size=round(file.size / 1000, 2),
                url=stored["url"],
                provider=self.provider.name,
                provider_metadata=stored.get("provider_metadata"),
            )
            db.add(record)
            await db.commit()
            await db.refresh(record)
            return [record.to_dict()]
