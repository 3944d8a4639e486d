"""Create one content entry, uploading and attaching its files first.

Best effort: failures are logged and reported in the returned
``ImportResult``, never raised.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path

from cms_bootstrap.core.metrics import seed_entries_total, seed_uploads_total
from cms_bootstrap.host.contracts import Host
from cms_bootstrap.schemas.seed import SeedEntry

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    model: str
    ok: bool
    entry_id: int | None = None
    error: str | None = None


def failed_result(entry: SeedEntry, exc: Exception) -> ImportResult:
    logger.error(
        "Could not create %s entry %s: %s",
        entry.model,
        entry.model_dump(mode="json"),
        exc,
        extra={"seed_model": entry.model},
    )
    seed_entries_total.labels(model=entry.model, status="failed").inc()
    return ImportResult(model=entry.model, ok=False, error=f"{type(exc).__name__}: {exc}")


async def create_entry(
    host: Host, entry: SeedEntry, *, limiter: asyncio.Semaphore | None = None
) -> ImportResult:
    async with limiter or nullcontext():
        try:
            for attachment in entry.attachments():
                # "default-image.png" -> "default-image"
                display_name = Path(attachment.file.name).stem
                try:
                    uploaded = await host.uploads.upload(
                        attachment.file,
                        {
                            "alternative_text": display_name,
                            "caption": display_name,
                            "name": display_name,
                        },
                    )
                except Exception:
                    seed_uploads_total.labels(status="failed").inc()
                    logger.warning(
                        "Upload of %s for %s.%s failed",
                        attachment.file.name,
                        entry.model,
                        attachment.path,
                        extra={"seed_model": entry.model, "seed_path": attachment.path},
                    )
                    raise
                seed_uploads_total.labels(status="ok").inc()
                setattr(attachment.owner, attachment.field, uploaded[0]["id"])

            record = await host.content.create(entry.model, entry.to_fields())
        except Exception as exc:
            return failed_result(entry, exc)

    seed_entries_total.labels(model=entry.model, status="ok").inc()
    return ImportResult(model=entry.model, ok=True, entry_id=record["id"])
