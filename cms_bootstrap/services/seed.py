"""Import the blog starter content: permissions, then categories, writers,
articles and the global settings, in that order.

Each phase creates its entries concurrently under a shared limiter and
waits for all of them before the next phase starts. Per-entry failures
are collected in the ``SeedReport``; only a failure outside an entry
(a missing public role or seed file) aborts the remaining phases.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from cms_bootstrap.core.permissions import PUBLIC_PERMISSIONS
from cms_bootstrap.host.contracts import Host
from cms_bootstrap.schemas.seed import (
    ArticleSeed,
    CategorySeed,
    GlobalSeed,
    SeedDataset,
    SeedEntry,
    WriterSeed,
)
from cms_bootstrap.services.entry_importer import ImportResult, create_entry
from cms_bootstrap.services.file_resolver import get_file_data
from cms_bootstrap.services.permission_initializer import set_public_permissions

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8

FAVICON_FILE = "favicon.png"
SHARE_IMAGE_FILE = "default-image.png"


@dataclass
class SeedReport:
    permissions: int = 0
    categories: list[ImportResult] = field(default_factory=list)
    writers: list[ImportResult] = field(default_factory=list)
    articles: list[ImportResult] = field(default_factory=list)
    global_: list[ImportResult] = field(default_factory=list)

    @property
    def results(self) -> list[ImportResult]:
        return self.categories + self.writers + self.articles + self.global_

    @property
    def created(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failures(self) -> list[ImportResult]:
        return [r for r in self.results if not r.ok]

    @property
    def failed(self) -> int:
        return len(self.failures)


def _attach_writer_files(writer: WriterSeed, upload_dir: Path) -> None:
    writer.picture = get_file_data(f"{writer.email}.jpg", upload_dir)


def _attach_article_files(article: ArticleSeed, upload_dir: Path) -> None:
    article.image = get_file_data(f"{article.slug}.jpg", upload_dir)


def _attach_global_files(global_: GlobalSeed, upload_dir: Path) -> None:
    global_.favicon = get_file_data(FAVICON_FILE, upload_dir)
    global_.default_seo.share_image = get_file_data(SHARE_IMAGE_FILE, upload_dir)


async def _import(
    host: Host,
    entry: SeedEntry,
    attach: Callable[[Any, Path], None],
    upload_dir: Path,
    limiter: asyncio.Semaphore,
) -> ImportResult:
    """Resolve the entry's seed files, then create it.

    A missing seed file raises ``FileNotFoundError`` out of the phase and
    aborts the remaining ones; it is not an entry-level failure.
    """
    attach(entry, upload_dir)
    return await create_entry(host, entry, limiter=limiter)


async def import_categories(
    host: Host, categories: list[CategorySeed], limiter: asyncio.Semaphore
) -> list[ImportResult]:
    return await asyncio.gather(
        *(create_entry(host, c.model_copy(deep=True), limiter=limiter) for c in categories)
    )


async def import_writers(
    host: Host, writers: list[WriterSeed], upload_dir: Path, limiter: asyncio.Semaphore
) -> list[ImportResult]:
    return await asyncio.gather(
        *(
            _import(
                host,
                w.model_copy(deep=True),
                _attach_writer_files,
                upload_dir,
                limiter,
            )
            for w in writers
        )
    )


async def import_articles(
    host: Host,
    articles: list[ArticleSeed],
    upload_dir: Path,
    limiter: asyncio.Semaphore,
    *,
    category_ids: dict[str, int] | None = None,
    writer_ids: dict[str, int] | None = None,
) -> list[ImportResult]:
    category_ids = category_ids or {}
    writer_ids = writer_ids or {}
    entries = []
    for article in articles:
        update: dict = {"published_at": datetime.now(timezone.utc)}  # never a draft
        if article.category is not None:
            update["category_id"] = category_ids.get(article.category)
        if article.author is not None:
            update["author_id"] = writer_ids.get(article.author)
        entries.append(article.model_copy(update=update, deep=True))

    return await asyncio.gather(
        *(
            _import(host, entry, _attach_article_files, upload_dir, limiter)
            for entry in entries
        )
    )


async def import_global(
    host: Host, global_: GlobalSeed, upload_dir: Path, limiter: asyncio.Semaphore
) -> list[ImportResult]:
    result = await _import(
        host,
        global_.model_copy(deep=True),
        _attach_global_files,
        upload_dir,
        limiter,
    )
    return [result]


def _ids_by(entries: list, results: list[ImportResult], attr: str) -> dict[str, int]:
    return {
        getattr(entry, attr): result.entry_id
        for entry, result in zip(entries, results)
        if result.ok and result.entry_id is not None
    }


async def import_seed_data(
    host: Host,
    dataset: SeedDataset,
    upload_dir: str | Path,
    *,
    permissions: dict[str, list[str]] | None = None,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> SeedReport:
    upload_dir = Path(upload_dir)
    limiter = asyncio.Semaphore(max(1, concurrency))
    report = SeedReport()

    # Allow anonymous reads of the blog content types
    report.permissions = await set_public_permissions(
        host, PUBLIC_PERMISSIONS if permissions is None else permissions, limiter=limiter
    )

    logger.info("Bootstrapping data...")
    report.categories = await import_categories(host, dataset.categories, limiter)
    report.writers = await import_writers(host, dataset.writers, upload_dir, limiter)
    report.articles = await import_articles(
        host,
        dataset.articles,
        upload_dir,
        limiter,
        category_ids=_ids_by(dataset.categories, report.categories, "slug"),
        writer_ids=_ids_by(dataset.writers, report.writers, "email"),
    )
    if dataset.global_ is not None:
        report.global_ = await import_global(host, dataset.global_, upload_dir, limiter)

    return report
