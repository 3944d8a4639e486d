"""First-boot initialisation, run once from the application lifespan.

    gate -> admin account -> (BOOTSTRAP_CONTENT) seed data

The setup flag is claimed before anything else, so a boot that fails
half-way is not retried on the next start.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path

from cms_bootstrap.config import Settings
from cms_bootstrap.core.metrics import bootstrap_runs_total
from cms_bootstrap.host.contracts import Host
from cms_bootstrap.schemas.seed import SeedDataset, load_dataset
from cms_bootstrap.services.admin_provisioner import AdminOutcome, create_admin_user
from cms_bootstrap.services.first_run import is_first_run
from cms_bootstrap.services.seed import SeedReport, import_seed_data

logger = logging.getLogger(__name__)


class BootstrapState(str, enum.Enum):
    ALREADY_SEEDED = "already_seeded"
    CONTENT_SKIPPED = "content_skipped"
    SEEDED = "seeded"
    SEEDING_FAILED = "seeding_failed"


@dataclass
class BootstrapResult:
    state: BootstrapState
    admin: AdminOutcome | None = None
    report: SeedReport | None = None


def _finish(result: BootstrapResult) -> BootstrapResult:
    bootstrap_runs_total.labels(state=result.state.value).inc()
    return result


async def bootstrap(
    host: Host, settings: Settings, dataset: SeedDataset | None = None
) -> BootstrapResult:
    if not await is_first_run(host.store):
        return _finish(BootstrapResult(BootstrapState.ALREADY_SEEDED))

    logger.info("First install, checking whether initial data should be created")
    admin = await create_admin_user(host, settings)

    if not settings.BOOTSTRAP_CONTENT:
        return _finish(BootstrapResult(BootstrapState.CONTENT_SKIPPED, admin=admin))

    try:
        logger.info("Setting up the template...")
        if dataset is None:
            dataset = load_dataset(Path(settings.SEED_DATA_DIR) / "data.json")
        report = await import_seed_data(
            host,
            dataset,
            settings.seed_uploads_dir,
            concurrency=settings.SEED_CONCURRENCY,
        )
    except Exception:
        logger.exception("Could not import seed data")
        return _finish(BootstrapResult(BootstrapState.SEEDING_FAILED, admin=admin))

    if report.failed:
        logger.warning(
            "Seeded %d entries, %d failed: %s",
            report.created,
            report.failed,
            ", ".join(f"{r.model} ({r.error})" for r in report.failures),
        )
    else:
        logger.info("Ready to go! Seeded %d entries", report.created)
    return _finish(BootstrapResult(BootstrapState.SEEDED, admin=admin, report=report))
