from __future__ import annotations

import logging

from cms_bootstrap.host.contracts import SettingsStore

logger = logging.getLogger(__name__)

SETUP_FLAG_KEY = "type_setup_initHasRun"


async def is_first_run(store: SettingsStore) -> bool:
    """Claim the setup flag. True only for the caller that flips it.

    Querying marks the installation as initialised whatever happens
    afterwards, so a failed seed is never retried on the next boot.
    """
    current = await store.get(SETUP_FLAG_KEY)
    if current is not None and current.value:
        return False

    expected_version = None if current is None else current.version
    claimed = await store.compare_and_set(SETUP_FLAG_KEY, True, expected_version)
    if not claimed:
        logger.info("Setup flag was claimed by another process")
    return claimed
