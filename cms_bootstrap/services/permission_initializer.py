from __future__ import annotations

import asyncio
import logging
from contextlib import nullcontext

from cms_bootstrap.core.metrics import seed_permissions_total
from cms_bootstrap.core.permissions import action_id
from cms_bootstrap.host.contracts import Host

logger = logging.getLogger(__name__)


class PublicRoleNotFoundError(LookupError):
    pass


async def set_public_permissions(
    host: Host,
    new_permissions: dict[str, list[str]],
    *,
    limiter: asyncio.Semaphore | None = None,
) -> int:
    """Grant every (controller, action) pair to the public role.

    All grants are attempted; once they have settled the first failure,
    if any, is re-raised. Returns the number of grants created.
    """
    public_role = await host.roles.find_role(type="public")
    if public_role is None:
        raise PublicRoleNotFoundError("No role of type 'public' exists")

    async def _grant(controller: str, action: str):
        async with limiter or nullcontext():
            return await host.roles.create_permission(
                action_id(controller, action), public_role["id"]
            )

    results = await asyncio.gather(
        *(
            _grant(controller, action)
            for controller, actions in new_permissions.items()
            for action in actions
        ),
        return_exceptions=True,
    )

    failures = [r for r in results if isinstance(r, BaseException)]
    granted = len(results) - len(failures)
    seed_permissions_total.inc(granted)
    logger.info("Granted %d public permissions", granted)
    if failures:
        raise failures[0]
    return granted
