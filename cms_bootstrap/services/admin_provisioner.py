"""Create the first admin account on a fresh installation."""

from __future__ import annotations

import enum
import logging

from cms_bootstrap.config import Settings
from cms_bootstrap.core.permissions import SUPER_ADMIN_ROLE
from cms_bootstrap.host.contracts import Host

logger = logging.getLogger(__name__)


class AdminOutcome(str, enum.Enum):
    DISABLED = "disabled"
    EXISTS = "exists"
    NO_ROLE = "no_role"
    CREATED = "created"
    FAILED = "failed"


async def create_admin_user(host: Host, settings: Settings) -> AdminOutcome:
    if not settings.ADMIN_CREATE:
        logger.info("ADMIN_CREATE is set to false in env config. Skipping admin creation")
        return AdminOutcome.DISABLED

    if await host.admin_users.exists():
        return AdminOutcome.EXISTS

    super_admin = await host.admin_roles.get_super_admin()
    if super_admin is None:
        logger.info("Super admin role does not exist, creating it")
        try:
            await host.admin_roles.create(dict(SUPER_ADMIN_ROLE))
        except Exception:
            logger.exception("Could not create the super admin role")

        super_admin = await host.admin_roles.get_super_admin()
        if super_admin is None:
            logger.warning("Super admin role is unavailable. Skipping admin creation")
            return AdminOutcome.NO_ROLE

    try:
        logger.info("Setting up admin user %s", settings.ADMIN_EMAIL)
        await host.admin_users.create(
            {
                "username": settings.ADMIN_USERNAME,
                "email": settings.ADMIN_EMAIL,
                "firstname": settings.ADMIN_FN,
                "lastname": settings.ADMIN_LN,
                "password": settings.ADMIN_PASS,
                "is_active": True,
                "blocked": False,
                "registration_token": None,
                "roles": [super_admin["id"]],
            }
        )
    except Exception:
        logger.exception("Could not create admin user")
        return AdminOutcome.FAILED

    logger.info("Admin account created")
    return AdminOutcome.CREATED
