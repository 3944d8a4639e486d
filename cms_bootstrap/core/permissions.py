"""Permission key registry for the public (anonymous) role."""

from __future__ import annotations

API_NAMESPACE = "api"

# Read access granted to anonymous visitors on first boot
PUBLIC_PERMISSIONS: dict[str, list[str]] = {
    "global": ["find"],
    "article": ["find", "findOne"],
    "category": ["find", "findOne"],
    "writer": ["find", "findOne"],
}

# Roles the users-permissions layer needs before anything else can run
DEFAULT_ROLES: list[dict[str, str]] = [
    {
        "name": "Public",
        "type": "public",
        "description": "Default role given to unauthenticated user.",
    },
    {
        "name": "Authenticated",
        "type": "authenticated",
        "description": "Default role given to authenticated user.",
    },
]

SUPER_ADMIN_CODE = "strapi-super-admin"

SUPER_ADMIN_ROLE: dict[str, str] = {
    "name": "Super Admin",
    "code": SUPER_ADMIN_CODE,
    "description": "Super Admins can access and manage all features and settings.",
}


def action_id(controller: str, action: str) -> str:
    """``api::article.article.find`` style identifier for a controller action."""
    return f"{API_NAMESPACE}::{controller}.{controller}.{action}"
