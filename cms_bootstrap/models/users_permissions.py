from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cms_bootstrap.models.base import Base, IdMixin, TimestampMixin


class UpRole(Base, IdMixin, TimestampMixin):
    """End-user role (public / authenticated) for content API access."""

    __tablename__ = "up_roles"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    type: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)


class UpPermission(Base, IdMixin, TimestampMixin):
    """One allowed controller action for a role. Not unique per role."""

    __tablename__ = "up_permissions"

    action: Mapped[str] = mapped_column(String(255), nullable=False)
    role_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("up_roles.id", ondelete="CASCADE"), nullable=False
    )
