from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cms_bootstrap.models.base import Base, IdMixin, TimestampMixin


class CoreStore(Base, IdMixin, TimestampMixin):
    """Process-wide key-value settings, scoped by deployment environment.

    ``version`` increases on every write so callers can compare-and-set.
    """

    __tablename__ = "core_store"
    __table_args__ = (UniqueConstraint("key", "environment", name="uq_core_store_key_env"),)

    key: Mapped[str] = mapped_column(String(255), nullable=False)
    environment: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    value: Mapped[dict | list | str | int | bool | None] = mapped_column(JSONB, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
