"""Blog content types: category, writer, article and the global singleton."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cms_bootstrap.models.base import Base, IdMixin, TimestampMixin


class Category(Base, IdMixin, TimestampMixin):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)


class Writer(Base, IdMixin, TimestampMixin):
    __tablename__ = "writers"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320))
    picture_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("upload_files.id", ondelete="SET NULL"), nullable=True
    )


class Article(Base, IdMixin, TimestampMixin):
    __tablename__ = "articles"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    content: Mapped[str | None] = mapped_column(Text)
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    author_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("writers.id", ondelete="SET NULL"), nullable=True
    )
    image_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("upload_files.id", ondelete="SET NULL"), nullable=True
    )
    # NULL means draft
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class Global(Base, IdMixin, TimestampMixin):
    """Singleton site settings. ``default_seo`` is a component stored inline."""

    __tablename__ = "globals"

    site_name: Mapped[str] = mapped_column(String(255), nullable=False)
    site_description: Mapped[str | None] = mapped_column(Text)
    favicon_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("upload_files.id", ondelete="SET NULL"), nullable=True
    )
    default_seo: Mapped[dict | None] = mapped_column(JSONB, default=dict)


# Content-type name -> model, as addressed by the content store
CONTENT_TYPES: dict[str, type[Base]] = {
    "category": Category,
    "writer": Writer,
    "article": Article,
    "global": Global,
}
