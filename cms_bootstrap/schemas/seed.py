"""Typed seed entries, one builder per content type.

File references are plain fields holding a ``FileDescriptor`` until the
entry importer swaps each one for the id of the uploaded asset.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar, NamedTuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class FileDescriptor:
    path: str
    name: str
    size: int
    type: str


class Attachment(NamedTuple):
    owner: BaseModel
    field: str
    path: str  # dotted location inside the entry, logged on upload failure
    file: FileDescriptor


def _asset_id(value: FileDescriptor | int | None) -> int | None:
    if isinstance(value, FileDescriptor):
        raise TypeError(f"file {value.name!r} has not been uploaded yet")
    return value


class _SeedModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    def attachments(self, prefix: str = "") -> list[Attachment]:
        """Every field (nested ones included) still holding a FileDescriptor."""
        found: list[Attachment] = []
        for name in type(self).model_fields:
            value = getattr(self, name)
            path = f"{prefix}{name}"
            if isinstance(value, FileDescriptor):
                found.append(Attachment(self, name, path, value))
            elif isinstance(value, _SeedModel):
                found.extend(value.attachments(prefix=f"{path}."))
        return found


class SeedEntry(_SeedModel):
    """One content entry. Pydantic models are ABCs, so subclasses must define ``to_fields``."""

    model: ClassVar[str]

    @abc.abstractmethod
    def to_fields(self) -> dict[str, Any]:
        """Column values for the content store, file fields as asset ids."""


class CategorySeed(SeedEntry):
    model: ClassVar[str] = "category"

    name: str
    slug: str
    description: str | None = None

    def to_fields(self) -> dict[str, Any]:
        return {"name": self.name, "slug": self.slug, "description": self.description}


class WriterSeed(SeedEntry):
    model: ClassVar[str] = "writer"

    name: str
    email: str
    picture: FileDescriptor | int | None = None

    def to_fields(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "picture_id": _asset_id(self.picture),
        }


class ArticleSeed(SeedEntry):
    model: ClassVar[str] = "article"

    title: str
    slug: str
    description: str | None = None
    content: str | None = None
    # Dataset references: category slug and author email
    category: str | None = None
    author: str | None = None
    category_id: int | None = None
    author_id: int | None = None
    image: FileDescriptor | int | None = None
    published_at: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "content": self.content,
            "category_id": self.category_id,
            "author_id": self.author_id,
            "image_id": _asset_id(self.image),
            "published_at": self.published_at,
        }


class SeoSeed(_SeedModel):
    meta_title: str
    meta_description: str | None = None
    share_image: FileDescriptor | int | None = None

    def to_fields(self) -> dict[str, Any]:
        return {
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "share_image": _asset_id(self.share_image),
        }


class GlobalSeed(SeedEntry):
    model: ClassVar[str] = "global"

    site_name: str
    site_description: str | None = None
    favicon: FileDescriptor | int | None = None
    default_seo: SeoSeed

    def to_fields(self) -> dict[str, Any]:
        return {
            "site_name": self.site_name,
            "site_description": self.site_description,
            "favicon_id": _asset_id(self.favicon),
            "default_seo": self.default_seo.to_fields(),
        }


class SeedDataset(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: list[CategorySeed] = []
    writers: list[WriterSeed] = []
    articles: list[ArticleSeed] = []
    global_: GlobalSeed | None = Field(default=None, alias="global")


def load_dataset(path: str | Path) -> SeedDataset:
    """Parse ``data.json`` into typed seed entries."""
    return SeedDataset.model_validate_json(Path(path).read_text(encoding="utf-8"))
