from __future__ import annotations

from sqlalchemy import Float, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from cms_bootstrap.models.base import Base, IdMixin, TimestampMixin


class UploadFile(Base, IdMixin, TimestampMixin):
    """Stored asset record for an uploaded binary file."""

    __tablename__ = "upload_files"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    alternative_text: Mapped[str | None] = mapped_column(String(255))
    caption: Mapped[str | None] = mapped_column(String(255))
    hash: Mapped[str] = mapped_column(String(255), nullable=False)
    ext: Mapped[str | None] = mapped_column(String(20))
    mime: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[float] = mapped_column(Float, nullable=False)  # kilobytes
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    provider_metadata: Mapped[dict | None] = mapped_column(JSONB, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "alternative_text": self.alternative_text,
            "caption": self.caption,
            "hash": self.hash,
            "ext": self.ext,
            "mime": self.mime,
            "size": self.size,
            "url": self.url,
            "provider": self.provider,
        }
