from __future__ import annotations

import os
from pathlib import Path

APP_VERSION = "1.0.0"

_PACKAGE_DIR = Path(__file__).resolve().parent


def _flag(name: str, default: str = "") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Settings:
    PROJECT_NAME: str = "CMS Bootstrap"

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    POSTGRES_HOST: str = os.getenv("POSTGRES_HOST", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "cms")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "cms")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "cms")

    # Admin creation is on unless explicitly switched off with "false"
    ADMIN_CREATE: bool = os.getenv("ADMIN_CREATE", "").lower() != "false"
    ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    ADMIN_FN: str = os.getenv("ADMIN_FN", "")
    ADMIN_LN: str = os.getenv("ADMIN_LN", "")
    ADMIN_PASS: str = os.getenv("ADMIN_PASS", "")

    BOOTSTRAP_CONTENT: bool = _flag("BOOTSTRAP_CONTENT")
    SEED_DATA_DIR: str = os.getenv("SEED_DATA_DIR", str(_PACKAGE_DIR / "seed_data"))
    SEED_CONCURRENCY: int = int(os.getenv("SEED_CONCURRENCY", "8"))

    # Local upload provider target (development)
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "public/uploads")

    # Cloudinary upload provider (production only)
    CLOUDINARY_NAME: str = os.getenv("CLOUDINARY_NAME", "")
    CLOUDINARY_KEY: str = os.getenv("CLOUDINARY_KEY", "")
    CLOUDINARY_SECRET: str = os.getenv("CLOUDINARY_SECRET", "")

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def seed_uploads_dir(self) -> Path:
        return Path(self.SEED_DATA_DIR) / "uploads"

    @property
    def use_cloud_uploads(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
