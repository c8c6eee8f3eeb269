"""Configuration management for pkgindex"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings.

    Values come from the environment (case-insensitive) or a `.env` file:
        ALLOW_PACKAGE_OVERWRITES=true
        STORAGE_PATH=/var/lib/pkgindex/packages
    """

    # ===== Indexing Policy =====
    allow_package_overwrites: bool = Field(
        default=False,
        description="Replace an existing package when the same id and version is uploaded again"
    )
    max_package_size_bytes: int = Field(
        default=0,
        ge=0,
        description="Reject uploads larger than this many bytes (0 = unlimited)"
    )

    # ===== Local Providers =====
    storage_path: str = "data/packages"  # Root directory for package content
    database_path: str = "data/packages.db"  # SQLite metadata database

    # ===== Temporary Files =====
    temp_dir: str | None = None  # None = system default temp directory

    # ===== Application Settings =====
    log_level: str = "info"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
