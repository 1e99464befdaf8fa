# File: app/core/config.py

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel


def _csv(value: str) -> List[str]:
    return [i.strip() for i in value.split(",") if i.strip()]


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "Storefront API"
    VERSION: str = "0.1.0"

    api_prefix: str = "/api"
    debug: bool = os.getenv("DEBUG", "0").lower() in ("1", "true", "yes", "on")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    backend_cors_origins: List[str] = _csv(
        os.getenv("BACKEND_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    )

    # Database (set DATABASE_URL=postgresql+psycopg://... for Postgres)
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")

    # Tokens: 0 disables expiry
    token_expire_minutes: int = int(os.getenv("TOKEN_EXPIRE_MINUTES", str(60 * 24)))  # 24h

    # Image storage
    storage_dir: str = os.getenv("STORAGE_DIR", "storage")
    storage_url: str = os.getenv("STORAGE_URL", "/storage")
    max_image_bytes: int = 2 * 1024 * 1024
    allowed_image_types: dict[str, str] = {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/gif": ".gif",
        "image/svg+xml": ".svg",
    }

    page_size: int = 10


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
