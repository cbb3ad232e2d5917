from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Metalyz SEO API"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True

    # ── Logging ─────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # ── Analysis cache ──────────────────────────
    ANALYSIS_CACHE_KEY: str = "metalyz_url_analysis_cache"
    CACHE_EXPIRY_HOURS: int = 24
    CACHE_MAX_ENTRIES: int = 50

    # Falls back to the in-memory store when unset
    REDIS_URL: Optional[str] = None
    FORCE_IN_MEMORY_CACHE: bool = False

    # ── Crawler ─────────────────────────────────
    FETCH_TIMEOUT_SECONDS: float = 10.0
    CRAWLER_USER_AGENT: str = (
        "Mozilla/5.0 (compatible; Metalyz-SEO-Bot/1.0; +https://seo-meta-master.vercel.app)"
    )

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
