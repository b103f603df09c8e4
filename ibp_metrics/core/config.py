# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os

# Downtime events are always requested for this trailing window.
DOWNTIME_LOOKBACK_DAYS: int = 30


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "ibp-metrics-exporter")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "3000"))

    IBP_API_URL: str = os.getenv(
        "IBP_API_URL", "https://ibdash.dotters.network:9000/api"
    ).rstrip("/")
    IBP_API_TIMEOUT: float = float(os.getenv("IBP_API_TIMEOUT", "10.0"))
    SERVICE_TIERS_URL: str = os.getenv("SERVICE_TIERS_URL", f"{IBP_API_URL}/services")
    SERVICE_TIERS_FILE: str = os.getenv("SERVICE_TIERS_FILE", "")

    CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", "15"))
    REFRESH_MAX_WORKERS: int = int(os.getenv("REFRESH_MAX_WORKERS", "4"))

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
