# app/config/settings.py

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "academy-audit"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Security ---
    jwt_secret: str = Field(..., min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None

    # --- Database ---
    database_url: str
    database_echo: bool = False

    # --- Audit trail ---
    audit_page_size: int = Field(50, ge=1)
    audit_max_page_size: int = Field(500, ge=1)
    enable_security_alerts: bool = True
    large_expense_threshold: Decimal = Decimal("1000")
    security_alert_window_days: int = Field(7, ge=1)

    # --- Observability ---
    enable_metrics: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
