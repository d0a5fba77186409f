"""
ShopFloor configuration.

Each concern reads its own environment prefix (``STORAGE_``, ``PRICING_``,
``API_``, ``PDF_``); top-level values and a local ``.env`` file fill in the
rest. List values accept either JSON or a comma-separated string, e.g.
``PRICING_INK_CATEGORIES="UV Printer,DTF Printer"``.
"""

import json
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            return json.loads(text)
        return [part.strip() for part in text.split(",") if part.strip()]
    return value


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "shopfloor.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="Milliseconds")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class PricingSettings(BaseSettings):
    """Engine behaviour and the defaults new tenants start with."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    # Equipment types billed by ink consumption rather than time or flat fee
    ink_categories: Annotated[list[str], NoDecode] = ["UV Printer", "Sublimation Printer"]

    default_margin_pct: float = Field(default=100.0, ge=0)
    default_tax_rate: float = Field(default=0.0, ge=0)
    default_currency: str = Field(default="USD", min_length=3, max_length=3)

    # Zero padding of Q-/J-/INV- counters
    code_width: int = Field(default=5, ge=1, le=12)

    @field_validator("ink_categories", mode="before")
    @classmethod
    def split_categories(cls, v: Any) -> Any:
        return _split_list(v)

    @field_validator("default_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: Annotated[list[str], NoDecode] = ["*"]
    tenant_header: str = Field(default="X-Tenant-ID", min_length=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: Any) -> Any:
        return _split_list(v)


class PdfSettings(BaseSettings):
    """Letterhead printed on invoice PDFs."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    company_name: str = "ShopFloor"
    company_address: str = ""
    company_phone: str = ""
    company_email: str = ""
    footer_text: str = "Thank you for your business."


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ShopFloor"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    api: APISettings = Field(default_factory=APISettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, built on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
