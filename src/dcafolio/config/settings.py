# src/dcafolio/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and an optional .env file with validation.

Files that USE this module:
- dcafolio.app (target fiat, basis and fallback rates for the report command)
- dcafolio.adapters.providers.* (API URLs, keys, timeouts and cache TTLs)
- dcafolio.shared.logging_conf (indirectly, through app)

Files that this module USES:
- dcafolio.shared.validators (currency code validation)
- dcafolio.domain.models (CostBasis)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from typing import Dict, Optional, Tuple  # Type hints

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from dcafolio.domain.models import CostBasis
from dcafolio.shared.validators import normalize_currency, validate_currency_code


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Engine defaults ---
    target_fiat: str = Field(default="USD", alias="TARGET_FIAT")
    cost_basis: CostBasis = Field(default=CostBasis.EFFECTIVE, alias="COST_BASIS")

    # Approximate rates used only when no live rate is available, keyed "FROM/TO"
    fallback_fx_rates: Dict[str, float] = Field(
        default_factory=lambda: {"EUR/USD": 1.1}, alias="FALLBACK_FX_RATES"
    )

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=60)

    # --- Market data (CoinGecko) ---
    coingecko_url: str = Field(default="https://api.coingecko.com/api/v3", alias="COINGECKO_URL")
    coingecko_cache_minutes: int = Field(default=5, alias="COINGECKO_CACHE_MINUTES", ge=1, le=1440)

    # --- FX rates (FastForex) ---
    fastforex_key: str = Field(default="", alias="FASTFOREX_API_KEY")
    fastforex_base_url: str = Field(default="https://api.fastforex.io", alias="FASTFOREX_URL")
    fastforex_cache_minutes: int = Field(default=60, alias="FASTFOREX_CACHE_MINUTES", ge=1, le=1440)

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_console: bool = Field(default=True, alias="DCAFOLIO_LOG_CONSOLE")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def FASTFOREX_URL(self) -> str:
        """FastForex fetch-all endpoint with key."""
        return f"{self.fastforex_base_url.rstrip('/')}/fetch-all?api_key={self.fastforex_key}"

    @property
    def fallback_rate_table(self) -> Dict[Tuple[str, str], float]:
        """Fallback rates keyed by (from, to) currency pair."""
        table: Dict[Tuple[str, str], float] = {}
        for pair, rate in self.fallback_fx_rates.items():
            source, target = pair.split("/")
            table[(source, target)] = rate
        return table

    @field_validator("target_fiat")
    @classmethod
    def validate_target_fiat(cls, v: str) -> str:
        """Validate target fiat currency code."""
        code = normalize_currency(v) or ""
        if not validate_currency_code(code):
            raise ValueError("TARGET_FIAT must be a three-letter currency code")
        return code

    @field_validator("fallback_fx_rates")
    @classmethod
    def validate_fallback_fx_rates(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Validate 'FROM/TO' keys and positive rates."""
        normalized: Dict[str, float] = {}
        for pair, rate in v.items():
            parts = [normalize_currency(p) or "" for p in pair.split("/")]
            if len(parts) != 2 or not all(validate_currency_code(p) for p in parts):
                raise ValueError(f"Invalid FALLBACK_FX_RATES pair: {pair!r} (expected 'EUR/USD')")
            if rate <= 0:
                raise ValueError(f"FALLBACK_FX_RATES rate for {pair} must be positive")
            normalized["/".join(parts)] = float(rate)
        return normalized


# Global settings instance
settings = Settings()
