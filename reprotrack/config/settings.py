from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    tenant_header: str = "X-Tenant-ID"
    log_level: str = "INFO"
    environment: str = "dev"
    # Calendar "today" for projections is taken in this zone
    timezone: str = "UTC"
    # CORS
    cors_allow_origins: str = "*"
    # Reproduction engine tunables
    ovulation_window_half_width_days: int = 2
    testing_lead_days: int = 3
    gestation_policy: str = "reject"  # reject | warn
    cycle_override_conflict_ratio: float = 0.20
    upcoming_cycles_horizon_months: int = 12
    upcoming_cycles_max_count: int = 6

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("database_url")
    @classmethod
    def ensure_asyncpg_scheme(cls, value: str) -> str:
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql+asyncpg://", 1)
        if value.startswith("postgresql://") and "+" not in value.split("://", 1)[0]:
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        return value

    @field_validator("gestation_policy")
    @classmethod
    def validate_gestation_policy(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"reject", "warn"}:
            raise ValueError("gestation_policy must be 'reject' or 'warn'")
        return normalized

    @field_validator("ovulation_window_half_width_days", "testing_lead_days")
    @classmethod
    def ensure_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must be zero or positive")
        return value

    @property
    def cors_allow_origins_list(self) -> list[str]:
        """Convert cors_allow_origins string to list"""
        if isinstance(self.cors_allow_origins, str):
            return [v.strip() for v in self.cors_allow_origins.split(",") if v.strip()]
        return self.cors_allow_origins


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
