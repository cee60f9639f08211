"""Configuration management using Pydantic Settings"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "paycycle"
    log_level: str = "INFO"

    # Reporting
    reporting_currency: str = "DOP"
    default_exchange_rate: Decimal = Field(default=Decimal("60"), gt=0)  # USD -> DOP when a request omits the rate
    default_financial_start_day: int = Field(default=1, ge=1, le=28)

    # Due-date horizons (days)
    due_soon_days: int = 7
    urgent_days: int = 3
    agenda_limit: int = 4

    # Budgets
    budget_warning_percent: int = 80


settings = Settings()
