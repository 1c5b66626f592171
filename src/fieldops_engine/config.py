"""Configuration management for the field-ops engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str
    super_guarantee_rate: Decimal
    cost_rate_super_loading: Decimal

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            super_guarantee_rate=Decimal(os.getenv("SUPER_GUARANTEE_RATE", "0.11")),
            cost_rate_super_loading=Decimal(os.getenv("COST_RATE_SUPER_LOADING", "0.12")),
        )


@dataclass(frozen=True)
class PayrollPolicy:
    """Statutory and company policy constants used by payroll calculations.

    Attributes:
        super_guarantee_rate: Superannuation guarantee applied to ordinary
            time earnings on a pay run.
        cost_rate_super_loading: Superannuation loading applied when
            projecting an hourly cost rate for job costing. Kept separate
            from the guarantee rate: the two figures differ in practice and
            must be confirmed against current statutory rates.
        weeks_per_year: Pay periods per year for salaried staff.
        ordinary_weekly_hours: Full-time ordinary hours per week.
        annual_leave_days: Paid annual leave per year.
        sick_leave_days: Paid personal/sick leave per year.
    """

    super_guarantee_rate: Decimal = Decimal("0.11")
    cost_rate_super_loading: Decimal = Decimal("0.12")
    weeks_per_year: int = 52
    ordinary_weekly_hours: Decimal = Decimal("38")
    annual_leave_days: Decimal = Decimal("20")
    sick_leave_days: Decimal = Decimal("10")

    @property
    def hours_per_day(self) -> Decimal:
        """Ordinary hours in one day of a five-day week (7.6 for 38h)."""
        return self.ordinary_weekly_hours / 5

    @property
    def annual_hours(self) -> Decimal:
        """Full-time ordinary hours per year (1976 for 38h x 52)."""
        return self.ordinary_weekly_hours * self.weeks_per_year

    @classmethod
    def from_settings(cls, settings: Settings) -> PayrollPolicy:
        return cls(
            super_guarantee_rate=settings.super_guarantee_rate,
            cost_rate_super_loading=settings.cost_rate_super_loading,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


def get_payroll_policy() -> PayrollPolicy:
    """Payroll policy with rates taken from settings."""
    return PayrollPolicy.from_settings(get_settings())


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the API and CLI entry points."""
    logging.basicConfig(
        level=level or get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
