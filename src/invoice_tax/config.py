"""Application configuration via environment variables with INVOICE_TAX_ prefix."""

from __future__ import annotations

from datetime import date

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Invoice tax summary configuration.

    All settings are read from environment variables prefixed with
    ``INVOICE_TAX_``. The date range is optional; when either bound is set,
    invoices without a readable issue date are left out of the batch.
    """

    model_config = SettingsConfigDict(env_prefix="INVOICE_TAX_")

    # ── Input ──────────────────────────────────────────────────────────────
    input_dir: str = "."
    file_extension: str = ".xml"

    # ── Date filter (inclusive) ────────────────────────────────────────────
    start_date: date | None = None
    end_date: date | None = None

    # ── Reconciliation ─────────────────────────────────────────────────────
    # Adjustments smaller than this are applied silently
    adjustment_threshold: float = Field(default=0.01, ge=0.0)

    # ── Output ─────────────────────────────────────────────────────────────
    output_filename: str = "invoice-summary.json"

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True

    @model_validator(mode="after")
    def _check_date_range(self) -> Settings:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self
