"""Invoice tax summary models.

Per-document models (breakdown, reconciliation metadata, summary totals and
the final record) plus the cross-document aggregate they are folded into.
Rates are plain floats (13.0 means 13%) and amounts are floats rounded where
the reconciliation step says so.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BreakdownSource(StrEnum):
    SUMMARY = "summary"
    LINE_ITEMS = "line-items"


# ---------------------------------------------------------------------------
# Per-document intermediate results
# ---------------------------------------------------------------------------


class BreakdownResult(BaseModel):
    """Raw per-rate IVA totals before reconciliation."""

    breakdown: dict[float, float] = Field(default_factory=dict)
    taxable_base_by_rate: dict[float, float] = Field(default_factory=dict)
    source: BreakdownSource = BreakdownSource.SUMMARY


class ReconciliationInfo(BaseModel):
    """What the reconciler did to make the breakdown match TotalImpuesto."""

    model_config = ConfigDict(frozen=True)

    adjusted: bool = False
    diff_applied: float = 0.0
    adjusted_rate: float | None = None
    # No non-zero-rate entries: the tax total has no visible breakdown
    no_breakdown: bool = False


class InvoiceSummary(BaseModel):
    """Monetary totals read from the document summary (ResumenFactura)."""

    taxable_total: float = 0.0
    subtotal: float = 0.0
    tax_total: float = 0.0
    grand_total: float = 0.0
    exempt_total: float = 0.0
    discount_total: float = 0.0
    raw: Any = Field(default=None, exclude=True, repr=False)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class InvoiceRecord(BaseModel):
    """Normalized tax record for one document."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    file_name: str
    key: str = ""
    sequence_number: str = ""
    issue_date: datetime | None = None
    taxable_total: float = 0.0
    discount_total: float = 0.0
    subtotal: float = 0.0
    tax_total: float = 0.0
    grand_total: float = 0.0
    exempt_total: float = 0.0
    tax_by_rate: dict[float, float] = Field(default_factory=dict)
    taxable_base_by_rate: dict[float, float] = Field(default_factory=dict)
    is_exempt: bool = False
    observations: str = ""
    breakdown_source: BreakdownSource = BreakdownSource.SUMMARY
    reconciliation: ReconciliationInfo = Field(default_factory=ReconciliationInfo)


class CrossDocumentAggregate(BaseModel):
    """Running totals across every retained invoice of a batch."""

    invoice_count: int = 0
    taxable_total: float = 0.0
    discount_total: float = 0.0
    subtotal: float = 0.0
    tax_total: float = 0.0
    grand_total: float = 0.0
    exempt_total: float = 0.0
    tax_by_rate: dict[float, float] = Field(default_factory=dict)
    taxable_base_by_rate: dict[float, float] = Field(default_factory=dict)
    exempt_count: int = 0

    def add(self, record: InvoiceRecord) -> None:
        """Fold one record into the running totals."""
        self.invoice_count += 1
        self.taxable_total += record.taxable_total
        self.discount_total += record.discount_total
        self.subtotal += record.subtotal
        self.tax_total += record.tax_total
        self.grand_total += record.grand_total
        self.exempt_total += record.exempt_total
        for rate, amount in record.tax_by_rate.items():
            self.tax_by_rate[rate] = self.tax_by_rate.get(rate, 0.0) + amount
        for rate, base in record.taxable_base_by_rate.items():
            self.taxable_base_by_rate[rate] = self.taxable_base_by_rate.get(rate, 0.0) + base
        if record.is_exempt:
            self.exempt_count += 1


class BatchResult(BaseModel):
    """Records retained by a batch run and their aggregate."""

    invoices: list[InvoiceRecord] = Field(default_factory=list)
    aggregates: CrossDocumentAggregate = Field(default_factory=CrossDocumentAggregate)
    skipped: list[str] = Field(default_factory=list)
