"""Per-rate IVA aggregation from the summary breakdown or the line items."""
from __future__ import annotations

from typing import Any

import structlog

from .field_locator import as_list, find_all, pick_first_available
from .rates import is_vat_entry, rate_code, resolve_rate, tax_category
from ..models.invoice import BreakdownResult, BreakdownSource
from ..utils.numbers import to_number

logger = structlog.get_logger(__name__)

# v4.4 uses TotalDesgloseImpuesto; some issuers emit TotalDesgloseFactura
SUMMARY_BREAKDOWN_FIELDS = ("TotalDesgloseImpuesto", "TotalDesgloseFactura")
SUMMARY_AMOUNT_FIELDS = ("TotalMontoImpuesto", "MontoImpuesto")

LINE_TAX_FIELDS = ("Impuesto", "Impuestos")
LINE_AMOUNT_FIELDS = ("Monto", "MontoImpuesto")
LINE_BASE_FIELDS = ("BaseImponible", "SubTotal", "MontoTotal", "MontoTotalLinea")


class _RateTotals:
    """Accumulates IVA and taxable base per rate."""

    def __init__(self):
        self.iva: dict[float, float] = {}
        self.base: dict[float, float] = {}

    def add_iva(self, rate: float, amount) -> None:
        self.iva[rate] = self.iva.get(rate, 0.0) + to_number(amount)

    def add_base(self, rate: float, amount) -> None:
        # 0% lines carry no taxable base
        if rate == 0:
            return
        self.base[rate] = self.base.get(rate, 0.0) + to_number(amount)


def summary_breakdown_entries(summary: Any) -> list[dict]:
    """Every breakdown entry under the summary, across all field aliases."""
    entries: list[dict] = []
    for name in SUMMARY_BREAKDOWN_FIELDS:
        for entry in find_all(summary, name):
            entries.extend(e for e in as_list(entry) if isinstance(e, dict))
    return entries


def _from_summary(summary: Any, totals: _RateTotals) -> None:
    seen: set[tuple[str, str, str]] = set()
    for entry in summary_breakdown_entries(summary):
        if not is_vat_entry(entry):
            continue
        amount = pick_first_available(entry, SUMMARY_AMOUNT_FIELDS)
        if amount is None:
            continue
        key = (tax_category(entry), rate_code(entry), str(amount))
        if key in seen:
            continue
        seen.add(key)

        rate = resolve_rate(entry)
        if rate is None:
            continue
        totals.add_iva(rate, amount)
        if rate > 0:
            totals.add_base(rate, to_number(amount) / (rate / 100))


def _from_line_items(line_items: list, totals: _RateTotals) -> None:
    for line in line_items or []:
        if not isinstance(line, dict):
            continue
        taxes = as_list(pick_first_available(line, LINE_TAX_FIELDS))
        for tax in taxes:
            if not isinstance(tax, dict) or not is_vat_entry(tax):
                continue
            rate = resolve_rate(tax)
            amount = pick_first_available(tax, LINE_AMOUNT_FIELDS)
            if rate is None or amount is None:
                continue
            totals.add_iva(rate, amount)
            base = to_number(pick_first_available(line, LINE_BASE_FIELDS))
            if base:
                totals.add_base(rate, base)


def aggregate_by_rate(line_items: list, summary: Any) -> BreakdownResult:
    """Build IVA and taxable base per rate for one document.

    The summary breakdown is preferred. Entries repeated under several
    aliases are counted once, keyed on (category, rate code, amount). When
    the summary yields nothing, the breakdown is derived from the line items'
    own tax entries instead.
    """
    totals = _RateTotals()
    source = BreakdownSource.SUMMARY
    _from_summary(summary, totals)

    if not totals.iva:
        source = BreakdownSource.LINE_ITEMS
        _from_line_items(line_items, totals)

    logger.debug("breakdown_aggregated", source=source.value, rates=sorted(totals.iva))
    return BreakdownResult(breakdown=totals.iva, taxable_base_by_rate=totals.base, source=source)
