"""Identifier, date, summary and line-item extraction from a document tree."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from .field_locator import as_list, find_first, pick_first_available
from ..models.invoice import InvoiceSummary
from ..utils.dates import parse_issue_date
from ..utils.numbers import sum_values, to_number

DATE_FIELDS = ("FechaEmision", "FechaCreacion", "FechaFactura", "IssueDate")

# Alias lists: the first alias present in the summary wins
TAXABLE_FIELDS = ("TotalGravado", "TotalVentaGravada")
TAXABLE_PARTS = ("TotalServGravados", "TotalMercanciasGravadas")
SUBTOTAL_FIELDS = ("TotalVenta", "TotalVentaNeta")
TAX_FIELDS = ("TotalImpuesto", "TotalImpuestos")
TAX_PART_AMOUNT_FIELDS = ("TotalMontoImpuesto", "MontoImpuesto", "Monto")
GRAND_TOTAL_FIELDS = ("TotalComprobante", "TotalFactura", "TotalDocumento", "TotalMedioPago")
PAYMENT_AMOUNT_FIELDS = ("TotalMedioPago", "Monto", "Total")
EXEMPT_FIELDS = ("TotalExento",)
EXEMPT_PARTS = ("TotalServExentos", "TotalMercanciasExentas")
DISCOUNT_FIELDS = ("TotalDescuentos", "TotalDescuento")

DETAIL_FIELDS = ("DetalleServicio", "DetalleFactura")
LINE_FIELDS = ("LineaDetalle", "Lineas", "lineas")


def extract_identifiers(root: Any) -> tuple[str, str]:
    """Return (Clave, NumeroConsecutivo), empty strings when absent."""
    key = find_first(root, "Clave")
    sequence = find_first(root, "NumeroConsecutivo")
    return (
        str(key) if key is not None else "",
        str(sequence) if sequence is not None else "",
    )


def extract_issue_date(root: Any) -> datetime | None:
    """First parseable issue date among the known date fields."""
    for name in DATE_FIELDS:
        parsed = parse_issue_date(find_first(root, name))
        if parsed is not None:
            return parsed
    return None


def _sum_parts(summary: dict, names: tuple[str, ...]) -> float:
    return sum_values(summary.get(name) for name in names)


def extract_summary(root: Any) -> InvoiceSummary:
    """Read the ResumenFactura totals, with fallbacks for older layouts.

    Each total comes from the first alias present; when that is absent or zero
    it is rebuilt from finer-grained parts where the document carries them.
    """
    summary = find_first(root, "ResumenFactura")
    if not isinstance(summary, dict):
        return InvoiceSummary()

    taxable_total = to_number(pick_first_available(summary, TAXABLE_FIELDS))
    if not taxable_total:
        taxable_total = _sum_parts(summary, TAXABLE_PARTS)

    subtotal = to_number(pick_first_available(summary, SUBTOTAL_FIELDS))

    tax_total = to_number(pick_first_available(summary, TAX_FIELDS))
    if not tax_total and summary.get("TotalDesgloseImpuesto"):
        tax_total = sum_values(
            pick_first_available(entry, TAX_PART_AMOUNT_FIELDS)
            for entry in as_list(summary["TotalDesgloseImpuesto"])
        )

    grand_total = to_number(pick_first_available(summary, GRAND_TOTAL_FIELDS))
    if not grand_total and summary.get("MedioPago"):
        grand_total = sum_values(
            pick_first_available(payment, PAYMENT_AMOUNT_FIELDS)
            for payment in as_list(summary["MedioPago"])
        )

    exempt_total = to_number(pick_first_available(summary, EXEMPT_FIELDS))
    if not exempt_total:
        exempt_total = _sum_parts(summary, EXEMPT_PARTS)

    discount_total = to_number(pick_first_available(summary, DISCOUNT_FIELDS))

    return InvoiceSummary(
        taxable_total=taxable_total,
        subtotal=subtotal,
        tax_total=tax_total,
        grand_total=grand_total,
        exempt_total=exempt_total,
        discount_total=discount_total,
        raw=summary,
    )


def extract_line_items(root: Any) -> list[dict]:
    """Line items under DetalleServicio (or DetalleFactura)."""
    detail = None
    for name in DETAIL_FIELDS:
        detail = find_first(root, name)
        if detail is not None:
            break
    if not isinstance(detail, dict):
        return []
    return [line for line in as_list(pick_first_available(detail, LINE_FIELDS)) if isinstance(line, dict)]
