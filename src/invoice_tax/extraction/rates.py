"""IVA rate resolution for tax entries."""
from __future__ import annotations

from types import MappingProxyType

from .field_locator import pick_first_available
from ..utils.numbers import to_number

# CodigoTarifaIVA (v4.4) -> percentage
IVA_CODE_TO_RATE = MappingProxyType({
    "01": 0.0,
    "02": 1.0,
    "03": 2.0,
    "08": 13.0,
})

VAT_CATEGORY = "01"

RATE_CODE_FIELDS = ("CodigoTarifaIVA", "codigoTarifaIVA")
RATE_PERCENT_FIELDS = ("Tarifa", "tarifa", "Porcentaje")
CATEGORY_FIELDS = ("Codigo", "codigo")


def pad_code(value) -> str:
    """Zero-pad a code to two characters; missing becomes "00"."""
    return str(value if value is not None else "").strip().rjust(2, "0")


def rate_code(entry: dict) -> str:
    return pad_code(pick_first_available(entry, RATE_CODE_FIELDS))


def tax_category(entry: dict) -> str:
    return pad_code(pick_first_available(entry, CATEGORY_FIELDS))


def is_vat_entry(entry: dict) -> bool:
    """True for IVA entries; other taxes (selective consumption, fuel...) are not."""
    return tax_category(entry) == VAT_CATEGORY


def resolve_rate(entry: dict) -> float | None:
    """Resolve the IVA percentage of a tax entry.

    The rate code wins when it maps to a known bracket. Otherwise an explicit
    percentage is used (zero included). Returns None when neither resolves,
    which excludes the entry from aggregation.
    """
    if not isinstance(entry, dict):
        return None

    code = pick_first_available(entry, RATE_CODE_FIELDS)
    if code is not None:
        rate = IVA_CODE_TO_RATE.get(pad_code(code))
        if rate is not None:
            return rate

    explicit = pick_first_available(entry, RATE_PERCENT_FIELDS)
    if explicit is not None:
        return to_number(explicit)
    return None
