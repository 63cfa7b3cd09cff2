"""
Stock aggregation over a product's variants.

Totals are derived on every call and never stored, so they cannot drift from
the variant stock fields.
"""

from typing import Any, Dict, Iterable, Mapping, Union

from variant_engine.models.variant import VariantRecord, VariantStatus

VariantLike = Union[VariantRecord, Mapping[str, Any]]


def coerce_stock(value: Any) -> int:
    """Missing or non-numeric stock counts as 0; numeric strings are accepted."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0


def _stock_of(variant: VariantLike) -> int:
    if isinstance(variant, VariantRecord):
        return variant.stock
    if isinstance(variant, Mapping):
        return coerce_stock(variant.get("stock"))
    return coerce_stock(getattr(variant, "stock", None))


def _status_of(variant: VariantLike) -> str:
    if isinstance(variant, Mapping):
        status = variant.get("status")
    else:
        status = getattr(variant, "status", None)
    if isinstance(status, VariantStatus):
        return status.value
    return str(status or VariantStatus.ACTIVE.value)


def total_stock(variants: Iterable[VariantLike]) -> int:
    """Sum of stock over all variants; 0 for an empty list."""
    return sum(_stock_of(variant) for variant in variants or [])


def stock_by_status(variants: Iterable[VariantLike]) -> Dict[str, int]:
    """Stock totals per variant status (active / inactive)."""
    totals = {status.value: 0 for status in VariantStatus}
    for variant in variants or []:
        status = _status_of(variant)
        totals[status] = totals.get(status, 0) + _stock_of(variant)
    return totals
