"""
SKU Service

Assigns stock keeping unit codes to variants and decides when an existing
SKU should be regenerated.

SKU layout: {seller}-{category}-{variant}-{time}
- seller:   last 3 characters of the seller id, or UNK
- category: first 3 characters of the category code, upper-cased, or UNK
- variant:  attribute values joined with '-', whitespace removed,
            upper-cased, first 3 characters, or DEF
- time:     last 4 digits of the millisecond clock

Uniqueness is only encouraged by the time suffix; values sharing a 3
character prefix (Red/S vs Red/Small) produce the same variant segment.
"""

import re
import time
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from variant_engine.core.config import config
from variant_engine.core.logger import logger
from variant_engine.models.variant import SkuContext, VariantRecord

UNKNOWN_SEGMENT = "UNK"
DEFAULT_VARIANT_SEGMENT = "DEF"
ERROR_PREFIX = "ERR"
SEGMENT_LENGTH = 3

_WHITESPACE = re.compile(r"\s+")


class SkuRegenerationPolicy(str, Enum):
    """When a variant that already has a SKU gets a new one."""
    PRESERVE_MANUAL = "preserve_manual"  # Only fill a blank SKU
    ALWAYS_FRESH = "always_fresh"        # Regenerate on every attribute change


def current_time_ms() -> int:
    return time.time_ns() // 1_000_000


def default_policy() -> SkuRegenerationPolicy:
    return SkuRegenerationPolicy(config.sku_regeneration_policy)


class SkuAssigner:
    """
    Builds SKU strings.

    The clock is injectable so a fixed timestamp makes assignment fully
    deterministic.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or current_time_ms

    def assign(
        self,
        sku_context: Optional[SkuContext],
        category_code: Optional[str] = None,
        attribute_values: Optional[Mapping[str, Optional[str]]] = None,
    ) -> str:
        """
        Assign a SKU. Never raises.

        Args:
            sku_context: Seller and category context
            category_code: Category code; falls back to the context's code
            attribute_values: Attribute values in catalog order

        Returns:
            SKU string, or ERR-#### when the inputs could not be processed
        """
        time_segment = self._time_segment()

        try:
            seller_id = sku_context.seller_id if sku_context else None
            code = category_code or (sku_context.category_code if sku_context else None)

            user_segment = seller_id[-SEGMENT_LENGTH:] if seller_id else UNKNOWN_SEGMENT
            category_segment = (
                code[:SEGMENT_LENGTH].upper() if code else UNKNOWN_SEGMENT
            )
            variant_segment = self._variant_segment(attribute_values)

            return f"{user_segment}-{category_segment}-{variant_segment}-{time_segment}"

        except Exception as e:
            logger.warning(
                "SKU generation failed, using error SKU",
                error=e,
                metadata={"category_code": str(category_code)}
            )
            return f"{ERROR_PREFIX}-{time_segment}"

    @staticmethod
    def _variant_segment(attribute_values: Optional[Mapping[str, Optional[str]]]) -> str:
        values = [
            str(value).strip()
            for value in (attribute_values or {}).values()
            if value is not None and value != ""
        ]
        joined = _WHITESPACE.sub("", "-".join(values)).upper()
        return joined[:SEGMENT_LENGTH] or DEFAULT_VARIANT_SEGMENT

    def _time_segment(self) -> str:
        try:
            return f"{int(self._clock()) % 10000:04d}"
        except Exception as e:
            logger.warning("SKU clock failed", error=e)
            return "0000"


def is_error_sku(sku: Optional[str]) -> bool:
    """True for fallback SKUs that need manual correction."""
    return bool(sku) and sku.startswith(f"{ERROR_PREFIX}-")


def should_regenerate(
    policy: SkuRegenerationPolicy,
    current_sku: Optional[str],
    previous_values: Optional[Mapping[str, Optional[str]]],
    new_values: Optional[Mapping[str, Optional[str]]],
) -> bool:
    """
    Decide whether a variant's SKU should be regenerated.

    PRESERVE_MANUAL regenerates only a blank SKU. ALWAYS_FRESH regenerates
    whenever the attribute-value combination changed, overwriting any SKU
    typed by hand.
    """
    policy = SkuRegenerationPolicy(policy)
    if policy is SkuRegenerationPolicy.PRESERVE_MANUAL:
        return not (current_sku or "").strip()

    return list((previous_values or {}).items()) != list((new_values or {}).items())


def fill_missing_skus(
    variants: Sequence[VariantRecord],
    sku_context: Optional[SkuContext],
    category_code: Optional[str] = None,
    assigner: Optional[SkuAssigner] = None,
) -> List[VariantRecord]:
    """Assign a SKU to every variant whose SKU is still blank."""
    assigner = assigner or SkuAssigner()
    filled = []
    for variant in variants:
        if not variant.sku.strip():
            sku = assigner.assign(sku_context, category_code, variant.attribute_values())
            variant = variant.model_copy(update={"sku": sku})
        filled.append(variant)
    return filled


def find_duplicate_skus(variants: Sequence[VariantRecord]) -> Dict[str, List[int]]:
    """
    Report SKUs shared by more than one variant of a product.

    Returns:
        Dict mapping each duplicated SKU to the indexes of the variants using it
    """
    positions: Dict[str, List[int]] = {}
    for index, variant in enumerate(variants):
        if variant.sku.strip():
            positions.setdefault(variant.sku, []).append(index)
    return {sku: indexes for sku, indexes in positions.items() if len(indexes) > 1}


def generate_sku(
    sku_context: Optional[SkuContext],
    category_code: Optional[str] = None,
    attribute_values: Optional[Mapping[str, Optional[str]]] = None,
) -> str:
    """Module-level shortcut using the wall clock."""
    return SkuAssigner().assign(sku_context, category_code, attribute_values)
