"""
Combination Service

Expands attribute value lists into the Cartesian product of variants.

Generation is destructive: the result replaces the product's variant list,
discarding any price, stock, SKU or images entered before. Confirming that
with the seller is the caller's job.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from variant_engine.core.logger import logger
from variant_engine.models.attribute import (
    AttributeCatalog,
    AttributeInstance,
    attribute_identity,
    is_reserved_attribute,
)
from variant_engine.models.variant import (
    AttributeOption,
    GenerationRequest,
    SkuContext,
    VariantRecord,
    VariantStatus,
)
from variant_engine.services.sku_service import SkuAssigner


class CombinationGenerator:
    """Builds variant skeletons from a generation request."""

    def __init__(self, sku_assigner: Optional[SkuAssigner] = None):
        self.sku_assigner = sku_assigner or SkuAssigner()

    def generate(
        self,
        request: GenerationRequest,
        sku_context: Optional[SkuContext],
        category_code: Optional[str] = None,
        catalog: Optional[AttributeCatalog] = None,
    ) -> List[VariantRecord]:
        """
        Generate every combination of the requested attribute values.

        Attributes without values are skipped rather than producing zero
        variants. If no attribute has values the result is empty.

        Args:
            request: Ordered attribute/value lists
            sku_context: Seller and category context for SKUs
            category_code: Category code for SKUs
            catalog: Attribute catalog that fixes attribute order; the
                request order is used when omitted

        Returns:
            New variant records (price 0, stock 0, active, no images)
        """
        combinations = self._combinations(request)
        keys = catalog.names() if catalog is not None else [
            option.attribute_name for option in self._contributing(request)
        ]

        variants = [
            self._build_variant(combination, keys, sku_context, category_code)
            for combination in combinations
        ]

        logger.info(
            f"Generated {len(variants)} variants",
            metadata={
                "attributes": [o.attribute_name for o in self._contributing(request)],
                "count": len(variants),
            }
        )

        return variants

    def count_combinations(self, request: GenerationRequest) -> int:
        """Number of variants generate() would produce."""
        contributing = self._contributing(request)
        if not contributing:
            return 0
        count = 1
        for option in contributing:
            count *= len(option.values)
        return count

    def new_blank_variant(self, catalog: AttributeCatalog) -> VariantRecord:
        """A single empty variant with one blank value per catalog attribute."""
        return VariantRecord(
            attributes=[AttributeInstance(key=name, value="") for name in catalog.names()],
            sku="",
        )

    # ===== Private Helper Methods =====

    @staticmethod
    def _contributing(request: GenerationRequest) -> List[AttributeOption]:
        """Options that multiply the result: non-empty and not reserved."""
        return [
            option for option in request.options
            if option.values and not is_reserved_attribute(option.attribute_name)
        ]

    def _combinations(self, request: GenerationRequest) -> List[Dict[str, str]]:
        contributing = self._contributing(request)
        if not contributing:
            return []

        combinations: List[Dict[str, str]] = [{}]
        for option in contributing:
            combinations = [
                {**partial, option.attribute_name: value}
                for partial in combinations
                for value in option.values
            ]
        return combinations

    def _build_variant(
        self,
        combination: Dict[str, str],
        keys: List[str],
        sku_context: Optional[SkuContext],
        category_code: Optional[str],
    ) -> VariantRecord:
        lookup = {attribute_identity(key): value for key, value in combination.items()}
        attributes = [
            AttributeInstance(key=key, value=lookup.get(attribute_identity(key), ""))
            for key in keys
        ]
        values = {a.key: a.value for a in attributes if a.value}

        return VariantRecord(
            attributes=attributes,
            price=Decimal("0"),
            discount=Decimal("0"),
            stock=0,
            sku=self.sku_assigner.assign(sku_context, category_code, values),
            status=VariantStatus.ACTIVE,
            images=[],
        )


def generate_variants(
    request: GenerationRequest,
    sku_context: Optional[SkuContext],
    category_code: Optional[str] = None,
    catalog: Optional[AttributeCatalog] = None,
) -> List[VariantRecord]:
    """Module-level shortcut using the wall clock for SKUs."""
    return CombinationGenerator().generate(request, sku_context, category_code, catalog)
