"""
Variant Session Service

Explicit state for editing the variants of one product: the category
attributes, the seller's custom attributes and the variant list.

Reconciliation runs only when the resolved attribute catalog differs from the
catalog the variants were last aligned with, so repeated calls are cheap and
cannot loop.
"""

from typing import Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from variant_engine.core.logger import logger
from variant_engine.models.attribute import (
    AttributeCatalog,
    AttributeDefinition,
    AttributeInstance,
    attribute_identity,
    is_reserved_attribute,
)
from variant_engine.models.variant import GenerationRequest, SkuContext, VariantRecord
from variant_engine.services.attribute_catalog_service import AttributeCatalogResolver
from variant_engine.services.attribute_reconciler import AttributeReconciler
from variant_engine.services.combination_service import CombinationGenerator
from variant_engine.services.sku_service import (
    SkuAssigner,
    SkuRegenerationPolicy,
    default_policy,
    fill_missing_skus,
    find_duplicate_skus,
    is_error_sku,
    should_regenerate,
)
from variant_engine.services.stock_service import coerce_stock, total_stock


class CatalogState(BaseModel):
    """Inputs of the attribute catalog, owned by the editing context."""
    category_attributes: List[AttributeDefinition] = Field(default_factory=list)
    custom_attributes: List[str] = Field(default_factory=list)

    @property
    def catalog(self) -> AttributeCatalog:
        return AttributeCatalogResolver().resolve(
            self.category_attributes, self.custom_attributes
        )


class VariantSubmission(BaseModel):
    """Variant records ready for the persistence collaborator."""
    variants: List[VariantRecord]
    total_stock: int
    error_skus: List[int] = Field(
        default_factory=list, description="Indexes of variants with an ERR- SKU"
    )
    duplicate_skus: Dict[str, List[int]] = Field(default_factory=dict)


def _entered(attributes: Iterable[AttributeInstance]) -> List[AttributeInstance]:
    """Attributes the seller actually filled in."""
    return [a.model_copy() for a in attributes if a.value]


class VariantSession:
    """
    Single-writer editing session for one product's variants.

    An attribute the seller filled in on a variant survives removal of that
    attribute from the catalog; blank entries added automatically do not.
    """

    def __init__(
        self,
        sku_context: Optional[SkuContext] = None,
        category_code: Optional[str] = None,
        category_attributes: Optional[Iterable[Union[AttributeDefinition, str]]] = None,
        variants: Optional[Iterable[VariantRecord]] = None,
        policy: Optional[Union[SkuRegenerationPolicy, str]] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.sku_context = sku_context or SkuContext()
        self.category_code = category_code
        self.policy = SkuRegenerationPolicy(policy) if policy else default_policy()

        self.resolver = AttributeCatalogResolver()
        self.reconciler = AttributeReconciler()
        self.sku_assigner = SkuAssigner(clock)
        self.generator = CombinationGenerator(self.sku_assigner)

        self.state = CatalogState(
            category_attributes=self._definitions(category_attributes or [])
        )
        self.variants: List[VariantRecord] = list(variants or [])
        self._selected: List[List[AttributeInstance]] = [
            _entered(v.attributes) for v in self.variants
        ]
        self._reconciled_catalog: Optional[AttributeCatalog] = None

    # ===== Attribute catalog =====

    @property
    def catalog(self) -> AttributeCatalog:
        return self.state.catalog

    def set_category_attributes(
        self,
        category_attributes: Iterable[Union[AttributeDefinition, str]],
        category_code: Optional[str] = None,
    ) -> bool:
        """Switch category; returns whether any variant changed."""
        self.state.category_attributes = self._definitions(category_attributes)
        if category_code is not None:
            self.category_code = category_code
        return self.sync_attributes()

    def add_custom_attribute(self, name: Optional[str]) -> bool:
        """Add a custom attribute; returns False when the name was rejected."""
        updated = self.resolver.add_custom_attribute(
            self.state.custom_attributes, name, self.state.category_attributes
        )
        if updated == self.state.custom_attributes:
            return False
        self.state.custom_attributes = updated
        self.sync_attributes()
        return True

    def remove_custom_attribute(self, name: Optional[str]) -> bool:
        """Remove a custom attribute; returns False when it was not present."""
        updated = self.resolver.remove_custom_attribute(self.state.custom_attributes, name)
        if updated == self.state.custom_attributes:
            return False
        self.state.custom_attributes = updated
        self.sync_attributes()
        return True

    def sync_attributes(self, force: bool = False) -> bool:
        """
        Align every variant with the current catalog.

        Does nothing when the catalog equals the one last reconciled against,
        unless force is set.

        Returns:
            True if any variant's attribute list changed
        """
        catalog = self.catalog
        if not force and catalog == self._reconciled_catalog:
            return False

        changed = False
        for index, variant in enumerate(self.variants):
            attributes = self.reconciler.reconcile(catalog, variant, self._selected[index])
            if self.reconciler.has_changes(variant.attributes, attributes):
                self.variants[index] = variant.model_copy(update={"attributes": attributes})
                changed = True

        self._reconciled_catalog = catalog
        return changed

    # ===== Variant list =====

    def generate(self, request: GenerationRequest) -> List[VariantRecord]:
        """Replace all variants with the combinations of the request."""
        catalog = self.catalog
        if self.variants:
            logger.info(
                f"Replacing {len(self.variants)} existing variants with generated ones",
                metadata={"previous_count": len(self.variants)}
            )

        self.variants = self.generator.generate(
            request, self.sku_context, self.category_code, catalog
        )
        self._selected = [_entered(v.attributes) for v in self.variants]
        self._reconciled_catalog = catalog
        return list(self.variants)

    def append_variant(self) -> VariantRecord:
        """Add one blank variant with every catalog attribute."""
        self.sync_attributes()
        variant = self.generator.new_blank_variant(self.catalog)
        self.variants.append(variant)
        self._selected.append([])
        return variant

    def remove_variant(self, index: int) -> VariantRecord:
        self._selected.pop(index)
        return self.variants.pop(index)

    def update_attribute(self, index: int, key: str, value: Optional[str]) -> VariantRecord:
        """
        Set one attribute value, applying the SKU regeneration policy.

        Reserved or blank keys are ignored.
        """
        variant = self.variants[index]
        if not key or not key.strip() or is_reserved_attribute(key):
            logger.debug(f"Ignoring attribute update for key: {key!r}")
            return variant

        value = (value or "").strip()
        identity = attribute_identity(key)
        previous_values = variant.attribute_values()

        attributes = [a.model_copy() for a in variant.attributes]
        for instance in attributes:
            if attribute_identity(instance.key) == identity:
                instance.value = value
                break
        else:
            attributes.append(AttributeInstance(key=key.strip(), value=value))

        updated = variant.model_copy(update={"attributes": attributes})
        new_values = updated.attribute_values()

        if should_regenerate(self.policy, variant.sku, previous_values, new_values):
            sku = self.sku_assigner.assign(self.sku_context, self.category_code, new_values)
            updated = updated.model_copy(update={"sku": sku})

        selected = [a for a in self._selected[index] if attribute_identity(a.key) != identity]
        if value:
            selected.append(AttributeInstance(key=key.strip(), value=value))
        self._selected[index] = selected

        self.variants[index] = updated
        return updated

    def set_sku(self, index: int, sku: Optional[str]) -> VariantRecord:
        """Manual SKU edit."""
        updated = self.variants[index].model_copy(update={"sku": (sku or "").strip()})
        self.variants[index] = updated
        return updated

    def set_stock(self, index: int, stock) -> VariantRecord:
        """Manual stock edit; non-numeric or negative input becomes 0."""
        updated = self.variants[index].model_copy(
            update={"stock": max(0, coerce_stock(stock))}
        )
        self.variants[index] = updated
        return updated

    @property
    def total_stock(self) -> int:
        return total_stock(self.variants)

    def prepare_submission(self) -> VariantSubmission:
        """Fill blank SKUs and package the variants for persistence."""
        self.sync_attributes()
        variants = fill_missing_skus(
            self.variants, self.sku_context, self.category_code, self.sku_assigner
        )
        self.variants = variants

        submission = VariantSubmission(
            variants=list(variants),
            total_stock=total_stock(variants),
            error_skus=[i for i, v in enumerate(variants) if is_error_sku(v.sku)],
            duplicate_skus=find_duplicate_skus(variants),
        )

        if submission.error_skus or submission.duplicate_skus:
            logger.warning(
                "Variants need SKU review before saving",
                metadata={
                    "error_skus": submission.error_skus,
                    "duplicate_skus": submission.duplicate_skus,
                }
            )

        return submission

    @staticmethod
    def _definitions(attributes: Iterable[Union[AttributeDefinition, str]]) -> List[AttributeDefinition]:
        """Blank names are dropped, as the catalog resolver does."""
        return [
            a if isinstance(a, AttributeDefinition) else AttributeDefinition(name=a)
            for a in attributes
            if isinstance(a, AttributeDefinition) or (a and a.strip())
        ]
