"""
Attribute Reconciler

Keeps each variant's attribute list aligned with the current attribute
catalog without discarding values the seller already entered.

Reconciliation is idempotent: running it again with the same catalog and the
same previously selected attributes returns the same list and reports no
change, so callers can invoke it on every catalog change without looping.
"""

from typing import Iterable, List, Optional, Sequence, Union

from variant_engine.core.logger import logger
from variant_engine.models.attribute import (
    AttributeCatalog,
    AttributeInstance,
    attribute_identity,
    is_reserved_attribute,
)
from variant_engine.models.variant import VariantRecord

VariantOrAttributes = Union[VariantRecord, Sequence[AttributeInstance]]


class AttributeReconciler:
    """Aligns variant attribute lists with an attribute catalog."""

    def reconcile(
        self,
        catalog: AttributeCatalog,
        variant: VariantOrAttributes,
        previously_selected: Optional[Iterable[AttributeInstance]] = None,
    ) -> List[AttributeInstance]:
        """
        Reconcile one variant's attributes with the catalog.

        Steps:
        1. Start from the variant's current attributes
        2. Add an empty entry for every catalog attribute that is missing
        3. Drop entries that are neither in the catalog nor in
           previously_selected (stale entries from an obsolete catalog)
        4. Order catalog entries first, then retained out-of-catalog entries
           in their prior order

        Existing values of catalog attributes are never changed.

        Args:
            catalog: Current attribute catalog
            variant: Variant record (or its attribute list)
            previously_selected: Attributes explicitly present on the variant
                before the catalog changed; these survive removal from the
                catalog

        Returns:
            New attribute list
        """
        # Bare attribute lists bypass VariantRecord validation
        current = [
            instance for instance in self._current_attributes(variant)
            if not is_reserved_attribute(instance.key)
        ]

        by_identity = {}
        for instance in current:
            by_identity.setdefault(attribute_identity(instance.key), instance)

        reconciled: List[AttributeInstance] = []
        used = set()
        for definition in catalog.attributes:
            existing = by_identity.get(definition.identity)
            if existing is not None:
                reconciled.append(existing.model_copy())
            else:
                reconciled.append(AttributeInstance(key=definition.name, value=""))
            used.add(definition.identity)

        retained = {attribute_identity(a.key) for a in previously_selected or []}
        for instance in current:
            identity = attribute_identity(instance.key)
            if identity in used or identity not in retained:
                continue
            reconciled.append(instance.model_copy())
            used.add(identity)

        return reconciled

    def has_changes(
        self,
        before: Sequence[AttributeInstance],
        after: Sequence[AttributeInstance],
    ) -> bool:
        """True when applying a reconciliation result would change the variant."""
        return [(a.key, a.value) for a in before] != [(a.key, a.value) for a in after]

    def reconcile_all(
        self,
        catalog: AttributeCatalog,
        variants: Sequence[VariantRecord],
        previously_selected: Optional[Iterable[AttributeInstance]] = None,
    ) -> List[VariantRecord]:
        """
        Reconcile every variant; only the attribute lists differ in the result.

        Variants that are already aligned are returned as they are.
        """
        previously_selected = list(previously_selected or [])
        result = []
        changed = 0

        for variant in variants:
            attributes = self.reconcile(catalog, variant, previously_selected)
            if self.has_changes(variant.attributes, attributes):
                variant = variant.model_copy(update={"attributes": attributes})
                changed += 1
            result.append(variant)

        if changed:
            logger.debug(
                f"Reconciled attributes on {changed} of {len(result)} variants",
                metadata={"catalog": catalog.names(), "changed": changed}
            )

        return result

    @staticmethod
    def _current_attributes(variant: VariantOrAttributes) -> List[AttributeInstance]:
        if isinstance(variant, VariantRecord):
            return list(variant.attributes)
        return list(variant or [])


_reconciler = AttributeReconciler()


def reconcile_attributes(
    catalog: AttributeCatalog,
    variant: VariantOrAttributes,
    previously_selected: Optional[Iterable[AttributeInstance]] = None,
) -> List[AttributeInstance]:
    """Module-level shortcut for AttributeReconciler.reconcile."""
    return _reconciler.reconcile(catalog, variant, previously_selected)


def get_attribute_reconciler() -> AttributeReconciler:
    return _reconciler
