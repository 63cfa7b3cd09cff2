"""
Attribute Catalog Service

Computes the active attribute set of a product from the attributes its
category defines and the custom attributes the seller added in the session.
"""

from typing import Iterable, List, Optional, Sequence, Union

from variant_engine.core.logger import logger
from variant_engine.models.attribute import (
    AttributeCatalog,
    AttributeDefinition,
    AttributeOrigin,
    attribute_identity,
    is_reserved_attribute,
)

CategoryAttribute = Union[AttributeDefinition, str]


class AttributeCatalogResolver:
    """
    Resolves and edits the attribute catalog of a product.

    All methods are side-effect free: they return new values and never touch
    the lists they are given. Rejected custom attribute names are a silent
    no-op, not an error.
    """

    def resolve(
        self,
        category_attributes: Iterable[CategoryAttribute],
        custom_attributes: Iterable[str],
    ) -> AttributeCatalog:
        """
        Build the active catalog.

        Args:
            category_attributes: Attributes inherited from the category
            custom_attributes: Seller-added attribute names, in insertion order

        Returns:
            AttributeCatalog with predefined attributes first, then custom ones
        """
        definitions: List[AttributeDefinition] = []
        seen = set()

        for attr in category_attributes or []:
            name = attr.name if isinstance(attr, AttributeDefinition) else attr
            self._append(definitions, seen, name, AttributeOrigin.PREDEFINED)

        for name in custom_attributes or []:
            self._append(definitions, seen, name, AttributeOrigin.CUSTOM)

        return AttributeCatalog(attributes=definitions)

    def add_custom_attribute(
        self,
        custom_attributes: Sequence[str],
        name: Optional[str],
        category_attributes: Iterable[CategoryAttribute] = (),
    ) -> List[str]:
        """
        Add a custom attribute name.

        Blank names, reserved names and names already present (in the custom
        list or among the category attributes) leave the list unchanged.

        Returns:
            The new custom attribute list
        """
        trimmed = (name or "").strip()
        current = list(custom_attributes or [])

        if not trimmed:
            logger.debug("Ignoring blank custom attribute name")
            return current

        if is_reserved_attribute(trimmed):
            logger.debug(
                f"Ignoring reserved custom attribute name: {trimmed}",
                metadata={"attribute": trimmed}
            )
            return current

        existing = {attribute_identity(n) for n in current}
        existing.update(
            attribute_identity(a.name if isinstance(a, AttributeDefinition) else a)
            for a in category_attributes or []
        )
        if attribute_identity(trimmed) in existing:
            logger.debug(
                f"Ignoring duplicate custom attribute name: {trimmed}",
                metadata={"attribute": trimmed}
            )
            return current

        return current + [trimmed]

    def remove_custom_attribute(
        self,
        custom_attributes: Sequence[str],
        name: Optional[str],
    ) -> List[str]:
        """Remove a custom attribute name (case-insensitive); no-op when absent."""
        identity = attribute_identity(name)
        return [n for n in custom_attributes or [] if attribute_identity(n) != identity]

    @staticmethod
    def _append(definitions, seen, name, origin):
        if not name or not name.strip() or is_reserved_attribute(name):
            return
        identity = attribute_identity(name)
        if identity in seen:
            return
        seen.add(identity)
        definitions.append(AttributeDefinition(name=name, origin=origin))


_resolver = AttributeCatalogResolver()


def resolve_catalog(
    category_attributes: Iterable[CategoryAttribute],
    custom_attributes: Iterable[str],
) -> AttributeCatalog:
    """Module-level shortcut for AttributeCatalogResolver.resolve."""
    return _resolver.resolve(category_attributes, custom_attributes)


def get_attribute_catalog_resolver() -> AttributeCatalogResolver:
    return _resolver
