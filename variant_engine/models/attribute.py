"""
Attribute Models

Defines the variant dimensions of a product (color, size, ...) and the
per-variant attribute values. Names are compared case-insensitively and the
reserved name 'brand' is a product-level field, never a variant dimension.
"""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field, field_validator

RESERVED_ATTRIBUTE_NAMES = frozenset({"brand"})


def attribute_identity(name: str) -> str:
    """Case-insensitive identity used for every attribute name comparison."""
    return (name or "").strip().casefold()


def is_reserved_attribute(name: str) -> bool:
    """True for names that can never be a variant dimension."""
    return attribute_identity(name) in RESERVED_ATTRIBUTE_NAMES


class AttributeOrigin(str, Enum):
    """Where an attribute definition comes from."""
    PREDEFINED = "predefined"  # Inherited from the product's category
    CUSTOM = "custom"          # Added by the seller for this product


class AttributeDefinition(BaseModel):
    """A variant dimension (e.g., Color)."""
    name: str = Field(..., min_length=1, description="Attribute name (e.g., 'Color')")
    origin: AttributeOrigin = Field(
        AttributeOrigin.PREDEFINED,
        description="Category attribute or seller-defined custom attribute"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Strip surrounding whitespace; blank names are invalid."""
        v = v.strip()
        if not v:
            raise ValueError("Attribute name cannot be blank")
        return v

    @property
    def identity(self) -> str:
        return attribute_identity(self.name)


class AttributeCatalog(BaseModel):
    """
    Ordered set of active attribute definitions for a product.

    Predefined attributes precede custom ones. Never persisted; it is derived
    each time from the category attributes and the session custom attributes.
    Two catalogs are equal when they hold the same definitions in the same
    order, which is what drives re-reconciliation.
    """
    attributes: List[AttributeDefinition] = Field(default_factory=list)

    @field_validator('attributes')
    @classmethod
    def validate_attributes(cls, v):
        """Names must be unique (case-insensitive) and never reserved."""
        seen = set()
        for definition in v:
            if definition.identity in RESERVED_ATTRIBUTE_NAMES:
                raise ValueError(f"'{definition.name}' cannot be a variant attribute")
            if definition.identity in seen:
                raise ValueError(f"Duplicate attribute name: {definition.name}")
            seen.add(definition.identity)
        return v

    def names(self) -> List[str]:
        """Attribute names in catalog order."""
        return [definition.name for definition in self.attributes]

    def contains(self, name: str) -> bool:
        identity = attribute_identity(name)
        return any(definition.identity == identity for definition in self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)


class AttributeInstance(BaseModel):
    """A single attribute value on one variant (e.g., Color: Red)."""
    key: str = Field(..., min_length=1, description="Attribute name")
    value: str = Field("", description="Attribute value, empty until entered")
