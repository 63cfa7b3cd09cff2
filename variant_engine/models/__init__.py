"""
Variant engine models
"""

from .attribute import (
    RESERVED_ATTRIBUTE_NAMES,
    AttributeCatalog,
    AttributeDefinition,
    AttributeInstance,
    AttributeOrigin,
    attribute_identity,
    is_reserved_attribute,
)
from .variant import (
    AttributeOption,
    GenerationRequest,
    ImageRef,
    SkuContext,
    VariantRecord,
    VariantStatus,
    parse_option_values,
)
from .media import NormalizedImage, RawImageInput

__all__ = [
    "RESERVED_ATTRIBUTE_NAMES",
    "AttributeCatalog",
    "AttributeDefinition",
    "AttributeInstance",
    "AttributeOrigin",
    "attribute_identity",
    "is_reserved_attribute",
    "AttributeOption",
    "GenerationRequest",
    "ImageRef",
    "SkuContext",
    "VariantRecord",
    "VariantStatus",
    "parse_option_values",
    "NormalizedImage",
    "RawImageInput",
]
