"""
Variant Models

Defines the sellable variant records of a product, the SKU context and the
generation request used to expand attribute values into a variant matrix.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, List, Mapping, Optional
from pydantic import BaseModel, Field, field_validator

from variant_engine.models.attribute import (
    AttributeInstance,
    attribute_identity,
    is_reserved_attribute,
)


class VariantStatus(str, Enum):
    """Whether a variant can be sold."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class ImageRef(BaseModel):
    """Stable reference returned by the image storage collaborator."""
    url: str = Field(..., min_length=1)
    alt: Optional[str] = None


class VariantRecord(BaseModel):
    """One sellable configuration of a product."""
    id: Optional[str] = Field(None, description="Persistence id, absent until saved")
    attributes: List[AttributeInstance] = Field(default_factory=list)
    price: Decimal = Field(Decimal("0"), ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    stock: int = Field(0, ge=0)
    sku: str = Field("", description="Stock keeping unit code")
    status: VariantStatus = VariantStatus.ACTIVE
    images: List[ImageRef] = Field(default_factory=list)

    @field_validator('attributes')
    @classmethod
    def validate_attributes(cls, v):
        """Attribute keys are unique per variant and never reserved."""
        seen = set()
        for instance in v:
            if is_reserved_attribute(instance.key):
                raise ValueError(f"'{instance.key}' cannot be a variant attribute")
            identity = attribute_identity(instance.key)
            if identity in seen:
                raise ValueError(f"Duplicate variant attribute: {instance.key}")
            seen.add(identity)
        return v

    def attribute_values(self) -> Dict[str, str]:
        """Ordered {key: value} map of this variant's attributes."""
        return {instance.key: instance.value for instance in self.attributes}


class SkuContext(BaseModel):
    """Read-only inputs to SKU assignment."""
    seller_id: Optional[str] = None
    category_code: Optional[str] = None


def parse_option_values(text: Optional[str]) -> List[str]:
    """Split a comma-separated free-text field into trimmed, non-empty values."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


class AttributeOption(BaseModel):
    """Candidate values for one attribute in a generation request."""
    attribute_name: str = Field(..., min_length=1)
    values: List[str] = Field(default_factory=list)

    @field_validator('attribute_name')
    @classmethod
    def validate_attribute_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Attribute name cannot be blank")
        return v

    @field_validator('values')
    @classmethod
    def clean_values(cls, v):
        """Trim values and drop empty entries."""
        return [value.strip() for value in v if value and value.strip()]


class GenerationRequest(BaseModel):
    """Ordered attribute/value lists to expand into variants."""
    options: List[AttributeOption] = Field(default_factory=list)

    @field_validator('options')
    @classmethod
    def validate_options(cls, v):
        names = [attribute_identity(option.attribute_name) for option in v]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate attribute names not allowed in a generation request")
        return v

    @classmethod
    def from_text(cls, fields: Mapping[str, Optional[str]]) -> "GenerationRequest":
        """
        Build a request from comma-separated text fields.

        Example:
            GenerationRequest.from_text({"Color": "Red, Blue", "Size": "S,M"})
        """
        return cls(options=[
            AttributeOption(attribute_name=name, values=parse_option_values(text))
            for name, text in fields.items()
        ])
