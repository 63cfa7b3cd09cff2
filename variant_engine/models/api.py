"""
Request and response bodies of the variants HTTP adapter
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from variant_engine.models.attribute import (
    AttributeCatalog,
    AttributeDefinition,
    AttributeInstance,
)
from variant_engine.models.variant import GenerationRequest, SkuContext, VariantRecord


class ResolveCatalogRequest(BaseModel):
    category_attributes: List[AttributeDefinition] = Field(default_factory=list)
    custom_attributes: List[str] = Field(default_factory=list)


class GenerateVariantsRequest(BaseModel):
    request: GenerationRequest
    sku_context: SkuContext = Field(default_factory=SkuContext)
    category_code: Optional[str] = None
    catalog: Optional[AttributeCatalog] = None


class GenerateVariantsResponse(BaseModel):
    variants: List[VariantRecord]
    count: int


class ReconcileRequest(BaseModel):
    catalog: AttributeCatalog
    variant: VariantRecord
    previously_selected: List[AttributeInstance] = Field(default_factory=list)


class ReconcileResponse(BaseModel):
    attributes: List[AttributeInstance]
    changed: bool


class AssignSkuRequest(BaseModel):
    sku_context: SkuContext = Field(default_factory=SkuContext)
    category_code: Optional[str] = None
    attribute_values: Dict[str, Optional[str]] = Field(default_factory=dict)


class AssignSkuResponse(BaseModel):
    sku: str
    needs_review: bool


class StockTotalRequest(BaseModel):
    # Raw form rows: stock may be missing or non-numeric
    variants: List[Dict[str, Any]] = Field(default_factory=list)


class StockTotalResponse(BaseModel):
    total_stock: int
    by_status: Dict[str, int]
