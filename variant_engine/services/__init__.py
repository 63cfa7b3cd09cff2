"""
Variant engine services
"""

from .attribute_catalog_service import AttributeCatalogResolver, resolve_catalog
from .attribute_reconciler import AttributeReconciler, reconcile_attributes
from .combination_service import CombinationGenerator, generate_variants
from .sku_service import (
    SkuAssigner,
    SkuRegenerationPolicy,
    fill_missing_skus,
    find_duplicate_skus,
    generate_sku,
    is_error_sku,
    should_regenerate,
)
from .stock_service import stock_by_status, total_stock
from .variant_media_service import VariantMediaPipeline
from .variant_session_service import CatalogState, VariantSession, VariantSubmission

__all__ = [
    "AttributeCatalogResolver",
    "resolve_catalog",
    "AttributeReconciler",
    "reconcile_attributes",
    "CombinationGenerator",
    "generate_variants",
    "SkuAssigner",
    "SkuRegenerationPolicy",
    "fill_missing_skus",
    "find_duplicate_skus",
    "generate_sku",
    "is_error_sku",
    "should_regenerate",
    "stock_by_status",
    "total_stock",
    "VariantMediaPipeline",
    "CatalogState",
    "VariantSession",
    "VariantSubmission",
]
