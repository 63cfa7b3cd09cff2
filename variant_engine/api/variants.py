"""
Variants Router
Exposes the variant engine's pure operations over HTTP
"""
from fastapi import APIRouter, HTTPException, status

from variant_engine.core.config import config
from variant_engine.core.errors import ErrorResponse, ErrorResponseModel
from variant_engine.core.logger import logger
from variant_engine.models.api import (
    AssignSkuRequest,
    AssignSkuResponse,
    GenerateVariantsRequest,
    GenerateVariantsResponse,
    ReconcileRequest,
    ReconcileResponse,
    ResolveCatalogRequest,
    StockTotalRequest,
    StockTotalResponse,
)
from variant_engine.models.attribute import AttributeCatalog
from variant_engine.services.attribute_catalog_service import get_attribute_catalog_resolver
from variant_engine.services.attribute_reconciler import get_attribute_reconciler
from variant_engine.services.combination_service import CombinationGenerator
from variant_engine.services.sku_service import SkuAssigner, is_error_sku
from variant_engine.services.stock_service import stock_by_status, total_stock

router = APIRouter()


@router.post(
    '/catalog/resolve',
    response_model=AttributeCatalog,
    summary="Resolve the active attribute catalog"
)
async def resolve_catalog(body: ResolveCatalogRequest):
    """Category attributes first, then custom ones; 'brand' and duplicates removed."""
    return get_attribute_catalog_resolver().resolve(
        body.category_attributes, body.custom_attributes
    )


@router.post(
    '/generate',
    response_model=GenerateVariantsResponse,
    summary="Generate all variant combinations",
    description="Replaces the product's variants; price, stock and images start empty",
    responses={400: {"model": ErrorResponseModel}, 422: {"model": ErrorResponseModel}}
)
async def generate_variants(body: GenerateVariantsRequest):
    """
    Generate the variant matrix.

    - Attributes without values are skipped
    - Rejected when the matrix exceeds MAX_VARIANTS_PER_PRODUCT
    """
    try:
        generator = CombinationGenerator()
        count = generator.count_combinations(body.request)

        if count > config.max_variants_per_product:
            raise ErrorResponse(
                f"Generation would create {count} variants, "
                f"limit is {config.max_variants_per_product}",
                status_code=422,
                details={"count": count, "limit": config.max_variants_per_product}
            )

        variants = generator.generate(
            body.request, body.sku_context, body.category_code, body.catalog
        )
        return GenerateVariantsResponse(variants=variants, count=len(variants))

    except ErrorResponse:
        raise
    except ValueError as e:
        logger.warning(
            f"Validation error generating variants: {str(e)}",
            metadata={'event': 'variant_generation_validation_error'}
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(
            "Error generating variants",
            error=e,
            metadata={'event': 'variant_generation_error'}
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate variants"
        )


@router.post(
    '/reconcile',
    response_model=ReconcileResponse,
    summary="Align a variant's attributes with the catalog"
)
async def reconcile_variant(body: ReconcileRequest):
    reconciler = get_attribute_reconciler()
    attributes = reconciler.reconcile(body.catalog, body.variant, body.previously_selected)
    return ReconcileResponse(
        attributes=attributes,
        changed=reconciler.has_changes(body.variant.attributes, attributes)
    )


@router.post('/sku', response_model=AssignSkuResponse, summary="Assign a SKU")
async def assign_sku(body: AssignSkuRequest):
    sku = SkuAssigner().assign(body.sku_context, body.category_code, body.attribute_values)
    return AssignSkuResponse(sku=sku, needs_review=is_error_sku(sku))


@router.post('/stock/total', response_model=StockTotalResponse, summary="Total variant stock")
async def stock_total(body: StockTotalRequest):
    return StockTotalResponse(
        total_stock=total_stock(body.variants),
        by_status=stock_by_status(body.variants)
    )
