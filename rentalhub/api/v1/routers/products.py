# rentalhub/api/v1/routers/products.py
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import time
import logging

from rentalhub.api.deps import product_repo
from rentalhub.api.v1.schemas.product import PagingOut, ProductCardOut, ProductListOut, ProductOut, SuggestionsOut
from rentalhub.core.config import Settings, get_settings
from rentalhub.domain.models.product import LookupStatus
from rentalhub.domain.repositories.product_repo import ProductRepo
from rentalhub.domain.services.product_detail_svc import load_product
from rentalhub.domain.services.suggestions_svc import fetch_suggestions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


def _raise_for_lookup(lookup) -> None:
    # The JSON API keeps "absent" and "store failed" apart
    if lookup.status is LookupStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Product not found.")
    if lookup.status is LookupStatus.FAILED:
        raise HTTPException(status_code=503, detail="Product store unavailable.")


@router.get("/products", response_model=ProductListOut)
async def list_products(
    category: Optional[str] = Query(None),
    limit: int = Query(24, ge=1, le=100),
    offset: int = Query(0, ge=0),
    repo: ProductRepo = Depends(product_repo),
    settings: Settings = Depends(get_settings),
):
    logger.info("Request: list_products category=%s limit=%s offset=%s", category, limit, offset)
    try:
        items = await repo.list_products(category=category, limit=limit, offset=offset)
        total = await repo.count(category=category)
    except Exception as e:
        logger.error(f"Error listing products category={category}: {e}")
        raise HTTPException(status_code=503, detail="Product store unavailable.")
    return ProductListOut(
        items=[ProductCardOut.from_product(p, settings.fallback_category) for p in items],
        paging=PagingOut(limit=limit, offset=offset, total=total),
    )


@router.get("/products/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, repo: ProductRepo = Depends(product_repo)):
    logger.info("Request: get_product product_id=%s", product_id)
    lookup = await load_product(repo, product_id)
    _raise_for_lookup(lookup)
    return ProductOut.from_product(lookup.product)


@router.get("/products/{product_id}/suggestions", response_model=SuggestionsOut)
async def product_suggestions(
    product_id: str,
    repo: ProductRepo = Depends(product_repo),
    settings: Settings = Depends(get_settings),
):
    """
    Related items for a product: same category first, then any other products,
    at most `suggestion_limit` (4), never the product itself. Computed on every call.
    """
    logger.info("Request: product_suggestions product_id=%s", product_id)
    start_time = time.perf_counter()

    lookup = await load_product(repo, product_id)
    _raise_for_lookup(lookup)
    try:
        items = await fetch_suggestions(
            repo,
            lookup.product,
            limit=settings.suggestion_limit,
            fallback_category=settings.fallback_category,
        )
    except Exception as e:
        logger.error(f"Error fetching suggested products for product_id={product_id}: {e}")
        raise HTTPException(status_code=503, detail="Product store unavailable.")

    logger.info(
        "Response: product_suggestions product_id=%s, count=%s, elapsed_time=%.4fs",
        product_id, len(items), time.perf_counter() - start_time,
    )
    return SuggestionsOut(
        source_product_id=product_id,
        items=[ProductCardOut.from_product(p, settings.fallback_category) for p in items],
        count=len(items),
    )
