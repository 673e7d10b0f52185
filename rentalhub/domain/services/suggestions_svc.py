import logging
import time
from typing import Iterable, List

from rentalhub.domain.models.product import Product
from rentalhub.domain.repositories.product_repo import ProductRepo
from rentalhub.domain.services.constants import FALLBACK_CATEGORY, SUGGESTION_LIMIT

logger = logging.getLogger(__name__)


def _merge_unique(subject_id: str, *phases: Iterable[Product]) -> List[Product]:
    """Concatenate phases in order, dropping the subject and any id already taken."""
    seen = {subject_id}
    merged: List[Product] = []
    for phase in phases:
        for p in phase:
            if p.id in seen:
                continue
            seen.add(p.id)
            merged.append(p)
    return merged


async def fetch_suggestions(
    repo: ProductRepo,
    product: Product,
    *,
    limit: int = SUGGESTION_LIMIT,
    fallback_category: str = FALLBACK_CATEGORY,
) -> List[Product]:
    """
    Build the Suggestion Set for `product`.

    Phase a: up to `limit` products of the same category (the fallback category
    when the product has none), the product itself excluded.
    Phase b, only when phase a came back short: exactly `limit - len(a)` other
    products, excluding the product and everything phase a selected.
    Result: a then b in store order, de-duplicated, truncated to `limit`.
    Store errors propagate; callers decide how to degrade.
    """
    t0 = time.perf_counter()
    category = product.effective_category(fallback_category)

    primary = await repo.find_by_category(category, exclude_id=product.id, limit=limit)
    primary = _merge_unique(product.id, primary)
    logger.debug("suggestions phase=a product_id=%s category=%s hits=%s", product.id, category, len(primary))

    if len(primary) >= limit:
        items = primary[:limit]
    else:
        missing = limit - len(primary)
        backfill = await repo.find_others(
            exclude_ids=[product.id, *(p.id for p in primary)],
            limit=missing,
        )
        logger.debug("suggestions phase=b product_id=%s requested=%s hits=%s", product.id, missing, len(backfill))
        items = _merge_unique(product.id, primary, backfill)[:limit]

    logger.info(
        "suggestions done product_id=%s count=%s time=%.3fs",
        product.id, len(items), time.perf_counter() - t0,
    )
    return items
