from __future__ import annotations
import asyncio
import logging
import time
from typing import List

from pydantic import BaseModel

from rentalhub.domain.models.product import Product, ProductLookup
from rentalhub.domain.repositories.product_repo import ProductRepo
from rentalhub.domain.services.constants import FALLBACK_CATEGORY, SUGGESTION_LIMIT
from rentalhub.domain.services.suggestions_svc import fetch_suggestions

logger = logging.getLogger(__name__)


class ProductDetail(BaseModel):
    lookup: ProductLookup
    suggestions: List[Product] = []
    model_config = {"frozen": True}


async def load_product(repo: ProductRepo, product_id: str) -> ProductLookup:
    """Fetch one product. Never raises: store errors come back as a `failed` lookup."""
    try:
        product = await repo.get_by_id(product_id)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Error fetching product product_id={product_id}: {e}")
        return ProductLookup.failed(product_id, str(e))

    if product is None:
        logger.warning(f"Product not found: product_id={product_id}")
        return ProductLookup.not_found(product_id)
    return ProductLookup.found(product)


async def load_suggestions(
    repo: ProductRepo,
    product: Product,
    *,
    limit: int = SUGGESTION_LIMIT,
    fallback_category: str = FALLBACK_CATEGORY,
) -> List[Product]:
    """Suggestion Set for `product`, or an empty list when the store fails."""
    try:
        return await fetch_suggestions(repo, product, limit=limit, fallback_category=fallback_category)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        logger.error(f"Error fetching suggested products for product_id={product.id}: {e}")
        return []


class ProductDetailView:
    """
    Loads one product detail page. Each fetch runs as its own task owned by the view;
    closing the view cancels whatever is still in flight, so a torn-down view never
    receives late results.

        async with ProductDetailView(repo, "P1") as view:
            detail = await view.load()
    """

    def __init__(
        self,
        repo: ProductRepo,
        product_id: str,
        *,
        suggestion_limit: int = SUGGESTION_LIMIT,
        fallback_category: str = FALLBACK_CATEGORY,
    ):
        self.repo = repo
        self.product_id = product_id
        self.suggestion_limit = suggestion_limit
        self.fallback_category = fallback_category
        self._tasks: List[asyncio.Task] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def load(self) -> ProductDetail:
        t0 = time.perf_counter()
        lookup = await self._run(load_product(self.repo, self.product_id))
        suggestions: List[Product] = []
        if lookup.is_found:
            suggestions = await self._run(
                load_suggestions(
                    self.repo,
                    lookup.product,
                    limit=self.suggestion_limit,
                    fallback_category=self.fallback_category,
                )
            )
        logger.info(
            "product detail loaded product_id=%s status=%s suggestions=%s time=%.3fs",
            self.product_id, lookup.status.value, len(suggestions), time.perf_counter() - t0,
        )
        return ProductDetail(lookup=lookup, suggestions=suggestions)

    async def _run(self, coro):
        if self._closed:
            coro.close()
            raise RuntimeError("product detail view is closed")
        task = asyncio.create_task(coro)
        self._tasks.append(task)
        try:
            return await task
        finally:
            self._tasks.remove(task)

    async def close(self) -> None:
        self._closed = True
        pending = [t for t in self._tasks if not t.done()]
        for t in pending:
            t.cancel()
        if pending:
            logger.debug("product detail view closed product_id=%s cancelled=%s", self.product_id, len(pending))
            await asyncio.gather(*pending, return_exceptions=True)

    async def __aenter__(self) -> "ProductDetailView":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


async def get_product_detail(
    repo: ProductRepo,
    product_id: str,
    *,
    suggestion_limit: int = SUGGESTION_LIMIT,
    fallback_category: str = FALLBACK_CATEGORY,
) -> ProductDetail:
    async with ProductDetailView(
        repo, product_id, suggestion_limit=suggestion_limit, fallback_category=fallback_category
    ) as view:
        return await view.load()
