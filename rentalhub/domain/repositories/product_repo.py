# rentalhub/domain/repositories/product_repo.py

from __future__ import annotations
import logging
import uuid
from typing import Iterable, List, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from rentalhub.domain.models.product import Product

logger = logging.getLogger(__name__)


class ProductRepo:
    """
    Product repository backed by the 'products' collection.
    Documents are keyed by an opaque string `_id`; field names are stored camelCase.
    Reads only, apart from `insert` which adds brand-new listings.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str = "products"):
        self.col = db[collection_name]

    @staticmethod
    def new_id() -> str:
        """Opaque 20-char identifier for a new listing."""
        return uuid.uuid4().hex[:20]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        doc = await self.col.find_one({"_id": product_id})
        return Product.model_validate(doc) if doc else None

    async def find_by_category(self, category: str, *, exclude_id: str, limit: int) -> List[Product]:
        """Up to `limit` products whose category equals `category`, minus `exclude_id`."""
        query = {"category": category, "_id": {"$ne": exclude_id}}
        return await self._find(query, limit=limit)

    async def find_others(self, *, exclude_ids: Iterable[str], limit: int) -> List[Product]:
        """Up to `limit` arbitrary products whose id is not in `exclude_ids`."""
        ids = list(dict.fromkeys(exclude_ids))
        if not ids:
            query = {}
        elif len(ids) == 1:
            query = {"_id": {"$ne": ids[0]}}
        else:
            query = {"_id": {"$nin": ids}}
        return await self._find(query, limit=limit)

    async def list_products(self, *, category: Optional[str] = None, limit: int = 24, offset: int = 0) -> List[Product]:
        query = {"category": category} if category else {}
        return await self._find(query, limit=limit, offset=offset)

    async def count(self, *, category: Optional[str] = None) -> int:
        return await self.col.count_documents({"category": category} if category else {})

    async def insert(self, product: Product) -> Product:
        await self.col.insert_one(product.to_document())
        logger.info("product inserted id=%s category=%s", product.id, product.category)
        return product

    async def _find(self, query: dict, *, limit: int, offset: int = 0) -> List[Product]:
        if limit <= 0:
            return []
        cursor = self.col.find(query)
        if offset:
            cursor = cursor.skip(offset)
        cursor = cursor.limit(limit)
        return _validate_many([doc async for doc in cursor])


def _validate_many(docs: List[dict]) -> List[Product]:
    # A document we cannot read at all (no id) is skipped rather than failing the list
    items: List[Product] = []
    for doc in docs:
        try:
            items.append(Product.model_validate(doc))
        except ValidationError as e:
            logger.warning("skipping unreadable product document id=%s err=%s", doc.get("_id"), e.error_count())
    return items
