from __future__ import annotations
import math
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentalhub.domain.services.constants import (
    FALLBACK_BRAND,
    FALLBACK_CATEGORY,
    FALLBACK_DESCRIPTION,
    FALLBACK_NAME,
    FALLBACK_WAREHOUSE,
    SKU_PREFIX,
    SPEC_FALLBACK_CATEGORY,
    TAG_FALLBACK,
)


class Specification(BaseModel):
    key: str
    value: str = ""
    model_config = {"frozen": True}

    @field_validator("key", "value", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> Any:
        return "" if v is None else str(v)


class Product(BaseModel):
    """
    A product document from the `products` collection (read-only here).

    Stored field names are camelCase (productName, imageLinks, ...); `_id` is an
    opaque string. Every optional field may be missing or malformed in the store,
    which is never an error:

      field              missing / malformed  ->  substitute
      ----------------   ------------------------------------------------
      category           effective_category() -> "Electronics" or the configured
                         fallback (suggestion queries, cards)
                         spec_category      -> "General"
                         display_tags       -> ["product"] when no tags
      brand              display_brand      -> "Unknown"
      name               display_name       -> "Unnamed Product"
      price              None (non-numeric and non-finite values dropped)
      stock_quantity     None (negative or non-integer values dropped)
      description        display_description -> fixed blurb
      image_links/specifications/tags   -> [] when missing, null or not a list
      sku                display_sku        -> "PRD" + id[:6]
      warehouse_location display_warehouse  -> "Warehouse"
    """

    id: str = Field(alias="_id")
    name: Optional[str] = Field(default=None, alias="productName")
    brand: Optional[str] = Field(default=None, alias="brandName")
    category: Optional[str] = None
    price: Optional[float] = None
    stock_quantity: Optional[int] = Field(default=None, alias="stockQuantity")
    description: Optional[str] = None
    image_links: List[str] = Field(default_factory=list, alias="imageLinks")
    specifications: List[Specification] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    sku: Optional[str] = None
    warehouse_location: Optional[str] = Field(default=None, alias="warehouseLocation")
    owner_id: Optional[str] = Field(default=None, alias="ownerId")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")  # immuable = safe

    # ----- lenient parsing ----------------------------------------------------

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        # ObjectId or any other scalar id is addressed by its string form
        return v if isinstance(v, str) or v is None else str(v)

    @field_validator("name", "brand", "category", "description", "sku", "warehouse_location", "owner_id", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @field_validator("price", mode="before")
    @classmethod
    def _lenient_price(cls, v: Any) -> Optional[float]:
        if v is None or isinstance(v, bool):
            return None
        try:
            price = float(v)
        except (TypeError, ValueError, OverflowError):
            return None
        return price if math.isfinite(price) else None

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def _lenient_stock(cls, v: Any) -> Optional[int]:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, float) and not math.isfinite(v):
            return None
        try:
            n = int(v)
        except (TypeError, ValueError, OverflowError):
            return None
        if n != v and not isinstance(v, str):
            return None  # 2.5 units is not a stock count
        return n if n >= 0 else None

    @field_validator("image_links", "tags", mode="before")
    @classmethod
    def _text_list(cls, v: Any) -> List[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [str(x) for x in v if x is not None]

    @field_validator("specifications", mode="before")
    @classmethod
    def _spec_list(cls, v: Any) -> List[Any]:
        if not isinstance(v, (list, tuple)):
            return []
        return [s for s in v if isinstance(s, dict) and s.get("key") is not None]

    # ----- default substitution -----------------------------------------------

    def effective_category(self, fallback: str = FALLBACK_CATEGORY) -> str:
        return self.category or fallback

    @property
    def spec_category(self) -> str:
        return self.category or SPEC_FALLBACK_CATEGORY

    @property
    def display_name(self) -> str:
        return self.name or FALLBACK_NAME

    @property
    def display_brand(self) -> str:
        return self.brand or FALLBACK_BRAND

    @property
    def display_description(self) -> str:
        return self.description or FALLBACK_DESCRIPTION

    @property
    def display_sku(self) -> str:
        return self.sku or f"{SKU_PREFIX}{self.id[:6]}"

    @property
    def display_warehouse(self) -> str:
        return self.warehouse_location or FALLBACK_WAREHOUSE

    @property
    def display_tags(self) -> List[str]:
        return list(self.tags) if self.tags else [self.category or TAG_FALLBACK]

    @property
    def display_specifications(self) -> List[Specification]:
        if self.specifications:
            return list(self.specifications)
        return [
            Specification(key="Category", value=self.spec_category),
            Specification(key="Brand", value=self.display_brand),
        ]

    def to_document(self) -> dict:
        """Serialize with the stored (camelCase) field names, `_id` included."""
        return self.model_dump(by_alias=True, exclude_none=True)


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ProductLookup(BaseModel):
    """Outcome of fetching one product: found, absent, or the fetch itself failed."""

    product_id: str
    status: LookupStatus
    product: Optional[Product] = None
    error: Optional[str] = None
    model_config = {"frozen": True}

    @classmethod
    def found(cls, product: Product) -> "ProductLookup":
        return cls(product_id=product.id, status=LookupStatus.FOUND, product=product)

    @classmethod
    def not_found(cls, product_id: str) -> "ProductLookup":
        return cls(product_id=product_id, status=LookupStatus.NOT_FOUND)

    @classmethod
    def failed(cls, product_id: str, error: str) -> "ProductLookup":
        return cls(product_id=product_id, status=LookupStatus.FAILED, error=error)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND
