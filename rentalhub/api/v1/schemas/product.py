# rentalhub/api/v1/schemas/product.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from rentalhub.domain.models.product import Product
from rentalhub.domain.services.constants import FALLBACK_CATEGORY, THUMBNAIL_FALLBACK_IMAGE


class SpecificationIn(BaseModel):
    key: str = Field(min_length=1)
    value: str = ""


class ProductIn(BaseModel):
    """Listing submitted from the "list your item" form (stored camelCase names accepted)."""
    name: str = Field(min_length=1, max_length=200, alias="productName")
    category: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0)
    brand: Optional[str] = Field(default=None, alias="brandName")
    stock_quantity: Optional[int] = Field(default=None, ge=0, alias="stockQuantity")
    description: Optional[str] = None
    image_links: List[str] = Field(default_factory=list, alias="imageLinks")
    specifications: List[SpecificationIn] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    sku: Optional[str] = None
    warehouse_location: Optional[str] = Field(default=None, alias="warehouseLocation")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    def to_product(self, product_id: str, owner_id: Optional[str]) -> Product:
        data = self.model_dump(by_alias=True)
        data.update({"_id": product_id, "ownerId": owner_id})
        return Product.model_validate(data)


class ProductCardOut(BaseModel):
    """Compact product card (suggestions, listings)."""
    id: str
    name: str
    category: str
    price: str
    image: str
    path: str

    @classmethod
    def from_product(cls, p: Product, fallback_category: str = FALLBACK_CATEGORY) -> "ProductCardOut":
        return cls(
            id=p.id,
            name=p.display_name,
            category=p.effective_category(fallback_category),
            price=f"{p.price:.2f}" if p.price is not None else "0.00",
            image=p.image_links[0] if p.image_links and p.image_links[0] else THUMBNAIL_FALLBACK_IMAGE,
            path=f"/product/{p.id}",
        )


class SpecificationOut(BaseModel):
    key: str
    value: str


class ProductOut(BaseModel):
    """Product with every display default already substituted."""
    id: str
    name: Optional[str]
    brand: str
    category: Optional[str]
    sku: str
    price: Optional[float]
    stock_quantity: Optional[int]
    in_stock_label: str
    description: str
    image_links: List[str]
    specifications: List[SpecificationOut]
    tags: List[str]
    warehouse_location: str

    @classmethod
    def from_product(cls, p: Product) -> "ProductOut":
        stock = p.stock_quantity
        return cls(
            id=p.id,
            name=p.name,
            brand=p.display_brand,
            category=p.category,
            sku=p.display_sku,
            price=p.price,
            stock_quantity=stock,
            in_stock_label=f"In Stock ({stock} available)" if stock else "In Stock",
            description=p.display_description,
            image_links=list(p.image_links),
            specifications=[SpecificationOut(key=s.key, value=s.value) for s in p.display_specifications],
            tags=p.display_tags,
            warehouse_location=p.display_warehouse,
        )


class SuggestionsOut(BaseModel):
    source_product_id: str
    items: List[ProductCardOut]
    count: int


class PagingOut(BaseModel):
    limit: int
    offset: int
    total: int


class ProductListOut(BaseModel):
    items: List[ProductCardOut]
    paging: PagingOut


class ListingCreatedOut(BaseModel):
    id: str
    path: str
