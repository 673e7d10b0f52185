import pytest

from rentalhub.domain.models.product import LookupStatus, Product, ProductLookup


def test_reads_stored_field_names():
    p = Product.model_validate({
        "_id": "abc123",
        "productName": "Canon EOS R6",
        "brandName": "Canon",
        "category": "Cameras",
        "price": 45,
        "stockQuantity": 3,
        "imageLinks": ["a.jpg", "b.jpg"],
        "specifications": [{"key": "Sensor", "value": "Full frame"}],
        "tags": ["dslr"],
        "unknownField": True,
    })
    assert p.id == "abc123"
    assert p.name == "Canon EOS R6"
    assert p.brand == "Canon"
    assert p.price == 45.0
    assert p.stock_quantity == 3
    assert p.image_links == ["a.jpg", "b.jpg"]
    assert p.specifications[0].key == "Sensor"


def test_missing_optional_fields_get_defaults():
    p = Product.model_validate({"_id": "xyz789abc"})
    assert p.effective_category() == "Electronics"
    assert p.effective_category("General") == "General"
    assert p.spec_category == "General"
    assert p.display_name == "Unnamed Product"
    assert p.display_brand == "Unknown"
    assert p.display_sku == "PRDxyz789"
    assert p.display_warehouse == "Warehouse"
    assert p.display_tags == ["product"]
    assert p.image_links == [] and p.tags == [] and p.specifications == []
    assert [(s.key, s.value) for s in p.display_specifications] == [
        ("Category", "General"),
        ("Brand", "Unknown"),
    ]


def test_malformed_optional_fields_are_not_errors():
    p = Product.model_validate({
        "_id": "m1",
        "category": "  ",
        "price": "n/a",
        "stockQuantity": -4,
        "imageLinks": None,
        "specifications": "Sensor: full frame",
        "tags": [None, "camera"],
    })
    assert p.category is None
    assert p.price is None
    assert p.stock_quantity is None
    assert p.image_links == []
    assert p.specifications == []
    assert p.tags == ["camera"]


def test_fractional_stock_is_dropped():
    assert Product.model_validate({"_id": "s", "stockQuantity": 2.5}).stock_quantity is None
    assert Product.model_validate({"_id": "s", "stockQuantity": "7"}).stock_quantity == 7


@pytest.mark.parametrize("price", ["NaN", "inf", float("nan"), float("-inf"), "1e400"])
def test_non_finite_price_is_dropped(price):
    assert Product.model_validate({"_id": "n", "price": price}).price is None


@pytest.mark.parametrize("stock", [float("inf"), float("nan"), "Infinity"])
def test_non_finite_stock_is_dropped(stock):
    assert Product.model_validate({"_id": "n", "stockQuantity": stock}).stock_quantity is None


def test_tag_fallback_uses_category():
    p = Product.model_validate({"_id": "t", "category": "Drones"})
    assert p.display_tags == ["Drones"]


def test_to_document_round_trips_stored_names():
    doc = {"_id": "d1", "productName": "Tent", "category": "Outdoor", "price": 12.5}
    assert Product.model_validate(doc).to_document()["productName"] == "Tent"
    assert Product.model_validate(doc).to_document()["_id"] == "d1"


def test_lookup_variants():
    p = Product(id="p1")
    assert ProductLookup.found(p).is_found
    assert ProductLookup.not_found("p2").status is LookupStatus.NOT_FOUND
    failed = ProductLookup.failed("p3", "timeout")
    assert failed.status is LookupStatus.FAILED
    assert failed.error == "timeout"
    assert not failed.is_found
