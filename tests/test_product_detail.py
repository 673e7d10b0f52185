import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from conftest import product_doc
from rentalhub.domain.models.gallery import ImageGallery, ImageSource
from rentalhub.domain.models.product import LookupStatus
from rentalhub.domain.services.product_detail_svc import (
    ProductDetailView,
    get_product_detail,
    load_product,
    load_suggestions,
)


# ============================================================
# Product fetch
# ============================================================

@pytest.mark.asyncio
async def test_load_product_found(products, repo):
    products.docs.append(product_doc("P1", "Cameras"))
    lookup = await load_product(repo, "P1")
    assert lookup.status is LookupStatus.FOUND
    assert lookup.product.id == "P1"


@pytest.mark.asyncio
async def test_load_product_absent(repo):
    lookup = await load_product(repo, "missing")
    assert lookup.status is LookupStatus.NOT_FOUND
    assert lookup.product is None


@pytest.mark.asyncio
async def test_load_product_network_error_is_failed_not_raised(repo):
    repo.get_by_id = AsyncMock(side_effect=ConnectionError("network down"))
    lookup = await load_product(repo, "P1")
    assert lookup.status is LookupStatus.FAILED
    assert "network down" in lookup.error


@pytest.mark.asyncio
async def test_load_suggestions_degrades_to_empty(products, repo):
    products.docs.append(product_doc("P1", "Cameras"))
    subject = await repo.get_by_id("P1")
    repo.find_by_category = AsyncMock(side_effect=TimeoutError("slow store"))
    assert await load_suggestions(repo, subject) == []


# ============================================================
# Detail view
# ============================================================

@pytest.mark.asyncio
async def test_detail_with_suggestions(products, repo):
    products.docs += [product_doc("P1", "Cameras"), product_doc("C1", "Cameras"), product_doc("O1", "Tools")]

    detail = await get_product_detail(repo, "P1")

    assert detail.lookup.is_found
    assert [p.id for p in detail.suggestions] == ["C1", "O1"]


@pytest.mark.asyncio
async def test_absent_product_skips_suggestions(repo):
    repo.find_by_category = AsyncMock()
    detail = await get_product_detail(repo, "nope")
    assert detail.lookup.status is LookupStatus.NOT_FOUND
    assert detail.suggestions == []
    repo.find_by_category.assert_not_called()


@pytest.mark.asyncio
async def test_failed_product_fetch_skips_suggestions(repo):
    repo.get_by_id = AsyncMock(side_effect=OSError("connection reset"))
    repo.find_by_category = AsyncMock()
    detail = await get_product_detail(repo, "P1")
    assert detail.lookup.status is LookupStatus.FAILED
    repo.find_by_category.assert_not_called()


@pytest.mark.asyncio
async def test_closing_view_cancels_in_flight_fetch():
    started = asyncio.Event()
    cancelled = []

    async def slow_get(product_id):
        started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            cancelled.append(product_id)
            raise

    repo = Mock()
    repo.get_by_id = slow_get
    view = ProductDetailView(repo, "P1")
    load = asyncio.create_task(view.load())
    await started.wait()

    await view.close()

    assert cancelled == ["P1"]
    assert view.closed
    with pytest.raises(asyncio.CancelledError):
        await load


@pytest.mark.asyncio
async def test_closed_view_refuses_new_loads(repo):
    view = ProductDetailView(repo, "P1")
    await view.close()
    with pytest.raises(RuntimeError):
        await view.load()


# ============================================================
# Gallery
# ============================================================

def test_gallery_defaults_to_first_image():
    g = ImageGallery(["a.jpg", "b.jpg"])
    assert g.selected == 0
    assert g.main_image.src == "a.jpg"


def test_gallery_selection_bounded_to_three_thumbnails():
    g = ImageGallery(["a", "b", "c", "d", "e"])
    assert g.thumbnails == ["a", "b", "c"]
    assert g.select(2) is True
    assert g.main_image.src == "c"
    assert g.select(3) is False
    assert g.select(-1) is False
    assert g.selected == 2


def test_single_image_has_no_thumbnails():
    g = ImageGallery(["only.jpg"], selected=1)
    assert g.thumbnails == []
    assert g.selected == 0
    assert g.main_image.src == "only.jpg"


def test_no_images():
    g = ImageGallery([])
    assert g.main_image.src is None
    assert g.to_dict()["thumbnails"] == []


def test_empty_thumbnail_reference_uses_placeholder():
    g = ImageGallery(["", "b.jpg"])
    assert g.to_dict()["thumbnails"][0]["src"] == "/Images/DSLR.png"


def test_broken_image_swaps_to_fallback_once():
    img = ImageSource("https://cdn.example.com/broken.jpg")
    assert img.on_error() is True
    assert img.src == "/Images/default.png"
    assert img.on_error() is False
    assert img.src == "/Images/default.png"
    assert img.swapped
