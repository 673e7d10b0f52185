# rentalhub/api/v1/routers/pages.py
from __future__ import annotations
from typing import Optional
import time
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from rentalhub.api.deps import product_repo, session_gate
from rentalhub.api.v1.schemas.product import ListingCreatedOut, ProductCardOut, ProductIn, ProductOut
from rentalhub.core.config import Settings, get_settings
from rentalhub.domain.models.gallery import ImageGallery
from rentalhub.domain.repositories.product_repo import ProductRepo
from rentalhub.domain.services.constants import FEATURED_LIMIT, HOME_SECTIONS, PATH_UPLOAD
from rentalhub.domain.services.product_detail_svc import get_product_detail
from rentalhub.domain.services.route_resolver import Page, Redirect, RenderPage, normalize_path, resolve_route
from rentalhub.domain.services.session_gate import SessionGate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

LOADING_PAGE = {"page": "loading", "message": "Loading..."}


def _base(decision: RenderPage) -> dict:
    return {"page": decision.page.value, "path": decision.path, "chrome": decision.chrome}


async def _home(decision: RenderPage, repo: ProductRepo, settings: Settings) -> dict:
    try:
        featured = await repo.list_products(limit=FEATURED_LIMIT)
    except Exception as e:
        logger.error(f"Error fetching featured products: {e}")
        featured = []
    return {
        **_base(decision),
        "sections": list(HOME_SECTIONS),
        "featured": [ProductCardOut.from_product(p, settings.fallback_category).model_dump() for p in featured],
    }


async def _product_detail(decision: RenderPage, repo: ProductRepo, settings: Settings, image: int) -> dict:
    detail = await get_product_detail(
        repo,
        decision.product_id,
        suggestion_limit=settings.suggestion_limit,
        fallback_category=settings.fallback_category,
    )
    page = {**_base(decision), "product_id": decision.product_id}

    # absent and failed fetches look the same to the visitor
    if not detail.lookup.is_found:
        return {**page, "status": "not_found", "message": "Product not found"}

    product = detail.lookup.product
    cards = [ProductCardOut.from_product(p, settings.fallback_category).model_dump() for p in detail.suggestions]
    return {
        **page,
        "status": "found",
        "product": ProductOut.from_product(product).model_dump(),
        "gallery": ImageGallery(product.image_links, selected=image).to_dict(),
        "suggestions": {
            "title": "You Might Also Like",
            "items": cards,
            "empty_message": None if cards else "No suggested products available",
        },
    }


async def _all_products(
    decision: RenderPage, repo: ProductRepo, settings: Settings, category: Optional[str], limit: int, offset: int
) -> dict:
    try:
        items = await repo.list_products(category=category, limit=limit, offset=offset)
    except Exception as e:
        logger.error(f"Error fetching products category={category}: {e}")
        items = []
    return {
        **_base(decision),
        "category": category,
        "items": [ProductCardOut.from_product(p, settings.fallback_category).model_dump() for p in items],
        "paging": {"limit": limit, "offset": offset, "count": len(items)},
    }


def _upload_form(decision: RenderPage) -> dict:
    return {
        **_base(decision),
        "form": ProductIn.model_json_schema(by_alias=True),
        "submit": {"method": "POST", "action": PATH_UPLOAD},
    }


async def _read_listing(request: Request) -> ProductIn:
    try:
        return ProductIn.model_validate(await request.json())
    except ValidationError as e:
        raise RequestValidationError([{**err, "loc": ("body", *err["loc"])} for err in e.errors(include_url=False)])
    except ValueError:
        raise RequestValidationError([{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}])


@router.post(PATH_UPLOAD, status_code=201, response_model=ListingCreatedOut)
async def submit_listing(
    request: Request,
    gate: SessionGate = Depends(session_gate),
    repo: ProductRepo = Depends(product_repo),
):
    """
    Create a new listing owned by the signed-in visitor.
    The session is checked before the body is read: a signed-out visitor is sent
    to /auth whatever they posted.
    """
    if not gate.auth_checked:
        raise HTTPException(status_code=503, detail="Session is still being checked.")

    decision = resolve_route(gate.current_user, PATH_UPLOAD)
    if isinstance(decision, Redirect):
        return RedirectResponse(url=decision.location, status_code=303)

    listing = await _read_listing(request)
    product = listing.to_product(ProductRepo.new_id(), gate.current_user.uid)
    try:
        await repo.insert(product)
    except Exception as e:
        logger.error(f"Error inserting listing owner={gate.current_user.uid}: {e}")
        raise HTTPException(status_code=503, detail="Product store unavailable.")
    return ListingCreatedOut(id=product.id, path=f"/product/{product.id}")


@router.get("/{full_path:path}")
async def render_page(
    full_path: str,
    image: int = Query(0, description="Selected thumbnail on a product page"),
    category: Optional[str] = Query(None, description="All-products category filter"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    gate: SessionGate = Depends(session_gate),
    repo: ProductRepo = Depends(product_repo),
    settings: Settings = Depends(get_settings),
):
    """
    Routing surface. While the session gate is still checking, every page is the
    loading placeholder; afterwards the route resolver picks a page or a redirect.
    """
    path = normalize_path(full_path)
    if path == settings.api_prefix or path.startswith(settings.api_prefix + "/"):
        raise HTTPException(status_code=404, detail="Not Found")

    if not gate.auth_checked:
        logger.debug("Response: page path=%s loading (session not checked)", path)
        return LOADING_PAGE

    start_time = time.perf_counter()
    decision = resolve_route(gate.current_user, path)
    if isinstance(decision, Redirect):
        logger.info("Response: page path=%s redirect=%s", path, decision.location)
        return RedirectResponse(url=decision.location, status_code=307)

    if decision.page is Page.AUTH:
        body = {**_base(decision), "sign_in": f"{settings.api_prefix}/auth/sign-in"}
    elif decision.page is Page.HOME:
        body = await _home(decision, repo, settings)
    elif decision.page is Page.ACCOUNT:
        body = {**_base(decision), "user": decision.subject.model_dump()}
    elif decision.page is Page.UPLOAD:
        body = _upload_form(decision)
    elif decision.page is Page.PRODUCT_DETAIL:
        body = await _product_detail(decision, repo, settings, image)
    else:
        body = await _all_products(
            decision, repo, settings, category, limit or settings.all_products_page_size, offset
        )

    logger.info(
        "Response: page path=%s page=%s chrome=%s elapsed_time=%.4fs",
        path, decision.page.value, decision.chrome, time.perf_counter() - start_time,
    )
    return body
