# rentalhub/domain/services/route_resolver.py
from __future__ import annotations
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel

from rentalhub.domain.models.session import UserHandle
from rentalhub.domain.services.constants import (
    PATH_ACCOUNT,
    PATH_ALL_PRODUCTS,
    PATH_AUTH,
    PATH_HOME,
    PATH_PRODUCT_PREFIX,
    PATH_UPLOAD,
)


class Page(str, Enum):
    AUTH = "auth"
    HOME = "home"
    ACCOUNT = "account"
    UPLOAD = "list-your-item"
    PRODUCT_DETAIL = "product-detail"
    ALL_PRODUCTS = "all-products"


class RenderPage(BaseModel):
    page: Page
    path: str
    product_id: Optional[str] = None
    subject: Optional[UserHandle] = None   # account page only
    chrome: bool = True                    # navigation bar + footer
    model_config = {"frozen": True}


class Redirect(BaseModel):
    location: str
    model_config = {"frozen": True}


RouteDecision = Union[RenderPage, Redirect]


def normalize_path(path: str) -> str:
    """Leading slash enforced, trailing slash ignored ('/account/' == '/account')."""
    p = "/" + (path or "").lstrip("/")
    if len(p) > 1:
        p = p.rstrip("/") or "/"
    return p


def _product_id(path: str) -> Optional[str]:
    if not path.startswith(PATH_PRODUCT_PREFIX):
        return None
    rest = path[len(PATH_PRODUCT_PREFIX):]
    if not rest or "/" in rest:
        return None
    return rest


def show_chrome(path: str) -> bool:
    """The login page is full-screen: chrome is hidden on exactly /auth, whoever is asking."""
    return normalize_path(path) != PATH_AUTH


def _render(page: Page, path: str, **kw) -> RenderPage:
    return RenderPage(page=page, path=path, chrome=show_chrome(path), **kw)


def resolve_route(current_user: Optional[UserHandle], requested_path: str) -> RouteDecision:
    """
    Pick the page for `requested_path` given the session; first match wins.

      path             signed in               signed out
      /auth            -> /                    Auth
      /                Home                    -> /auth
      /account         Account(current user)   -> /auth
      /list-your-item  Upload form             -> /auth
      /product/:id     Product detail          Product detail
      /all-products    All products            All products
      anything else    -> /                    -> /auth
    """
    path = normalize_path(requested_path)
    signed_in = current_user is not None

    if path == PATH_AUTH:
        return Redirect(location=PATH_HOME) if signed_in else _render(Page.AUTH, path)

    if path == PATH_HOME:
        return _render(Page.HOME, path) if signed_in else Redirect(location=PATH_AUTH)

    if path == PATH_ACCOUNT:
        if not signed_in:
            return Redirect(location=PATH_AUTH)
        return _render(Page.ACCOUNT, path, subject=current_user)

    if path == PATH_UPLOAD:
        return _render(Page.UPLOAD, path) if signed_in else Redirect(location=PATH_AUTH)

    product_id = _product_id(path)
    if product_id is not None:
        return _render(Page.PRODUCT_DETAIL, path, product_id=product_id)

    if path == PATH_ALL_PRODUCTS:
        return _render(Page.ALL_PRODUCTS, path)

    return Redirect(location=PATH_HOME if signed_in else PATH_AUTH)
