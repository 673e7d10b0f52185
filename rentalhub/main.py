from fastapi import FastAPI
from rentalhub.core.config import get_settings
from rentalhub.core.lifespan import lifespan
from rentalhub.api.v1.routers.auth import router as auth_router
from rentalhub.api.v1.routers.health import router as health_router
from rentalhub.api.v1.routers.pages import router as pages_router
from rentalhub.api.v1.routers.products import router as products_router
from rentalhub.core.logging import configure_logging

from fastapi.middleware.cors import CORSMiddleware
import logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

    # ------- CORS -------
    # ALLOWED_ORIGINS from the env (CSV), e.g.
    # ALLOWED_ORIGINS="https://rentalhub.app,https://www.rentalhub.app"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["http://localhost:5173"],
        allow_credentials=False,                        # keep False to simplify preflight
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )

    # ------- Routes -------
    app.include_router(health_router)
    app.include_router(auth_router, prefix=settings.api_prefix)       # session sign-in/out
    app.include_router(products_router, prefix=settings.api_prefix)   # products + suggestions
    app.include_router(pages_router)                                  # routing surface; catch-all, keep last
    return app


app = create_app()
