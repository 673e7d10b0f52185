# rentalhub/core/lifespan.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from rentalhub.db import mongo
from rentalhub.core.config import get_settings
from rentalhub.domain.services.auth_service import LocalAuthService
from rentalhub.domain.services.session_gate import SessionGate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    if settings.MONGO_URI:
        await mongo.connect()
    else:
        logger.warning("No MONGO_URI provided, skipping Mongo connection")

    # The application root owns the one auth subscription
    auth = LocalAuthService()
    gate = SessionGate(auth)
    app.state.auth_service = auth
    app.state.session_gate = gate

    with gate:
        if settings.AUTH_RESTORE_ON_STARTUP:
            auth.restore()  # no persisted session: resolve as signed out
        else:
            logger.info("Session gate waits for the first sign-in/sign-out")

        try:
            # Application runs
            yield
        finally:
            # --- Shutdown ---
            if settings.MONGO_URI:
                await mongo.disconnect()
