# rentalhub/api/deps.py
from fastapi import Depends, Request
from rentalhub.core.config import Settings, get_settings
from rentalhub.db.mongo import get_db
from rentalhub.domain.repositories.product_repo import ProductRepo
from rentalhub.domain.services.auth_service import LocalAuthService
from rentalhub.domain.services.session_gate import SessionGate

# Dependency for injecting the MongoDB database into endpoints/services
async def mongo_db(db = Depends(get_db)):
    # Returns the MongoDB database instance (async)
    return db

# Repository over the configured products collection
def product_repo(db = Depends(mongo_db), settings: Settings = Depends(get_settings)) -> ProductRepo:
    return ProductRepo(db, collection_name=settings.PRODUCTS_COLLECTION)

# Session gate and auth service are built by the lifespan and live on app.state
def session_gate(request: Request) -> SessionGate:
    return request.app.state.session_gate

def auth_service(request: Request) -> LocalAuthService:
    return request.app.state.auth_service
