from fastapi import Request
from db.file_store import JsonFileProductStore
from db.postgres_store import PostgresProductStore
from db.product_store import ProductStore
from utils.config import BACKEND_POSTGRES, Settings
from utils.errors import StoreError
import logging

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> ProductStore:
    if settings.store_backend == BACKEND_POSTGRES:
        return PostgresProductStore(settings)
    return JsonFileProductStore(settings.products_file)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_store(request: Request) -> ProductStore:
    store = getattr(request.app.state, "store", None)
    if not store:
        logger.error("Product store is not available")
        raise StoreError("get_store", detail="Product store is not available")
    return store
