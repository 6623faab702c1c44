from fastapi import APIRouter, HTTPException, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from typing import List
from db.product_store import ProductStore
from models.product_model import DeleteResponse, Product, ProductPayload
from utils.auth import require_admin_token
from utils.dependencies import get_store
from utils.errors import ValidationError
from services.product_service import (
    list_products,
    get_product,
    create_product,
    update_product,
    delete_product,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["product"])


async def read_product_payload(request: Request, token: str = Depends(require_admin_token)) -> dict:
    """Parse the body only once the caller is authorised; returns the fields actually sent."""
    raw_body = await request.body()
    if not raw_body.strip():
        return {}
    try:
        payload = ProductPayload.model_validate_json(raw_body)
    except PydanticValidationError as e:
        errors = e.errors()
        message = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        raise ValidationError(message)
    return payload.model_dump(exclude_unset=True)


@router.get("", response_model=List[Product])
async def get_products_endpoint(store: ProductStore = Depends(get_store)):
    try:
        return await list_products(store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.exception(f"Listing products failed: {e}")
        raise HTTPException(status_code=500, detail="Could not list products")


@router.get("/{product_id}", response_model=Product)
async def get_product_endpoint(product_id: str, store: ProductStore = Depends(get_store)):
    try:
        return await get_product(product_id, store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.exception(f"Fetching product {product_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Could not fetch product")


@router.post("", response_model=Product, status_code=201)
async def create_product_endpoint(
    payload: dict = Depends(read_product_payload),
    store: ProductStore = Depends(get_store),
):
    try:
        return await create_product(payload, store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.exception(f"Creating product failed: {e}")
        raise HTTPException(status_code=500, detail="Could not create product")


@router.put("/{product_id}", response_model=Product)
async def update_product_endpoint(
    product_id: str,
    payload: dict = Depends(read_product_payload),
    store: ProductStore = Depends(get_store),
):
    try:
        return await update_product(product_id, payload, store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.exception(f"Updating product {product_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Could not update product")


@router.delete("/{product_id}", response_model=DeleteResponse)
async def delete_product_endpoint(
    product_id: str,
    token: str = Depends(require_admin_token),
    store: ProductStore = Depends(get_store),
):
    try:
        return await delete_product(product_id, store)
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        logger.exception(f"Deleting product {product_id} failed: {e}")
        raise HTTPException(status_code=500, detail="Could not delete product")
