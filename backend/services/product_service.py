from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from db.product_store import DuplicateProductError, ProductStore
from utils.errors import ConflictError, NotFoundError, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "brand")


def upsert_product(payload: Dict[str, Any], existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge a partial payload over the stored version of a product.

    Top-level keys and ``detail`` keys are merged shallowly with the payload
    winning. ``detail.priceOptions`` is taken whole from the payload when it
    is a list, otherwise kept from the existing record. ``createdAt`` is only
    set the first time; ``updatedAt`` is always the merge time.

    Args:
        payload: Fields sent by the client.
        existing: The stored record, or None when creating.

    Returns:
        The record to persist. Neither argument is modified.
    """
    now = datetime.now(timezone.utc)
    base = existing or {}
    base_detail = base.get("detail") or {}
    payload_detail = payload.get("detail") or {}

    payload_price_options = payload_detail.get("priceOptions")
    if isinstance(payload_price_options, list):
        price_options = payload_price_options
    else:
        price_options = base_detail.get("priceOptions") or []

    detail = {**base_detail, **payload_detail, "priceOptions": price_options}

    payload_id = payload.get("id")
    if isinstance(payload_id, str) and payload_id.strip():
        product_id = payload_id.strip()
    elif base.get("id"):
        product_id = base["id"]
    else:
        product_id = str(uuid.uuid4())

    product = {
        **base,
        **payload,
        "id": product_id,
        "detail": detail,
        "updatedAt": now,
        "createdAt": base.get("createdAt") or now,
    }
    if product.get("featured") is None:
        product["featured"] = False
    return product


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


async def list_products(store: ProductStore) -> List[Dict[str, Any]]:
    return await store.list_all()


async def get_product(product_id: str, store: ProductStore) -> Dict[str, Any]:
    product = await store.get_by_id(product_id)
    if not product:
        raise NotFoundError()
    return product


async def create_product(payload: Dict[str, Any], store: ProductStore) -> Dict[str, Any]:
    if any(_is_blank(payload.get(field)) for field in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields (name, brand)")
    product = upsert_product(payload, None)
    try:
        created = await store.insert(product)
    except DuplicateProductError as e:
        raise ConflictError(str(e))
    logger.info(f"Created product {created['id']}")
    return created


async def update_product(product_id: str, payload: Dict[str, Any], store: ProductStore) -> Dict[str, Any]:
    for field in REQUIRED_FIELDS:
        if field in payload and _is_blank(payload[field]):
            raise ValidationError(f"Field '{field}' cannot be empty")
    existing = await store.get_by_id(product_id)
    if not existing:
        raise NotFoundError()
    product = upsert_product(payload, existing)
    try:
        updated = await store.replace(product_id, product)
    except DuplicateProductError as e:
        raise ConflictError(str(e))
    if not updated:
        raise NotFoundError()
    logger.info(f"Updated product {product_id}")
    return updated


async def delete_product(product_id: str, store: ProductStore) -> Dict[str, Any]:
    if not await store.delete_by_id(product_id):
        raise NotFoundError()
    logger.info(f"Deleted product {product_id}")
    return {"ok": True}
