import asyncpg
import logging
from datetime import datetime, timezone
from typing import List, Optional
from db.database import close_pool, create_pool, ensure_products_table
from db.product_store import DuplicateProductError, ProductRecord, ProductStore
from utils.config import Settings
from utils.errors import StoreError

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = (
    "id, name, brand, category, size, image, alt, featured, detail, created_at, updated_at"
)


def _to_datetime(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return datetime.now(timezone.utc)


def row_to_record(row) -> ProductRecord:
    return {
        "id": row["id"],
        "name": row["name"],
        "brand": row["brand"],
        "category": row["category"],
        "size": row["size"],
        "image": row["image"],
        "alt": row["alt"],
        "featured": row["featured"],
        "detail": row["detail"] if row["detail"] is not None else {"priceOptions": []},
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
    }


def record_to_params(record: ProductRecord) -> tuple:
    return (
        record["id"],
        record.get("name"),
        record.get("brand"),
        record.get("category"),
        record.get("size"),
        record.get("image"),
        record.get("alt"),
        bool(record.get("featured") or False),
        record.get("detail") or {"priceOptions": []},
        _to_datetime(record.get("createdAt")),
        _to_datetime(record.get("updatedAt")),
    )


class PostgresProductStore(ProductStore):
    """Products kept in the ``products`` table, one row per record.

    Top-level keys without a column are not persisted.
    """

    name = "postgres"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.pool: Optional[asyncpg.Pool] = None

    async def open(self):
        self.pool = await create_pool(self.settings)
        await ensure_products_table(self.pool)

    async def close(self):
        if self.pool:
            await close_pool(self.pool)
            self.pool = None

    def _require_pool(self, operation: str) -> asyncpg.Pool:
        if not self.pool:
            logger.error(f"{operation} failed: connection pool is not open")
            raise StoreError(operation)
        return self.pool

    async def list_all(self) -> List[ProductRecord]:
        pool = self._require_pool("list_all")
        try:
            select_query = f"SELECT {PRODUCT_COLUMNS} FROM products ORDER BY updated_at DESC"
            rows = await pool.fetch(select_query)
            return [row_to_record(row) for row in rows]
        except Exception as e:
            logger.error(f"list_all failed: {e}")
            raise StoreError("list_all")

    async def get_by_id(self, product_id: str) -> Optional[ProductRecord]:
        pool = self._require_pool("get_by_id")
        try:
            select_query = f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = $1"
            row = await pool.fetchrow(select_query, product_id)
            return row_to_record(row) if row else None
        except Exception as e:
            logger.error(f"get_by_id failed for '{product_id}': {e}")
            raise StoreError("get_by_id")

    async def insert(self, record: ProductRecord) -> ProductRecord:
        pool = self._require_pool("insert")
        try:
            insert_query = f"""
            INSERT INTO products ({PRODUCT_COLUMNS})
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
            RETURNING {PRODUCT_COLUMNS}
            """
            row = await pool.fetchrow(insert_query, *record_to_params(record))
            return row_to_record(row)
        except asyncpg.UniqueViolationError:
            raise DuplicateProductError(record["id"])
        except Exception as e:
            logger.error(f"insert failed for '{record.get('id')}': {e}")
            raise StoreError("insert")

    async def replace(self, product_id: str, record: ProductRecord) -> Optional[ProductRecord]:
        pool = self._require_pool("replace")
        try:
            update_query = f"""
            UPDATE products
            SET id = $1, name = $2, brand = $3, category = $4, size = $5, image = $6,
                alt = $7, featured = $8, detail = $9, created_at = $10, updated_at = $11
            WHERE id = $12
            RETURNING {PRODUCT_COLUMNS}
            """
            row = await pool.fetchrow(update_query, *record_to_params(record), product_id)
            return row_to_record(row) if row else None
        except asyncpg.UniqueViolationError:
            raise DuplicateProductError(record["id"])
        except Exception as e:
            logger.error(f"replace failed for '{product_id}': {e}")
            raise StoreError("replace")

    async def delete_by_id(self, product_id: str) -> bool:
        pool = self._require_pool("delete_by_id")
        try:
            delete_query = "DELETE FROM products WHERE id = $1 RETURNING id"
            deleted_id = await pool.fetchval(delete_query, product_id)
            return deleted_id is not None
        except Exception as e:
            logger.error(f"delete_by_id failed for '{product_id}': {e}")
            raise StoreError("delete_by_id")
