import asyncio
import json
import logging
import os
import tempfile
from datetime import datetime
from typing import List, Optional
from db.product_store import DuplicateProductError, ProductRecord, ProductStore
from utils.errors import StoreError

logger = logging.getLogger(__name__)


def _json_default(value):
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonFileProductStore(ProductStore):
    """Products kept as one JSON array in a single file.

    Every write rewrites the whole file. Writers inside this process are
    serialised by a lock and the new content is moved into place with
    os.replace, but separate processes sharing the file still overwrite each
    other: run a single worker with this backend.
    """

    name = "file"

    def __init__(self, path: str):
        self.path = path
        self._write_lock = asyncio.Lock()

    async def open(self):
        try:
            await asyncio.to_thread(self._ensure_file)
        except OSError as e:
            logger.error(f"Could not prepare products file {self.path}: {e}")
            raise StoreError("open")
        logger.info(f"Using products file {self.path}")

    def _ensure_file(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.path):
            self._write(self.path, [])

    def _read(self) -> List[ProductRecord]:
        self._ensure_file()
        with open(self.path, "r", encoding="utf-8") as f:
            products = json.load(f)
        if not isinstance(products, list):
            logger.warning(f"{self.path} does not hold a JSON array, treating it as empty")
            return []
        return products

    @staticmethod
    def _write(path: str, products: List[ProductRecord]):
        directory = os.path.dirname(path) or "."
        fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".products-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(products, f, indent=2, ensure_ascii=False, default=_json_default)
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise

    async def _load(self, operation: str) -> List[ProductRecord]:
        try:
            return await asyncio.to_thread(self._read)
        except (OSError, ValueError) as e:
            logger.error(f"{operation} failed reading {self.path}: {e}")
            raise StoreError(operation)

    async def _save(self, operation: str, products: List[ProductRecord]):
        try:
            await asyncio.to_thread(self._write, self.path, products)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"{operation} failed writing {self.path}: {e}")
            raise StoreError(operation)

    async def list_all(self) -> List[ProductRecord]:
        return await self._load("list_all")

    async def get_by_id(self, product_id: str) -> Optional[ProductRecord]:
        products = await self._load("get_by_id")
        return next((p for p in products if p.get("id") == product_id), None)

    async def insert(self, record: ProductRecord) -> ProductRecord:
        async with self._write_lock:
            products = await self._load("insert")
            if any(p.get("id") == record["id"] for p in products):
                raise DuplicateProductError(record["id"])
            products.append(record)
            await self._save("insert", products)
        return record

    async def replace(self, product_id: str, record: ProductRecord) -> Optional[ProductRecord]:
        async with self._write_lock:
            products = await self._load("replace")
            index = next((i for i, p in enumerate(products) if p.get("id") == product_id), None)
            if index is None:
                return None
            if record["id"] != product_id and any(p.get("id") == record["id"] for p in products):
                raise DuplicateProductError(record["id"])
            products[index] = record
            await self._save("replace", products)
        return record

    async def delete_by_id(self, product_id: str) -> bool:
        async with self._write_lock:
            products = await self._load("delete_by_id")
            remaining = [p for p in products if p.get("id") != product_id]
            if len(remaining) == len(products):
                return False
            await self._save("delete_by_id", remaining)
        return True
