from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

ProductRecord = Dict[str, Any]


class DuplicateProductError(Exception):
    """Raised by a store when a write would give two records the same id."""

    def __init__(self, product_id: str):
        super().__init__(f"Product id '{product_id}' already exists")
        self.product_id = product_id


class ProductStore(ABC):
    """Key-value view of the products catalog, keyed by product id.

    Records are plain dicts using the wire field names (``createdAt``,
    ``updatedAt``, ``detail.priceOptions`` ...). Backend failures are raised
    as ``utils.errors.StoreError``.
    """

    name = "store"

    async def open(self) -> None:
        """Prepare the backend (create the table or the file) before serving."""

    async def close(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def list_all(self) -> List[ProductRecord]:
        ...

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[ProductRecord]:
        ...

    @abstractmethod
    async def insert(self, record: ProductRecord) -> ProductRecord:
        """Store a new record. Raises DuplicateProductError if the id is taken."""

    @abstractmethod
    async def replace(self, product_id: str, record: ProductRecord) -> Optional[ProductRecord]:
        """Replace the record stored under ``product_id``.

        ``record["id"]`` may differ from ``product_id`` when the id is being
        changed. Returns None if nothing is stored under ``product_id`` and
        raises DuplicateProductError if the new id belongs to another record.
        """

    @abstractmethod
    async def delete_by_id(self, product_id: str) -> bool:
        """Remove a record. Returns False if no record had that id."""
