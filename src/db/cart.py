# shopping cart, one snapshot line per unit, mirrored to session storage
from __future__ import annotations

from collections import Counter
from typing import List, Tuple

from db.catalog import Catalog
from db.models import Product, from_records
from db.storage import Keys, Storage
from utils.errors import OutOfStockError
from utils.logger import get_logger
from utils.pure import parse_price

_logger = get_logger(__name__)


class Cart:
    """
    Adding a line takes one unit out of catalog stock, removing or clearing
    gives it back. Lines are copies of the product at add time.
    """

    def __init__(self, storage: Storage, catalog: Catalog) -> None:
        self.storage = storage
        self.catalog = catalog
        self._lines: List[Product] = []

    @property
    def lines(self) -> Tuple[Product, ...]:
        return tuple(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    async def load(self) -> None:
        raw = await self.storage.read_session(Keys.CART, [])
        lines = from_records(Product, raw)
        if lines is None:
            _logger.warning("Stored cart is unreadable, starting empty.")
            lines = []
        self._lines = lines

    async def _persist(self) -> None:
        await self.storage.write_session(
            Keys.CART, [p.to_record() for p in self._lines]
        )

    async def add(self, product_id: int) -> Product:
        """Add one unit of a product. Raises OutOfStockError if there is none left."""
        product = self.catalog.get(product_id)
        if product is None or product.stock <= 0:
            raise OutOfStockError()
        self._lines.append(product)
        await self.catalog.adjust_stock(product_id, -1)
        await self._persist()
        return product

    async def remove(self, index: int) -> Product:
        """Remove the line at `index` and restock it. Raises IndexError when out of range."""
        if not 0 <= index < len(self._lines):
            raise IndexError(f"No cart line at position {index}")
        line = self._lines.pop(index)
        await self.catalog.adjust_stock(line.id, 1)
        await self._persist()
        return line

    async def clear(self) -> None:
        returned = Counter(line.id for line in self._lines)
        self._lines = []
        for pid, count in returned.items():
            await self.catalog.adjust_stock(pid, count)
        await self._persist()

    def total(self) -> int:
        return sum(parse_price(line.price) for line in self._lines)
