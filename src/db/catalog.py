# product catalog, mirrored to durable storage on every change
from __future__ import annotations

import asyncio
import dataclasses
import random
from typing import Dict, List, Optional, Tuple

from db.models import (
    NEW_PRODUCT_IMAGE,
    PLACEHOLDER_IMAGE,
    PRODUCT_FIELDS,
    Product,
    from_records,
)
from db.storage import Keys, Storage
from utils.config import SEED_SIZE
from utils.logger import get_logger
from utils.pure import encode_data_url

_logger = get_logger(__name__)


def generate_products(count: int = SEED_SIZE) -> List[Product]:
    return [
        Product(
            id=i,
            name=f"Regal Piece {i:03d}",
            description="none",
            price=str(random.randint(500, 5499)),
            stock=random.randint(1, 10),
            image=PLACEHOLDER_IMAGE,
        )
        for i in range(1, count + 1)
    ]


class Catalog:
    """
    In-memory product list. The list order is display order: new products are
    prepended, seeded ones keep ascending ids.
    """

    def __init__(
        self,
        storage: Storage,
        seed_size: int = SEED_SIZE,
        legacy_ids: bool = False,
    ) -> None:
        self.storage = storage
        self.seed_size = seed_size
        self.legacy_ids = legacy_ids
        self._products: List[Product] = []
        self._pending_images: Dict[int, asyncio.Task] = {}

    @property
    def products(self) -> Tuple[Product, ...]:
        return tuple(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def get(self, pid: int) -> Optional[Product]:
        for p in self._products:
            if p.id == pid:
                return p
        return None

    async def _persist(self) -> None:
        await self.storage.write_durable(
            Keys.PRODUCTS, [p.to_record() for p in self._products]
        )

    async def load(self) -> None:
        """Read the durable catalog, seeding it when absent or unreadable."""
        raw = await self.storage.read_durable(Keys.PRODUCTS)
        products = from_records(Product, raw) if raw is not None else None
        if products is None:
            if raw is not None:
                _logger.warning("Stored catalog is unreadable, reseeding.")
            await self.seed()
            return
        self._products = products

    async def seed(self) -> None:
        self._products = generate_products(self.seed_size)
        _logger.info(f"Seeded catalog with {len(self._products)} products.")
        await self._persist()

    def _replace(self, pid: int, **changes) -> Optional[Product]:
        for i, p in enumerate(self._products):
            if p.id == pid:
                self._products[i] = dataclasses.replace(p, **changes)
                return self._products[i]
        return None

    async def edit_field(self, pid: int, field: str, value) -> bool:
        """
        Overwrite one field of a product. The value is stored as given.
        Returns False (and changes nothing) when no product has this id.
        """
        if field not in PRODUCT_FIELDS:
            raise ValueError(f"Unknown product field: {field}")
        if self._replace(pid, **{field: value}) is None:
            return False
        await self._persist()
        return True

    async def adjust_stock(self, pid: int, delta: int) -> bool:
        product = self.get(pid)
        if product is None:
            return False
        self._replace(pid, stock=product.stock + delta)
        await self._persist()
        return True

    def next_id(self) -> int:
        if self.legacy_ids:
            # may collide once an existing id has been edited upwards
            return len(self._products) + 1
        return max((p.id for p in self._products), default=0) + 1

    async def add_product(self) -> Product:
        pid = self.next_id()
        product = Product(
            id=pid,
            name=f"New Piece {pid}",
            description="none",
            price="0",
            stock=0,
            image=NEW_PRODUCT_IMAGE,
        )
        self._products.insert(0, product)
        _logger.info(f"Added product {pid}.")
        await self._persist()
        return product

    def set_image(self, pid: int, source) -> asyncio.Task:
        """
        Start encoding `source` (a file path) into a data URL for product `pid`.
        Returns at once with a task resolving to True when the image was stored,
        False when the product no longer exists by then. A newer upload for the
        same product cancels the older one.
        """
        pending = self._pending_images.pop(pid, None)
        if pending is not None and not pending.done():
            pending.cancel()
        task = asyncio.get_running_loop().create_task(self._store_image(pid, source))
        self._pending_images[pid] = task
        task.add_done_callback(lambda t: self._forget_image_task(pid, t))
        return task

    def cancel_pending_images(self) -> int:
        """Cancel every upload still encoding. Returns how many were cancelled."""
        pending = [t for t in self._pending_images.values() if not t.done()]
        for task in pending:
            task.cancel()
        self._pending_images.clear()
        return len(pending)

    def _forget_image_task(self, pid: int, task: asyncio.Task) -> None:
        if self._pending_images.get(pid) is task:
            del self._pending_images[pid]

    async def _store_image(self, pid: int, source) -> bool:
        data_url = await asyncio.to_thread(encode_data_url, source)
        # resolve against the catalog as it is now, not as it was at upload time
        if self.get(pid) is None:
            _logger.info(f"Product {pid} is gone, dropping uploaded image.")
            return False
        await self.edit_field(pid, "image", data_url)
        _logger.info(f"Stored image for product {pid} ({len(data_url)} chars).")
        return True

    def search(self, query: str) -> List[Product]:
        """
        Case-insensitive search over name/description.
        - Empty string: every product, in catalog order.
        - Numeric only: exact id match; falls back to keyword search when no id matches.
        - Multiple words: whole phrase matches first, then each word; no duplicates.
        - Single word: keyword search.
        """
        phrase = (query or "").strip().lower()
        if not phrase:
            return list(self._products)

        def matching(term: str) -> List[Product]:
            return [
                p
                for p in self._products
                if term in str(p.name).lower() or term in str(p.description).lower()
            ]

        if phrase.isdigit():
            by_id = [p for p in self._products if p.id == int(phrase)]
            return by_id or matching(phrase)

        results: List[Product] = []
        seen: set[int] = set()
        for term in [phrase, *phrase.split()]:
            for p in matching(term):
                # identity, since product ids can repeat under legacy numbering
                if id(p) not in seen:
                    seen.add(id(p))
                    results.append(p)
        return results
