# append-only order history, durable
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from db.models import Account, Order, PaymentMethod, Product, from_records
from db.storage import Keys, Storage
from utils.logger import get_logger

_logger = get_logger(__name__)


class OrderLedger:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self._orders: List[Order] = []

    @property
    def orders(self) -> Tuple[Order, ...]:
        return tuple(self._orders)

    async def load(self) -> None:
        raw = await self.storage.read_durable(Keys.ORDERS, [])
        orders = from_records(Order, raw)
        if orders is None:
            _logger.warning("Stored order history is unreadable, starting empty.")
            orders = []
        self._orders = orders

    async def place(
        self,
        user: Account,
        items: Iterable[Product],
        total: int,
        method: PaymentMethod,
        when: Optional[datetime] = None,
    ) -> Order:
        """Record a new order. Orders are never changed after this."""
        when = when or datetime.now()
        order = Order(
            id=int(when.timestamp() * 1000),
            user=user,
            items=tuple(items),
            total=total,
            method=PaymentMethod(method).value,
            created_at=when.isoformat(),
        )
        self._orders.append(order)
        await self.storage.write_durable(
            Keys.ORDERS, [o.to_record() for o in self._orders]
        )
        _logger.info(
            f"Order {order.id} placed by {user.email}: {len(order.items)} item(s), "
            f"total {order.total}, {order.method}."
        )
        return order

    def get(self, order_id: int) -> Optional[Order]:
        for order in self._orders:
            if order.id == order_id:
                return order
        return None

    def list_for(
        self, account_id: int, page: int = 1, page_size: int = 5
    ) -> Tuple[List[Order], int]:
        """
        A customer's orders, newest first, paginated.
        Return (orders_for_page, total_count).
        """
        mine = [o for o in reversed(self._orders) if o.user.id == account_id]
        offset = max(page - 1, 0) * page_size
        return mine[offset : offset + page_size], len(mine)
