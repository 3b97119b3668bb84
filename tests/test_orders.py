import unittest
from datetime import datetime, timedelta

from support import StoreTestCase, make_form

from db.accounts import AccountBook
from db.catalog import Catalog
from db.models import PaymentMethod
from db.orders import OrderLedger
from db.storage import Keys


class OrderLedgerTestCase(StoreTestCase):
    async def asyncSetUp(self):
        self.catalog = Catalog(self.storage, seed_size=10)
        await self.catalog.load()
        book = AccountBook(self.storage)
        self.asha = await book.sign_up(
            make_form(), remember=False, when=datetime(2025, 1, 1)
        )
        self.ravi = await book.sign_up(
            make_form(email="ravi@example.com", name="Ravi"),
            remember=False,
            when=datetime(2025, 1, 2),
        )
        self.ledger = OrderLedger(self.storage)
        await self.ledger.load()
        self.start = datetime(2025, 2, 1, 9, 0, 0)

    async def _place(self, user, minutes, method=PaymentMethod.CASH_ON_DELIVERY):
        items = self.catalog.products[:2]
        return await self.ledger.place(
            user, items, 1500, method, when=self.start + timedelta(minutes=minutes)
        )

    async def test_place_builds_snapshot(self):
        order = await self._place(self.asha, 0)
        self.assertEqual(order.id, int(self.start.timestamp() * 1000))
        self.assertEqual(order.user, self.asha)
        self.assertEqual(order.items, self.catalog.products[:2])
        self.assertEqual(order.total, 1500)
        self.assertEqual(order.method, "Cash on Delivery")
        self.assertEqual(order.created_at, self.start.isoformat())
        self.assertEqual(self.ledger.orders, (order,))

    async def test_orders_survive_reload(self):
        first = await self._place(self.asha, 0)
        second = await self._place(self.ravi, 1, PaymentMethod.SIMULATED_GATEWAY)

        reloaded = OrderLedger(self.storage)
        await reloaded.load()
        self.assertEqual(reloaded.orders, (first, second))
        self.assertEqual(reloaded.orders[1].method, "Razorpay (simulated)")

        stored = await self.storage.read_durable(Keys.ORDERS)
        self.assertEqual(stored[0]["createdAt"], first.created_at)

    async def test_orders_are_snapshots(self):
        order = await self._place(self.asha, 0)
        await self.catalog.edit_field(1, "name", "Renamed")
        self.assertNotEqual(order.items[0].name, "Renamed")
        self.assertNotEqual(self.ledger.orders[0].items[0].name, "Renamed")

    async def test_get(self):
        order = await self._place(self.asha, 0)
        self.assertEqual(self.ledger.get(order.id), order)
        self.assertIsNone(self.ledger.get(12345))

    async def test_list_for_is_newest_first_and_paginated(self):
        placed = [await self._place(self.asha, minute) for minute in range(7)]
        await self._place(self.ravi, 30)

        page, total = self.ledger.list_for(self.asha.id, page=1, page_size=5)
        self.assertEqual(total, 7)
        self.assertEqual(page, placed[::-1][:5])

        page, total = self.ledger.list_for(self.asha.id, page=2, page_size=5)
        self.assertEqual(page, placed[1::-1])

        page, _ = self.ledger.list_for(self.asha.id, page=3, page_size=5)
        self.assertEqual(page, [])

        page, total = self.ledger.list_for(self.ravi.id)
        self.assertEqual(total, 1)

    async def test_corrupt_history_loads_empty(self):
        await self.storage.write_durable(Keys.ORDERS, "not a list")
        ledger = OrderLedger(self.storage)
        await ledger.load()
        self.assertEqual(ledger.orders, ())


if __name__ == "__main__":
    unittest.main()
