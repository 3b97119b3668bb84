import random
import unittest

from support import StoreTestCase

from db.cart import Cart
from db.catalog import Catalog
from db.storage import Keys
from utils.errors import OutOfStockError


class CartTestCase(StoreTestCase):
    async def asyncSetUp(self):
        self.catalog = Catalog(self.storage)
        await self.catalog.load()
        self.cart = Cart(self.storage, self.catalog)
        await self.cart.load()
        await self.catalog.edit_field(5, "stock", 3)

    async def test_add_then_remove_round_trip(self):
        await self.cart.add(5)
        self.assertEqual(self.catalog.get(5).stock, 2)
        self.assertEqual([line.id for line in self.cart.lines], [5])

        await self.cart.remove(0)
        self.assertEqual(self.catalog.get(5).stock, 3)
        self.assertEqual(len(self.cart), 0)

    async def test_snapshot_is_taken_before_decrement(self):
        line = await self.cart.add(5)
        self.assertEqual(line.stock, 3)
        self.assertEqual(self.cart.lines[0].stock, 3)

    async def test_line_is_independent_of_later_edits(self):
        await self.cart.add(5)
        await self.catalog.edit_field(5, "price", "9999")
        await self.catalog.edit_field(5, "name", "Renamed")
        self.assertNotEqual(self.cart.lines[0].price, "9999")
        self.assertNotEqual(self.cart.lines[0].name, "Renamed")

    async def test_out_of_stock_raises_and_changes_nothing(self):
        await self.catalog.edit_field(6, "stock", 0)
        with self.assertRaises(OutOfStockError):
            await self.cart.add(6)
        with self.assertRaises(OutOfStockError):
            await self.cart.add(4242)
        self.assertEqual(self.catalog.get(6).stock, 0)
        self.assertEqual(len(self.cart), 0)

    async def test_cannot_take_more_than_stock(self):
        for _ in range(3):
            await self.cart.add(5)
        with self.assertRaises(OutOfStockError):
            await self.cart.add(5)
        self.assertEqual(self.catalog.get(5).stock, 0)
        self.assertEqual(len(self.cart), 3)

    async def test_remove_rejects_bad_index(self):
        await self.cart.add(5)
        for bad in (1, 5, -1):
            with self.assertRaises(IndexError):
                await self.cart.remove(bad)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.catalog.get(5).stock, 2)

    async def test_remove_keeps_order_of_other_lines(self):
        for pid in (1, 2, 3):
            await self.cart.add(pid)
        await self.cart.remove(1)
        self.assertEqual([line.id for line in self.cart.lines], [1, 3])

    async def test_clear_restores_duplicates_cumulatively(self):
        await self.catalog.edit_field(8, "stock", 4)
        for pid in (5, 5, 8, 5, 8):
            await self.cart.add(pid)
        self.assertEqual(self.catalog.get(5).stock, 0)
        self.assertEqual(self.catalog.get(8).stock, 2)

        await self.cart.clear()
        self.assertEqual(self.catalog.get(5).stock, 3)
        self.assertEqual(self.catalog.get(8).stock, 4)
        self.assertEqual(len(self.cart), 0)

    async def test_total_parses_prices_as_integers(self):
        await self.catalog.edit_field(1, "price", "1200")
        await self.catalog.edit_field(1, "stock", 5)
        await self.catalog.edit_field(2, "price", "350.75")
        await self.catalog.edit_field(3, "price", "ask me")
        for pid in (1, 1, 2, 3):
            await self.cart.add(pid)
        self.assertEqual(self.cart.total(), 1200 + 1200 + 350 + 0)

    async def test_stock_never_negative_under_random_operations(self):
        rng = random.Random(7)
        for _ in range(150):
            action = rng.choice(["add", "add", "remove", "clear"])
            if action == "add":
                try:
                    await self.cart.add(rng.randint(1, 10))
                except OutOfStockError:
                    pass
            elif action == "remove" and len(self.cart):
                await self.cart.remove(rng.randrange(len(self.cart)))
            elif action == "clear" and rng.random() < 0.1:
                await self.cart.clear()
            for p in self.catalog.products[:10]:
                self.assertGreaterEqual(p.stock, 0)

    async def test_cart_survives_reload_but_not_restart(self):
        await self.cart.add(5)
        await self.cart.add(9)

        reloaded = Cart(self.storage, self.catalog)
        await reloaded.load()
        self.assertEqual([line.id for line in reloaded.lines], [5, 9])

        await self.storage.clear_session_scope()
        restarted = Cart(self.storage, self.catalog)
        await restarted.load()
        self.assertEqual(restarted.lines, ())

    async def test_add_works_on_catalog_stored_with_text_stock(self):
        record = self.catalog.get(5).to_record()
        record["stock"] = "3"
        await self.storage.write_durable(Keys.PRODUCTS, [record])
        catalog = Catalog(self.storage)
        await catalog.load()
        cart = Cart(self.storage, catalog)
        await cart.load()

        await cart.add(5)
        self.assertEqual(catalog.get(5).stock, 2)

    async def test_mistyped_cart_lines_load_empty(self):
        line = self.catalog.get(5).to_record()
        line["id"] = "five"
        await self.storage.write_session(Keys.CART, [line])
        await self.cart.load()
        self.assertEqual(self.cart.lines, ())


if __name__ == "__main__":
    unittest.main()
