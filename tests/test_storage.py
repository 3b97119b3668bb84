import unittest

from support import StoreTestCase

from db.database import connect
from db.storage import Keys


class StorageTestCase(StoreTestCase):
    async def test_absent_records_return_default(self):
        self.assertIsNone(await self.storage.read_durable(Keys.CURRENT_USER))
        self.assertEqual(await self.storage.read_durable(Keys.USERS, []), [])
        self.assertEqual(await self.storage.read_session(Keys.CART, []), [])

    async def test_round_trip_in_each_scope(self):
        await self.storage.write_durable(Keys.USERS, [{"email": "a@b.c"}])
        await self.storage.write_session(Keys.CART, [{"id": 1}])
        self.assertEqual(
            await self.storage.read_durable(Keys.USERS), [{"email": "a@b.c"}]
        )
        self.assertEqual(await self.storage.read_session(Keys.CART), [{"id": 1}])

    async def test_key_lives_in_one_scope_only(self):
        await self.storage.write_durable(Keys.CURRENT_USER, {"id": 1})
        await self.storage.write_session(Keys.CURRENT_USER, {"id": 2})
        self.assertIsNone(await self.storage.read_durable(Keys.CURRENT_USER))
        self.assertEqual(await self.storage.read_session(Keys.CURRENT_USER), {"id": 2})

        async with connect(self.db_path) as conn:
            cur = await conn.execute(
                "SELECT COUNT(*) FROM records WHERE key = ?;", (Keys.CURRENT_USER,)
            )
            self.assertEqual((await cur.fetchone())[0], 1)
            await cur.close()

    async def test_malformed_record_returns_default(self):
        async with connect(self.db_path) as conn:
            await conn.execute(
                "INSERT INTO records(key, scope, value, updated_at) VALUES (?, 'durable', ?, '');",
                (Keys.ORDERS, "{not json"),
            )
            await conn.commit()
        self.assertEqual(await self.storage.read_durable(Keys.ORDERS, []), [])

    async def test_remove_and_clear_session_scope(self):
        await self.storage.write_durable(Keys.REMEMBER, "1")
        await self.storage.write_session(Keys.CART, [{"id": 3}])

        await self.storage.clear_session_scope()
        self.assertEqual(await self.storage.read_session(Keys.CART, []), [])
        self.assertEqual(await self.storage.read_durable(Keys.REMEMBER), "1")

        await self.storage.remove(Keys.REMEMBER)
        self.assertIsNone(await self.storage.read_durable(Keys.REMEMBER))


if __name__ == "__main__":
    unittest.main()
