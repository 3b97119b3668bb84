# key/value records in two scopes: durable (survives restarts) and session
# (cleared at every process start, survives in-process reloads)
from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from db.database import connect
from utils.logger import get_logger

_logger = get_logger(__name__)

DURABLE = "durable"
SESSION = "session"


class Keys:
    PRODUCTS = "products_v1"
    USERS = "users_v1"
    CURRENT_USER = "current_user_v1"
    REMEMBER = "remember_me_v1"
    ORDERS = "orders_v1"
    CART = "cart_v1"


class Storage:
    """
    Persistent store adapter. Every model receives one of these instead of
    reaching for a path or a key on its own.

    Reads never raise on bad data: an absent row, a row in the other scope or
    text that is not valid JSON all come back as `default`.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    async def _read(self, scope: str, key: str, default: Any) -> Any:
        async with connect(self.db_path) as conn:
            cur = await conn.execute(
                "SELECT value FROM records WHERE key = ? AND scope = ?;",
                (key, scope),
            )
            row = await cur.fetchone()
            await cur.close()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except (TypeError, ValueError):
            _logger.warning(f"Discarding malformed {scope} record '{key}'.")
            return default

    async def _write(self, scope: str, key: str, value: Any) -> None:
        text = json.dumps(value)
        async with connect(self.db_path) as conn:
            await conn.execute(
                """
                INSERT INTO records(key, scope, value, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    scope = excluded.scope,
                    value = excluded.value,
                    updated_at = excluded.updated_at;
                """,
                (key, scope, text, datetime.now().isoformat()),
            )
            await conn.commit()

    async def read_durable(self, key: str, default: Any = None) -> Any:
        return await self._read(DURABLE, key, default)

    async def write_durable(self, key: str, value: Any) -> None:
        await self._write(DURABLE, key, value)

    async def read_session(self, key: str, default: Any = None) -> Any:
        return await self._read(SESSION, key, default)

    async def write_session(self, key: str, value: Any) -> None:
        await self._write(SESSION, key, value)

    async def remove(self, key: str) -> None:
        """Drop a record from whichever scope holds it."""
        async with connect(self.db_path) as conn:
            await conn.execute("DELETE FROM records WHERE key = ?;", (key,))
            await conn.commit()

    async def clear_session_scope(self) -> None:
        async with connect(self.db_path) as conn:
            cur = await conn.execute(
                "DELETE FROM records WHERE scope = ?;", (SESSION,)
            )
            if cur.rowcount:
                _logger.debug(f"Cleared {cur.rowcount} session record(s).")
            await cur.close()
            await conn.commit()
