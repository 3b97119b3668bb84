# manages connection to the local store file, helpers internal to db package
import os
from contextlib import asynccontextmanager
from pathlib import Path
from sqlite3 import Row
from typing import Optional

import aiosqlite

from utils.config import DB_PATH
from utils.logger import get_logger

_logger = get_logger(__name__)

DB_INIT_SCRIPTS = [Path(__file__).with_name("tables.sql")]

_initialized: set[str] = set()


async def _init_db(conn: aiosqlite.Connection) -> None:
    for script in DB_INIT_SCRIPTS:
        if not script.exists() or script.stat().st_size == 0:
            continue
        _logger.debug(f"Running init script {script.name}...")
        await conn.executescript(script.read_text())
    await conn.commit()


@asynccontextmanager
async def connect(db_path: Optional[str] = None) -> aiosqlite.Connection:
    """Async context manager yielding an aiosqlite connection to the store.

    Creates the parent directory and the records table on first use of a path.
    """
    path = db_path or DB_PATH
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    conn = await aiosqlite.connect(path)
    conn.row_factory = Row
    try:
        if path not in _initialized:
            _logger.info(f"Initializing store at {path}...")
            await _init_db(conn)
            _initialized.add(path)
        yield conn
    finally:
        await conn.close()
