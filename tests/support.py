import os
import sys
import tempfile
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from db.accounts import SignUpForm  # noqa: E402
from db.storage import Storage  # noqa: E402
from utils.config import Settings  # noqa: E402
from utils.state import StoreState  # noqa: E402


def make_form(email="asha@example.com", password="pw", name="Asha"):
    return SignUpForm(
        name=name,
        email=email,
        phone="9876543210",
        address="12 MG Road, Pune",
        password=password,
    )


class StoreTestCase(unittest.IsolatedAsyncioTestCase):
    """Points a fresh Storage at a temporary sqlite file for every test."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "store.sqlite")
        self.storage = Storage(self.db_path)
        self.settings = Settings(db_path=self.db_path)

    def tearDown(self):
        self.temp_dir.cleanup()

    async def new_state(self, fresh_process=True, **overrides) -> StoreState:
        """A StoreState over the same file, as if the app was (re)started."""
        settings = Settings(db_path=self.db_path, **overrides)
        state = StoreState(settings, Storage(self.db_path))
        await state.start(fresh_process=fresh_process)
        return state
