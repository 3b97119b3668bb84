from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal, Optional

from db.accounts import AccountBook, OwnerGate, SignUpForm
from db.cart import Cart
from db.catalog import Catalog
from db.models import Account, Order, PaymentMethod, Product
from db.orders import OrderLedger
from db.storage import Storage
from utils.config import Settings
from utils.errors import EmptyCartError, InvalidTransitionError, NotSignedInError
from utils.logger import get_logger

_logger = get_logger(__name__)


class View(str, Enum):
    HOME = "home"
    SHOP = "shop"
    CART = "cart"
    OWNER = "owner"
    CHECKOUT = "checkout"
    AWAITING_AUTH = "awaiting_auth"
    ORDERS = "orders"


Flow = Literal["browsing", "cart", "awaitingAuth", "checkout"]


class StoreState:
    """
    Centralized application state shared by screens.

    Owns the models (catalog, cart, accounts, ledger), the owner gate and the
    current view. Screens call the methods here and re-render afterwards; no
    screen talks to storage directly.

    Fields:
      - view: the screen being shown
      - auth_mode: which tab the sign-up/log-in modal opens on
      - last_order: the order just placed, until the shopper moves on
    """

    def __init__(self, settings: Settings, storage: Optional[Storage] = None):
        self.settings = settings
        self.storage = storage or Storage(settings.db_path)
        self.catalog = Catalog(
            self.storage,
            seed_size=settings.seed_size,
            legacy_ids=settings.legacy_product_ids,
        )
        self.cart = Cart(self.storage, self.catalog)
        self.accounts = AccountBook(self.storage)
        self.ledger = OrderLedger(self.storage)
        self.owner = OwnerGate(settings.owner_passphrase)

        self.view: View = View.HOME
        self.auth_mode: Literal["signup", "login"] = "signup"
        self.last_order: Optional[Order] = None

    async def start(self, fresh_process: bool = True) -> None:
        """
        Load everything from storage. A fresh process forgets the session
        scope first; a reload keeps it.
        """
        if fresh_process:
            await self.storage.clear_session_scope()
        await self.catalog.load()
        await self.cart.load()
        await self.ledger.load()
        await self.accounts.restore()
        self.view = View.HOME
        _logger.debug(
            f"State ready: {len(self.catalog)} products, {len(self.cart)} in cart, "
            f"{'signed in' if self.accounts.is_authenticated else 'anonymous'}."
        )

    def stop(self) -> None:
        """Drop work still tied to this state, so it cannot write after a reload."""
        cancelled = self.catalog.cancel_pending_images()
        if cancelled:
            _logger.info(f"Cancelled {cancelled} pending image upload(s).")

    # ---------------------------
    # Views & flow
    # ---------------------------

    @property
    def user(self) -> Optional[Account]:
        return self.accounts.current

    @property
    def flow(self) -> Flow:
        if self.view is View.CART:
            return "cart"
        if self.view is View.AWAITING_AUTH:
            return "awaitingAuth"
        if self.view is View.CHECKOUT:
            return "checkout"
        return "browsing"

    @property
    def order_complete(self) -> bool:
        """True right after an order is placed, until the shopper leaves home."""
        return self.view is View.HOME and self.last_order is not None

    def show(self, view: View | str) -> View:
        view = View(view)
        if view is not View.HOME:
            self.last_order = None
        self.view = view
        return view

    def confirm(self) -> View:
        """Move on from the cart: straight to checkout, or via sign-up/log-in."""
        if not len(self.cart):
            raise EmptyCartError()
        if not self.accounts.is_authenticated:
            self.auth_mode = "signup"
            return self.show(View.AWAITING_AUTH)
        return self.show(View.CHECKOUT)

    def _after_auth(self) -> None:
        if self.view is View.AWAITING_AUTH:
            self.show(View.CHECKOUT)

    async def sign_up(self, form: SignUpForm, remember: bool) -> Account:
        account = await self.accounts.sign_up(form, remember)
        self._after_auth()
        return account

    async def log_in(self, email: str, password: str, remember: bool) -> Account:
        account = await self.accounts.log_in(email, password, remember)
        self._after_auth()
        return account

    async def place_order(
        self, method: PaymentMethod, when: Optional[datetime] = None
    ) -> Order:
        if self.view is not View.CHECKOUT:
            raise InvalidTransitionError()
        if self.user is None:
            raise NotSignedInError()
        if not len(self.cart):
            raise EmptyCartError()

        order = await self.ledger.place(
            self.user, self.cart.lines, self.cart.total(), method, when
        )
        await self.cart.clear()
        self.show(View.HOME)
        self.last_order = order
        return order

    def enter_owner(self, passphrase: str) -> bool:
        return self.owner.enter(passphrase)

    # ---------------------------
    # Cart & catalog pass-throughs
    # ---------------------------

    async def add_to_cart(self, product_id: int) -> Product:
        return await self.cart.add(product_id)

    async def remove_from_cart(self, index: int) -> Product:
        return await self.cart.remove(index)

    async def clear_cart(self) -> None:
        await self.cart.clear()

    async def edit_product(self, product_id: int, field: str, value) -> bool:
        return await self.catalog.edit_field(product_id, field, value)

    async def add_product(self) -> Product:
        return await self.catalog.add_product()

    def upload_image(self, product_id: int, path: str):
        return self.catalog.set_image(product_id, path)
