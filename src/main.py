from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from utils.config import Settings, load_settings
from utils.errors import StoreError
from utils.logger import configure_logging, get_logger
from utils.messages import (
    AuthRequestedMessage,
    ConfirmRequestedMessage,
    QuitRequestedMessage,
    ViewRequestedMessage,
)
from utils.state import StoreState, View
from views.base_screen import BaseScreen
from views.modal_auth import AuthModal
from views.modal_dialog import ErrorNoticeModal
from views.scr_awaiting_auth import AwaitingAuthScreen
from views.scr_cart import CartScreen
from views.scr_checkout import CheckoutScreen
from views.scr_home import HomeScreen
from views.scr_owner import OwnerScreen
from views.scr_past_orders import PastOrdersScreen
from views.scr_shop import ShopScreen

_logger = get_logger("app")


class AtelierApp(App):
    TITLE = "Atelier"

    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    MODES = {
        View.HOME.value: HomeScreen,
        View.SHOP.value: ShopScreen,
        View.CART.value: CartScreen,
        View.OWNER.value: OwnerScreen,
        View.CHECKOUT.value: CheckoutScreen,
        View.AWAITING_AUTH.value: AwaitingAuthScreen,
        View.ORDERS.value: PastOrdersScreen,
    }

    # views reachable from the sidebar, in menu order
    MENU = {
        View.HOME.value: "Home",
        View.SHOP.value: "Shop",
        View.CART.value: "Cart",
        View.OWNER.value: "Owner's",
        View.ORDERS.value: "Past Orders",
    }
    SUBTITLES = {
        **MENU,
        View.CHECKOUT.value: "Checkout",
        View.AWAITING_AUTH.value: "Almost there",
    }

    CSS_PATH = "views/styles/atelier.tcss"

    state: StoreState

    def __init__(self, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or load_settings()
        configure_logging(self.settings.debug, self.settings.log_file)
        self.state = StoreState(self.settings)

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.load_state(fresh_process=True)

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    def action_reload(self) -> None:
        # like a browser reload: durable and session records survive,
        # transient state such as the owner gate does not
        self.state.stop()
        self.state = StoreState(self.settings, self.state.storage)
        self.load_state(fresh_process=False)

    @work(exclusive=True, group="state")
    async def load_state(self, fresh_process: bool) -> None:
        await self.state.start(fresh_process=fresh_process)
        _logger.info(
            f"Store ready ({'fresh start' if fresh_process else 'reload'})."
        )
        await self.show_view(self.state.view)

    async def show_view(self, view: View) -> None:
        """Bring the mode for `view` to the front, re-rendering it if already there."""
        if self.current_mode == view.value:
            if isinstance(self.screen, BaseScreen):
                await self.screen.refresh_view()
            return
        await self.switch_mode(view.value)

    async def show_error(self, error: StoreError) -> None:
        _logger.debug(f"{type(error).__name__}: {error.message}")
        await self.push_screen_wait(ErrorNoticeModal(error))

    @on(ViewRequestedMessage)
    @work(exclusive=True, group="view")
    async def handle_view_request(self, message: ViewRequestedMessage) -> None:
        await self.show_view(self.state.show(message.view))

    @on(ConfirmRequestedMessage)
    @work(exclusive=True, group="flow")
    async def handle_confirm(self) -> None:
        try:
            view = self.state.confirm()
        except StoreError as err:
            await self.show_error(err)
            return
        await self.show_view(view)
        if view is View.AWAITING_AUTH:
            await self.open_auth(self.state.auth_mode)

    @on(AuthRequestedMessage)
    @work(exclusive=True, group="flow")
    async def handle_auth_request(self, message: AuthRequestedMessage) -> None:
        await self.open_auth(message.mode)

    async def open_auth(self, mode: str) -> None:
        """Show the sign-up / log-in modal; must run inside a worker."""
        self.state.auth_mode = mode
        if await self.push_screen_wait(AuthModal(mode)):
            await self.show_view(self.state.view)

    @on(QuitRequestedMessage)
    def handle_quit(self) -> None:
        self.exit()


def main() -> None:
    app = AtelierApp()
    app.run()


if __name__ == "__main__":
    main()
