from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, HorizontalGroup, VerticalScroll
from textual.widgets import Button, Label, Rule

from db.models import Product
from utils.messages import CartChangedMessage, ConfirmRequestedMessage, ViewRequestedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal


class CartLineWidget(HorizontalGroup):
    """One unit in the cart; duplicates of a product show as separate lines."""

    def __init__(self, index: int, line: Product):
        super().__init__(classes="cart-line")
        self.index = index
        self.line = line

    def compose(self):
        yield Label(self.line.name, classes="label-line-name")
        yield Label(format_price(self.line.price), classes="label-line-price")
        yield Label("Qty 1", classes="label-line-qty")
        yield Button("Remove", classes="btn-line-remove", variant="error")

    @on(Button.Pressed, ".btn-line-remove")
    @work()
    async def handle_remove_line(self):
        try:
            await self.app.state.remove_from_cart(self.index)
        except IndexError:
            # the cart changed underneath this widget; redraw it
            self.notify("That item is no longer in the cart.", severity="warning")
        else:
            self.notify(f"{self.line.name} removed from cart.")
        self.post_message(CartChangedMessage())


class CartScreen(BaseScreen):
    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Label("Your Cart", id="label-cart-title")
        yield VerticalScroll(id="vertscroll-content")
        yield Label("Total: ₹0", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Continue Shopping", id="btn-continue")
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Confirm", id="btn-confirm", variant="primary")

    async def refresh_view(self) -> None:
        await super().refresh_view()
        cart = self.app.state.cart

        content = self.query_one("#vertscroll-content")
        await content.remove_children()
        await content.mount_all(
            [CartLineWidget(i, line) for i, line in enumerate(cart.lines)]
        )
        if not len(cart):
            await content.mount(Label("Your cart is empty.", id="label-empty"))
            content.add_class("no-items")
        else:
            content.remove_class("no-items")

        self.query_one("#label-cart-total", Label).update(
            f"Total: {format_price(cart.total())}"
        )
        self.query_one("#btn-confirm", Button).disabled = not len(cart)
        self.query_one("#btn-clear-cart", Button).disabled = not len(cart)

    @on(CartChangedMessage)
    def handle_cart_change(self, message: CartChangedMessage) -> None:
        message.stop()
        self.reload_view()

    @on(Button.Pressed, "#btn-continue")
    def handle_continue(self) -> None:
        self.post_message(ViewRequestedMessage("shop"))

    @on(Button.Pressed, "#btn-clear-cart")
    @work(exclusive=True, group="cart")
    async def handle_clear_cart(self) -> None:
        if not len(self.app.state.cart):
            self.app.notify("Cart is empty.", severity="warning")
            return

        remove_confirmed = await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        )
        if remove_confirmed:
            await self.app.state.clear_cart()
            self.reload_view()

    @on(Button.Pressed, "#btn-confirm")
    def handle_confirm(self) -> None:
        self.post_message(ConfirmRequestedMessage())
