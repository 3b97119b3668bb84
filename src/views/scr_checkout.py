from collections import Counter

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label, MarkdownViewer

from db.models import PaymentMethod
from utils.errors import StoreError
from utils.messages import ViewRequestedMessage
from utils.pure import format_price, generate_markdown_table, parse_price
from views.base_screen import BaseScreen
from views.modal_dialog import ErrorNoticeModal, SimpleDialogModal


class CheckoutScreen(BaseScreen):
    """
    Order summary for the signed-in shopper plus the payment choice.
    Either payment button places the order straight away.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-checkout"):
            yield MarkdownViewer("", id="md-checkout", show_table_of_contents=False)
            yield Label("Choose payment:")
            with Horizontal(id="hort-buttons"):
                yield Button("Back to Cart", id="btn-back")
                yield Button("Cash on Delivery", id="btn-pay-cash")
                yield Button("Pay with Razorpay", id="btn-pay-gateway", variant="primary")

    def summary_markdown(self) -> str:
        state = self.app.state
        user = state.user
        lines = state.cart.lines

        counts = Counter((p.id, p.name, p.price) for p in lines)
        rows = [
            [name, format_price(price), qty, format_price(parse_price(price) * qty)]
            for (_, name, price), qty in counts.items()
        ]
        md = (
            "### Checkout\n\n"
            f"Shipping to: **{user.name if user else '-'}**  \n"
            f"Address: {user.address if user else '-'}  \n"
            f"Phone: **{user.phone if user else '-'}**\n\n"
        )
        if rows:
            md += generate_markdown_table(
                ["Piece", "Unit Price", "Quantity", "Total Price"],
                rows,
                ["l", "r", "c", "r"],
            )
        md += f"\n\n**Total:** {format_price(state.cart.total())}"
        return md

    async def refresh_view(self) -> None:
        await super().refresh_view()
        await self.query_one("#md-checkout", MarkdownViewer).document.update(
            self.summary_markdown()
        )

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.post_message(ViewRequestedMessage("cart"))

    @on(Button.Pressed, "#btn-pay-cash")
    def handle_pay_cash(self) -> None:
        self.place_order(PaymentMethod.CASH_ON_DELIVERY)

    @on(Button.Pressed, "#btn-pay-gateway")
    def handle_pay_gateway(self) -> None:
        self.place_order(PaymentMethod.SIMULATED_GATEWAY)

    @work(exclusive=True, group="checkout")
    async def place_order(self, method: PaymentMethod) -> None:
        try:
            order = await self.app.state.place_order(method)
        except StoreError as err:
            await self.app.push_screen_wait(ErrorNoticeModal(err))
            return

        await self.app.push_screen_wait(
            SimpleDialogModal(
                f"Order placed! Method: {order.method}. "
                f"Total: {format_price(order.total)}",
                tone="positive",
            )
        )
        await self.app.show_view(self.app.state.view)
