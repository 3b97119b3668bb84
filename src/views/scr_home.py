from textual import on
from textual.app import ComposeResult
from textual.containers import Center, Vertical
from textual.widgets import Button, Label, Markdown

from utils.messages import ViewRequestedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen

WELCOME = """\
# Atelier

*The beauty of the unusual:* elegant, formal handmade jewelry.
"""


class HomeScreen(BaseScreen):
    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-home"):
            yield Markdown(WELCOME, id="md-welcome")
            yield Label("", id="label-last-order")
            with Center():
                yield Button("Explore Collection", id="btn-explore", variant="primary")

    async def refresh_view(self) -> None:
        await super().refresh_view()
        state = self.app.state
        label = self.query_one("#label-last-order", Label)
        if not state.order_complete:
            label.update("")
            label.add_class("hidden")
            return
        order = state.last_order
        label.update(
            f"Order #{order.id} placed ({order.method}). "
            f"Total: {format_price(order.total)}. Thank you!"
        )
        label.remove_class("hidden")

    @on(Button.Pressed, "#btn-explore")
    def handle_explore(self) -> None:
        self.post_message(ViewRequestedMessage("shop"))
