from collections import Counter
from datetime import datetime
from math import ceil
from typing import List

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import Button, DataTable, Label, MarkdownViewer

from db.models import Order
from utils.pure import format_price, generate_markdown_table
from views.base_screen import BaseScreen

PAGE_SIZE = 5


def _when(order: Order) -> str:
    try:
        return datetime.fromisoformat(order.created_at).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return order.created_at


class PastOrdersScreen(BaseScreen):
    """
    Signed-in shoppers browse their orders, newest first, 5 per page.

    Layout:
    - Markdown detail view at the top, showing the highlighted order.
    - Orders table below with Prev/Next.
    """

    BINDINGS = [
        Binding("p", "prev_page", "Prev Page", show=True),
        Binding("n", "next_page", "Next Page", show=True),
    ]

    page_idx = reactive(1)
    page_cnt = reactive(1)

    def __init__(self) -> None:
        super().__init__()
        self._orders: List[Order] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("<", id="btn-prev")
            yield Label("1 / 1", id="label-page")
            yield Button(">", id="btn-next")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order No", "Date", "Payment", "Items", "Total")

    async def refresh_view(self) -> None:
        await super().refresh_view()
        await self._load_orders()

    def watch_page_idx(self, old: int, new: int) -> None:
        if self.is_mounted and old != new:
            self.reload_view()

    async def _load_orders(self) -> None:
        state = self.app.state
        table = self.query_one(DataTable)
        table.clear()

        if state.user is None:
            self._orders = []
            self.page_cnt = 1
            self._refresh_controls()
            await self._render_detail(None, "Log in to see your past orders.")
            return

        orders, total = state.ledger.list_for(state.user.id, self.page_idx, PAGE_SIZE)
        self.page_cnt = max(ceil(total / PAGE_SIZE), 1)
        if self.page_idx > self.page_cnt:
            self.page_idx = self.page_cnt
            return

        for i, o in enumerate(orders):
            table.add_row(
                o.id, _when(o), o.method, len(o.items), format_price(o.total), key=str(i)
            )
        self._orders = orders
        self._refresh_controls()
        if orders:
            table.move_cursor(row=0)
            await self._render_detail(orders[0])
        else:
            await self._render_detail(None, "No orders yet.")

    def _refresh_controls(self) -> None:
        self.query_one("#btn-prev", Button).disabled = self.page_idx <= 1
        self.query_one("#btn-next", Button).disabled = self.page_idx >= self.page_cnt
        self.query_one("#label-page", Label).update(f"{self.page_idx} / {self.page_cnt}")

    @on(DataTable.RowHighlighted, "#table-orders")
    async def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        index = int(event.row_key.value)
        if index < len(self._orders):
            await self._render_detail(self._orders[index])

    @on(Button.Pressed, "#btn-prev")
    def action_prev_page(self) -> None:
        if self.page_idx > 1:
            self.page_idx -= 1

    @on(Button.Pressed, "#btn-next")
    def action_next_page(self) -> None:
        if self.page_idx < self.page_cnt:
            self.page_idx += 1

    async def _render_detail(self, order: Order | None, placeholder: str = "") -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            await viewer.document.update(f"### {placeholder}")
            return

        counts = Counter((p.name, p.price) for p in order.items)
        rows = [[name, format_price(price), qty] for (name, price), qty in counts.items()]
        header = (
            f"### Order #{order.id}\n"
            f"Date: {_when(order)}  \n"
            f"Payment: {order.method}  \n"
            f"Ship To: {order.user.name}, {order.user.address}\n\n"
        )
        table = generate_markdown_table(["Piece", "Price", "Qty"], rows, ["l", "r", "c"])
        footer = f"\n\n**Grand Total:** {format_price(order.total)}"
        await viewer.document.update(header + table + footer)
