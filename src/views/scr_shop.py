from typing import List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Input, Label

from db.models import Product
from utils.errors import StoreError
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_dialog import ErrorNoticeModal
from views.modal_prod_detail import ProdDetailModal


class ShopScreen(BaseScreen):
    """
    Browse and search the catalog. Enter opens a product, `a` adds the
    highlighted one straight to the cart.
    """

    BINDINGS = [
        Binding("a", "add_to_cart", "Add to Cart", show=True),
    ]

    def __init__(self):
        super().__init__()
        self._results: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Input(id="input-search", placeholder="Search by name, description or id...")
        yield DataTable(id="table-products")
        yield Label("", id="label-result-cnt")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Description", "Price", "Stock")
        self.query_one("#input-search").focus()

    async def refresh_view(self) -> None:
        await super().refresh_view()
        self.render_results()

    @on(Input.Changed, "#input-search")
    def handle_search_changed(self) -> None:
        self.render_results()

    def render_results(self) -> None:
        query = self.query_one("#input-search", Input).value
        self._results = self.app.state.catalog.search(query)

        table = self.query_one(DataTable)
        cursor_row = table.cursor_row
        table.clear()
        # keyed by position, product ids are not guaranteed unique
        for i, p in enumerate(self._results):
            stock = p.stock if p.stock > 0 else "Out of stock"
            table.add_row(
                p.id, p.name, p.description, format_price(p.price), stock, key=str(i)
            )
        if self._results:
            table.move_cursor(row=min(cursor_row, len(self._results) - 1))

        total = len(self.app.state.catalog)
        self.query_one("#label-result-cnt", Label).update(
            f"{len(self._results)} of {total} pieces"
        )

    def _highlighted(self) -> Product | None:
        table = self.query_one(DataTable)
        if not self._results or table.cursor_row is None:
            return None
        if 0 <= table.cursor_row < len(self._results):
            return self._results[table.cursor_row]
        return None

    @on(DataTable.RowSelected, "#table-products")
    @work(exclusive=True, group="shop")
    async def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        product = self._results[int(event.row_key.value)]
        if await self.app.push_screen_wait(ProdDetailModal(product)):
            await self.refresh_view()

    @work(exclusive=True, group="shop")
    async def action_add_to_cart(self) -> None:
        product = self._highlighted()
        if product is None:
            return
        try:
            await self.app.state.add_to_cart(product.id)
        except StoreError as err:
            await self.app.push_screen_wait(ErrorNoticeModal(err))
            return
        self.notify(f"{product.name} added to cart.")
        await self.refresh_view()
