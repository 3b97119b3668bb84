from __future__ import annotations

import asyncio
import os
from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.validation import Number
from textual.widgets import Button, DataTable, Input, Label

from db.models import Product
from utils.errors import StoreError
from utils.logger import get_logger
from utils.pure import describe_image
from views.base_screen import BaseScreen
from views.modal_dialog import ErrorNoticeModal

_logger = get_logger(__name__)

EDITABLE = ("name", "description", "price", "stock")


class OwnerScreen(BaseScreen):
    """
    Owner's access: a passphrase gate, then a dashboard to edit products,
    restock, add new pieces and upload images.
    """

    current_pid: Optional[int] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-gate"):
            yield Label("Owner's access", id="label-gate")
            yield Input(placeholder="Owner password", password=True, id="input-owner-pwd")
            yield Button("Enter", id="btn-owner-enter", variant="primary")

        with Vertical(id="div-dashboard"):
            with Horizontal(id="hort-dashboard-top"):
                yield Label("Owner Dashboard", id="label-dashboard")
                yield Button("+ Add Product", id="btn-add-product", variant="success")
            yield DataTable(id="table-owner-products")
            with Horizontal(id="hort-editor"):
                with Vertical():
                    yield Label("Name")
                    yield Input(id="input-name")
                    yield Label("Description")
                    yield Input(id="input-description")
                with Vertical():
                    yield Label("Price (₹)")
                    yield Input(id="input-price")
                    yield Label("Stock")
                    yield Input(
                        id="input-stock",
                        type="integer",
                        validators=[Number(minimum=0)],
                    )
                with Vertical():
                    yield Label("Image file", id="label-image")
                    yield Input(placeholder="/path/to/image.png", id="input-image")
                    with Horizontal(id="div-editor-btns"):
                        yield Button("Upload Image", id="btn-upload")
                        yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one("#table-owner-products", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Price", "Stock", "Image")

    async def refresh_view(self) -> None:
        await super().refresh_view()
        unlocked = self.app.state.owner.authenticated
        self.query_one("#div-gate").set_class(unlocked, "hidden")
        self.query_one("#div-dashboard").set_class(not unlocked, "hidden")
        if not unlocked:
            self.query_one("#input-owner-pwd").focus()
            return
        self.render_products()

    # ---------------------------
    # Gate
    # ---------------------------

    @on(Button.Pressed, "#btn-owner-enter")
    @on(Input.Submitted, "#input-owner-pwd")
    @work(exclusive=True, group="owner")
    async def handle_gate(self) -> None:
        pwd_input = self.query_one("#input-owner-pwd", Input)
        try:
            self.app.state.enter_owner(pwd_input.value)
        except StoreError as err:
            pwd_input.value = ""
            await self.app.push_screen_wait(ErrorNoticeModal(err))
            pwd_input.focus()
            return
        pwd_input.value = ""
        await self.refresh_view()

    # ---------------------------
    # Dashboard
    # ---------------------------

    def _products(self) -> tuple[Product, ...]:
        return self.app.state.catalog.products

    def render_products(self) -> None:
        table = self.query_one("#table-owner-products", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for i, p in enumerate(self._products()):
            table.add_row(
                p.id, p.name, p.price, p.stock, describe_image(p.image), key=str(i)
            )
        if self._products():
            table.move_cursor(row=min(cursor_row, len(self._products()) - 1))

    @on(DataTable.RowHighlighted, "#table-owner-products")
    def handle_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        products = self._products()
        index = int(event.row_key.value)
        if index >= len(products):
            return
        product = products[index]
        if product.id == self.current_pid:
            return
        self.current_pid = product.id
        for field in EDITABLE:
            self.query_one(f"#input-{field}", Input).value = str(getattr(product, field))
        self.query_one("#input-image", Input).value = ""

    @on(Button.Pressed, "#btn-add-product")
    async def handle_add_product(self) -> None:
        product = await self.app.state.add_product()
        self.current_pid = None
        self.render_products()
        self.query_one("#table-owner-products", DataTable).move_cursor(row=0)
        self.notify(f"Added {product.name}.")

    @on(Button.Pressed, "#btn-save")
    async def handle_save(self) -> None:
        state = self.app.state
        product = state.catalog.get(self.current_pid) if self.current_pid else None
        if product is None:
            self.notify("Select a product first.", severity="warning")
            return

        stock_input = self.query_one("#input-stock", Input)
        if not stock_input.is_valid:
            stock_input.focus()
            self.notify("Stock must be a whole number, 0 or more.", severity="error")
            return

        values = {f: self.query_one(f"#input-{f}", Input).value for f in EDITABLE}
        values["stock"] = int(values["stock"] or 0)

        changed = [f for f in EDITABLE if values[f] != getattr(product, f)]
        if not changed:
            self.notify("Nothing to update.", severity="warning")
            return
        for field in changed:
            await state.edit_product(product.id, field, values[field])
        self.notify(f"Updated {', '.join(changed)} of {product.name}.")
        self.render_products()

    @on(Button.Pressed, "#btn-upload")
    def handle_upload(self) -> None:
        path = self.query_one("#input-image", Input).value.strip()
        if self.current_pid is None:
            self.notify("Select a product first.", severity="warning")
            return
        if not path or not os.path.isfile(path):
            self.notify("Image file not found.", severity="error")
            return

        task = self.app.state.upload_image(self.current_pid, path)
        self.notify("Encoding image...")
        self.await_upload(self.current_pid, task)

    @work(group="uploads")
    async def await_upload(self, pid: int, task: asyncio.Task) -> None:
        try:
            stored = await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            _logger.debug(f"Upload for product {pid} superseded.")
            return
        except OSError as err:
            self.notify(f"Could not read image: {err}", severity="error")
            return

        if stored:
            self.notify(f"Image stored for product {pid}.")
        else:
            self.notify(f"Product {pid} no longer exists; image dropped.", severity="warning")
        if self.is_attached and self.app.state.owner.authenticated:
            self.render_products()
