from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer

from db.models import Product
from utils.errors import StoreError
from utils.pure import describe_image, format_price, generate_markdown_table
from views.modal_dialog import ErrorNoticeModal


def product_markdown(product: Product) -> str:
    rows = [
        ["ID", product.id],
        ["Name", product.name],
        ["Description", product.description],
        ["Price", format_price(product.price)],
        ["Stock", product.stock],
        ["Image", describe_image(product.image)],
    ]
    table = generate_markdown_table(["Attribute", "Value"], rows, ["l", "l"])
    return f"### {product.name}\n\n" + table


class ProdDetailModal(ModalScreen[bool]):
    """
    Product detail with an Add to Cart button.
    Will return true if the cart changed, false if not
    """

    BINDINGS = [Binding("escape", "close", "Close", show=False)]

    def __init__(self, product: Product) -> None:
        super().__init__()
        self._product = product

    def compose(self) -> ComposeResult:
        with Vertical(id="div-prod-detail"):
            yield MarkdownViewer(
                product_markdown(self._product), show_table_of_contents=False
            )
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Add to Cart", id="btn-addcart", variant="primary")

    def on_mount(self):
        order_btn = self.query_one("#btn-addcart", Button)
        if self._product.stock < 1:
            order_btn.label = "Out of stock"
            order_btn.disabled = True
            order_btn.variant = "warning"
            self.query_one("#btn-quit").focus()
        else:
            order_btn.focus()

    @on(Button.Pressed, "#btn-quit")
    def action_close(self):
        self.dismiss(False)

    @on(Button.Pressed, "#btn-addcart")
    @work(exclusive=True)
    async def handle_addcart(self):
        try:
            await self.app.state.add_to_cart(self._product.id)
        except StoreError as err:
            await self.app.push_screen_wait(ErrorNoticeModal(err))
            self.dismiss(False)
            return

        self.app.notify(f"{self._product.name} added to cart.")
        self.dismiss(True)
