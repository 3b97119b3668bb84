from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label

from utils.messages import AuthRequestedMessage, ViewRequestedMessage
from views.base_screen import BaseScreen


class AwaitingAuthScreen(BaseScreen):
    """
    Shown after Confirm while nobody is signed in. Signing up or logging in
    from here carries straight on to checkout.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-awaiting"):
            yield Label(
                "Create an account or log in to finish your order.",
                id="label-awaiting",
            )
            with Horizontal(id="hort-buttons"):
                yield Button("Back to Cart", id="btn-back")
                yield Button("Log in", id="btn-await-login")
                yield Button("Make a new account", id="btn-await-signup", variant="primary")

    @on(Button.Pressed, "#btn-await-signup")
    def handle_signup(self) -> None:
        self.post_message(AuthRequestedMessage("signup"))

    @on(Button.Pressed, "#btn-await-login")
    def handle_login(self) -> None:
        self.post_message(AuthRequestedMessage("login"))

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.post_message(ViewRequestedMessage("cart"))
