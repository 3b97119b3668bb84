from typing import Literal

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Checkbox, Input, Label, TabbedContent, TabPane

from db.accounts import SignUpForm
from utils.errors import StoreError
from views.modal_dialog import ErrorNoticeModal


class AuthModal(ModalScreen[bool]):
    """
    Sign-up and log-in forms in one overlay.
    Dismisses True once the shopper is signed in, False if closed.
    """

    BINDINGS = [Binding("escape", "close", "Close", show=False)]

    def __init__(self, mode: Literal["signup", "login"] = "signup"):
        super().__init__()
        self.mode = mode

    def compose(self) -> ComposeResult:
        with Vertical(id="div-auth"):
            with TabbedContent(initial=f"tab-{self.mode}", id="tabs-auth"):
                with TabPane("Create account", id="tab-signup"):
                    with Vertical(id="div-reg"):
                        yield Input(placeholder="Full name", id="input-reg-name")
                        yield Input(placeholder="Address", id="input-reg-address")
                        yield Input(placeholder="Phone number", id="input-reg-phone")
                        yield Input(placeholder="Email", id="input-reg-email")
                        yield Input(
                            placeholder="Password", password=True, id="input-reg-pwd"
                        )
                        with Container(classes="div-auth-btns"):
                            yield Button(
                                "Create account", id="btn-reg", variant="primary"
                            )

                with TabPane("Log in", id="tab-login"):
                    with Vertical(id="div-login"):
                        yield Input(placeholder="Email", id="input-login-email")
                        yield Input(
                            placeholder="Password", password=True, id="input-login-pwd"
                        )
                        with Container(classes="div-auth-btns"):
                            yield Button("Log in", id="btn-login", variant="primary")

            with Horizontal(id="div-auth-footer"):
                yield Checkbox(
                    "Remember me forever",
                    value=self.app.state.accounts.remembered,
                    id="chk-remember",
                )
                yield Button("Close", id="btn-close")

    def on_mount(self):
        first = "#input-reg-name" if self.mode == "signup" else "#input-login-email"
        self.query_one(first).focus()

    def _value(self, selector: str) -> str:
        return self.query_one(selector, Input).value

    @property
    def remember(self) -> bool:
        return self.query_one("#chk-remember", Checkbox).value

    @on(Checkbox.Changed, "#chk-remember")
    async def handle_remember_changed(self, event: Checkbox.Changed) -> None:
        # unticking forgets the stored flag right away, not only on submit
        if not event.value:
            await self.app.state.accounts.set_remember(False)

    @on(Button.Pressed, "#btn-reg")
    @on(Input.Submitted, "#input-reg-pwd")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        form = SignUpForm(
            name=self._value("#input-reg-name"),
            email=self._value("#input-reg-email"),
            phone=self._value("#input-reg-phone"),
            address=self._value("#input-reg-address"),
            password=self._value("#input-reg-pwd"),
        ).cleaned()
        if not form.is_complete:
            self.notify("Make sure all inputs are filled.", severity="error")
            return

        try:
            account = await self.app.state.sign_up(form, self.remember)
        except StoreError as err:
            await self.app.push_screen_wait(ErrorNoticeModal(err))
            self.query_one("#input-reg-email", Input).focus()
            return

        self.app.notify(f"Account created, you are now logged in as {account.name}.")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-login")
    @on(Input.Submitted, "#input-login-pwd")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        email = self._value("#input-login-email").strip()
        pwd = self._value("#input-login-pwd")

        if not email or not pwd:
            self.notify("Email or password cannot be empty!", severity="error")
            return

        try:
            account = await self.app.state.log_in(email, pwd, self.remember)
        except StoreError as err:
            await self.app.push_screen_wait(ErrorNoticeModal(err))
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            return

        self.app.notify(f"Logged in, welcome back {account.name}!")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-close")
    def action_close(self) -> None:
        self.dismiss(False)
