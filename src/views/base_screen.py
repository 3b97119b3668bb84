from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.events import ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.messages import AuthRequestedMessage, ViewRequestedMessage
from utils.pure import generate_markdown_table
from views.modal_dialog import QuitDialogModal


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("Account", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        with Horizontal(id="div-auth-btns"):
            yield Button("Sign up", id="btn-signup", variant="primary")
            yield Button("Log in", id="btn-login")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def refresh_info(self) -> None:
        state = self.app.state
        user = state.user

        if user:
            rows = [["Name", user.name], ["Email", user.email], ["Phone", user.phone]]
        else:
            rows = [["Guest", "New? Make a new account!"]]
        await self.query_one("#md-userinfo", Markdown).update(
            generate_markdown_table(None, rows, ["l", "l"])
        )
        self.query_one("#div-auth-btns").set_class(user is not None, "hidden")

        labels = dict(self.app.MENU)
        labels["cart"] = f"Cart ({len(state.cart)})"
        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [ListItem(Label(v), id="menu-" + k) for k, v in labels.items()]
        )
        current = self.app.current_mode
        for i, key in enumerate(labels):
            if key == current:
                list_menu.index = i

    @on(ListView.Selected, "#list-menu")
    def handle_menu_selected(self, event: ListView.Selected) -> None:
        selected = event.item.id.removeprefix("menu-")
        if selected != self.app.current_mode:
            self.post_message(ViewRequestedMessage(selected))

    @on(Button.Pressed, "#btn-signup")
    def handle_signup(self) -> None:
        self.post_message(AuthRequestedMessage("signup"))

    @on(Button.Pressed, "#btn-login")
    def handle_login(self) -> None:
        self.post_message(AuthRequestedMessage("login"))


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.

    Subclasses render themselves in `refresh_view`, which runs whenever the
    screen comes back into view and after the app changes state under it.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = self.app.TITLE
        self.sub_title = header_sub_title
        for k, v in self.app.MODES.items():
            if isinstance(self, v) and not header_sub_title:
                self.sub_title = self.app.SUBTITLES.get(k, k.title())

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def refresh_view(self) -> None:
        if self._show_sidebar:
            await self.query_one(Sidebar).refresh_info()

    @on(ScreenResume)
    def handle_screen_resume(self) -> None:
        self.reload_view()

    @work(exclusive=True, group="view")
    async def reload_view(self) -> None:
        await self.refresh_view()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
