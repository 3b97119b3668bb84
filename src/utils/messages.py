from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired whenever a line is added, removed or the cart is cleared.
    Refreshes the cart screen and the cart count in the sidebar.

    If posted from outside CartScreen, make sure to post at App level
    """

    bubble = True


class ViewRequestedMessage(Message):
    """
    Ask the app to move to another view; the app validates it against the
    state and switches mode. Must reach the app, so post it from app level.
    """

    bubble = True

    def __init__(self, view: str) -> None:
        super().__init__()
        self.view = view


class ConfirmRequestedMessage(Message):
    """
    Posted by the cart screen's Confirm button
    """

    bubble = True


class AuthRequestedMessage(Message):
    """
    Open the sign-up / log-in modal on the given tab
    """

    bubble = True

    def __init__(self, mode: str = "signup") -> None:
        super().__init__()
        self.mode = mode
