class StoreError(Exception):
    """
    Base for every recoverable, user-facing failure.
    Screens show `message` in a blocking notice; nothing here is fatal.
    """

    message = "Something went wrong."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateEmailError(StoreError):
    message = "An account with this email already exists."


class InvalidCredentialsError(StoreError):
    message = "Invalid email or password."


class InvalidOwnerPassphraseError(StoreError):
    message = "Incorrect owner password."


class OutOfStockError(StoreError):
    message = "This piece is out of stock."


class EmptyCartError(StoreError):
    message = "Cart is empty."


class NotSignedInError(StoreError):
    message = "Sign up or log in to place an order."


class InvalidTransitionError(StoreError):
    message = "That action is not available right now."
