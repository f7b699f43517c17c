# /bmi_ussd/utils/exceptions.py

from typing import Optional

# Error kinds raised while handling a keystroke. Each one maps to a single
# localized message key; SessionNavigator.handle is the only place they are
# turned into replies.


class UssdError(Exception):
    """Base class for errors raised inside the USSD dialog.

    Attributes:
        message: human-readable message for logs
        message_key: template key of the reply shown to the caller
        code: optional machine-readable error code
    """

    message_key = "ERROR"

    def __init__(self, message: str = "USSD error", code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return self.message


class ValidationError(UssdError):
    """A token failed the format or range check of the current screen.

    ``choice`` marks menu screens, which answer with INVALID_CHOICE instead of
    INVALID.
    """

    def __init__(self, message: str = "Invalid input", code: Optional[str] = None, choice: bool = False):
        super().__init__(message, code)
        self.choice = choice

    @property
    def message_key(self) -> str:
        return "INVALID_CHOICE" if self.choice else "INVALID"


class NavigationError(UssdError):
    """Back was requested with nothing on the navigation stack.

    Not terminal: the navigator resets the dialog to the language menu.
    """


class StoreError(UssdError):
    """The session store is unavailable or did not answer in time."""

    message_key = "ERROR"
