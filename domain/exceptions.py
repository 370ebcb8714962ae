# domain/exceptions.py
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from domain.session_state import SessionState


class PortalError(Exception):
    """Base class for every error raised by the login flow."""


class AlreadyLoggedIn(PortalError):
    """
    The first fetched page is already the resource list.

    Not a failure: the underlying session is authenticated and nothing was submitted.
    """


class SessionStateError(PortalError):
    """An orchestrator operation was called in a state that does not allow it."""


class ParseError(PortalError, ValueError):
    """A response body, script payload or JSON document could not be parsed."""


class LoginFailed(PortalError):
    """A step of the attempt failed. The attempt is over; restart from the beginning."""

    def __init__(self, message: str = "", state: Optional["SessionState"] = None):
        super().__init__(message or self.__class__.__name__)
        self.state = state


class InvalidPageError(LoginFailed):
    page = "page"


class InvalidUserNamePage(InvalidPageError):
    page = "username"


class InvalidPasswordPage(InvalidPageError):
    page = "password"


class InvalidMethodSelectionPage(InvalidPageError):
    page = "method_selection"


class InvalidEmailPage(InvalidPageError):
    page = "email_otp"


class InvalidTOTPPage(InvalidPageError):
    page = "totp"


class InvalidWaitingPage(InvalidPageError):
    page = "waiting"


class InvalidResourceListPage(InvalidPageError):
    page = "resource_list"


class InvalidEmailSending(LoginFailed):
    """The email OTP dispatch did not answer with a success marker."""


class MissingTOTPSecret(LoginFailed):
    """The TOTP branch was chosen for an account without a shared secret."""


class InvalidSecret(LoginFailed, ValueError):
    """The TOTP shared secret is empty or not valid base32."""
