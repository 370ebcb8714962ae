# domain/session_state.py
from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    START = "start"
    USERNAME_ENTERED = "username_entered"
    PASSWORD_ENTERED = "password_entered"
    METHOD_SELECTED = "method_selected"
    EMAIL_CHALLENGE_ISSUED = "email_challenge_issued"
    TOTP_CHALLENGE_ISSUED = "totp_challenge_issued"
    WAITING = "waiting"
    RESOURCE_LIST_REACHED = "resource_list_reached"
