# domain/account.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Account:
    """
    Login credentials supplied by the caller. Never persisted.
    """
    username: str
    password: str = field(repr=False)
    totp_secret: Optional[str] = field(default=None, repr=False)

    @property
    def has_totp_secret(self) -> bool:
        return bool(self.totp_secret and self.totp_secret.strip())
