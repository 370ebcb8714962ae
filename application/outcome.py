# application/outcome.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from domain.fields import FormField, MetaToken


@dataclass(frozen=True)
class EmailChallenge:
    """OTP form fields and page tokens kept until the user types the emailed code."""
    fields: List[FormField] = field(default_factory=list)
    metas: List[MetaToken] = field(default_factory=list)


class Fido2Status(str, Enum):
    SUCCESS = "success"
    NO_CREDENTIAL = "no_credential"
    SERVER_REJECTED = "server_rejected"


@dataclass(frozen=True)
class Fido2RegistrationResult:
    status: Fido2Status
    http_status: Optional[int] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == Fido2Status.SUCCESS
