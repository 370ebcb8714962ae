# domain/fields.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple


class FieldKind(str, Enum):
    TEXT = "text"
    PASSWORD = "password"
    OTHER = "other"

    @classmethod
    def from_type_attr(cls, type_attr: str | None) -> "FieldKind":
        # type属性なしはHTMLの既定どおり text
        if type_attr is None:
            return cls.TEXT
        t = type_attr.strip().lower()
        if t == "text":
            return cls.TEXT
        if t == "password":
            return cls.PASSWORD
        return cls.OTHER


@dataclass(frozen=True)
class FormField:
    name: str
    kind: FieldKind
    value: str = ""

    def with_value(self, value: str) -> "FormField":
        return replace(self, value=value)


@dataclass(frozen=True)
class MetaToken:
    name: str
    content: str = ""


@dataclass(frozen=True)
class SelectGroup:
    name: str
    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CsrfSpec:
    """
    Which token to pick up (token_field) and which request header carries it (header_name).
    """
    token_field: str
    header_name: str


# standard pages: <meta name="csrf-token">
PAGE_CSRF = CsrfSpec(token_field="csrf-token", header_name="X-CSRF-Token")
# FIDO2 settings pages: <input type="hidden" name="_csrf">
FIDO2_SETTINGS_CSRF = CsrfSpec(token_field="_csrf", header_name="x-csrf-token")
FIDO2_RELAY_CSRF = CsrfSpec(token_field="_csrf", header_name="X-CSRF-Token")
