# application/services/redactor.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from domain.fields import FieldKind, FormField

SENSITIVE_KEYS = {
    "password",
    "passwd",
    "pass",
    "authorization",
    "cookie",
    "set-cookie",
    "x-csrf-token",
    "_csrf",
    "csrf-token",
    "authenticity_token",
    "otp",
    "totp",
    "code",
}

MASK = "********"


def mask_value(key: str, value: Any) -> Any:
    if key.lower() in SENSITIVE_KEYS and value is not None:
        return MASK
    return value


def mask_pairs(pairs: List[Tuple[str, str]], extra_keys: Iterable[str] = ()) -> List[Tuple[str, Any]]:
    extra = {k.lower() for k in extra_keys}
    return [(k, MASK if k.lower() in extra else mask_value(k, v)) for k, v in pairs]


def mask_dict(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: mask_value(k, v) for k, v in d.items()}


def filled_field_names(fields: Iterable[FormField]) -> List[str]:
    """Names of text/password fields; their values are user input and never logged."""
    return [f.name for f in fields if f.kind in (FieldKind.TEXT, FieldKind.PASSWORD) and f.name]
