# application/services/field_injector.py
from __future__ import annotations

from typing import List, Optional, Sequence

from domain.fields import FieldKind, FormField


def first_index_of_kind(fields: Sequence[FormField], kind: FieldKind) -> Optional[int]:
    for i, f in enumerate(fields):
        if f.kind == kind:
            return i
    return None


def inject(fields: Sequence[FormField], username_value: str, password_value: str) -> List[FormField]:
    """
    Fill the first text field with username_value and the first password field with password_value.

    Returns a new list of the same length and order; every other field is left as is.
    OTP submissions reuse the username slot.
    """
    out = list(fields)

    i = first_index_of_kind(out, FieldKind.TEXT)
    if i is not None:
        out[i] = out[i].with_value(username_value)

    j = first_index_of_kind(out, FieldKind.PASSWORD)
    if j is not None:
        out[j] = out[j].with_value(password_value)

    return out
