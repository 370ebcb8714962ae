# application/services/form_composer.py
from __future__ import annotations

from typing import Iterable, List, Tuple

from domain.fields import FormField


class FormComposer:
    """
    Compose the url-encoded form_list for a submission.

    - keeps field order (the portal is order-insensitive but traces are easier to diff)
    - drops nameless inputs (browsers never submit them)
    - keeps duplicate names as separate pairs
    """

    def compose(self, fields: Iterable[FormField]) -> List[Tuple[str, str]]:
        return [(f.name, "" if f.value is None else str(f.value)) for f in fields if f.name]
