# application/services/csrf_propagator.py
from __future__ import annotations

from typing import Dict, Iterable, List

from domain.fields import CsrfSpec, FormField, MetaToken


def csrf_header(tokens: Iterable[MetaToken], token_field: str, header_name: str) -> Dict[str, str]:
    """
    Map the anti-forgery token(s) named token_field to a header named header_name.

    No matching token gives an empty dict; the server decides later whether that is fatal.
    """
    headers: Dict[str, str] = {}
    for t in tokens:
        if t.name == token_field:
            headers[header_name] = t.content
    return headers


def csrf_header_for(tokens: Iterable[MetaToken], csrf: CsrfSpec) -> Dict[str, str]:
    return csrf_header(tokens, csrf.token_field, csrf.header_name)


def tokens_from_fields(fields: Iterable[FormField]) -> List[MetaToken]:
    # hidden input (例: _csrf) をトークンとして扱う
    return [MetaToken(name=f.name, content=f.value) for f in fields]
