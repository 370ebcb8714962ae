# application/services/script_response_parser.py
from __future__ import annotations

from application.services.page_validator import REDIRECT_MARKER
from domain.exceptions import ParseError


def parse_redirect_url(script: str) -> str:
    """
    Pull the redirect URL out of a script payload such as

        window.location="https://portal/wait";

    The payload is split on the double quote. When the redirect assignment is
    present, the quoted segment right after it wins; otherwise the first quoted
    segment (second element of the split) is returned.
    """
    parts = (script or "").split('"')
    if len(parts) < 3:
        raise ParseError("script payload has no quoted URL")

    marker_at = script.find(REDIRECT_MARKER)
    if marker_at >= 0:
        tail = script[marker_at + len(REDIRECT_MARKER):].split('"')
        if len(tail) >= 3:
            return tail[1]

    return parts[1]
