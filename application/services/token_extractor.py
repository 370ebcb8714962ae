# application/services/token_extractor.py
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup

from domain.exceptions import ParseError
from domain.fields import FieldKind, FormField, MetaToken, SelectGroup


def parse_document(html: str) -> BeautifulSoup:
    """
    Parse a response body into a document tree (lxml builder).

    Raises ParseError when the body is not text or the parser gives up.
    """
    if not isinstance(html, str):
        raise ParseError(f"response body must be str, got: {type(html).__name__}")
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as e:
        raise ParseError(f"unable to parse response body: {e}") from e


def body_markup(html: str) -> str:
    """Inner markup of <body>, or "" when the document has none."""
    soup = parse_document(html)
    if soup.body is None:
        return ""
    return soup.body.decode_contents()


def _attr(node, name: str) -> str:
    v = node.get(name)
    if v is None:
        return ""
    # class等の複数値属性はlistで返る
    if isinstance(v, list):
        return " ".join(v)
    return str(v)


class TokenExtractor:
    """
    Turns response bodies into typed descriptors.

    - inputs: every <input>, kind from its type attribute
    - metas: every <meta> (name/content)
    - selects: every <select> with its option values
    - fragment: inner markup of the first element matching a CSS selector
    """

    def extract_inputs(self, html: str) -> List[FormField]:
        soup = parse_document(html)
        return [
            FormField(
                name=_attr(inp, "name"),
                kind=FieldKind.from_type_attr(inp.get("type")),
                value=_attr(inp, "value"),
            )
            for inp in soup.find_all("input")
        ]

    def extract_meta(self, html: str) -> List[MetaToken]:
        soup = parse_document(html)
        return [
            MetaToken(name=_attr(meta, "name"), content=_attr(meta, "content"))
            for meta in soup.find_all("meta")
        ]

    def extract_selects(self, html: str) -> List[SelectGroup]:
        soup = parse_document(html)
        return [
            SelectGroup(
                name=_attr(sel, "name"),
                values=tuple(_attr(opt, "value") for opt in sel.find_all("option")),
            )
            for sel in soup.find_all("select")
        ]

    def extract_fragment(self, html: str, selector: str) -> str:
        soup = parse_document(html)
        scope = soup.body if soup.body is not None else soup
        node = scope.select_one(selector)
        if node is None:
            return ""
        return node.decode_contents()
