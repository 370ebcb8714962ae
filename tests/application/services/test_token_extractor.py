# tests/application/services/test_token_extractor.py
import pytest

from application.services.token_extractor import TokenExtractor, body_markup, parse_document
from domain.exceptions import ParseError
from domain.fields import FieldKind, FormField, MetaToken, SelectGroup


class TestExtractInputs:
    def test_kinds_from_type_attribute(self):
        html = """
        <form>
          <input type="text" name="identifier" value="u1">
          <input type="password" name="password">
          <input type="hidden" name="authenticity_token" value="tok">
          <input type="submit" name="commit" value="Login">
        </form>
        """
        fields = TokenExtractor().extract_inputs(html)

        assert fields == [
            FormField(name="identifier", kind=FieldKind.TEXT, value="u1"),
            FormField(name="password", kind=FieldKind.PASSWORD, value=""),
            FormField(name="authenticity_token", kind=FieldKind.OTHER, value="tok"),
            FormField(name="commit", kind=FieldKind.OTHER, value="Login"),
        ]

    def test_missing_name_and_value_default_to_empty(self):
        fields = TokenExtractor().extract_inputs('<input type="text">')
        assert fields == [FormField(name="", kind=FieldKind.TEXT, value="")]

    def test_type_is_case_insensitive(self):
        fields = TokenExtractor().extract_inputs('<input type="PASSWORD" name="p">')
        assert fields[0].kind == FieldKind.PASSWORD

    def test_missing_type_is_text(self):
        fields = TokenExtractor().extract_inputs('<input name="q">')
        assert fields[0].kind == FieldKind.TEXT

    def test_email_type_is_other(self):
        fields = TokenExtractor().extract_inputs('<input type="email" name="mail">')
        assert fields[0].kind == FieldKind.OTHER

    def test_no_inputs(self):
        assert TokenExtractor().extract_inputs("<p>nothing</p>") == []


class TestExtractMeta:
    def test_meta_tokens_in_order(self):
        html = """
        <html><head>
          <meta charset="utf-8">
          <meta name="csrf-param" content="authenticity_token">
          <meta name="csrf-token" content="abc">
        </head><body></body></html>
        """
        metas = TokenExtractor().extract_meta(html)

        assert metas == [
            MetaToken(name="", content=""),
            MetaToken(name="csrf-param", content="authenticity_token"),
            MetaToken(name="csrf-token", content="abc"),
        ]


class TestExtractSelects:
    def test_select_groups(self):
        html = """
        <select name="lang">
          <option value="ja">日本語</option>
          <option value="en">English</option>
        </select>
        <select><option>no value</option></select>
        """
        groups = TokenExtractor().extract_selects(html)

        assert groups == [
            SelectGroup(name="lang", values=("ja", "en")),
            SelectGroup(name="", values=("",)),
        ]


class TestExtractFragment:
    def test_inner_markup_of_first_match(self):
        html = """
        <body>
          <form id="login"><input type="text" name="a"></form>
          <form id="login"><input type="text" name="b"></form>
        </body>
        """
        fragment = TokenExtractor().extract_fragment(html, "form#login")

        assert 'name="a"' in fragment
        assert 'name="b"' not in fragment
        assert "<form" not in fragment

    def test_no_match_is_empty(self):
        assert TokenExtractor().extract_fragment("<body><p>x</p></body>", "form#totp-form") == ""

    def test_fragment_feeds_input_extraction(self):
        extractor = TokenExtractor()
        html = '<body><div id="identifier-field-wrapper"><input type="text" name="identifier"></div>' \
               '<input type="password" name="password"></body>'

        fields = extractor.extract_inputs(extractor.extract_fragment(html, "div#identifier-field-wrapper"))

        assert [f.name for f in fields] == ["identifier"]


class TestParseErrors:
    def test_non_text_body_raises(self):
        with pytest.raises(ParseError):
            TokenExtractor().extract_inputs(None)

    def test_bytes_body_raises(self):
        with pytest.raises(ParseError):
            parse_document(b"<html></html>")

    def test_body_markup_without_body(self):
        assert body_markup("") == ""
