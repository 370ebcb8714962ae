# tests/application/services/test_page_validator.py
import pytest

from application.services import page_validator as pages
from domain.exceptions import ParseError
from tests import portal_pages


def _body(inner: str) -> str:
    return f"<html><body>{inner}</body></html>"


class TestMarkerPredicates:
    @pytest.mark.parametrize(
        "predicate,english,japanese",
        [
            (pages.is_username_page, pages.USERNAME_PAGE.english, pages.USERNAME_PAGE.japanese),
            (pages.is_method_selection_page, pages.METHOD_SELECTION_PAGE.english, pages.METHOD_SELECTION_PAGE.japanese),
            (pages.is_waiting_page, pages.WAITING_PAGE.english, pages.WAITING_PAGE.japanese),
            (pages.is_resource_list_page, "Account", "アカウント"),
        ],
    )
    def test_either_language_matches(self, predicate, english, japanese):
        assert predicate(_body(f"<p>{english}</p>")) is True
        assert predicate(_body(f"<p>{japanese}</p>")) is True
        assert predicate(_body("<p>something else</p>")) is False

    def test_japanese_only_resource_list(self):
        assert pages.is_resource_list_page(_body("アカウント")) is True

    def test_marker_outside_body_is_ignored(self):
        html = "<html><head><title>Account</title></head><body><p>hello</p></body></html>"
        assert pages.is_resource_list_page(html) is False

    def test_empty_body(self):
        assert pages.is_waiting_page("") is False

    def test_already_authenticated_uses_resource_list_marker(self):
        assert pages.is_already_authenticated(portal_pages.resource_list_page()) is True
        assert pages.is_already_authenticated(portal_pages.username_page()) is False

    def test_username_page_fixture(self):
        assert pages.is_username_page(portal_pages.username_page()) is True
        assert pages.is_username_page(portal_pages.username_page(japanese=True)) is True


class TestLiteralMarkers:
    def test_redirect_script(self):
        assert pages.is_redirect_script('window.location="https://portal/wait";') is True
        assert pages.is_redirect_script("alert('nope')") is False
        assert pages.is_redirect_script("") is False

    def test_email_sent(self):
        assert pages.is_email_sent('{"status":"succeeded"}') is True
        assert pages.is_email_sent('{"status":"failed"}') is False


class TestUsernameAccepted:
    def test_accepted(self):
        assert pages.is_username_accepted('{"password":true,"identifier":"u1"}', "u1") is True

    def test_other_identifier(self):
        assert pages.is_username_accepted('{"password":true,"identifier":"u2"}', "u1") is False

    def test_password_false(self):
        assert pages.is_username_accepted('{"password":false,"identifier":"u1"}', "u1") is False

    @pytest.mark.parametrize(
        "body",
        ['{"password":"true","identifier":"u1"}', '{"password":true}', '{"password":true,"identifier":1}', "[]", "null"],
    )
    def test_wrong_shape(self, body):
        assert pages.is_username_accepted(body, "u1") is False

    def test_not_json(self):
        with pytest.raises(ParseError):
            pages.is_username_accepted("<html>error</html>", "u1")
