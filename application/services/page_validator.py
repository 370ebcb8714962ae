# application/services/page_validator.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Tuple

from application.services.token_extractor import body_markup
from domain.exceptions import ParseError


@dataclass(frozen=True)
class PageMarkers:
    english: str
    japanese: str

    def found_in(self, text: str) -> bool:
        return self.english in text or self.japanese in text


USERNAME_PAGE = PageMarkers(
    english="Please set your e-mail address for password reissue to an e-mail other than m.isct.ac.jp.",
    japanese="パスワード再発行用メールアドレスをm.isct.ac.jp以外のメールアドレスに忘れず必ず設定してください。",
)
METHOD_SELECTION_PAGE = PageMarkers(
    english="Please select an authentication method.",
    japanese="認証方法を選択してください。",
)
WAITING_PAGE = PageMarkers(
    english="Please wait for a moment",
    japanese="しばらくお待ちください。",
)
RESOURCE_LIST_PAGE = PageMarkers(
    english="Account",
    japanese="アカウント",
)

REDIRECT_MARKER = "window.location="
EMAIL_SENT_MARKER = "succeeded"


def _body_has(html: str, markers: PageMarkers) -> bool:
    return markers.found_in(body_markup(html))


def is_username_page(html: str) -> bool:
    return _body_has(html, USERNAME_PAGE)


def is_method_selection_page(html: str) -> bool:
    return _body_has(html, METHOD_SELECTION_PAGE)


def is_waiting_page(html: str) -> bool:
    return _body_has(html, WAITING_PAGE)


def is_resource_list_page(html: str) -> bool:
    return _body_has(html, RESOURCE_LIST_PAGE)


def is_already_authenticated(html: str) -> bool:
    # ログイン済みならユーザー名ページの代わりにリソース一覧が返る
    return is_resource_list_page(html)


def is_redirect_script(script: str) -> bool:
    return REDIRECT_MARKER in (script or "")


def is_email_sent(result: str) -> bool:
    return EMAIL_SENT_MARKER in (result or "")


def parse_username_submission(body: str) -> Tuple[object, object]:
    try:
        data = json.loads(body)
    except (TypeError, json.JSONDecodeError) as e:
        raise ParseError(f"username submission is not JSON: {e}") from e
    if not isinstance(data, dict):
        return None, None
    return data.get("password"), data.get("identifier")


def is_username_accepted(body: str, username: str) -> bool:
    """
    {"password": true, "identifier": "<username>"} means the portal accepted the
    identifier and expects a password next.
    """
    password, identifier = parse_username_submission(body)
    if not isinstance(password, bool) or not isinstance(identifier, str):
        return False
    return password and identifier == username
