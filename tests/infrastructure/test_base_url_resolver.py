from infrastructure.url.base_url_resolver import BaseUrlResolver


def test_relative_path_is_joined():
    assert BaseUrlResolver("https://portal.test/").resolve_url("/auth/session") == "https://portal.test/auth/session"


def test_absolute_url_is_kept():
    assert BaseUrlResolver("https://portal.test").resolve_url("https://other.test/x") == "https://other.test/x"


def test_scheme_relative_url_takes_base_scheme():
    assert BaseUrlResolver("https://portal.test").resolve_url("//idp.portal.test/wait") == "https://idp.portal.test/wait"


def test_path_without_leading_slash():
    assert BaseUrlResolver("https://portal.test").resolve_url("auth/session") == "https://portal.test/auth/session"
