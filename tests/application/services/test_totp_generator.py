# tests/application/services/test_totp_generator.py
import pytest

from application.services.totp_generator import compute, normalize_secret, validate_secret
from domain.exceptions import InvalidSecret, LoginFailed

# RFC 6238 SHA-1 seed "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


class TestCompute:
    @pytest.mark.parametrize(
        "for_time,expected",
        [
            (59, "287082"),
            (1111111109, "081804"),
            (1111111111, "050471"),
            (1234567890, "005924"),
        ],
    )
    def test_rfc6238_vectors(self, for_time, expected):
        assert compute(RFC_SECRET, for_time=for_time) == expected

    def test_eight_digits(self):
        assert compute(RFC_SECRET, for_time=59, digits=8) == "94287082"

    def test_same_window_same_code(self):
        assert compute(RFC_SECRET, for_time=1111111080) == compute(RFC_SECRET, for_time=1111111109)

    def test_next_window_differs(self):
        assert compute(RFC_SECRET, for_time=1111111109) != compute(RFC_SECRET, for_time=1111111109 + 30)

    def test_secret_is_normalized(self):
        spaced = "gezd gnbv gy3t qojq gezd gnbv gy3t qojq"
        assert compute(spaced, for_time=59) == "287082"

    def test_defaults_to_now(self):
        code = compute(RFC_SECRET)
        assert len(code) == 6 and code.isdigit()


class TestInvalidSecret:
    @pytest.mark.parametrize("secret", ["", "   ", "not base32!", "A"])
    def test_invalid_secret_raises(self, secret):
        with pytest.raises(InvalidSecret):
            compute(secret, for_time=59)

    def test_invalid_secret_is_a_login_failure(self):
        with pytest.raises(LoginFailed):
            compute("!!!!", for_time=59)


def test_validate_secret():
    assert validate_secret(RFC_SECRET) is True
    assert validate_secret("!!!!") is False


def test_normalize_secret():
    assert normalize_secret(" ab cd\tef ") == "ABCDEF"
