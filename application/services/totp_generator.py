# application/services/totp_generator.py
"""TOTP code generation."""
from __future__ import annotations

import binascii
import time
from typing import Optional

import pyotp

from domain.exceptions import InvalidSecret

DEFAULT_STEP_SEC = 30
DEFAULT_DIGITS = 6


def normalize_secret(secret: str) -> str:
    return "".join(secret.split()).upper()


def compute(
    secret_base32: str,
    for_time: Optional[float] = None,
    step: int = DEFAULT_STEP_SEC,
    digits: int = DEFAULT_DIGITS,
) -> str:
    """Compute the TOTP code for the window containing for_time.

    Args:
        secret_base32: Base32-encoded shared secret (spaces/lowercase tolerated)
        for_time: Unix timestamp, defaults to now
        step: Window length in seconds
        digits: Code length

    Returns:
        Zero-padded decimal code (HMAC-SHA1, dynamic truncation)

    Raises:
        InvalidSecret: If the secret is empty or not valid base32
    """
    secret = normalize_secret(secret_base32 or "")
    if not secret:
        raise InvalidSecret("TOTP secret is empty")

    if for_time is None:
        for_time = time.time()

    totp = pyotp.TOTP(secret, digits=digits, interval=step)
    try:
        return totp.at(int(for_time))
    except (binascii.Error, ValueError) as e:
        raise InvalidSecret(f"TOTP secret is not valid base32: {e}") from e


def validate_secret(secret: str) -> bool:
    """Check if TOTP secret is usable."""
    try:
        compute(secret, for_time=0)
        return True
    except InvalidSecret:
        return False
