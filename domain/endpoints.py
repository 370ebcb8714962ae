# domain/endpoints.py
from __future__ import annotations

from dataclasses import dataclass, fields

DEFAULT_BASE_URL = "https://isct.ex-tic.com"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_5 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.5 Mobile/15E148 Safari/604.1"
)


@dataclass(frozen=True)
class PortalEndpoints:
    """
    Fixed endpoint set of the portal. Paths are relative to base_url unless absolute.
    """
    base_url: str = DEFAULT_BASE_URL
    username_page: str = "/auth/session"
    username_submit: str = "/auth/session/identifier"
    password_submit: str = "/auth/session"
    method_selection_page: str = "/auth/session/second_factor"
    email_sending: str = "/auth/session/second_factor/email_otp/deliver"
    otp_submit: str = "/auth/session/second_factor"
    resource_list: str = "/auth/session/complete"
    fido2_page: str = "/user/security/fido2"
    fido2_settings: str = "/user/security/fido2/settings"
    fido2_relay1: str = "/user/security/fido2/relay/attestation/options"
    fido2_relay2: str = "/user/security/fido2/relay/attestation/result"

    @classmethod
    def path_names(cls) -> list[str]:
        return [f.name for f in fields(cls) if f.name != "base_url"]
