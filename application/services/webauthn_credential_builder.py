# application/services/webauthn_credential_builder.py
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from application.ports.authenticator import AuthenticatorPort
from domain.exceptions import ParseError


def _load_json_object(raw: str, label: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise ParseError(f"{label} is not JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ParseError(f"{label} must be a JSON object")
    return parsed


def creation_options(challenge: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the PublicKeyCredentialCreationOptions part of a relay-party challenge, if any."""
    public_key = challenge.get("publicKey")
    if isinstance(public_key, dict) and public_key.get("challenge"):
        return public_key
    if challenge.get("challenge"):
        return challenge
    return None


class WebAuthnCredentialBuilder:
    """
    Relay-party challenge -> credential creation response.

    None is a normal outcome: no authenticator, no creation options in the
    challenge, or the authenticator declined.
    """

    def __init__(self, authenticator: Optional[AuthenticatorPort] = None):
        self._authenticator = authenticator

    @property
    def available(self) -> bool:
        return self._authenticator is not None

    def build(self, challenge_json: str) -> Optional[Dict[str, Any]]:
        challenge = _load_json_object(challenge_json, "relay challenge")
        if self._authenticator is None:
            return None

        options = creation_options(challenge)
        if options is None:
            return None

        response = self._authenticator.create_credential(json.dumps(options))
        if response is None:
            return None
        return _load_json_object(response, "authenticator response")
