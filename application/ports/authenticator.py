# application/ports/authenticator.py
from __future__ import annotations

from typing import Optional, Protocol


class AuthenticatorPort(Protocol):
    def create_credential(self, options_json: str) -> Optional[str]:
        """
        Create a credential for the given creation options (JSON text).

        Returns the attestation response as JSON text, or None when the
        authenticator declines or cannot create a device-bound credential.
        """
        ...
