# infrastructure/secrets/env_account_provider.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

from domain.account import Account

USERNAME_ENV = "PORTAL_USERNAME"
PASSWORD_ENV = "PORTAL_PASSWORD"
TOTP_SECRET_ENV = "PORTAL_TOTP_SECRET"

_default_env_path = Path(__file__).parent.parent.parent / ".env"


class AccountNotConfigured(Exception):
    pass


class EnvAccountProvider:
    """
    環境変数と.envファイルからログイン情報を組み立てる

    .env の値が環境変数より優先される。
    """

    def __init__(self, env_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None):
        path = env_path or _default_env_path
        values: Dict[str, Optional[str]] = dict(dotenv_values(path)) if path.exists() else {}

        source = os.environ if environ is None else environ
        for key, value in source.items():
            if values.get(key) is None:
                values[key] = value
        self._values = values

    def get(self) -> Account:
        username = (self._values.get(USERNAME_ENV) or "").strip()
        password = self._values.get(PASSWORD_ENV) or ""
        if not username or not password:
            raise AccountNotConfigured(f"{USERNAME_ENV} and {PASSWORD_ENV} must be set")

        secret = (self._values.get(TOTP_SECRET_ENV) or "").strip() or None
        return Account(username=username, password=password, totp_secret=secret)
