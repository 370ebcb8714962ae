# infrastructure/config/endpoint_loader.py
"""
Portal settings from an optional YAML file plus environment overrides.

    base_url: https://isct.ex-tic.com
    user_agent: Mozilla/5.0 ...
    timeout_sec: 20
    endpoints:
      username_page: /auth/session
      ...
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from domain.endpoints import DEFAULT_USER_AGENT, PortalEndpoints

BASE_URL_ENV = "PORTAL_BASE_URL"


class ConfigLoadError(Exception):
    pass


@dataclass(frozen=True)
class PortalSettings:
    endpoints: PortalEndpoints = field(default_factory=PortalEndpoints)
    user_agent: str = DEFAULT_USER_AGENT
    timeout_sec: int = 20


class PortalSettingsLoader:
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def load(self, path: Optional[str] = None) -> PortalSettings:
        data: Dict[str, Any] = {}
        if path:
            data = self._read_yaml(path)
        settings = self.load_from_dict(data)

        base_url = self._environ.get(BASE_URL_ENV)
        if base_url:
            settings = replace(settings, endpoints=replace(settings.endpoints, base_url=base_url))
        return settings

    def load_from_dict(self, data: Dict[str, Any]) -> PortalSettings:
        overrides = data.get("endpoints") or {}
        if not isinstance(overrides, dict):
            raise ConfigLoadError("endpoints must be a mapping")

        known = set(PortalEndpoints.path_names())
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigLoadError(f"unknown endpoints: {', '.join(unknown)}")

        endpoint_kwargs = {k: str(v) for k, v in overrides.items()}
        if data.get("base_url"):
            endpoint_kwargs["base_url"] = str(data["base_url"])

        try:
            timeout = int(data.get("timeout_sec", 20))
        except (TypeError, ValueError) as e:
            raise ConfigLoadError(f"timeout_sec must be an integer: {e}") from e

        return PortalSettings(
            endpoints=PortalEndpoints(**endpoint_kwargs),
            user_agent=str(data.get("user_agent") or DEFAULT_USER_AGENT),
            timeout_sec=timeout,
        )

    def _read_yaml(self, path: str) -> Dict[str, Any]:
        p = Path(path)
        if not p.exists():
            raise ConfigLoadError(f"Config file not found: {path}")

        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigLoadError(f"Config file is invalid: {path}")
        return data
