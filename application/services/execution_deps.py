# application/services/execution_deps.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from application.ports.authenticator import AuthenticatorPort
from application.ports.http_client import HttpClientPort
from application.ports.logger import LoggerPort
from domain.endpoints import PortalEndpoints


class UrlResolverPort(Protocol):
    def resolve_url(self, url: str) -> str:
        ...


@dataclass(frozen=True)
class ExecutionDeps:
    http_client: HttpClientPort
    url_resolver: UrlResolverPort
    logger: LoggerPort
    endpoints: PortalEndpoints = field(default_factory=PortalEndpoints)
    authenticator: Optional[AuthenticatorPort] = None
    clock: Callable[[], float] = time.time

    def resolve_url(self, url: str) -> str:
        return self.url_resolver.resolve_url(url)

    def endpoint(self, name: str) -> str:
        return self.resolve_url(getattr(self.endpoints, name))
