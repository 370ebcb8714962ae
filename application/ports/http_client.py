# application/ports/http_client.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict

from domain.request import PortalRequest


@dataclass(frozen=True)
class HttpResponse:
    status: int
    url: str
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.status >= 400


class HttpClientPort(ABC):
    """
    Transport collaborator. Cookie/session continuity is the implementation's job.
    """

    @abstractmethod
    def send(self, request: PortalRequest) -> HttpResponse:
        ...
