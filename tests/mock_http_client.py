# tests/mock_http_client.py
"""
Scripted HTTP client for exercising the login flow without a network.

Responses are served in the order they were queued; every request is recorded
so tests can assert on URLs, headers and forms.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional, Union

from application.ports.http_client import HttpClientPort, HttpResponse
from domain.request import PortalRequest


class MockHttpClient(HttpClientPort):
    def __init__(self, responses: Optional[List[HttpResponse]] = None):
        self._queue: Deque[Union[HttpResponse, Exception]] = deque(responses or [])
        self.requests: List[PortalRequest] = []

    def queue(self, text: str, status: int = 200, url: str = "https://portal.test/") -> "MockHttpClient":
        self._queue.append(HttpResponse(status=status, url=url, text=text, headers={}))
        return self

    def queue_error(self, error: Exception) -> "MockHttpClient":
        """The next send() raises `error`, as a transport failure would."""
        self._queue.append(error)
        return self

    def send(self, request: PortalRequest) -> HttpResponse:
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        item = self._queue.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def pending(self) -> int:
        return len(self._queue)

    def form_of(self, index: int) -> dict:
        return dict(self.requests[index].form_list or [])
