# application/ports/requests_client.py
from __future__ import annotations

from typing import Dict, Optional

import requests

from application.ports.http_client import HttpClientPort, HttpResponse
from domain.endpoints import DEFAULT_USER_AGENT
from domain.request import PortalRequest


class RequestsSessionHttpClient(HttpClientPort):
    def __init__(
        self,
        base_headers: Optional[Dict[str, str]] = None,
        timeout_sec: int = 20,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self._session = session or requests.Session()
        self._base_headers = {"User-Agent": user_agent}
        self._base_headers.update(base_headers or {})
        self._timeout = timeout_sec

    def send(self, request: PortalRequest) -> HttpResponse:
        merged = dict(self._base_headers)
        merged.update(request.headers or {})

        kwargs = {}
        if request.json_body is not None:
            kwargs["json"] = request.json_body
        elif request.form_list is not None:
            kwargs["data"] = request.form_list  # list[tuple] OK、同名キー複数OK

        resp = self._session.request(
            method=request.method.upper(),
            url=request.url,
            headers=merged,
            timeout=self._timeout,
            allow_redirects=True,
            **kwargs,
        )

        # charset無しの text/html は requests が ISO-8859-1 扱いするので推定に切り替える
        if resp.encoding and "charset" not in resp.headers.get("Content-Type", "").lower():
            resp.encoding = resp.apparent_encoding

        return HttpResponse(
            status=resp.status_code,
            url=str(resp.url),
            text=resp.text,
            headers=dict(resp.headers),
        )
