# infrastructure/url/base_url_resolver.py
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class BaseUrlResolver:
    """
    Endpoint paths and `window.location` targets -> absolute portal URLs.

    Redirect scripts may carry an absolute URL, a root-relative path or a
    scheme-relative `//host/path`; all three end up absolute.
    """
    base_url: str

    def resolve_url(self, url: str) -> str:
        if url.startswith("http://") or url.startswith("https://"):
            return url
        if url.startswith("//"):
            scheme = urlsplit(self.base_url).scheme or "https"
            return f"{scheme}:{url}"
        return self.base_url.rstrip("/") + "/" + url.lstrip("/")
