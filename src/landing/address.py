"""
In-process model of the browser address bar.

Keeps the history stack so callers can tell a replace (same entry rewritten)
from a push (new entry), and supports back/forward navigation.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


class PageAddress:
    def __init__(self, url: str = "/") -> None:
        self.history: List[str] = [url]
        self.index = 0

    @property
    def url(self) -> str:
        return self.history[self.index]

    def get_param(self, name: str) -> Optional[str]:
        """Return the trimmed query parameter, or None when missing or blank."""
        for key, value in parse_qsl(urlparse(self.url).query, keep_blank_values=True):
            if key == name:
                value = value.strip()
                return value or None
        return None

    def with_param(self, name: str, value: str) -> str:
        parsed = urlparse(self.url)
        params = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != name]
        params.append((name, value))
        return urlunparse(parsed._replace(query=urlencode(params)))

    def replace_param(self, name: str, value: str) -> None:
        self.history[self.index] = self.with_param(name, value)

    def push(self, url: str) -> None:
        del self.history[self.index + 1:]
        self.history.append(url)
        self.index += 1

    def back(self) -> None:
        if self.index > 0:
            self.index -= 1

    def forward(self) -> None:
        if self.index < len(self.history) - 1:
            self.index += 1
