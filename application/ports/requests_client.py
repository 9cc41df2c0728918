# application/ports/requests_client.py
from __future__ import annotations

import requests
from typing import Dict, Optional

from application.ports.http_client import HttpClientPort, HttpResponse


class RequestsSessionHttpClient(HttpClientPort):
    def __init__(self, base_headers: Optional[Dict[str, str]] = None, timeout_sec: float = 10):
        self._session = requests.Session()
        self._base_headers = base_headers or {}
        self._timeout = timeout_sec

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> HttpResponse:
        merged = dict(self._base_headers)
        if headers:
            merged.update(headers)

        # requests.Timeout / ConnectionError propagate to the caller
        resp = self._session.request(
            method=method.upper(),
            url=url,
            headers=merged,
            data=body,
            timeout=self._timeout,
        )

        return HttpResponse(
            status=resp.status_code,
            url=str(resp.url),
            text=resp.text,
            headers=dict(resp.headers),
        )
