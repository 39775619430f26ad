"""Fake Paperless-NGX backend and sample API payloads shared by the tests."""

from typing import Any

import httpx

BASE_URL = "http://paperless.test:8000"
PUBLIC_URL = "https://docs.example.com"
TOKEN = "test-token-12345"

SAMPLE_CORRESPONDENTS = {
    "count": 2,
    "next": None,
    "previous": None,
    "all": [1, 2],
    "results": [
        {"id": 1, "name": "SPAR", "matching_algorithm": 6},
        {"id": 2, "name": "Stadtwerke Graz", "matching_algorithm": 1},
    ],
}

SAMPLE_DOCUMENT_TYPES = {
    "count": 1,
    "next": None,
    "previous": None,
    "all": [3],
    "results": [{"id": 3, "name": "Invoice", "matching_algorithm": 0}],
}

SAMPLE_TAGS = {
    "count": 2,
    "next": None,
    "previous": None,
    "all": [5, 6],
    "results": [
        {"id": 5, "name": "Finance", "color": "#a6cee3", "matching_algorithm": 1},
        {"id": 6, "name": "Inbox", "color": "#1f78b4", "is_inbox_tag": True},
    ],
}

SAMPLE_CUSTOM_FIELDS = {
    "count": 1,
    "next": None,
    "previous": None,
    "all": [7],
    "results": [{"id": 7, "name": "Amount", "data_type": "monetary"}],
}


class FakePaperless:
    """
    Routes requests to canned responses and records every request.
    Unknown routes answer with a Paperless style 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, dict[str, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"headers": headers}
        if content is not None:
            kwargs["content"] = content
        elif json is not None:
            kwargs["json"] = json
        self.routes[(method.upper(), path)] = (status, kwargs)

    def add_reference_collections(self) -> None:
        self.add("GET", "/api/correspondents/", json=SAMPLE_CORRESPONDENTS)
        self.add("GET", "/api/document_types/", json=SAMPLE_DOCUMENT_TYPES)
        self.add("GET", "/api/tags/", json=SAMPLE_TAGS)
        self.add("GET", "/api/custom_fields/", json=SAMPLE_CUSTOM_FIELDS)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not found."})
        status, kwargs = route
        return httpx.Response(status, **kwargs)

    def paths(self, method: str | None = None) -> list[str]:
        return [request.url.path for request in self.requests if method is None or request.method == method]

