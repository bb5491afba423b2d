"""Shared helpers for tests: a stub commerce backend and multipart parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from storefront.forms.media import UploadedFile

BACKEND_BASE = "http://backend.test/api/v1"

_NAME_RE = re.compile(r'; name="([^"]*)"')
_FILENAME_RE = re.compile(r'; filename="([^"]*)"')


@dataclass(slots=True)
class MultipartPart:
    name: str
    filename: str | None
    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode()


def parse_multipart(request: httpx.Request) -> list[MultipartPart]:
    """Split a recorded multipart request body into its parts."""
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data")
    boundary = content_type.split("boundary=", 1)[1].encode()
    parts: list[MultipartPart] = []
    for chunk in request.content.split(b"--" + boundary):
        chunk = chunk.strip(b"\r\n")
        if not chunk or chunk == b"--":
            continue
        head, _, data = chunk.partition(b"\r\n\r\n")
        headers = head.decode()
        name_match = _NAME_RE.search(headers)
        filename_match = _FILENAME_RE.search(headers)
        parts.append(
            MultipartPart(
                name=name_match.group(1) if name_match else "",
                filename=filename_match.group(1) if filename_match else None,
                data=data,
            )
        )
    return parts


def field_values(parts: list[MultipartPart], name: str) -> list[str]:
    return [part.text for part in parts if part.name == name and part.filename is None]


def file_parts(parts: list[MultipartPart], name: str) -> list[MultipartPart]:
    return [part for part in parts if part.name == name and part.filename is not None]


@dataclass
class StubBackend:
    """Route table for ``httpx.MockTransport`` that records every request."""

    routes: dict[tuple[str, str], list[tuple[int, Any] | Exception]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_data: Any | None = None,
        error: Exception | None = None,
    ) -> None:
        """Queue a response; the last queued response for a route repeats."""
        entry: tuple[int, Any] | Exception = error if error is not None else (status, json_data)
        self.routes.setdefault((method.upper(), path), []).append(entry)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        queue = self.routes.get((request.method, path))
        if not queue:
            return httpx.Response(status_code=404, json={"success": False, "message": "no stub"})
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        status, json_data = entry
        if json_data is None:
            return httpx.Response(status_code=status)
        return httpx.Response(status_code=status, json=json_data)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str | None = None) -> list[httpx.Request]:
        if method is None:
            return list(self.requests)
        return [request for request in self.requests if request.method == method.upper()]


def jpeg(name: str = "photo.jpg", content: bytes = b"\xff\xd8\xff\xe0jpeg-bytes") -> UploadedFile:
    return UploadedFile(filename=name, content_type="image/jpeg", content=content)


def mp4(name: str = "clip.mp4") -> UploadedFile:
    return UploadedFile(filename=name, content_type="video/mp4", content=b"\x00\x00\x00\x18ftypmp42")


def pdf(name: str = "brochure.pdf") -> UploadedFile:
    return UploadedFile(filename=name, content_type="application/pdf", content=b"%PDF-1.7")
