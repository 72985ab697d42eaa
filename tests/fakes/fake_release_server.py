"""
Fake GitHub release server for testing.

Serves the ``releases/latest`` API and release asset downloads through an
``httpx.MockTransport`` so the installer can run end to end without network
access. Every request is recorded for assertions.
"""
from __future__ import annotations

import json
from typing import Callable, Dict, List, Optional

import httpx

API_URL = "https://api.test"
DOWNLOAD_BASE_URL = "https://dl.test"


class FakeReleaseServer:
    """
    In-memory release host.

    Attributes:
        repo: Repository served ("owner/name")
        tag: Tag reported as latest
        assets: Asset name -> bytes for the current tag
        latest_payload: Override for the API JSON body (None = built from tag)
        latest_status: HTTP status for the API call
        asset_status: Per-asset HTTP status overrides
        asset_headers: Per-asset extra response headers
        fail_with: Per-path exception to raise instead of responding
    """

    def __init__(self, repo: str = "org/tool", tag: str = "v1.2.3"):
        self.repo = repo
        self.tag = tag
        self.assets: Dict[str, bytes] = {}
        self.latest_payload: Optional[object] = None
        self.latest_status = 200
        self.latest_body: Optional[bytes] = None
        self.asset_status: Dict[str, int] = {}
        self.asset_headers: Dict[str, Dict[str, str]] = {}
        self.fail_with: Dict[str, Callable[[httpx.Request], Exception]] = {}
        self.requests: List[httpx.Request] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def asset_url(self, name: str) -> str:
        return f"{DOWNLOAD_BASE_URL}/{self.repo}/releases/download/{self.tag}/{name}"

    def paths_requested(self) -> List[str]:
        return [r.url.path for r in self.requests]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.fail_with:
            raise self.fail_with[path](request)

        if request.url.host == "api.test":
            if path != f"/repos/{self.repo}/releases/latest":
                return httpx.Response(404, json={"message": "Not Found"})
            if self.latest_body is not None:
                return httpx.Response(self.latest_status, content=self.latest_body)
            payload = self.latest_payload
            if payload is None:
                payload = {
                    "tag_name": self.tag,
                    "name": f"Release {self.tag}",
                    "assets": [{"name": name, "size": len(data)} for name, data in self.assets.items()],
                }
            return httpx.Response(self.latest_status, content=json.dumps(payload).encode())

        prefix = f"/{self.repo}/releases/download/{self.tag}/"
        if request.url.host == "dl.test" and path.startswith(prefix):
            name = path[len(prefix):]
            status = self.asset_status.get(name, 200)
            if status != 200:
                return httpx.Response(status, content=b"error")
            if name not in self.assets:
                return httpx.Response(404, content=b"Not Found")
            return httpx.Response(200, content=self.assets[name], headers=self.asset_headers.get(name, {}))

        return httpx.Response(404, content=b"Not Found")
