import os
import sys
from typing import Any

import httpx
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from harness.client import build_client
from harness.config import Settings


def pytest_configure(config):
    # Keep the event log on so tests can read it back through capsys
    os.environ.setdefault("HARNESS_AUDIT_ENABLED", "1")
    config.addinivalue_line("markers", "live: black-box test against the running Todo Manager service")


class ScriptedService:
    """
    Stand-in for the remote service behind httpx.MockTransport.

    Each (method, path) owns a queue of canned responses; the head is consumed
    until one is left, which then answers every further call. Unscripted routes
    answer 404. Every request is recorded in `calls`.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[tuple[int, Any, str | None]]] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json: Any = None, text: str | None = None):
        self.routes.setdefault((method.upper(), path), []).append((status, json, text))
        return self

    def fail(self, method: str, path: str):
        self.routes.setdefault((method.upper(), path), []).append((-1, None, None))
        return self

    def paths(self, method: str | None = None) -> list[str]:
        return [r.url.path for r in self.calls if method is None or r.method == method.upper()]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"errorMessages": [f"Could not find {request.url.path}"]})
        status, body, text = queue.pop(0) if len(queue) > 1 else queue[0]
        if status == -1:
            raise httpx.ConnectError("connection refused", request=request)
        if body is not None:
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=text or "")


@pytest.fixture()
def service():
    return ScriptedService()


@pytest.fixture()
def client(service):
    with build_client(Settings(), transport=httpx.MockTransport(service)) as c:
        yield c
