from __future__ import annotations

import json
from typing import Any, Dict, Optional

import httpx
import pytest

from .audit import audit_log, collection_of
from .config import Settings
from .expect import PROBE_OK, expect_status

JSON = "application/json"
XML = "application/xml"


def _log_response(response: httpx.Response) -> None:
    request = response.request
    path = request.url.path
    audit_log(
        "request",
        collection_of(path),
        method=request.method,
        path=path,
        extra={"status": response.status_code},
    )


def build_client(settings: Settings, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """Client bound to the service under test. `transport` swaps the network for tests."""
    return httpx.Client(
        base_url=settings.base_url,
        timeout=settings.timeout,
        transport=transport,
        event_hooks={"response": [_log_response]},
    )


def send_json(
    client: httpx.Client,
    method: str,
    path: str,
    body: Dict[str, Any] | str | None = None,
    params: Optional[Dict[str, Any]] = None,
) -> httpx.Response:
    """
    Issue `method` with a JSON body. A `str` body is sent verbatim so malformed
    documents can be posted; dicts are serialised compactly.
    """
    content = body if isinstance(body, str) else (json.dumps(body) if body is not None else None)
    headers = {"Content-Type": JSON, "Accept": JSON}
    return client.request(method, path, content=content, headers=headers, params=params)


def send_xml(client: httpx.Client, method: str, path: str, body: str) -> httpx.Response:
    return client.request(method, path, content=body, headers={"Content-Type": XML, "Accept": JSON})


def get_json(client: httpx.Client, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
    return client.get(path, params=params, headers={"Accept": JSON})


def probe(client: httpx.Client) -> httpx.Response:
    """Fail fast unless the service answers `GET /todos` with 200 or 204."""
    r = get_json(client, "/todos")
    audit_log(
        "probe",
        "todos",
        method="GET",
        path="/todos",
        extra={"status": r.status_code, "base_url": str(client.base_url)},
    )
    return expect_status(r, PROBE_OK)


def open_session(settings: Settings, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """
    Build a client and probe the service once. A probe outside 200/204 raises
    UnexpectedStatus. An unreachable service fails the run, or skips it when
    `settings.require_service` is off.
    """
    client = build_client(settings, transport)
    try:
        probe(client)
    except httpx.TransportError as e:
        client.close()
        msg = f"Todo Manager service not reachable at {settings.base_url}: {e}"
        if settings.require_service:
            pytest.fail(msg, pytrace=False)
        pytest.skip(msg)
    except AssertionError:
        client.close()
        raise
    return client
