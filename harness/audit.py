from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any


def _enabled() -> bool:
    return os.getenv("HARNESS_AUDIT_ENABLED", "1") == "1"


def collection_of(path: str) -> str:
    """First segment of a service path: "/todos/3/categories" -> "todos"."""
    return path.strip("/").split("/", 1)[0]


def audit_log(
    action: str,
    resource: str,
    resource_id: Any | None = None,
    extra: dict | None = None,
    *,
    method: str | None = None,
    path: str | None = None,
) -> None:
    """
    Print one harness event as a JSON line on stdout; pytest keeps it with the test's output.

    `resource` is the collection or relation the event concerns. `method` and
    `path` carry the HTTP call behind the event, when there is one.
    Set HARNESS_AUDIT_ENABLED to anything but "1" to silence it.
    """
    if not _enabled():
        return
    evt = {
        "ts": datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z",
        "action": action,
        "resource": resource,
        "resource_id": resource_id,
        "method": method,
        "path": path,
        "extra": extra or {},
    }
    try:
        print(json.dumps({"audit": evt}, separators=(",", ":"), default=str))
    except (TypeError, ValueError):
        # An unprintable field must not fail the test that logged it
        pass
