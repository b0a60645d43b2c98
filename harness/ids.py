from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import httpx


@dataclass(frozen=True)
class Direct:
    """Creation response carrying the new object at the root."""
    id: str


@dataclass(frozen=True)
class Listed:
    """Creation response wrapping the object(s) in a `<collection>` array."""
    items: List[Dict[str, Any]]


Created = Union[Direct, Listed]


def _body(source: httpx.Response | Dict[str, Any] | None) -> Any:
    if isinstance(source, httpx.Response):
        if not source.content:
            return None
        try:
            return source.json()
        except ValueError:
            return None
    return source


def decode_created(source: httpx.Response | Dict[str, Any] | None, collection: str | None) -> Optional[Created]:
    body = _body(source)
    if not isinstance(body, dict):
        return None
    if body.get("id") is not None:
        return Direct(id=str(body["id"]))
    if collection:
        items = body.get(collection)
        if isinstance(items, list):
            return Listed(items=[x for x in items if isinstance(x, dict)])
    return None


def extract_id(source: httpx.Response | Dict[str, Any] | None, collection: str | None) -> Optional[str]:
    decoded = decode_created(source, collection)
    if isinstance(decoded, Direct):
        return decoded.id
    if isinstance(decoded, Listed) and decoded.items:
        first = decoded.items[0].get("id")
        return None if first is None else str(first)
    return None


def list_items(source: httpx.Response | Dict[str, Any] | None, key: str) -> List[Dict[str, Any]]:
    """Entities under `key` in a listing body; an absent or null key reads as empty."""
    body = _body(source)
    if not isinstance(body, dict):
        return []
    items = body.get(key)
    if not isinstance(items, list):
        return []
    return [x for x in items if isinstance(x, dict)]


def ids_in(items: List[Dict[str, Any]]) -> set[str]:
    return {str(x["id"]) for x in items if x.get("id") is not None}
