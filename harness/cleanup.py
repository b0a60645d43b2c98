from __future__ import annotations

from typing import Optional

import httpx

from .audit import audit_log
from .client import get_json
from .expect import ALREADY_ABSENT, expect_status
from .ids import list_items

COLLECTIONS = ("todos", "categories", "projects")


def delete_if_exists(client: httpx.Client, path: str) -> httpx.Response:
    """DELETE `path`; 200 (removed), 404 or 400 (already gone) are all fine."""
    return expect_status(client.delete(path), ALREADY_ABSENT)


def safe_delete(client: httpx.Client, collection: str, id_: Optional[str]) -> None:
    """Best-effort delete ignoring the outcome; an unknown id issues nothing."""
    if id_ is None:
        return
    try:
        client.delete(f"/{collection}/{id_}")
    except httpx.HTTPError as e:
        audit_log("cleanup_failed", collection, id_, {"error": str(e)})


def cleanup_all(client: httpx.Client) -> int:
    """
    Delete every todo, category and project the service currently lists.
    Never raises; a failed delete is logged for that entity and the walk goes on.
    Returns the number of entities removed.
    """
    removed = 0
    for collection in COLLECTIONS:
        try:
            r = get_json(client, f"/{collection}")
        except httpx.HTTPError as e:
            audit_log("cleanup_failed", collection, extra={"error": str(e)})
            continue
        if r.status_code != 200:
            audit_log("cleanup_skipped", collection, extra={"status": r.status_code})
            continue
        for item in list_items(r, collection):
            if item.get("id") is None:
                continue
            try:
                if delete_if_exists(client, f"/{collection}/{item['id']}").status_code == 200:
                    removed += 1
            except (AssertionError, httpx.HTTPError) as e:
                audit_log("cleanup_failed", collection, item["id"], {"error": str(e)})
    return removed
