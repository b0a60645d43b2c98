from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import httpx

from .audit import audit_log
from .client import get_json, send_json
from .expect import DETACHED, SUCCESS, expect_status
from .ids import ids_in, list_items


@dataclass(frozen=True)
class Relation:
    owner: str
    name: str
    # Key the relation listing nests its entities under
    key: str
    related: str
    reverse: Tuple[str, str]


RELATIONS: Dict[Tuple[str, str], Relation] = {
    (r.owner, r.name): r
    for r in (
        Relation("todos", "categories", "categories", "categories", ("categories", "todos")),
        Relation("todos", "tasksof", "projects", "projects", ("projects", "tasks")),
        Relation("projects", "tasks", "todos", "todos", ("todos", "tasksof")),
        Relation("projects", "categories", "categories", "categories", ("categories", "projects")),
        Relation("categories", "todos", "todos", "todos", ("todos", "categories")),
        Relation("categories", "projects", "projects", "projects", ("projects", "categories")),
    )
}


def relation(owner: str, name: str) -> Relation:
    try:
        return RELATIONS[(owner, name)]
    except KeyError:
        raise ValueError(f"Unknown relationship: /{owner}/{{id}}/{name}") from None


def relation_path(owner: str, owner_id: str, name: str, related_id: str | None = None) -> str:
    base = f"/{owner}/{owner_id}/{name}"
    return base if related_id is None else f"{base}/{related_id}"


def attach(client: httpx.Client, owner: str, owner_id: str, name: str, related_id: str) -> httpx.Response:
    """POST `{"id": related_id}` to the relation; the caller judges the status."""
    relation(owner, name)
    return send_json(client, "POST", relation_path(owner, owner_id, name), {"id": related_id})


def link(client: httpx.Client, owner: str, owner_id: str, name: str, related_id: str) -> httpx.Response:
    r = expect_status(attach(client, owner, owner_id, name, related_id), SUCCESS)
    audit_log("link", name, related_id, method="POST", path=relation_path(owner, owner_id, name))
    return r


def detach(client: httpx.Client, owner: str, owner_id: str, name: str, related_id: str) -> httpx.Response:
    """Remove one association; 404 counts as already detached."""
    relation(owner, name)
    r = expect_status(client.delete(relation_path(owner, owner_id, name, related_id)), DETACHED)
    audit_log(
        "unlink",
        name,
        related_id,
        {"status": r.status_code},
        method="DELETE",
        path=relation_path(owner, owner_id, name, related_id),
    )
    return r


def linked_ids(client: httpx.Client, owner: str, owner_id: str, name: str) -> set[str]:
    rel = relation(owner, name)
    r = expect_status(get_json(client, relation_path(owner, owner_id, name)), 200)
    return ids_in(list_items(r, rel.key))


def is_linked(client: httpx.Client, owner: str, owner_id: str, name: str, related_id: str) -> bool:
    return related_id in linked_ids(client, owner, owner_id, name)


@dataclass(frozen=True)
class LinkCheck:
    forward: bool
    # None when the reverse listing was not consulted
    reverse: Optional[bool]

    @property
    def symmetric(self) -> bool:
        return self.forward and bool(self.reverse)


def verify_link(
    client: httpx.Client,
    owner: str,
    owner_id: str,
    name: str,
    related_id: str,
    check_reverse: bool = True,
) -> LinkCheck:
    """Look for the association from the owning side and, optionally, from the related side."""
    rel = relation(owner, name)
    forward = is_linked(client, owner, owner_id, name, related_id)
    reverse = None
    if check_reverse:
        rev_owner, rev_name = rel.reverse
        reverse = is_linked(client, rev_owner, related_id, rev_name, owner_id)
    check = LinkCheck(forward=forward, reverse=reverse)
    audit_log(
        "verify_link",
        relation_path(owner, owner_id, name),
        related_id,
        {"forward": check.forward, "reverse": check.reverse},
    )
    return check
