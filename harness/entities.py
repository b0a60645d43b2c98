from __future__ import annotations

import itertools
import time
from typing import Optional, Union
from xml.etree import ElementTree

import httpx
from pydantic import ValidationError

from .audit import audit_log
from .client import get_json, send_json, send_xml
from .expect import SUCCESS, expect_status
from .ids import extract_id, list_items
from .schemas import (
    OUT_SCHEMAS,
    CategoryCreate,
    CategoryOut,
    ProjectCreate,
    ProjectOut,
    TodoCreate,
    TodoOut,
)

Entity = Union[TodoOut, CategoryOut, ProjectOut]

_seq = itertools.count()


def unique_title(prefix: str) -> str:
    return f"{prefix}-{time.monotonic_ns()}-{next(_seq)}"


def find_todo_id_by_title(client: httpx.Client, title: str) -> Optional[str]:
    """First todo returned by `GET /todos?title=<title>`."""
    r = expect_status(get_json(client, "/todos", params={"title": title}), 200)
    todos = list_items(r, "todos")
    if todos and todos[0].get("id") is not None:
        return str(todos[0]["id"])
    return None


def find_id_by_title(client: httpx.Client, collection: str, title: str) -> Optional[str]:
    """Scan the whole collection for an entity titled `title`."""
    r = expect_status(get_json(client, f"/{collection}"), 200)
    for item in list_items(r, collection):
        if str(item.get("title")) == title and item.get("id") is not None:
            return str(item["id"])
    return None


def _create(client: httpx.Client, collection: str, payload: dict, title: str) -> Optional[str]:
    r = expect_status(send_json(client, "POST", f"/{collection}", payload), SUCCESS)
    id_ = extract_id(r, collection)
    if id_ is None:
        # Creation body without a usable id; recover it by title
        if collection == "todos":
            id_ = find_todo_id_by_title(client, title)
        else:
            id_ = find_id_by_title(client, collection, title)
    audit_log("create", collection, id_, {"title": title}, method="POST", path=f"/{collection}")
    return id_


def create_todo(client: httpx.Client, title: str, done: bool = False, description: str | None = None) -> Optional[str]:
    payload = TodoCreate(title=title, done_status=done, description=description or "")
    return _create(client, "todos", payload.model_dump(by_alias=True), title)


def todo_xml(title: str, done: bool = False, description: str | None = None) -> str:
    root = ElementTree.Element("todo")
    ElementTree.SubElement(root, "title").text = title
    ElementTree.SubElement(root, "doneStatus").text = "true" if done else "false"
    ElementTree.SubElement(root, "description").text = description or ""
    return ElementTree.tostring(root, encoding="unicode")


def create_todo_xml(client: httpx.Client, title: str, done: bool = False, description: str | None = None) -> Optional[str]:
    """Create a todo from an XML document; the id is always resolved by title."""
    expect_status(send_xml(client, "POST", "/todos", todo_xml(title, done, description)), SUCCESS)
    id_ = find_todo_id_by_title(client, title)
    audit_log("create", "todos", id_, {"title": title, "format": "xml"}, method="POST", path="/todos")
    return id_


def create_category(client: httpx.Client, title: str, description: str | None = None) -> Optional[str]:
    payload = CategoryCreate(title=title, description=description or "")
    return _create(client, "categories", payload.model_dump(), title)


def create_project(
    client: httpx.Client,
    title: str,
    description: str | None = None,
    completed: bool = False,
) -> Optional[str]:
    payload = ProjectCreate(title=title, description=description or "", completed=completed)
    return _create(client, "projects", payload.model_dump(), title)


def fetch(client: httpx.Client, collection: str, id_: str) -> Optional[Entity]:
    """Read `/<collection>/<id>` and decode the first listed entity; None when absent."""
    r = get_json(client, f"/{collection}/{id_}")
    if r.status_code == 404:
        return None
    expect_status(r, 200)
    items = list_items(r, collection)
    if not items:
        return None
    try:
        return OUT_SCHEMAS[collection].model_validate(items[0])
    except ValidationError as e:
        raise AssertionError(f"/{collection}/{id_} returned an unreadable {collection} entry: {e}") from e
