"""
Basic CRUD walk against a running Todo Manager service.

    python -m harness.smoke

Base URL comes from TODO_API_BASE_URL (default http://localhost:4567).
Exits non-zero on the first unexpected status.
"""
from __future__ import annotations

import sys

import httpx

from .client import build_client, get_json, send_json
from .config import Settings
from .expect import SUCCESS, UnexpectedStatus, expect_status
from .ids import extract_id


def run(client: httpx.Client) -> str:
    """Run the ten smoke steps; returns the id of the todo that was created and deleted."""
    print("1. Creating a new todo...")
    r = expect_status(
        send_json(client, "POST", "/todos", {"title": "Test Todo", "doneStatus": False, "description": "Test description"}),
        SUCCESS,
    )
    todo_id = extract_id(r, "todos")
    if todo_id is None:
        raise AssertionError(f"POST /todos returned no id: {r.text!r}")
    print(f"Created Todo ID: {todo_id}")

    print("2. Getting all todos...")
    expect_status(get_json(client, "/todos"), 200)

    print(f"3. Getting specific todo (ID: {todo_id})...")
    expect_status(get_json(client, f"/todos/{todo_id}"), 200)

    print("4. Updating todo (PUT - replace)...")
    expect_status(
        send_json(client, "PUT", f"/todos/{todo_id}", {"title": "Updated Todo", "doneStatus": True, "description": "Updated description"}),
        SUCCESS,
    )

    print("5. Partial update (POST - amend)...")
    expect_status(send_json(client, "POST", f"/todos/{todo_id}", {"description": "Amended description"}), SUCCESS)

    print("6. Getting todo after updates...")
    r = expect_status(get_json(client, f"/todos/{todo_id}"), 200)
    print(r.text)

    print("7. Testing HEAD request...")
    expect_status(client.head(f"/todos/{todo_id}"), 200)

    print("8. Testing OPTIONS request...")
    expect_status(client.options(f"/todos/{todo_id}"), 200)

    print("9. Deleting todo...")
    expect_status(client.delete(f"/todos/{todo_id}"), 200)

    print("10. Verifying deletion (should return 404)...")
    expect_status(get_json(client, f"/todos/{todo_id}"), 404)
    return todo_id


def main() -> int:
    settings = Settings.from_env()
    print(f"=== Basic CRUD smoke walk against {settings.base_url} ===")
    with build_client(settings) as client:
        try:
            run(client)
        except (UnexpectedStatus, AssertionError) as e:
            print(f"FAILED: {e}", file=sys.stderr)
            return 1
        except httpx.HTTPError as e:
            print(f"FAILED: service not reachable: {e}", file=sys.stderr)
            return 2
    print("=== Basic CRUD smoke walk completed ===")
    return 0


if __name__ == "__main__":
    sys.exit(main())
