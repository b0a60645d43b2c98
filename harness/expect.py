from __future__ import annotations

from typing import Iterable

import httpx
import pytest

from .audit import audit_log, collection_of

# Accepted status sets. The service answers the same logical outcome with
# different codes across builds, so assertions take a set rather than a code.
SUCCESS = frozenset({200, 201})
ALREADY_ABSENT = frozenset({200, 400, 404})
GONE = frozenset({400, 404})
DETACHED = frozenset({200, 404})
BAD_INPUT = frozenset({400, 415, 422})
NOT_ALLOWED = frozenset({404, 405})
MISSING_RELATED = frozenset({400, 404})
DUPLICATE_LINK = frozenset({200, 201, 400, 409})
PROBE_OK = frozenset({200, 204})


class UnexpectedStatus(AssertionError):
    """Raised when a response status is outside the accepted set for the call."""

    def __init__(self, response: httpx.Response, accepted: Iterable[int]):
        self.response = response
        self.accepted = frozenset(accepted)
        request = response.request
        body = (response.text or "")[:300]
        super().__init__(
            f"{request.method} {request.url.path} returned {response.status_code}, "
            f"expected one of {sorted(self.accepted)}: {body!r}"
        )


def expect_status(response: httpx.Response, accepted: int | Iterable[int]) -> httpx.Response:
    accepted_set = frozenset({accepted}) if isinstance(accepted, int) else frozenset(accepted)
    if response.status_code not in accepted_set:
        raise UnexpectedStatus(response, accepted_set)
    return response


def assume(condition: bool, note: str) -> None:
    """Skip the running test with `note` unless `condition` holds."""
    if not condition:
        pytest.skip(note)


def assume_not(condition: bool, note: str) -> None:
    if condition:
        pytest.skip(note)


def expect_variant(
    response: httpx.Response,
    expected: int | Iterable[int],
    observed: int | Iterable[int],
    note: str,
) -> httpx.Response:
    """
    Check a call whose outcome is known to differ between service builds.

    - status in `expected`: passes.
    - status only in `observed`: the other documented variant happened; the test
      is skipped with `note` so the behaviour stays visible in the report.
    - anything else: hard failure.
    """
    expected_set = frozenset({expected}) if isinstance(expected, int) else frozenset(expected)
    observed_set = frozenset({observed}) if isinstance(observed, int) else frozenset(observed)
    status = response.status_code
    if status in expected_set:
        return response
    if status in observed_set:
        path = response.request.url.path
        audit_log(
            "variance",
            collection_of(path),
            method=response.request.method,
            path=path,
            extra={"status": status, "note": note},
        )
        pytest.skip(f"{note} (got {status})")
    raise UnexpectedStatus(response, expected_set | observed_set)


def as_bool(value) -> bool | None:
    """Read a flag the service may send either as a JSON boolean or as "true"/"false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return None
