from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "http://localhost:4567"


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 5.0
    # An unreachable service fails the live suites unless this is switched off
    require_service: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        try:
            timeout = float(os.getenv("TODO_API_TIMEOUT", "5.0"))
        except ValueError:
            timeout = 5.0
        return cls(
            base_url=os.getenv("TODO_API_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout=timeout,
            require_service=_truthy(os.getenv("TODO_API_REQUIRE_SERVICE", "1")),
        )
