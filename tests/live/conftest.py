import pytest

from harness.cleanup import cleanup_all
from harness.client import open_session
from harness.config import Settings


@pytest.fixture(scope="session")
def settings() -> Settings:
    return Settings.from_env()


@pytest.fixture(scope="session")
def api(settings):
    # Fails the whole live run when GET /todos is unreachable or not 200/204
    with open_session(settings) as c:
        yield c


@pytest.fixture(autouse=True)
def isolate(api):
    """Wipe every collection after each test."""
    yield
    cleanup_all(api)
