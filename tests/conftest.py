import os

import pytest

# Ensure allowed environment for env_loader
os.environ.setdefault("ENV", "dev")
os.environ.setdefault("CACHE_BACKEND", "file")

from tests._factories import StravaActivityFactory  # noqa: E402


class AccidentalDatabaseAccessError(Exception):
    """Raised when a unit test accidentally tries to access the database."""

    pass


def _raise_db_access_error(*args, **kwargs):
    """Raise an error when DB access is attempted in unit tests."""
    raise AccidentalDatabaseAccessError(
        "Unit test attempted to connect to the database! "
        "Either mock the database call with @patch('recap.db.cache_entries.get_db_cursor') "
        "or similar, or mark this test as @pytest.mark.e2e if it requires real DB access."
    )


@pytest.fixture(autouse=True)
def prevent_db_access_in_unit_tests(request, monkeypatch):
    """Prevent accidental database access in unit tests.

    For tests marked e2e this does nothing. Everywhere else psycopg.connect is
    patched to fail fast with a clear error.
    """
    markers = [marker.name for marker in request.node.iter_markers()]
    if "e2e" in markers:
        yield
        return

    monkeypatch.setattr("psycopg.connect", _raise_db_access_error)
    yield


@pytest.fixture(scope="session")
def activity_factory() -> StravaActivityFactory:
    return StravaActivityFactory()
