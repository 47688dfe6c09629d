"""
Global pytest configuration for test database toggling.

Usage:
- Default: reuse test DB across runs for speed.
- Override quickly via CLI:
    pytest --db-mode=recreate   # drop and re-create test DB
    pytest --db-mode=flush      # keep schema, flush data at session start
    pytest --db-mode=reuse      # reuse existing test DB (default)
- Or via env var (takes effect if CLI option omitted):
    PYTEST_DB_MODE=recreate pytest

Modes:
- reuse:     pytest-django --reuse-db (fastest, no deletion)
- recreate:  force re-create test DB (--create-db, disable reuse)
- flush:     reuse schema but flush all data once at session start
"""

import os
import secrets

import pytest
from django.core.management import call_command


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--db-mode",
        action="store",
        default=os.getenv("PYTEST_DB_MODE", "reuse"),
        choices=["reuse", "recreate", "flush"],
        help=(
            "Test DB mode: 'reuse' (default), 'recreate' (drop & re-create), or "
            "'flush' (keep schema, clear data at session start)."
        ),
    )


def pytest_configure(config: pytest.Config) -> None:
    mode = config.getoption("--db-mode")

    if mode == "recreate":
        config.option.reuse_db = False
        config.option.create_db = True
    elif mode in ("reuse", "flush"):
        config.option.reuse_db = True
        config.option.create_db = False


@pytest.fixture(scope="session", autouse=True)
def _maybe_flush_db(request: pytest.FixtureRequest, django_db_blocker) -> None:
    """Flush DB once at session start if --db-mode=flush."""
    mode = request.config.getoption("--db-mode")
    if mode != "flush":
        return

    with django_db_blocker.unblock():
        call_command("flush", verbosity=0, interactive=False)


@pytest.fixture(autouse=True)
def disable_throttling(settings):
    """
    Disable DRF throttling in all tests.

    Even though test.py disables throttling, this ensures it's disabled
    for all test cases regardless of settings overrides.
    """
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "test-cache-fixture",
        },
    }
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}


@pytest.fixture
def superuser(db):
    """
    Fixture that creates a superuser for testing.

    This superuser is used for auto-authentication in tests that don't
    explicitly test RoleBasedPermission behavior.
    """
    from apps.core.models import User

    password = secrets.token_urlsafe(16)

    return User.objects.create_superuser(
        username="test_superuser",
        email="superuser@test.com",
        password=password,
    )


@pytest.fixture
def api_client(request, superuser):
    """
    Fixture that provides a DRF APIClient with auto-authentication.

    By default, the client is authenticated as a superuser to bypass
    RoleBasedPermission checks. Tests that need to verify permission
    behavior should be marked with @pytest.mark.rbp to receive an
    unauthenticated client instead.
    """
    from rest_framework.test import APIClient

    client = APIClient()

    marker_names = {marker.name for marker in request.node.iter_markers()}
    if "rbp" not in marker_names:
        client.force_authenticate(user=superuser)

    return client


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """
    Auto-categorize tests as unit or integration based on patterns.

    Tests can override these auto-markers by explicitly using
    @pytest.mark.integration or @pytest.mark.unit.
    """
    for item in items:
        marker_names = {marker.name for marker in item.iter_markers()}

        has_test_type = "integration" in marker_names or "unit" in marker_names
        if not has_test_type:
            # API/ViewSet tests exercise the request/response cycle
            is_integration = (
                "test_api" in item.nodeid
                or "_api.py" in item.nodeid
                or "API" in str(item.cls)
                or "ViewSet" in str(item.cls)
            )

            if is_integration:
                item.add_marker(pytest.mark.integration)
            else:
                item.add_marker(pytest.mark.unit)
