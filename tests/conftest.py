"""Shared pytest fixtures for the intranet client tests.

Fixture Organization:
    - Configuration fixtures: isolated IntraConfig, singleton reset
    - Stub server fixtures: IntranetStub wired through httpx.MockTransport
    - Live test gating: requires_intranet marker + --run-integration
"""

import os
import sys
from pathlib import Path

import pytest

# Add tests directory to sys.path so test modules can import intranet_test_helpers
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from epitech_intra.config import IntraConfig, reset_config  # noqa: E402
from intranet_test_helpers import (  # noqa: E402
    SESSION_COOKIE,
    IntranetStub,
    make_profile,
)


def pytest_addoption(parser):
    """Add custom command line options for test selection."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run live tests against the real intranet (needs INTRA_AUTOLOGIN)",
    )


@pytest.fixture(autouse=True)
def skip_without_intranet(request):
    """Skip tests marked requires_intranet unless explicitly enabled."""
    if request.node.get_closest_marker("requires_intranet"):
        if not request.config.getoption("--run-integration"):
            pytest.skip("live intranet tests need --run-integration")
        if not os.getenv("INTRA_AUTOLOGIN"):
            pytest.skip("INTRA_AUTOLOGIN not set")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, request):
    """Drop INTRA_* settings (live tests keep them) and reset the singleton."""
    if not request.node.get_closest_marker("requires_intranet"):
        for name in list(os.environ):
            if name.startswith("INTRA_") and name not in ("INTRA_LOG_LEVEL", "INTRA_LOG_FORMAT"):
                monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def intra_config() -> IntraConfig:
    """Config with a small retry budget, ignoring any local .env file."""
    return IntraConfig(_env_file=None, intra_retry_count=3)


@pytest.fixture
def stub() -> IntranetStub:
    return IntranetStub()


@pytest.fixture
def logged_in_stub(stub) -> IntranetStub:
    """Stub answering the autologin redirect and the own-profile lookup."""
    stub.add_login_redirect(
        "language=fr; Path=/",
        f"{SESSION_COOKIE}; expires=Thu, 01-Jan-2037 00:00:00 GMT; path=/; HttpOnly",
    )
    stub.add_json("/user", make_profile("jane.doe@epitech.eu"))
    return stub
