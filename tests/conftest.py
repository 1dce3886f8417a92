"""
Pytest configuration and shared fixtures for Posta governance tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Time-dependent tests use FakeTimeAuthority
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from collections.abc import Iterator

import pytest

from posta.bootstrap.governance import reset_governance_core
from tests.helpers.fake_time_authority import FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from posta import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Provide a frozen clock at 2026-01-01T00:00:00Z."""
    return FakeTimeAuthority()


@pytest.fixture(autouse=True)
def _reset_governance_singletons() -> Iterator[None]:
    """Keep bootstrap singletons from leaking between tests."""
    reset_governance_core()
    yield
    reset_governance_core()
