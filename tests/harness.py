"""Test harness for unit and integration tests.

Integration tests assume PostgreSQL is already running and migrated
(`python scripts/run_migrations.py`). Settings are loaded from environment
variables (configure via .env or export).
"""

import pytest_asyncio

from signin.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that builds a test container with the given
    unmocking and yields a request-scoped container for service access.

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - in-memory users, no database needed
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_find_user(integration_env):
            service = await integration_env.get(UserService)
            user = await service.find_by_email("ada@example.com")
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
