"""
Shared pytest fixtures.

The test environment is configured at import time, before any test module
imports the app (engines are created when backend.app.db.session is imported).
"""
import sys
from pathlib import Path

import pytest
import pytest_asyncio

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from backend.test_scripts.test_db_config import setup_test_database, initialize_test_database  # noqa: E402

setup_test_database()

from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from backend.app.db.session import get_async_engine  # noqa: E402
from backend.test_scripts.test_utils import unique_id  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_database():
    """Create the schema once per test session."""
    if not initialize_test_database():
        pytest.exit("Refusing to run against a non-test database", returncode=1)
    yield


@pytest.fixture(scope="module")
def engine():
    """Get async engine."""
    return get_async_engine()


@pytest_asyncio.fixture
async def session(engine):
    """Fresh session per test."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def unique_email():
    """Factory of never-repeating email addresses."""
    def make(prefix: str = "user") -> str:
        return f"{unique_id(prefix).lower()}@example.com"

    return make
