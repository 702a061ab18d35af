"""
Test Database Configuration

Manages test database setup and teardown.
Tests use a separate database to avoid corrupting development data.

setup_test_database() only touches environment variables, so it must run
BEFORE any app module is imported (the engines read DATABASE_URL at import).
conftest.py calls it first thing.
"""
import os
from pathlib import Path

# Project root and database directory
PROJECT_ROOT = Path(__file__).parent.parent.parent
TEST_DB_PATH = PROJECT_ROOT / "backend" / "data" / "sqlite" / "test_app.db"
DB_DIR = TEST_DB_PATH.parent

# Absolute URL so tests work from any working directory
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")

TEST_ENVIRONMENT = {
    "EXPENSE_TRACKER_TEST_MODE": "1",
    "DATABASE_URL": TEST_DATABASE_URL,
    "TEST_DATABASE_URL": TEST_DATABASE_URL,
    # Low bcrypt cost keeps the suite fast; 4 is bcrypt's minimum
    "BCRYPT_ROUNDS": "4",
    "JWT_SECRET": "test-secret-key-for-the-test-suite-only",
    "LOG_TO_FILE": "false",
    "RATE_LIMIT_MAX_REQUESTS": "100000",
    "AUTH_RATE_LIMIT_MAX_REQUESTS": "100000",
    }


def setup_test_database(fresh: bool = True) -> Path:
    """
    Configure environment to use the test database.
    Must be called BEFORE importing any app modules that use DATABASE_URL.

    Args:
        fresh: Delete a leftover test database file first

    Returns:
        Path: Path to test database
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)
    os.environ.update(TEST_ENVIRONMENT)

    if fresh:
        cleanup_test_database()

    return TEST_DB_PATH


def cleanup_test_database():
    """
    Remove test database file.
    """
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()


def verify_test_database() -> tuple[bool, str]:
    """
    Verify that we're using the test database.

    Returns:
        tuple: (is_test_db, database_url)
    """
    # Import settings at call time so that the test mode env var has effect
    from backend.app.config import get_settings

    db_url = get_settings().DATABASE_URL
    return "test_app" in db_url, db_url


def initialize_test_database(print_func=None) -> bool:
    """
    Create the schema in the test database, refusing to touch any other database.

    Args:
        print_func: Optional print function (e.g., print_info from test_utils)

    Returns:
        bool: True if initialization successful and using test DB, False otherwise
    """
    if print_func is None:
        print_func = print

    is_test, db_url = verify_test_database()
    if not is_test:
        print_func(f"DANGER: Not using test database! Current DATABASE_URL: {db_url}")
        return False

    from backend.app.db.session import init_database

    init_database()
    print_func(f"Using test database: {db_url}")
    return True
