#!/usr/bin/env python3
"""
User Management CLI

Command-line tool for managing users from the server terminal.
Use this when you need to reset passwords or create accounts without the API.

Usage:
    python user_cli.py create-user <email> <password>
    python user_cli.py reset-password <email> <new_password>
    python user_cli.py list-users

Or, once installed:
    expense-tracker-users list-users
"""
import sys
import argparse
import asyncio
from pathlib import Path

# Add project root to path (file is in root)
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from backend.app.db.session import get_async_engine, init_database  # noqa: E402
from backend.app.repositories import RepositoryError, UserRepository  # noqa: E402
from backend.app.schemas.auth import AuthPasswordResetRequest  # noqa: E402
from backend.app.schemas.common import validate_input  # noqa: E402
from backend.app.services.auth_service import AuthService  # noqa: E402
from backend.app.utils.security import hash_password  # noqa: E402


async def cmd_create_user(email: str, password: str) -> bool:
    """Create a new user with the same rules as API registration."""
    engine = get_async_engine()

    async with AsyncSession(engine, expire_on_commit=False) as session:
        result = await AuthService(session).register(email, password)

        if result.success:
            print(f"✅ User '{result.data.user.email}' created with ID {result.data.user.id}")
        else:
            print(f"❌ {result.error}")
        return result.success


async def cmd_reset_password(email: str, new_password: str) -> bool:
    """Reset a user's password."""
    validation = validate_input(AuthPasswordResetRequest, {"email": email, "new_password": new_password})
    if not validation.success:
        print(f"❌ {validation.first_error}")
        return False

    engine = get_async_engine()

    async with AsyncSession(engine, expire_on_commit=False) as session:
        users = UserRepository(session)
        try:
            user = await users.find_by_email(validation.data.email)
            if user is None:
                print(f"❌ User '{validation.data.email}' not found")
                return False

            password_hash = await asyncio.to_thread(hash_password, validation.data.new_password)
            updated = await users.update(user.id, {"password": password_hash})
        except RepositoryError as e:
            print(f"❌ {e}")
            return False

        if updated is None:
            print(f"❌ User '{user.email}' no longer exists")
            return False
        print(f"✅ Password reset for user '{user.email}'")
        return True


async def cmd_list_users() -> bool:
    """List all users."""
    engine = get_async_engine()

    async with AsyncSession(engine, expire_on_commit=False) as session:
        try:
            users = await UserRepository(session).list_all()
        except RepositoryError as e:
            print(f"❌ {e}")
            return False

        if not users:
            print("No users found")
            return True

        print(f"\n{'ID':<5} {'Email':<40} {'Created':<20}")
        print("-" * 67)

        for user in users:
            print(f"{user.id:<5} {user.email:<40} {user.created_at:%Y-%m-%d %H:%M}")

        print(f"\nTotal: {len(users)} user(s)")
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Expense Tracker User Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python user_cli.py create-user john@example.com Password123
  python user_cli.py reset-password john@example.com NewPassword456
  python user_cli.py list-users
        """
        )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # create-user
    create_parser = subparsers.add_parser("create-user", help="Create a user")
    create_parser.add_argument("email", help="Email address")
    create_parser.add_argument("password", help="Password (8+ chars, lower + upper + digit)")

    # reset-password
    reset_parser = subparsers.add_parser("reset-password", help="Reset user password")
    reset_parser.add_argument("email", help="Email address")
    reset_parser.add_argument("new_password", help="New password")

    # list-users
    subparsers.add_parser("list-users", help="List all users")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    init_database()

    if args.command == "create-user":
        ok = asyncio.run(cmd_create_user(args.email, args.password))
    elif args.command == "reset-password":
        ok = asyncio.run(cmd_reset_password(args.email, args.new_password))
    else:
        ok = asyncio.run(cmd_list_users())
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
