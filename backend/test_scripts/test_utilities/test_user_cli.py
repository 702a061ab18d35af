"""
Tests for the user management CLI (user_cli.py).
"""
import pytest

import user_cli
from backend.app.repositories import RepositoryError
from backend.test_scripts.test_utils import print_section, print_success


class TestUserCli:
    """create-user, reset-password and list-users."""

    def test_create_reset_and_list(self, unique_email, capsys):
        """CLI-001: Full account lifecycle from the terminal."""
        print_section("CLI-001: create-user / reset-password / list-users")
        email = unique_email("cli")

        assert user_cli.main(["create-user", email, "Password123"]) == 0
        assert f"User '{email}' created" in capsys.readouterr().out

        assert user_cli.main(["reset-password", email, "NewPassword456"]) == 0
        assert f"Password reset for user '{email}'" in capsys.readouterr().out

        assert user_cli.main(["list-users"]) == 0
        assert email in capsys.readouterr().out
        print_success("CLI lifecycle OK")

    def test_create_duplicate(self, unique_email, capsys):
        """CLI-002: Same rules as API registration."""
        email = unique_email("cli_dup")
        user_cli.main(["create-user", email, "Password123"])
        capsys.readouterr()

        assert user_cli.main(["create-user", email, "Password123"]) == 1
        assert "A user with this email address already exists" in capsys.readouterr().out

    def test_reset_weak_password(self, unique_email, capsys):
        """CLI-003: New passwords follow the registration policy."""
        assert user_cli.main(["reset-password", unique_email("cli_weak"), "short"]) == 1
        assert "Password must be at least 8 characters long" in capsys.readouterr().out

    def test_reset_unknown_user(self, unique_email, capsys):
        """CLI-004: Unknown email."""
        assert user_cli.main(["reset-password", unique_email("cli_none"), "Password123"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_reset_storage_failure(self, unique_email, capsys, monkeypatch):
        """CLI-006: Storage errors print a failure line instead of a traceback."""
        email = unique_email("cli_fail")
        user_cli.main(["create-user", email, "Password123"])
        capsys.readouterr()

        async def failing_update(self, user_id, data):
            raise RepositoryError("Failed to update user")

        monkeypatch.setattr(user_cli.UserRepository, "update", failing_update)
        assert user_cli.main(["reset-password", email, "NewPassword456"]) == 1
        assert "❌ Failed to update user" in capsys.readouterr().out

    def test_reset_user_vanished(self, unique_email, capsys, monkeypatch):
        """CLI-007: A user deleted between lookup and update is reported."""
        email = unique_email("cli_gone")
        user_cli.main(["create-user", email, "Password123"])
        capsys.readouterr()

        async def missing_update(self, user_id, data):
            return None

        monkeypatch.setattr(user_cli.UserRepository, "update", missing_update)
        assert user_cli.main(["reset-password", email, "NewPassword456"]) == 1
        out = capsys.readouterr().out
        assert "no longer exists" in out
        assert "Password reset" not in out

    def test_no_command(self, capsys):
        """CLI-005: No command prints help and fails."""
        assert user_cli.main([]) == 1
        assert "create-user" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
