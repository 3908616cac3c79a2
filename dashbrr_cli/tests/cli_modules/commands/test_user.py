"""Tests for the user command."""
from __future__ import annotations

from typing import TYPE_CHECKING

import bcrypt
import pytest
from returns.io import IOFailure, IOSuccess
from returns.unsafe import unsafe_perform_io

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands.user import new_user_command
from dashbrr_cli.cli_modules.errors import (
    COLLABORATOR_ERROR,
    DUPLICATE_USER,
    INVALID_ARGUMENT,
    MISSING_ARGUMENTS,
    NOT_FOUND,
    UNKNOWN_ACTION,
    CommandError,
)

if TYPE_CHECKING:
    from pytest_mock import MockerFixture

    from dashbrr_cli.cli_modules.types import CommandContext, UserRecord


def _user(ctx: CommandContext, username: str) -> UserRecord | None:
    result = io_ops.get_user_by_username(ctx.settings.db_path, username)
    return unsafe_perform_io(result.unwrap())


def _error(result: object) -> CommandError:
    assert isinstance(result, IOFailure)
    return unsafe_perform_io(result.failure())  # type: ignore[no-any-return]


def test_create_user_with_default_email(
    command_context: CommandContext,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """A user without an email gets <name>@<default domain>."""
    result = new_user_command().execute(
        command_context, ["create", "alice", "s3cretpass"],
    )
    assert isinstance(result, IOSuccess)
    assert capsys.readouterr().out == "User alice created successfully\n"
    user = _user(command_context, "alice")
    assert user is not None
    assert user.email == "alice@dashbrr.local"
    assert bcrypt.checkpw(b"s3cretpass", user.password_hash.encode())


def test_create_user_with_email(command_context: CommandContext) -> None:
    """An explicit email is stored as given."""
    new_user_command().execute(
        command_context, ["create", "bob", "password1", "bob@example.org"],
    )
    user = _user(command_context, "bob")
    assert user is not None
    assert user.email == "bob@example.org"


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (
            ["create", "al", "password1"],
            "username must be between 3 and 32 characters",
        ),
        (
            ["create", "a" * 33, "password1"],
            "username must be between 3 and 32 characters",
        ),
        (
            ["create", "alice", "short"],
            "password must be at least 8 characters long",
        ),
    ],
)
def test_create_user_validation(
    command_context: CommandContext,
    args: list[str],
    message: str,
) -> None:
    """Username length and password length are enforced."""
    error = _error(new_user_command().execute(command_context, args))
    assert error.error_type == INVALID_ARGUMENT
    assert error.message == message


def test_create_user_duplicate_username(command_context: CommandContext) -> None:
    """A taken username fails with DuplicateUser."""
    cmd = new_user_command()
    cmd.execute(command_context, ["create", "carol", "password1"])
    error = _error(
        cmd.execute(command_context, ["create", "carol", "password2", "c2@x.io"]),
    )
    assert error.error_type == DUPLICATE_USER
    assert error.message == "username carol already exists"


def test_create_user_duplicate_email(command_context: CommandContext) -> None:
    """A taken email fails with DuplicateUser."""
    cmd = new_user_command()
    cmd.execute(command_context, ["create", "dave", "password1", "d@x.io"])
    error = _error(
        cmd.execute(command_context, ["create", "dan", "password1", "d@x.io"]),
    )
    assert error.error_type == DUPLICATE_USER
    assert error.message == "email d@x.io already exists"


def test_create_user_missing_arguments(command_context: CommandContext) -> None:
    """create needs a username and a password."""
    error = _error(new_user_command().execute(command_context, ["create", "eve"]))
    assert error.error_type == MISSING_ARGUMENTS
    assert error.message == "usage: user create <username> <password> [email]"


def test_create_user_wraps_lookup_failure(
    mocker: MockerFixture,
    command_context: CommandContext,
) -> None:
    """A failed username lookup is wrapped with context."""
    mocker.patch(
        "dashbrr_cli.cli_modules.io_ops.get_user_by_username",
        return_value=IOFailure(
            CommandError(
                command="io_ops.get_user_by_username",
                error_type=COLLABORATOR_ERROR,
                message="database is locked",
            ),
        ),
    )
    error = _error(
        new_user_command().execute(command_context, ["create", "frank", "password1"]),
    )
    assert error.message == "error checking username: database is locked"


def test_change_password(
    command_context: CommandContext,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """change-password replaces the stored hash."""
    cmd = new_user_command()
    cmd.execute(command_context, ["create", "grace", "oldpassword"])
    capsys.readouterr()

    result = cmd.execute(
        command_context, ["change-password", "grace", "newpassword"],
    )

    assert isinstance(result, IOSuccess)
    assert capsys.readouterr().out == (
        "Password changed successfully for user grace\n"
    )
    user = _user(command_context, "grace")
    assert user is not None
    assert bcrypt.checkpw(b"newpassword", user.password_hash.encode())


def test_change_password_unknown_user(command_context: CommandContext) -> None:
    """Changing the password of a missing user fails with NotFound."""
    error = _error(
        new_user_command().execute(
            command_context, ["change-password", "nobody", "newpassword"],
        ),
    )
    assert error.error_type == NOT_FOUND
    assert error.message == "user nobody not found"


def test_change_password_too_short(command_context: CommandContext) -> None:
    """The new password must meet the minimum length."""
    error = _error(
        new_user_command().execute(
            command_context, ["change-password", "grace", "short"],
        ),
    )
    assert error.error_type == INVALID_ARGUMENT
    assert error.message == "new password must be at least 8 characters long"


def test_user_without_subcommand(command_context: CommandContext) -> None:
    """user alone fails with its usage."""
    error = _error(new_user_command().execute(command_context, []))
    assert error.error_type == MISSING_ARGUMENTS
    assert "Usage: dashbrr run user <subcommand> [arguments]" in error.message


def test_user_unknown_subcommand(command_context: CommandContext) -> None:
    """Unknown subcommands are rejected with usage."""
    error = _error(new_user_command().execute(command_context, ["delete", "x"]))
    assert error.error_type == UNKNOWN_ACTION
    assert error.message.startswith("unknown subcommand: delete\n\n")
