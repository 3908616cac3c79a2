"""user create | change-password."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from returns.io import IOFailure
from returns.unsafe import unsafe_perform_io

from dashbrr_cli.cli_modules import io_ops
from dashbrr_cli.cli_modules.commands.types import CommandSpec
from dashbrr_cli.cli_modules.errors import (
    DUPLICATE_USER,
    INVALID_ARGUMENT,
    MISSING_ARGUMENTS,
    NOT_FOUND,
    UNKNOWN_ACTION,
)
from dashbrr_cli.cli_modules.types import UserRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

    from returns.io import IOResult

    from dashbrr_cli.cli_modules.errors import CommandError
    from dashbrr_cli.cli_modules.types import CommandContext

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 32
MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class UserCommand(CommandSpec):
    """Manage users in the system."""

    def execute(
        self,
        ctx: CommandContext,
        args: Sequence[str],
    ) -> IOResult[None, CommandError]:
        """Route to the create or change-password subcommand."""
        if not args:
            return self.fail_with_usage(MISSING_ARGUMENTS, "insufficient arguments")

        subcommand = args[0]
        if subcommand == "create":
            if len(args) < 3:  # noqa: PLR2004
                return self.fail(
                    MISSING_ARGUMENTS,
                    "usage: user create <username> <password> [email]",
                )
            username, password = args[1], args[2]
            email = (
                args[3]
                if len(args) > 3  # noqa: PLR2004
                else f"{username}@{ctx.settings.default_email_domain}"
            )
            return self._create_user(ctx, username, password, email)

        if subcommand == "change-password":
            if len(args) < 3:  # noqa: PLR2004
                return self.fail(
                    MISSING_ARGUMENTS,
                    "usage: user change-password <username> <new_password>",
                )
            return self._change_password(ctx, args[1], args[2])

        return self.fail_with_usage(
            UNKNOWN_ACTION,
            f"unknown subcommand: {subcommand}",
            {"subcommand": subcommand},
        )

    def _create_user(
        self,
        ctx: CommandContext,
        username: str,
        password: str,
        email: str,
    ) -> IOResult[None, CommandError]:
        if not MIN_USERNAME_LENGTH <= len(username) <= MAX_USERNAME_LENGTH:
            return self.fail(
                INVALID_ARGUMENT,
                (
                    f"username must be between {MIN_USERNAME_LENGTH}"
                    f" and {MAX_USERNAME_LENGTH} characters"
                ),
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            return self.fail(
                INVALID_ARGUMENT,
                f"password must be at least {MIN_PASSWORD_LENGTH} characters long",
            )

        db_path = ctx.settings.db_path
        by_name = io_ops.get_user_by_username(db_path, username)
        if isinstance(by_name, IOFailure):
            error = unsafe_perform_io(by_name.failure())
            return IOFailure(error.wrap(self.name, "error checking username"))
        if unsafe_perform_io(by_name.unwrap()) is not None:
            return self.fail(
                DUPLICATE_USER,
                f"username {username} already exists",
                {"username": username},
            )

        by_email = io_ops.get_user_by_email(db_path, email)
        if isinstance(by_email, IOFailure):
            error = unsafe_perform_io(by_email.failure())
            return IOFailure(error.wrap(self.name, "error checking email"))
        if unsafe_perform_io(by_email.unwrap()) is not None:
            return self.fail(
                DUPLICATE_USER,
                f"email {email} already exists",
                {"email": email},
            )

        hashed = io_ops.hash_password(password)
        if isinstance(hashed, IOFailure):
            error = unsafe_perform_io(hashed.failure())
            return IOFailure(error.wrap(self.name, "failed to hash password"))

        user = UserRecord(
            username=username,
            email=email,
            password_hash=unsafe_perform_io(hashed.unwrap()),
        )
        created = io_ops.create_user(db_path, user)
        if isinstance(created, IOFailure):
            error = unsafe_perform_io(created.failure())
            return IOFailure(error.wrap(self.name, "failed to create user"))

        return io_ops.write_stdout(f"User {username} created successfully")

    def _change_password(
        self,
        ctx: CommandContext,
        username: str,
        new_password: str,
    ) -> IOResult[None, CommandError]:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return self.fail(
                INVALID_ARGUMENT,
                (
                    "new password must be at least"
                    f" {MIN_PASSWORD_LENGTH} characters long"
                ),
            )

        db_path = ctx.settings.db_path
        found = io_ops.get_user_by_username(db_path, username)
        if isinstance(found, IOFailure):
            error = unsafe_perform_io(found.failure())
            return IOFailure(error.wrap(self.name, "failed to find user"))
        user = unsafe_perform_io(found.unwrap())
        if user is None or user.id is None:
            return self.fail(
                NOT_FOUND,
                f"user {username} not found",
                {"username": username},
            )

        hashed = io_ops.hash_password(new_password)
        if isinstance(hashed, IOFailure):
            error = unsafe_perform_io(hashed.failure())
            return IOFailure(error.wrap(self.name, "failed to hash new password"))

        updated = io_ops.update_user_password(
            db_path,
            user.id,
            unsafe_perform_io(hashed.unwrap()),
        )
        if isinstance(updated, IOFailure):
            error = unsafe_perform_io(updated.failure())
            return IOFailure(error.wrap(self.name, "failed to update password"))

        return io_ops.write_stdout(
            f"Password changed successfully for user {username}",
        )


def new_user_command() -> UserCommand:
    """Build the user command."""
    return UserCommand(
        name="user",
        description="Manage users in the system",
        usage_args=(
            "<subcommand> [arguments]\n\n"
            "  Subcommands:\n"
            "    create <username> <password> [email]\n"
            "    change-password <username> <new_password>"
        ),
    )
