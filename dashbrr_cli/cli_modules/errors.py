"""Command error types for the dashbrr CLI."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

NO_COMMAND_SPECIFIED: Final = "NoCommandSpecified"
UNKNOWN_COMMAND: Final = "UnknownCommand"
UNKNOWN_SERVICE_TYPE: Final = "UnknownServiceType"
NO_ACTION_SPECIFIED: Final = "NoActionSpecified"
UNKNOWN_ACTION: Final = "UnknownAction"
MISSING_ARGUMENTS: Final = "MissingArguments"
INVALID_ARGUMENT: Final = "InvalidArgument"
INVALID_URL: Final = "InvalidURL"
DUPLICATE_SERVICE: Final = "DuplicateService"
DUPLICATE_USER: Final = "DuplicateUser"
NOT_FOUND: Final = "NotFound"
HEALTH_CHECK_FAILED: Final = "HealthCheckFailed"
COLLABORATOR_ERROR: Final = "CollaboratorError"


@dataclass(frozen=True)
class CommandError:
    """Structured error for command failures.

    message is what the user sees. It is self-contained and
    already carries any usage or action listing that helps the
    next attempt.
    """

    command: str
    error_type: str
    message: str
    context: dict[str, object] = field(default_factory=dict)

    def wrap(self, command: str, prefix: str) -> CommandError:
        """Return a CollaboratorError that keeps this message verbatim."""
        return CommandError(
            command=command,
            error_type=COLLABORATOR_ERROR,
            message=f"{prefix}: {self.message}",
            context={**self.context, "cause": self.error_type},
        )

    def __str__(self) -> str:
        """Human-readable error representation for logging."""
        max_len = 500
        first_line = self.message.splitlines()[0] if self.message else ""
        base = f"CommandError[{self.command}] {self.error_type}: {first_line}"
        if self.context:
            ctx_str = str(self.context)
            if len(ctx_str) > max_len:
                ctx_str = ctx_str[: max_len - 3] + "..."
            base += f" | context={ctx_str}"
        return base
