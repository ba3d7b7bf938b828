"""commitpush exception hierarchy."""

from typing import Any


class CommitPushError(Exception):
    """Base exception for all commitpush errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(CommitPushError):
    """Error in commitpush configuration."""

    pass


class InvalidInputKeyError(ConfigurationError):
    """An input name outside the known input table was requested."""

    def __init__(self, key: str | None = None) -> None:
        super().__init__(f"Invalid input key: {key}" if key else "Invalid input key")
        self.key = key


class InputRequiredError(ConfigurationError):
    """A required input was empty."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Input required and not supplied: {name}")
        self.name = name


class InvalidRepositoryFormatError(ConfigurationError):
    """Repository input is not in ``owner/repo`` form."""

    def __init__(self, message: str = "Invalid repository format. Expected format: owner/repo") -> None:
        super().__init__(message)


class GuardError(CommitPushError):
    """Base error for command guard rejections."""

    pass


class UnauthorizedCommandError(GuardError):
    """Subcommand is outside the allow-list."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Unauthorized git command: {command}")
        self.command = command


class InvalidInputError(GuardError):
    """Argument is not a string."""

    def __init__(self, message: str = "Invalid input type") -> None:
        super().__init__(message)


class SecurityRiskError(GuardError):
    """Argument matched a disallowed pattern."""

    def __init__(self, value: str, pattern: str | None = None) -> None:
        super().__init__(
            f"Security risk detected in input: {value}",
            details={"pattern": pattern} if pattern else None,
        )
        self.value = value
        self.pattern = pattern


class DirectoryNotFoundError(CommitPushError):
    """Staging path does not exist."""

    def __init__(self, path: str | None = None) -> None:
        super().__init__(
            f"Directory path '{path}' does not exist." if path else "Directory path does not exist."
        )
        self.path = path


class GitCommandFailedError(CommitPushError):
    """Git could not be invoked, or a required follow-up read failed."""

    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        exit_code: int | None = None,
    ) -> None:
        super().__init__(f"Git command failed: {message}" if message else "Git command failed")
        self.command = command
        self.exit_code = exit_code


class WorkflowError(CommitPushError):
    """Base error for workflow step failures."""

    def __init__(
        self, message: str, step: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details)
        self.step = step


class StepFailedError(WorkflowError):
    """A workflow step returned a non-zero exit code."""

    def __init__(self, step: str, exit_code: int) -> None:
        super().__init__(f"Step '{step}' failed with exit code {exit_code}", step)
        self.exit_code = exit_code


class CommitFailedError(WorkflowError):
    """The commit step failed for a reason other than an empty change set."""

    def __init__(self) -> None:
        super().__init__("Commit failed.", "commit")


class PullRequestCreationError(CommitPushError):
    """Opening the pull request failed."""

    def __init__(self, message: str | None = None, status: int | None = None) -> None:
        super().__init__(
            f"Pull request creation failed: {message}" if message else "Pull request creation failed"
        )
        self.status = status
