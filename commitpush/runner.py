"""ProcessRunner -- guarded git subprocess execution."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from commitpush.constants import GitCommand
from commitpush.exceptions import GitCommandFailedError
from commitpush.guard import CommandGuard
from commitpush.logging import get_logger

logger = get_logger("runner")


@dataclass(frozen=True)
class ExecutionResult:
    """Captured outcome of one git invocation."""

    command: str
    exit_code: int | None
    stdout: str | None = None
    stderr: str | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class ProcessRunner:
    """Runs git with a guarded command line.

    A non-zero exit is returned as a normal result. Only failure to invoke
    git at all is raised, as GitCommandFailedError.
    """

    def __init__(
        self,
        working_dir: str | Path | None = None,
        executable: str = "git",
        guard: CommandGuard | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            working_dir: Directory git runs in. Defaults to the current directory
            executable: Git executable name or path
            guard: Command guard; a default guard is created when omitted
            env: Extra environment variables for the subprocess
        """
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()
        self.executable = executable
        self.guard = guard or CommandGuard()
        self.env = env or {}

    def _guarded(
        self, subcommand: str | GitCommand, arguments: Sequence[str]
    ) -> tuple[GitCommand, list[str]]:
        """Authorize the subcommand and sanitize every argument.

        Raises:
            UnauthorizedCommandError: Subcommand outside the allow-list
            InvalidInputError: Non-string argument
            SecurityRiskError: Argument matched a disallowed pattern
        """
        return self.guard.authorize(subcommand), self.guard.sanitize_all(arguments)

    def build_command_line(self, subcommand: str | GitCommand, arguments: Sequence[str] = ()) -> str:
        """Space-joined command line, as shown in logs and errors."""
        command, sanitized = self._guarded(subcommand, arguments)
        return f"{self.executable} {command.value} {' '.join(sanitized)}".rstrip()

    def build_argv(self, subcommand: str | GitCommand, arguments: Sequence[str] = ()) -> list[str]:
        """Argument vector with one entry per guarded argument.

        Only the outer quote pair added by CommandGuard.quote is removed, so
        a value never splits into several git arguments.
        """
        command, sanitized = self._guarded(subcommand, arguments)
        return [self.executable, command.value, *(self.guard.unquote(arg) for arg in sanitized)]

    def run(self, subcommand: str | GitCommand, arguments: Sequence[str] = ()) -> ExecutionResult:
        """Run a git subcommand.

        Args:
            subcommand: Git subcommand (must be allow-listed)
            arguments: Arguments, already quoted where needed

        Returns:
            ExecutionResult with exit code and captured output

        Raises:
            GitCommandFailedError: If git could not be invoked
        """
        argv = self.build_argv(subcommand, arguments)
        command_line = self.build_command_line(subcommand, arguments)
        logger.debug("Running: %s", command_line)

        exec_env = os.environ.copy()
        exec_env.update(self.env)
        # Pin git's messages to English so outcome detection is stable
        exec_env["LC_ALL"] = "C"

        try:
            completed = subprocess.run(
                argv,
                cwd=str(self.working_dir),
                env=exec_env,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise GitCommandFailedError(
                f"Command not found: {argv[0]}", command=command_line
            ) from e
        except (OSError, subprocess.SubprocessError) as e:
            raise GitCommandFailedError(str(e), command=command_line) from e

        logger.info("Git output: %s", completed.stdout)
        logger.info("Git errors: %s", completed.stderr)

        return ExecutionResult(
            command=command_line,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
