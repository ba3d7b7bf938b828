"""Scripted ProcessRunner for operation and workflow tests.

Records every call and answers from a per-subcommand script so tests can
drive exit codes and output without spawning git.

Example:
    runner = MockRunner()
    runner.script("commit", exit_code=1, stdout="nothing to commit, working tree clean")
    ops = RepositoryOperations(runner, host)
    assert ops.commit_changes("msg") == CommitOutcome.NO_CHANGES
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from commitpush.constants import GitCommand
from commitpush.guard import CommandGuard
from commitpush.runner import ExecutionResult


@dataclass
class RunCall:
    """Record of one runner invocation."""

    subcommand: GitCommand
    arguments: list[str]


class MockRunner:
    """Stand-in for ProcessRunner that never spawns a process.

    Arguments still pass through a real CommandGuard so guard errors
    surface exactly as they would in production.
    """

    def __init__(self, working_dir: str | Path = ".") -> None:
        self.working_dir = Path(working_dir)
        self.executable = "git"
        self.guard = CommandGuard()
        self.calls: list[RunCall] = []
        self._scripts: dict[GitCommand, deque[ExecutionResult | Exception]] = defaultdict(deque)

    def script(
        self,
        subcommand: str,
        exit_code: int | None = 0,
        stdout: str = "",
        stderr: str = "",
        raises: Exception | None = None,
    ) -> MockRunner:
        """Queue the next answer for ``subcommand``. Unscripted calls succeed."""
        command = GitCommand(subcommand)
        if raises is not None:
            self._scripts[command].append(raises)
        else:
            self._scripts[command].append(
                ExecutionResult(command=f"git {command.value}", exit_code=exit_code, stdout=stdout, stderr=stderr)
            )
        return self

    def run(self, subcommand: str | GitCommand, arguments: Sequence[str] = ()) -> ExecutionResult:
        command = self.guard.authorize(subcommand)
        args = self.guard.sanitize_all(arguments)
        self.calls.append(RunCall(command, args))

        queue = self._scripts[command]
        if queue:
            answer = queue.popleft()
            if isinstance(answer, Exception):
                raise answer
            return answer
        return ExecutionResult(command=f"git {command.value}", exit_code=0, stdout="", stderr="")

    def subcommands(self) -> list[str]:
        return [call.subcommand.value for call in self.calls]

    def calls_for(self, subcommand: str) -> list[RunCall]:
        return [call for call in self.calls if call.subcommand == subcommand]
