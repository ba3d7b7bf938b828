"""RepositoryOperations -- the git steps of the commit-and-push workflow."""

from __future__ import annotations

import os

from commitpush.constants import (
    NO_CHANGES_MARKERS,
    CommitOutcome,
    ConfigScope,
    ExitCode,
    GitCommand,
    Output,
)
from commitpush.exceptions import DirectoryNotFoundError, GitCommandFailedError
from commitpush.guard import ensure_quoted
from commitpush.host import ActionHost
from commitpush.logging import get_logger
from commitpush.runner import ProcessRunner

logger = get_logger("operations")


class RepositoryOperations:
    """Semantic git operations built on ProcessRunner.

    Each method returns a normalized outcome code. Guard rejections and a
    missing staging directory are raised; a non-zero git exit is returned.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        host: ActionHost,
        scope: ConfigScope = ConfigScope.LOCAL,
    ) -> None:
        """Initialize operations.

        Args:
            runner: Runner that executes guarded git commands
            host: CI host that receives published outputs
            scope: Default scope for ``git config`` writes
        """
        self.runner = runner
        self.host = host
        self.scope = scope

    def configure_identity(
        self,
        name: str,
        email: str,
        sign: bool = False,
        scope: ConfigScope | None = None,
    ) -> ExitCode:
        """Set the commit author and, optionally, enable commit signing.

        Args:
            name: Author name
            email: Author email
            sign: Enable ``commit.gpgsign``
            scope: Config scope; defaults to the scope given at construction

        Returns:
            ExitCode.SUCCESS
        """
        flag = ConfigScope(scope or self.scope).flag
        self.runner.run(GitCommand.CONFIG, [flag, "user.name", ensure_quoted(name)])
        self.runner.run(GitCommand.CONFIG, [flag, "user.email", ensure_quoted(email)])
        if sign:
            self.runner.run(GitCommand.CONFIG, [flag, "commit.gpgsign", "true"])
        return ExitCode.SUCCESS

    def fetch_all(self) -> int:
        """Fetch from all remotes; returns git's exit code."""
        return self.runner.run(GitCommand.FETCH, ["--all"]).exit_code

    def checkout_branch(self, branch: str, create_new: bool = False) -> int:
        """Check out ``branch``, creating it with ``-b`` when asked.

        Returns:
            Git's exit code
        """
        args = ["-b", branch] if create_new else [branch]
        return self.runner.run(GitCommand.CHECKOUT, args).exit_code

    def stage_changes(self, directory_path: str) -> int:
        """Stage everything under ``directory_path``.

        Raises:
            DirectoryNotFoundError: If the path does not exist; git is not run
        """
        path = directory_path
        if not os.path.isabs(path):
            path = os.path.join(self.runner.working_dir, path)
        if not os.path.exists(path):
            raise DirectoryNotFoundError(directory_path)
        return self.runner.run(GitCommand.ADD, [ensure_quoted(directory_path)]).exit_code

    def commit_changes(self, message: str, sign: bool = False) -> CommitOutcome:
        """Commit staged changes.

        Args:
            message: Commit message
            sign: Sign the commit with ``-S``

        Returns:
            COMMITTED on exit 0, NO_CHANGES when git reports an empty change
            set, FAILED otherwise
        """
        args = ["-S"] if sign else []
        args += ["-m", ensure_quoted(message)]

        try:
            result = self.runner.run(GitCommand.COMMIT, args)
        except GitCommandFailedError as e:
            logger.error("Commit failed: %s", e)
            return CommitOutcome.FAILED

        if result.success:
            return CommitOutcome.COMMITTED

        output = result.output
        if any(marker in output for marker in NO_CHANGES_MARKERS):
            logger.info("No changes detected. Skipping commit. %s", output.strip())
            return CommitOutcome.NO_CHANGES

        logger.error("Commit failed: %s", output.strip() or f"exit code {result.exit_code}")
        return CommitOutcome.FAILED

    def push_changes(self, remote: str, branch: str, force: bool = False) -> ExitCode:
        """Push ``branch`` to ``remote`` and publish the pushed commit hash.

        Returns:
            ExitCode.SUCCESS, or ExitCode.FAILURE if the push itself failed

        Raises:
            GitCommandFailedError: If the push succeeded but HEAD cannot be read
        """
        args = [remote, branch, "--force"] if force else [remote, branch]
        push_result = self.runner.run(GitCommand.PUSH, args)
        if not push_result.success:
            logger.error("Push to %s/%s failed (exit=%s)", remote, branch, push_result.exit_code)
            return ExitCode.FAILURE

        head_result = self.runner.run(GitCommand.REV_PARSE, ["HEAD"])
        if not head_result.success:
            raise GitCommandFailedError(
                f"Failed to get commit hash: {head_result.stderr}",
                command=head_result.command,
                exit_code=head_result.exit_code,
            )

        commit_hash = (head_result.stdout or "").strip()
        self.host.set_output(Output.COMMIT_HASH, commit_hash)
        logger.info("Pushed %s to %s/%s", commit_hash, remote, branch)
        return ExitCode.SUCCESS
