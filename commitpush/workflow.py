"""WorkflowOrchestrator -- the ordered commit-and-push pipeline.

Steps run strictly in order:
configure identity -> fetch (optional) -> checkout -> stage -> commit ->
push -> open pull request (optional).

The first failure stops the pipeline. An empty change set stops it
successfully. Errors never escape ``run()``; they are reported through the
CI host.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from commitpush.config import CommitPushConfig
from commitpush.constants import CommitOutcome, Output
from commitpush.exceptions import (
    CommitFailedError,
    CommitPushError,
    ConfigurationError,
    InputRequiredError,
    StepFailedError,
)
from commitpush.host import ActionHost
from commitpush.inputs import Input, WorkflowParams, read_inputs
from commitpush.logging import get_logger
from commitpush.operations import RepositoryOperations
from commitpush.pull_request import PullRequestGateway
from commitpush.runner import ProcessRunner

logger = get_logger("workflow")

COMMIT_FAILED_GUIDANCE = (
    "Commit failed. Please check your commit message format and ensure GPG is set up "
    "if commit signing is enabled."
)


class WorkflowStatus(Enum):
    """Terminal state of a workflow run."""

    SUCCEEDED = "succeeded"
    NO_CHANGES = "no_changes"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Summary of one workflow run."""

    status: WorkflowStatus = WorkflowStatus.SUCCEEDED
    completed_steps: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None
    commit_hash: str | None = None
    pull_request: dict[str, Any] | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is not WorkflowStatus.FAILED


@dataclass(frozen=True)
class WorkflowStep:
    """One scheduled step. ``action`` returns NO_CHANGES to stop early."""

    name: str
    announcement: str
    action: Callable[[], WorkflowStatus | None]


def format_failure(error: BaseException) -> str:
    """Turn ``error`` into the user-facing failure message."""
    if isinstance(error, CommitFailedError):
        message = COMMIT_FAILED_GUIDANCE
    elif isinstance(error, CommitPushError):
        message = error.message
    else:
        message = str(error) or "Unknown error"
    return f"Action failed: {message.rstrip('.')}. Please review the logs for more details."


class WorkflowOrchestrator:
    """Runs the commit-and-push pipeline once."""

    def __init__(
        self,
        params: WorkflowParams,
        operations: RepositoryOperations,
        host: ActionHost,
        pull_requests: PullRequestGateway | None = None,
    ) -> None:
        """Schedule the workflow steps.

        Args:
            params: Parameters for this run
            operations: Git operations
            host: CI host for outputs and failure reporting
            pull_requests: Gateway used when a pull request is requested

        Raises:
            ConfigurationError: If a pull request is requested without a gateway
        """
        if params.open_pull_request and pull_requests is None:
            raise ConfigurationError("A pull request was requested but no gateway is configured")

        self.params = params
        self.operations = operations
        self.host = host
        self.pull_requests = pull_requests
        self.pull_request: dict[str, Any] | None = None
        self.steps = self._schedule()

    def _schedule(self) -> list[WorkflowStep]:
        steps = [WorkflowStep("configure", "Updating config...", self._configure)]
        if self.params.fetch_latest:
            steps.append(WorkflowStep("fetch", "Fetching latest changes...", self._fetch))
        steps += [
            WorkflowStep("checkout", "Checking out branch...", self._checkout),
            WorkflowStep("stage", "Staging changes...", self._stage),
            WorkflowStep("commit", "Committing changes...", self._commit),
            WorkflowStep("push", "Pushing changes...", self._push),
        ]
        if self.params.open_pull_request:
            steps.append(WorkflowStep("pull_request", "Opening pull request...", self._open_pull_request))
        return steps

    @property
    def step_names(self) -> list[str]:
        return [step.name for step in self.steps]

    def run(self) -> WorkflowResult:
        """Run every scheduled step, stopping at the first failure.

        Returns:
            WorkflowResult; failures are reported through the host, not raised
        """
        result = WorkflowResult()
        current: WorkflowStep | None = None

        try:
            for current in self.steps:
                logger.info(current.announcement)
                signal = current.action()
                result.completed_steps.append(current.name)
                if signal is WorkflowStatus.NO_CHANGES:
                    logger.info("No changes to commit. Skipping push and pull request.")
                    result.status = WorkflowStatus.NO_CHANGES
                    return result
        except Exception as error:  # noqa: BLE001
            message = format_failure(error)
            result.status = WorkflowStatus.FAILED
            result.failed_step = current.name if current else None
            result.error = message
            logger.debug("Step %s raised %r", result.failed_step, error)
            self.host.set_failed(message)
            return result

        result.commit_hash = self.host.outputs.get(Output.COMMIT_HASH)
        result.pull_request = self.pull_request
        return result

    @staticmethod
    def _require_success(step: str, exit_code: int | None) -> None:
        if exit_code != 0:
            raise StepFailedError(step, -1 if exit_code is None else int(exit_code))

    def _configure(self) -> None:
        self.operations.configure_identity(
            self.params.author_name,
            self.params.author_email,
            self.params.sign_commit,
        )

    def _fetch(self) -> None:
        self._require_success("fetch", self.operations.fetch_all())

    def _checkout(self) -> None:
        self._require_success(
            "checkout",
            self.operations.checkout_branch(self.params.branch, self.params.create_branch),
        )

    def _stage(self) -> None:
        self._require_success("stage", self.operations.stage_changes(self.params.directory_path))

    def _commit(self) -> WorkflowStatus | None:
        outcome = self.operations.commit_changes(self.params.commit_message, self.params.sign_commit)
        if outcome == CommitOutcome.NO_CHANGES:
            return WorkflowStatus.NO_CHANGES
        if outcome != CommitOutcome.COMMITTED:
            raise CommitFailedError()
        return None

    def _push(self) -> None:
        self._require_success(
            "push",
            self.operations.push_changes(self.params.remote_ref, self.params.branch, self.params.force_push),
        )

    def _open_pull_request(self) -> None:
        if self.pull_requests is None:
            raise ConfigurationError("A pull request was requested but no gateway is configured")
        self.pull_request = self.pull_requests.create_pull_request(
            self.params.branch,
            self.params.base_branch,
            self.params.pull_request_title,
            self.params.pull_request_body,
        )


def build_workflow(
    host: ActionHost,
    config: CommitPushConfig | None = None,
    working_dir: str | Path | None = None,
) -> WorkflowOrchestrator:
    """Read inputs from ``host`` and wire a ready-to-run orchestrator.

    Raises:
        InvalidRepositoryFormatError: If the repository input is malformed
        InputRequiredError: If a pull request is requested without a token
    """
    config = config or CommitPushConfig()
    params = WorkflowParams.from_inputs(read_inputs(host))
    host.set_secret(params.github_token)

    runner = ProcessRunner(working_dir=working_dir, executable=config.git.executable)
    operations = RepositoryOperations(runner, host, scope=config.git.config_scope)

    gateway = None
    if params.open_pull_request:
        if not params.github_token:
            raise InputRequiredError(Input.GITHUB_TOKEN)
        gateway = PullRequestGateway(
            params.api_base_url,
            params.github_token,
            params.repository_owner,
            params.repository_name,
            timeout=config.http.timeout_seconds,
            retry_policy=config.retry,
            user_agent=config.http.user_agent,
        )

    return WorkflowOrchestrator(params, operations, host, gateway)


def run_action(
    host: ActionHost,
    config: CommitPushConfig | None = None,
    working_dir: str | Path | None = None,
) -> WorkflowResult:
    """Build and run the workflow, reporting construction errors as failures."""
    try:
        orchestrator = build_workflow(host, config, working_dir)
    except CommitPushError as error:
        message = format_failure(error)
        host.set_failed(message)
        return WorkflowResult(status=WorkflowStatus.FAILED, error=message)
    return orchestrator.run()
