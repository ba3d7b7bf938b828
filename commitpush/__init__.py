"""commitpush - stage, commit and push repository changes from CI.

Runs one guarded git workflow per invocation and optionally opens a pull request.
"""

__version__ = "1.0.0"

from commitpush.constants import CommitOutcome, ConfigScope, ExitCode, GitCommand
from commitpush.exceptions import CommitPushError
from commitpush.guard import CommandGuard
from commitpush.operations import RepositoryOperations
from commitpush.runner import ExecutionResult, ProcessRunner
from commitpush.workflow import WorkflowOrchestrator, WorkflowResult, WorkflowStatus

__all__ = [
    "__version__",
    "CommitOutcome",
    "ConfigScope",
    "ExitCode",
    "GitCommand",
    "CommitPushError",
    # Execution
    "CommandGuard",
    "ProcessRunner",
    "ExecutionResult",
    "RepositoryOperations",
    # Workflow
    "WorkflowOrchestrator",
    "WorkflowResult",
    "WorkflowStatus",
]
