"""Integration test: full commit-and-push flow against a real repository.

Runs the workflow with real git against a bare ``origin`` created in a
temporary directory.
"""

import io
import subprocess
from pathlib import Path

import pytest

from commitpush.host import ActionHost
from commitpush.workflow import WorkflowStatus, run_action

pytestmark = pytest.mark.integration


def _git(repo: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=repo, capture_output=True, text=True, check=True
    ).stdout.strip()


def _host(tmp_path: Path, **inputs: str) -> ActionHost:
    output_file = tmp_path / "github_output"
    output_file.touch()
    env = {"GITHUB_OUTPUT": str(output_file), "INPUT_REPOSITORY": "octo/demo"}
    for name, value in inputs.items():
        env[ActionHost.input_variable(name.replace("_", "-"))] = value
    return ActionHost(environ=env, stdout=io.StringIO())


class TestCommitAndPush:
    """Integration tests for the happy path."""

    def test_changes_are_committed_and_pushed(self, repo_with_remote: Path, tmp_path: Path) -> None:
        """Modified files end up on origin and the commit hash is published."""
        (repo_with_remote / "generated.txt").write_text("fresh output\n")
        host = _host(tmp_path, branch="main", commit_message="Regenerate output", author_name="CI Bot")

        result = run_action(host, working_dir=repo_with_remote)

        assert result.status is WorkflowStatus.SUCCEEDED
        assert host.exit_code == 0

        head = _git(repo_with_remote, "rev-parse", "HEAD")
        assert result.commit_hash == head
        assert _git(repo_with_remote, "rev-parse", "origin/main") == head
        assert _git(repo_with_remote, "log", "-1", "--format=%s|%an") == "Regenerate output|CI Bot"
        assert f"\n{head}\n" in Path(host.environ["GITHUB_OUTPUT"]).read_text()

    def test_new_branch_is_created_and_pushed(self, repo_with_remote: Path, tmp_path: Path) -> None:
        """create-branch checks out a new branch and pushes it."""
        (repo_with_remote / "feature.txt").write_text("feature\n")
        host = _host(tmp_path, branch="automation/update", create_branch="true", fetch_latest="true")

        result = run_action(host, working_dir=repo_with_remote)

        assert result.status is WorkflowStatus.SUCCEEDED
        assert "fetch" in result.completed_steps
        remote = tmp_path / "origin.git"
        assert _git(remote, "rev-parse", "automation/update") == result.commit_hash

    def test_stages_only_requested_directory(self, repo_with_remote: Path, tmp_path: Path) -> None:
        """Only files under directory-path are committed."""
        (repo_with_remote / "docs").mkdir()
        (repo_with_remote / "docs" / "index.md").write_text("# Docs\n")
        (repo_with_remote / "scratch.txt").write_text("leave me\n")
        host = _host(tmp_path, branch="main", directory_path="docs")

        result = run_action(host, working_dir=repo_with_remote)

        assert result.status is WorkflowStatus.SUCCEEDED
        committed = _git(repo_with_remote, "show", "--name-only", "--format=", "HEAD")
        assert committed == "docs/index.md"


class TestNoChanges:
    """Integration tests for the empty change set."""

    def test_clean_tree_skips_push(self, repo_with_remote: Path, tmp_path: Path) -> None:
        """A clean tree finishes successfully without pushing."""
        head_before = _git(repo_with_remote, "rev-parse", "HEAD")
        host = _host(tmp_path, branch="main")

        result = run_action(host, working_dir=repo_with_remote)

        assert result.status is WorkflowStatus.NO_CHANGES
        assert result.completed_steps[-1] == "commit"
        assert host.exit_code == 0
        assert "commit-hash" not in host.outputs
        assert _git(repo_with_remote, "rev-parse", "HEAD") == head_before


class TestFailures:
    """Integration tests for failing steps."""

    def test_push_to_unknown_remote_fails(self, repo_with_remote: Path, tmp_path: Path) -> None:
        """A push to a missing remote fails the run at the push step."""
        (repo_with_remote / "x.txt").write_text("x\n")
        host = _host(tmp_path, branch="main", remote_ref="nowhere")

        result = run_action(host, working_dir=repo_with_remote)

        assert result.status is WorkflowStatus.FAILED
        assert result.failed_step == "push"
        assert host.exit_code == 1

    def test_checkout_missing_branch_fails(self, repo_with_remote: Path, tmp_path: Path) -> None:
        """Checking out a branch that does not exist fails without create-branch."""
        host = _host(tmp_path, branch="missing-branch")

        result = run_action(host, working_dir=repo_with_remote)

        assert result.failed_step == "checkout"
        assert "commit" not in result.completed_steps
