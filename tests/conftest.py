"""Pytest configuration and fixtures for commitpush tests."""

import io
import os
import subprocess
from collections.abc import Generator
from pathlib import Path

import pytest

from commitpush.host import ActionHost
from commitpush.logging import clear_secrets, setup_logging


def _run_git(*args: str, cwd: Path | None = None) -> None:
    """Run git command safely without shell=True."""
    subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        check=True,
    )


@pytest.fixture
def tmp_repo(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one commit on ``main``.

    Yields:
        Path to the temporary repository
    """
    repo = tmp_path / "repo"
    repo.mkdir()
    orig_dir = os.getcwd()
    os.chdir(repo)

    _run_git("init", "-q", "-b", "main", cwd=repo)
    _run_git("config", "user.email", "test@test.com", cwd=repo)
    _run_git("config", "user.name", "Test", cwd=repo)
    _run_git("config", "commit.gpgsign", "false", cwd=repo)

    (repo / "README.md").write_text("# Test Repo")
    _run_git("add", "-A", cwd=repo)
    _run_git("commit", "-q", "-m", "Initial commit", cwd=repo)

    yield repo

    os.chdir(orig_dir)


@pytest.fixture
def repo_with_remote(tmp_repo: Path, tmp_path: Path) -> Path:
    """tmp_repo wired to a bare ``origin`` that already has ``main``."""
    remote = tmp_path / "origin.git"
    _run_git("init", "-q", "--bare", str(remote))
    _run_git("remote", "add", "origin", str(remote), cwd=tmp_repo)
    _run_git("push", "-q", "origin", "main", cwd=tmp_repo)
    return tmp_repo


@pytest.fixture
def host(tmp_path: Path) -> ActionHost:
    """ActionHost over an isolated environment with a GITHUB_OUTPUT file."""
    output_file = tmp_path / "github_output"
    output_file.touch()
    return ActionHost(environ={"GITHUB_OUTPUT": str(output_file)}, stdout=io.StringIO())


@pytest.fixture
def log_stream() -> Generator[io.StringIO, None, None]:
    """Route commitpush logging into a buffer at debug level."""
    stream = io.StringIO()
    setup_logging(level="debug", stream=stream)
    yield stream
    setup_logging(console_output=True)


@pytest.fixture(autouse=True)
def _forget_secrets() -> Generator[None, None, None]:
    yield
    clear_secrets()
