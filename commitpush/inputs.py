"""Action inputs and the workflow parameters built from them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from commitpush.constants import DEFAULT_PR_BODY, DEFAULT_PR_TITLE
from commitpush.exceptions import (
    InputRequiredError,
    InvalidInputKeyError,
    InvalidRepositoryFormatError,
)
from commitpush.host import ActionHost


class Input(StrEnum):
    """Input names as declared in action.yml."""

    AUTHOR_EMAIL = "author-email"
    AUTHOR_NAME = "author-name"
    BRANCH = "branch"
    COMMIT_MESSAGE = "commit-message"
    CREATE_BRANCH = "create-branch"
    DIRECTORY_PATH = "directory-path"
    FETCH_LATEST = "fetch-latest"
    FORCE_PUSH = "force-push"
    GITHUB_HOSTNAME = "github-hostname"
    GITHUB_TOKEN = "github-token"
    OPEN_PULL_REQUEST = "open-pull-request"
    REMOTE_REF = "remote-ref"
    REPOSITORY = "repository"
    SIGN_COMMIT = "sign-commit"
    BASE_BRANCH = "base-branch"
    PULL_REQUEST_TITLE = "pull-request-title"
    PULL_REQUEST_BODY = "pull-request-body"


@dataclass(frozen=True)
class InputEntry:
    """Declaration of one action input."""

    id: Input
    description: str
    default: str = ""
    default_env: str | None = None
    required: bool = False

    def resolve_default(self, environ: Mapping[str, str]) -> str:
        if self.default_env:
            return environ.get(self.default_env, self.default)
        return self.default


ACTION_INPUTS: dict[Input, InputEntry] = {
    entry.id: entry
    for entry in (
        InputEntry(
            Input.AUTHOR_EMAIL,
            "The author email to use for the commit",
            default="github-actions@noreply.github.com",
        ),
        InputEntry(Input.AUTHOR_NAME, "The author name to use for the commit", default="GitHub Actions"),
        InputEntry(
            Input.BRANCH, "The branch target to push the commit to", default_env="GITHUB_REF_NAME"
        ),
        InputEntry(
            Input.COMMIT_MESSAGE,
            "The commit message to use for the commit",
            default="Automated commit-and-push by GitHub Actions",
        ),
        InputEntry(Input.CREATE_BRANCH, "Whether to create the branch if it is missing", default="false"),
        InputEntry(
            Input.DIRECTORY_PATH, "The directory path to use for adding changes to the commit", default="."
        ),
        InputEntry(
            Input.FETCH_LATEST,
            "Whether to fetch the latest changes from the remote repository before pushing the commit",
            default="false",
        ),
        InputEntry(Input.FORCE_PUSH, "Whether to force push the commit", default="false"),
        InputEntry(
            Input.GITHUB_HOSTNAME,
            "The GitHub hostname to use for access (for GitHub Enterprise)",
            default="github.com",
        ),
        InputEntry(
            Input.GITHUB_TOKEN, "The GitHub token to use for authentication", default_env="GITHUB_TOKEN"
        ),
        InputEntry(
            Input.OPEN_PULL_REQUEST, "Whether to open a pull request after pushing the commit", default="false"
        ),
        InputEntry(Input.REMOTE_REF, "The remote reference to use for the commit", default="origin"),
        InputEntry(
            Input.REPOSITORY, "The GitHub repository to use for the commit", default_env="GITHUB_REPOSITORY"
        ),
        InputEntry(Input.SIGN_COMMIT, "Whether to sign the commit", default="false"),
        InputEntry(Input.BASE_BRANCH, "The branch the pull request targets", default="main"),
        InputEntry(Input.PULL_REQUEST_TITLE, "Title of the pull request", default=DEFAULT_PR_TITLE),
        InputEntry(Input.PULL_REQUEST_BODY, "Body of the pull request", default=DEFAULT_PR_BODY),
    )
}


def read_input(host: ActionHost, key: str) -> str:
    """Read one input, falling back to its declared default.

    Raises:
        InvalidInputKeyError: If ``key`` is not a declared input
    """
    try:
        entry = ACTION_INPUTS[Input(key)]
    except ValueError:
        raise InvalidInputKeyError(key) from None
    value = host.get_input(entry.id, required=entry.required)
    return value or entry.resolve_default(host.environ)


def read_inputs(host: ActionHost) -> dict[Input, str]:
    return {key: read_input(host, key) for key in ACTION_INPUTS}


def is_true(value: object) -> bool:
    """True for ``True`` or a case-insensitive "true" string."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def parse_repository(repository: str | None) -> tuple[str, str]:
    """Split ``owner/repo``.

    Raises:
        InvalidRepositoryFormatError: Unless there is exactly one ``/`` with
            non-empty text on both sides
    """
    if not repository or "/" not in repository:
        raise InvalidRepositoryFormatError()
    parts = repository.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidRepositoryFormatError()
    return parts[0], parts[1]


class WorkflowParams(BaseModel):
    """Parameters for one workflow run; read-only once built."""

    model_config = ConfigDict(frozen=True)

    author_name: str
    author_email: str
    branch: str
    commit_message: str
    create_branch: bool = False
    directory_path: str = "."
    fetch_latest: bool = False
    force_push: bool = False
    remote_ref: str = "origin"
    sign_commit: bool = False
    open_pull_request: bool = False
    repository_owner: str = Field(min_length=1)
    repository_name: str = Field(min_length=1)
    github_hostname: str = "github.com"
    github_token: str = Field(default="", repr=False)
    base_branch: str = "main"
    pull_request_title: str = DEFAULT_PR_TITLE
    pull_request_body: str = DEFAULT_PR_BODY

    @property
    def repository(self) -> str:
        return f"{self.repository_owner}/{self.repository_name}"

    @property
    def api_base_url(self) -> str:
        return f"https://api.{self.github_hostname}"

    @classmethod
    def from_inputs(cls, values: Mapping[str, str]) -> WorkflowParams:
        """Build parameters from raw input strings.

        Args:
            values: Mapping of input name to raw value

        Raises:
            InvalidRepositoryFormatError: If the repository input is malformed
        """
        owner, repo = parse_repository(values.get(Input.REPOSITORY))

        def text(key: Input) -> str:
            return values.get(key) or ACTION_INPUTS[key].default

        if not text(Input.BRANCH):
            raise InputRequiredError(Input.BRANCH)

        return cls(
            author_name=text(Input.AUTHOR_NAME),
            author_email=text(Input.AUTHOR_EMAIL),
            branch=text(Input.BRANCH),
            commit_message=text(Input.COMMIT_MESSAGE),
            create_branch=is_true(values.get(Input.CREATE_BRANCH)),
            directory_path=text(Input.DIRECTORY_PATH),
            fetch_latest=is_true(values.get(Input.FETCH_LATEST)),
            force_push=is_true(values.get(Input.FORCE_PUSH)),
            remote_ref=text(Input.REMOTE_REF),
            sign_commit=is_true(values.get(Input.SIGN_COMMIT)),
            open_pull_request=is_true(values.get(Input.OPEN_PULL_REQUEST)),
            repository_owner=owner,
            repository_name=repo,
            github_hostname=text(Input.GITHUB_HOSTNAME),
            github_token=values.get(Input.GITHUB_TOKEN, ""),
            base_branch=text(Input.BASE_BRANCH),
            pull_request_title=text(Input.PULL_REQUEST_TITLE),
            pull_request_body=text(Input.PULL_REQUEST_BODY),
        )
