"""Tests for commitpush.inputs."""

import io

import pytest
from pydantic import ValidationError

from commitpush.constants import DEFAULT_PR_TITLE
from commitpush.exceptions import InputRequiredError, InvalidInputKeyError, InvalidRepositoryFormatError
from commitpush.host import ActionHost
from commitpush.inputs import (
    ACTION_INPUTS,
    Input,
    WorkflowParams,
    is_true,
    parse_repository,
    read_input,
    read_inputs,
)


def make_host(**env: str) -> ActionHost:
    return ActionHost(environ=env, stdout=io.StringIO())


class TestReadInput:
    """Tests for reading inputs with defaults."""

    @pytest.mark.smoke
    def test_value_from_environment(self) -> None:
        host = make_host(**{"INPUT_AUTHOR-NAME": "  Release Bot  "})
        assert read_input(host, "author-name") == "Release Bot"

    def test_falls_back_to_default(self) -> None:
        assert read_input(make_host(), "author-name") == "GitHub Actions"
        assert read_input(make_host(), "remote-ref") == "origin"
        assert read_input(make_host(), "directory-path") == "."

    def test_empty_value_uses_default(self) -> None:
        host = make_host(**{"INPUT_COMMIT-MESSAGE": "   "})
        assert read_input(host, "commit-message") == ACTION_INPUTS[Input.COMMIT_MESSAGE].default

    @pytest.mark.parametrize(
        "key,env_name",
        [("branch", "GITHUB_REF_NAME"), ("github-token", "GITHUB_TOKEN"), ("repository", "GITHUB_REPOSITORY")],
    )
    def test_environment_backed_defaults(self, key: str, env_name: str) -> None:
        assert read_input(make_host(**{env_name: "from-env"}), key) == "from-env"

    def test_unknown_key(self) -> None:
        with pytest.raises(InvalidInputKeyError, match="Invalid input key: nope"):
            read_input(make_host(), "nope")

    def test_read_inputs_covers_every_declared_input(self) -> None:
        values = read_inputs(make_host())
        assert set(values) == set(Input)


class TestIsTrue:
    """Tests for boolean coercion."""

    @pytest.mark.parametrize("value", [True, "true", "TRUE", " True "])
    def test_true(self, value: object) -> None:
        assert is_true(value)

    @pytest.mark.parametrize("value", [False, "false", "yes", "1", "", None, 1])
    def test_false(self, value: object) -> None:
        assert not is_true(value)


class TestParseRepository:
    """Tests for owner/repo parsing."""

    def test_valid(self) -> None:
        assert parse_repository("octo/demo") == ("octo", "demo")

    @pytest.mark.parametrize("value", [None, "", "owner", "/repo", "owner/", "a/b/c", "/"])
    def test_invalid(self, value: str | None) -> None:
        with pytest.raises(InvalidRepositoryFormatError):
            parse_repository(value)


class TestWorkflowParams:
    """Tests for building WorkflowParams from raw inputs."""

    def _values(self, **overrides: str) -> dict[str, str]:
        values = {Input.REPOSITORY: "octo/demo", Input.BRANCH: "main"}
        values.update({Input(k.replace("_", "-")): v for k, v in overrides.items()})
        return values

    @pytest.mark.smoke
    def test_defaults(self) -> None:
        params = WorkflowParams.from_inputs(self._values())
        assert params.repository_owner == "octo"
        assert params.repository_name == "demo"
        assert params.author_name == "GitHub Actions"
        assert params.remote_ref == "origin"
        assert params.base_branch == "main"
        assert params.pull_request_title == DEFAULT_PR_TITLE
        assert params.fetch_latest is False
        assert params.api_base_url == "https://api.github.com"

    def test_booleans(self) -> None:
        params = WorkflowParams.from_inputs(
            self._values(create_branch="true", force_push="TRUE", sign_commit="no", open_pull_request="true")
        )
        assert params.create_branch is True
        assert params.force_push is True
        assert params.sign_commit is False
        assert params.open_pull_request is True

    def test_invalid_repository(self) -> None:
        with pytest.raises(InvalidRepositoryFormatError):
            WorkflowParams.from_inputs({Input.REPOSITORY: "owner", Input.BRANCH: "main"})

    def test_missing_branch(self) -> None:
        with pytest.raises(InputRequiredError, match="branch"):
            WorkflowParams.from_inputs({Input.REPOSITORY: "octo/demo"})

    def test_frozen(self) -> None:
        params = WorkflowParams.from_inputs(self._values())
        with pytest.raises(ValidationError):
            params.branch = "other"  # type: ignore[misc]

    def test_token_not_in_repr(self) -> None:
        params = WorkflowParams.from_inputs(self._values(github_token="ghp_secretvalue"))
        assert "ghp_secretvalue" not in repr(params)
        assert params.github_token == "ghp_secretvalue"
