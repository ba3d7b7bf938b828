"""Pull request creation through the GitHub REST API.

Issues a single ``POST /repos/{owner}/{repo}/pulls`` call, retrying
transient failures, and translates any final failure into
PullRequestCreationError.
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from typing import Any

from commitpush.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_PR_BODY,
    DEFAULT_PR_TITLE,
    GITHUB_ACCEPT,
    GITHUB_API_VERSION,
    LEGACY_TOKEN_MIN_LENGTH,
    TOKEN_PREFIXES,
    USER_AGENT,
)
from commitpush.exceptions import PullRequestCreationError
from commitpush.logging import get_logger
from commitpush.retry import RetryPolicy, is_retryable_error, with_retry

logger = get_logger("pull_request")


def validate_token(token: str) -> None:
    """Check the token is present and looks like a GitHub token.

    Raises:
        ValueError: If the token is empty or has an unrecognised format
    """
    if not token or not token.strip():
        raise ValueError("GitHub token is required but was not provided")
    if not (token.startswith(TOKEN_PREFIXES) or len(token) >= LEGACY_TOKEN_MIN_LENGTH):
        raise ValueError("GitHub token format appears to be invalid")


def _is_transient(error: BaseException) -> bool:
    if isinstance(error, urllib.error.HTTPError):
        return error.code == 429 or error.code >= 500
    if isinstance(error, (urllib.error.URLError, TimeoutError)):
        return True
    return is_retryable_error(error)


def _describe(error: BaseException) -> str:
    if isinstance(error, urllib.error.HTTPError):
        detail = ""
        try:
            payload = json.loads(error.read().decode("utf-8") or "{}")
            detail = payload.get("message", "")
        except (OSError, ValueError, AttributeError):
            pass
        return f"HTTP {error.code} {error.reason}" + (f": {detail}" if detail else "")
    return str(error)


class PullRequestGateway:
    """Opens pull requests on GitHub."""

    def __init__(
        self,
        base_url: str,
        token: str,
        owner: str,
        repo: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        retry_policy: RetryPolicy | None = None,
        user_agent: str = USER_AGENT,
    ) -> None:
        """Initialize gateway.

        Args:
            base_url: API root, e.g. https://api.github.com
            token: GitHub token used as a bearer credential
            owner: Repository owner
            repo: Repository name
            timeout: Per-request timeout in seconds
            retry_policy: Retry settings for transient failures
            user_agent: User-Agent header value
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.owner = owner
        self.repo = repo
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.user_agent = user_agent

    @property
    def pulls_url(self) -> str:
        return "/".join([self.base_url, "repos", self.owner, self.repo, "pulls"])

    def default_headers(self) -> dict[str, str]:
        validate_token(self.token)
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
        }

    def create_pull_request(
        self,
        head: str,
        base: str,
        title: str = DEFAULT_PR_TITLE,
        body: str = DEFAULT_PR_BODY,
    ) -> dict[str, Any] | None:
        """Open a pull request from ``head`` into ``base``.

        Args:
            head: Branch containing the changes
            base: Branch the changes should be pulled into
            title: Pull request title
            body: Pull request body

        Returns:
            Decoded API response, or None when head and base are the same

        Raises:
            PullRequestCreationError: If the request ultimately fails
        """
        if head == base:
            logger.warning(
                "Skipping pull request creation: 'fromBranch' (%s) and 'toBranch' (%s) are the same.",
                head,
                base,
            )
            return None

        payload = json.dumps({"head": head, "base": base, "title": title, "body": body}).encode("utf-8")

        try:
            headers = self.default_headers()
            response = with_retry(
                lambda: self._post(payload, headers),
                self.retry_policy,
                should_retry=_is_transient,
            )
        except Exception as error:  # noqa: BLE001
            message = _describe(error)
            logger.error("Error creating pull request: %s", message)
            status = error.code if isinstance(error, urllib.error.HTTPError) else None
            raise PullRequestCreationError(message, status=status) from error

        logger.info("Pull request created successfully.")
        if response.get("html_url"):
            logger.info("Pull request #%s: %s", response.get("number"), response["html_url"])
        return response

    def _post(self, payload: bytes, headers: dict[str, str]) -> dict[str, Any]:
        req = urllib.request.Request(
            self.pulls_url,
            data=payload,
            headers=headers,
            method="POST",
        )
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            raw = resp.read().decode("utf-8")
        result: dict[str, Any] = json.loads(raw) if raw.strip() else {}
        return result
