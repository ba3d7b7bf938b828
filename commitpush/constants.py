"""commitpush constants and enumerations."""

import re
from enum import IntEnum, StrEnum


class GitCommand(StrEnum):
    """Git subcommands known to the command guard."""

    ADD = "add"
    BRANCH = "branch"
    CHECKOUT = "checkout"
    CLONE = "clone"
    CONFIG = "config"
    COMMIT = "commit"
    FETCH = "fetch"
    MERGE = "merge"
    PULL = "pull"
    PUSH = "push"
    RESET = "reset"
    REV_PARSE = "rev-parse"
    STATUS = "status"
    TAG = "tag"


# Subcommands permitted to reach the subprocess layer
ALLOWED_COMMANDS: frozenset[GitCommand] = frozenset(GitCommand)

# Argument patterns rejected before anything reaches git
DISALLOWED_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\.\."),  # Directory traversal
    re.compile(r"\r"),  # Multi-line injection
    re.compile(r"\n"),  # Multi-line injection
    re.compile(r"[;&|]"),  # Command chaining
    re.compile(r"`"),  # Command substitution
    re.compile(r"\$"),  # Variable interpolation
)


class Quote(StrEnum):
    """Quote characters recognised by the guard."""

    DOUBLE = '"'
    SINGLE = "'"


class ExitCode(IntEnum):
    """Process-style exit codes returned by generic steps."""

    SUCCESS = 0
    FAILURE = 1


class CommitOutcome(IntEnum):
    """Tri-state result of the commit step."""

    COMMITTED = 0
    NO_CHANGES = 1
    FAILED = 2


class ConfigScope(StrEnum):
    """Scope that ``git config`` writes to."""

    LOCAL = "local"
    GLOBAL = "global"
    SYSTEM = "system"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


class Output(StrEnum):
    """Named outputs published to the CI host."""

    COMMIT_HASH = "commit-hash"


# Phrases git prints when a commit has nothing staged (LC_ALL=C)
NO_CHANGES_MARKERS: tuple[str, ...] = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)

# GitHub REST API
GITHUB_API_VERSION = "2022-11-28"
GITHUB_ACCEPT = "application/vnd.github+json"
USER_AGENT = "commitpush"
DEFAULT_PR_TITLE = "Automated Pull Request"
DEFAULT_PR_BODY = "Automated pull request created by GitHub Action."
TOKEN_PREFIXES: tuple[str, ...] = ("ghp_", "gho_", "ghu_", "ghs_", "ghr_", "github_pat_")
LEGACY_TOKEN_MIN_LENGTH = 40

# Defaults
DEFAULT_CONFIG_PATH = ".commitpush.yaml"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30
DEFAULT_RETRY_ATTEMPTS = 4
