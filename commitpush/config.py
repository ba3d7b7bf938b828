"""commitpush configuration management using Pydantic."""

from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, ValidationError

from commitpush.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    USER_AGENT,
    ConfigScope,
)
from commitpush.exceptions import ConfigurationError
from commitpush.retry import RetryPolicy


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="info", pattern="^(debug|info|warning|error)$")
    json_file: str | None = None


class HttpConfig(BaseModel):
    """HTTP client configuration for the GitHub API."""

    timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0, le=300)
    user_agent: str = USER_AGENT


class GitConfig(BaseModel):
    """Git invocation configuration."""

    executable: str = "git"
    config_scope: ConfigScope = ConfigScope.LOCAL


class CommitPushConfig(BaseModel):
    """Complete commitpush configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    http: HttpConfig = Field(default_factory=HttpConfig)
    git: GitConfig = Field(default_factory=GitConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "CommitPushConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Defaults to .commitpush.yaml

        Returns:
            CommitPushConfig instance; defaults when the file is missing

        Raises:
            ConfigurationError: If the file is not valid YAML or fails validation
        """
        config_path = Path(DEFAULT_CONFIG_PATH) if config_path is None else Path(config_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}", details={"error": str(e)}) from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        try:
            return cls.from_dict(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration in {config_path}: {e.error_count()} validation error(s)",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CommitPushConfig":
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
