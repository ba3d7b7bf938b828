"""commitpush structured logging with secret redaction and workflow annotations."""

from __future__ import annotations

import json
import logging
import re
import sys
import uuid
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import IO

# Values registered at runtime through ActionHost.set_secret
_registered_secrets: set[str] = set()

# Patterns redacted from every log record
SENSITIVE_PATTERNS = [
    re.compile(r"ghp_[A-Za-z0-9_]{36}"),  # GitHub personal access token
    re.compile(r"ghs_[A-Za-z0-9_]{36}"),  # GitHub app token
    re.compile(r"gho_[A-Za-z0-9_]{36}"),  # GitHub OAuth token
    re.compile(r"ghu_[A-Za-z0-9_]{36}"),  # GitHub user token
    re.compile(r"ghr_[A-Za-z0-9_]{36}"),  # GitHub refresh token
    re.compile(r"github_pat_[A-Za-z0-9_]{22,}"),  # Fine-grained token
    re.compile(r"Bearer\s+[A-Za-z0-9_\-.]{8,}"),
    re.compile(r"password\s*[=:]\s*['\"]?[^\s'\"]{8,}['\"]?", re.IGNORECASE),
    re.compile(r"api[_-]?key\s*[=:]\s*['\"]?[A-Za-z0-9_\-]{16,}['\"]?", re.IGNORECASE),
]

REDACTED = "***REDACTED***"


def redact(message: str) -> str:
    """Redact secrets from ``message``.

    Registered secrets are replaced outright. Pattern matches keep their
    first and last four characters so tokens stay identifiable in CI logs.

    Args:
        message: Text to redact

    Returns:
        Redacted text
    """
    redacted = message
    for secret in sorted(_registered_secrets, key=len, reverse=True):
        redacted = redacted.replace(secret, REDACTED)

    def _mask(match: re.Match[str]) -> str:
        value = match.group(0)
        if len(value) <= 8:
            return REDACTED
        return f"{value[:4]}...{value[-4:]}"

    for pattern in SENSITIVE_PATTERNS:
        redacted = pattern.sub(_mask, redacted)
    return redacted


def register_secret(secret: str) -> None:
    """Register a value that must never appear in log output."""
    if secret and secret.strip():
        _registered_secrets.add(secret)


def clear_secrets() -> None:
    """Forget all registered secrets."""
    _registered_secrets.clear()


class SecretRedactingFilter(logging.Filter):
    """Filter that rewrites records with secrets redacted."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "ts": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in ["step", "command", "exit_code"]:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for local runs."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now().strftime("%H:%M:%S")
        step = f"[{record.step}] " if hasattr(record, "step") else ""
        return f"{color}{timestamp} {record.levelname:8s}{self.RESET} {step}{record.getMessage()}"


class WorkflowCommandFormatter(logging.Formatter):
    """Render records as GitHub Actions workflow commands.

    Info lines are printed as-is, other levels become annotations the
    runner picks up (``::warning::``, ``::error::``, ``::debug::``). Info
    text holding a line that looks like a workflow command is wrapped in
    ``::stop-commands::`` so the runner prints it instead of acting on it.
    """

    PREFIXES = {
        "DEBUG": "::debug::",
        "WARNING": "::warning::",
        "ERROR": "::error::",
        "CRITICAL": "::error::",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        prefix = self.PREFIXES.get(record.levelname)
        if prefix is None:
            return self._suspend_commands(message)
        # Workflow commands are line oriented
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"{prefix}{escaped}"

    @staticmethod
    def _suspend_commands(message: str) -> str:
        if not any(line.lstrip().startswith("::") for line in message.splitlines()):
            return message
        token = uuid.uuid4().hex
        return f"::stop-commands::{token}\n{message}\n::{token}::"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the ``commitpush`` namespace.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(f"commitpush.{name}")


def setup_logging(
    level: str = "info",
    actions: bool = False,
    stream: IO[str] | None = None,
    json_file: str | Path | None = None,
    console_output: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> None:
    """Set up logging configuration.

    Args:
        level: Log level (debug, info, warning, error)
        actions: Emit GitHub Actions workflow commands instead of colored lines
        stream: Console stream; stdout under Actions, stderr otherwise
        json_file: Optional path for a rotating JSON log file
        console_output: Whether to output to console
        max_bytes: Maximum size of log file before rotation
        backup_count: Number of backup files to keep
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger("commitpush")
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    redactor = SecretRedactingFilter()

    if console_output:
        console_stream = stream or (sys.stdout if actions else sys.stderr)
        console_handler = logging.StreamHandler(console_stream)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(WorkflowCommandFormatter() if actions else ConsoleFormatter())
        console_handler.addFilter(redactor)
        root_logger.addHandler(console_handler)

    if json_file:
        log_path = Path(json_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JsonFormatter())
        file_handler.addFilter(redactor)
        root_logger.addHandler(file_handler)

    root_logger.propagate = False


# Initialize default logging on import
setup_logging(console_output=True)
