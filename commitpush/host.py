"""ActionHost -- the CI runner boundary.

Reads ``INPUT_*`` variables, publishes step outputs, masks secrets and
signals failure the way GitHub Actions expects.
"""

from __future__ import annotations

import os
import sys
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import IO

from commitpush.exceptions import InputRequiredError
from commitpush.logging import get_logger, register_secret

logger = get_logger("host")


class ActionHost:
    """Facade over the GitHub Actions runner environment."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        stdout: IO[str] | None = None,
    ) -> None:
        """Initialize host.

        Args:
            environ: Environment mapping. Defaults to os.environ
            stdout: Stream for workflow commands. Defaults to sys.stdout
        """
        self.environ = environ if environ is not None else os.environ
        self.stdout = stdout or sys.stdout
        self.outputs: dict[str, str] = {}
        self.exit_code = 0

    @staticmethod
    def input_variable(name: str) -> str:
        return f"INPUT_{name.replace(' ', '_').upper()}"

    def get_input(self, name: str, required: bool = False) -> str:
        """Read an input value.

        Args:
            name: Input name as declared in action.yml (e.g. "author-name")
            required: Raise if the value is empty

        Returns:
            Stripped value, or "" when unset

        Raises:
            InputRequiredError: If required and empty
        """
        value = self.environ.get(self.input_variable(name), "").strip()
        if required and not value:
            raise InputRequiredError(name)
        return value

    def get_boolean_input(self, name: str) -> bool:
        return self.get_input(name).lower() == "true"

    def set_output(self, name: str, value: str) -> None:
        """Publish a step output.

        Appends to the file named by ``GITHUB_OUTPUT`` when present; the
        value is always kept in ``outputs``.
        """
        self.outputs[name] = value
        output_file = self.environ.get("GITHUB_OUTPUT")
        if not output_file:
            logger.debug("GITHUB_OUTPUT not set; output %s kept in memory", name)
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(Path(output_file), "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def set_secret(self, value: str) -> None:
        """Mask ``value`` in runner logs and in our own log output."""
        if not value or not value.strip():
            return
        register_secret(value)
        if self.is_actions():
            self.stdout.write(f"::add-mask::{value}\n")
            self.stdout.flush()

    def set_failed(self, message: str) -> None:
        """Report failure to the runner without raising."""
        self.exit_code = 1
        logger.error(message)

    def is_actions(self) -> bool:
        return self.environ.get("GITHUB_ACTIONS") == "true"

    def is_debug(self) -> bool:
        return self.environ.get("RUNNER_DEBUG") == "1"
