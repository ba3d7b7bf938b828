"""Command guard: allow-listing, argument sanitization and quoting.

Every git invocation passes through here before it can reach a subprocess:
1. The subcommand must be in the allow-list
2. Each argument is rejected if it matches a disallowed pattern
3. Free-form values are wrapped in quotes; the runner strips the outer pair when building argv
"""

from __future__ import annotations

from collections.abc import Iterable

from commitpush.constants import ALLOWED_COMMANDS, DISALLOWED_PATTERNS, GitCommand, Quote
from commitpush.exceptions import InvalidInputError, SecurityRiskError, UnauthorizedCommandError


class CommandGuard:
    """Validates git subcommands and arguments before execution."""

    def __init__(self, allowed: Iterable[GitCommand] = ALLOWED_COMMANDS) -> None:
        self.allowed = frozenset(allowed)

    def authorize(self, subcommand: str | GitCommand) -> GitCommand:
        """Check ``subcommand`` against the allow-list.

        Args:
            subcommand: Git subcommand name

        Returns:
            The subcommand as a GitCommand

        Raises:
            UnauthorizedCommandError: If the subcommand is not allowed
        """
        try:
            command = GitCommand(subcommand)
        except ValueError:
            raise UnauthorizedCommandError(str(subcommand)) from None
        if command not in self.allowed:
            raise UnauthorizedCommandError(command.value)
        return command

    def sanitize(self, argument: object) -> str:
        """Reject arguments containing shell-sensitive sequences.

        Args:
            argument: Candidate argument

        Returns:
            The argument, unchanged

        Raises:
            InvalidInputError: If the argument is not a string
            SecurityRiskError: If the argument matches a disallowed pattern
        """
        if not isinstance(argument, str):
            raise InvalidInputError()
        for pattern in DISALLOWED_PATTERNS:
            if pattern.search(argument):
                raise SecurityRiskError(argument, pattern.pattern)
        return argument

    def sanitize_all(self, arguments: Iterable[object]) -> list[str]:
        return [self.sanitize(arg) for arg in arguments]

    @staticmethod
    def quote(argument: str, quote: Quote = Quote.DOUBLE) -> str:
        """Wrap ``argument`` in quotes unless it is already fully quoted.

        Args:
            argument: Value to quote
            quote: Quote character to wrap with

        Returns:
            Quoted value
        """
        if len(argument) > 1:
            for candidate in Quote:
                if argument.startswith(candidate) and argument.endswith(candidate):
                    return argument
        return f"{quote}{argument}{quote}"

    @staticmethod
    def unquote(argument: str) -> str:
        """Remove the one outer quote pair ``quote`` would have added.

        Inner quotes and backslashes are left exactly as given.
        """
        if len(argument) > 1:
            for candidate in Quote:
                if argument.startswith(candidate) and argument.endswith(candidate):
                    return argument[1:-1]
        return argument


ensure_quoted = CommandGuard.quote
