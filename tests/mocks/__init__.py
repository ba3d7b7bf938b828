"""Mock objects for commitpush testing."""

from tests.mocks.mock_runner import MockRunner, RunCall

__all__ = [
    "MockRunner",
    "RunCall",
]
