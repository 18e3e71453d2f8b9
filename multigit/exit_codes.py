"""
Standard exit codes for multigit.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import List, Optional

# Standard POSIX exit codes
SUCCESS = 0              # At least one target succeeded, or nothing to do
GENERAL_ERROR = 1        # Every target failed, or a fatal setup error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


def exit_code_for_failures(failed: int, total: int) -> int:
    """
    Overall exit code for a fan-out run.

    Only a run in which every single target failed is an error; partial
    success is success.

    Args:
        failed: Number of failed targets
        total: Number of targets dispatched

    Returns:
        SUCCESS or GENERAL_ERROR
    """
    if total > 0 and failed == total:
        return GENERAL_ERROR
    return SUCCESS


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class SetupError(CommandError):
    """Raised before any dispatch: bad directory, bad arguments, bad host."""


class AddressError(SetupError):
    """Raised when a clone address cannot be classified."""


class PatternError(SetupError):
    """Raised for a malformed glob pattern."""
    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern


class ProviderError(CommandError):
    """Raised when the hosting provider's listing API fails."""
    def __init__(self, message: str, status_code: Optional[int] = None,
                 partial: Optional[List[str]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.partial = list(partial or [])
