"""
Standard exit codes and error types for ghsync.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination (including per-repo failures)
GENERAL_ERROR = 1        # Fatal setup errors: missing token, aborted confirmation, bad flag
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FatalConfigError': GENERAL_ERROR,
    'UsageError': GENERAL_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class FatalConfigError(CommandError):
    """Raised for setup problems that stop the run before any sync work."""
    def __init__(self, message: str):
        super().__init__(message, GENERAL_ERROR)


class RemoteProtocolError(Exception):
    """
    Raised when a remote listing page cannot be used.

    Covers transport failures, non-200 responses and bodies that are not
    the expected JSON array. Pages yielded before the error remain valid.
    """
    def __init__(
        self,
        message: str,
        url: str = "",
        page: Optional[int] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.url = url
        self.page = page
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class RepoActionError(Exception):
    """A clone/update/fetch failure for a single repository."""
    def __init__(self, owner: str, name: str, operation: str, detail: str = ""):
        self.owner = owner
        self.name = name
        self.operation = operation
        self.detail = detail
        message = f"{operation} failed for {owner}/{name}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
