"""Custom exception hierarchy for tfplan-commenter.

Exception Hierarchy:
    TfPlanCommenterError (base)
    ├── ConfigurationError
    ├── InvalidModeError
    ├── PlanCommandError
    └── ExternalServiceError
        └── CommentStoreError

A soft "no pull request found" outcome is not an exception; the reconciler
reports it as a ``Skip`` action.

Example Usage:
    >>> from tfplan_commenter.exceptions import ConfigurationError
    >>> try:
    ...     settings = CommenterSettings.load(path)
    ... except ConfigurationError as e:
    ...     print(e.message)
"""

from collections.abc import Sequence


class TfPlanCommenterError(Exception):
    """Base exception for all tfplan-commenter errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(TfPlanCommenterError):
    """Configuration-related errors.

    Raised before any network call when the settings are unusable.

    Examples:
        - Neither an API token nor a username/password pair
        - Configuration file not found or not valid YAML
        - Repository owner or name missing
    """

    pass


class InvalidModeError(TfPlanCommenterError):
    """Comment mode is not one of the recognized values.

    Attributes:
        mode: The rejected mode string
        allowed: The accepted mode values
    """

    def __init__(self, mode: str, allowed: Sequence[str]) -> None:
        self.mode = mode
        self.allowed = tuple(allowed)
        super().__init__(f"Mode {mode!r} is invalid, required one of [{', '.join(self.allowed)}]")


class PlanCommandError(TfPlanCommenterError):
    """A terraform command exited with a non-zero status.

    Attributes:
        command: The command line that failed
        returncode: Process exit code
        stderr: Captured standard error, if any
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stderr: str | None = None,
    ) -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr

        message = f"Command failed with exit code {returncode}: {' '.join(self.command)}"
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super().__init__(message)


class ExternalServiceError(TfPlanCommenterError):
    """External service communication errors.

    Raised when communication with external services fails
    (HTTP errors, API failures, transport errors).
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_text: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            status_code: HTTP status code (if applicable)
            response_text: Response body text (if applicable)
        """
        self.status_code = status_code
        self.response_text = response_text

        full_message = message
        if status_code:
            full_message = f"{message} (HTTP {status_code})"

        super().__init__(full_message)


class CommentStoreError(ExternalServiceError):
    """A list, search, create or edit call against the comment store failed.

    The reconciliation is aborted at the first failure; nothing is written
    after it.
    """

    pass
