"""
Error Types for the Polling Relay.

Every failure the relay can encounter maps onto one of these classes:

    ConfigurationError: Missing or invalid settings at startup. Fatal, the
        process must not start.
    FetchError: Network failure, timeout or non-success HTTP status while
        reading the source URL. Reported through the webhook.
    ValidationError: The source answered but its payload failed the schema.
        Reported through the webhook.
    DeliveryError: POSTing a notification to the webhook failed. Logged only.

Only ConfigurationError is ever allowed to reach the process. The others are
produced and consumed inside a polling cycle.
"""
from typing import Any, Iterable, List, Optional


class PollingError(Exception):
    """Base class for all relay errors."""


def format_issues(issues: Iterable[Any]) -> str:
    """Render ``path: message`` pairs as a single ``; ``-separated line."""
    return "; ".join(f"{issue.path}: {issue.message}" for issue in issues)


class ConfigurationError(PollingError):
    """Raised when required settings are missing or invalid.

    Attributes:
        issues: One entry per offending field (objects with ``path`` and
            ``message`` attributes)

    Example:
        >>> raise ConfigurationError([ValidationIssue("POLL_URL", "Required")])
        ConfigurationError: Invalid environment configuration:
        - POLL_URL: Required
    """

    def __init__(self, issues: Iterable[Any]):
        self.issues: List[Any] = list(issues)
        lines = "\n".join(f"- {issue.path}: {issue.message}" for issue in self.issues)
        super().__init__(f"Invalid environment configuration:\n{lines}")


class FetchError(PollingError):
    """Raised when the source URL cannot be read.

    Attributes:
        status_code: HTTP status of the failed response, if one was received
        body: Response body text (possibly truncated), if one was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ValidationError(PollingError):
    """Raised when a fetched payload does not satisfy the schema.

    Attributes:
        issues: Every failing field path with its message
    """

    def __init__(self, issues: Iterable[Any]):
        self.issues: List[Any] = list(issues)
        super().__init__(f"Schema validation failed: {format_issues(self.issues)}")


class DeliveryError(PollingError):
    """Raised when a notification cannot be POSTed to the webhook."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
