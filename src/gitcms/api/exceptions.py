"""Custom exceptions for Git hosting API operations."""


class GatewayError(Exception):
    """Base exception for Git hosting API errors."""

    def __init__(self, message: str, status_code: int = None, response_data: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class AuthenticationError(GatewayError):
    """Raised when authentication fails."""
    pass


class RateLimitError(GatewayError):
    """Raised when rate limit is exceeded."""

    def __init__(self, message: str, retry_after: int = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ResourceNotFoundError(GatewayError):
    """Raised when a resource (branch, file, pull request) is not found."""
    pass


class PermissionError(GatewayError):
    """Raised when the token lacks permission for an operation."""
    pass


class ConflictError(GatewayError):
    """Raised on stale revision ids, duplicate refs or unmergeable requests."""
    pass
