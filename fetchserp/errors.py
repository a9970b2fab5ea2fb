"""Exception hierarchy for the FetchSERP client."""

from typing import Any, Optional, Sequence


class FetchSerpError(Exception):
    """Base exception for FetchSERP errors."""
    pass


class AuthenticationError(FetchSerpError):
    """Missing or empty API key."""
    pass


class ValidationError(FetchSerpError, ValueError):
    """A required parameter was missing before any request was sent."""

    def __init__(self, method: str, fields: Sequence[str], message: str):
        super().__init__(f"{method}: {message}")
        self.method = method
        self.fields = tuple(fields)


class TransportError(FetchSerpError):
    """Network failure before any response was received."""

    status_code = None


class RequestTimeoutError(TransportError):
    """No response within the configured timeout; the request was cancelled."""
    pass


class APIError(FetchSerpError):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class UnauthorizedError(APIError):
    """API key rejected (401/403)."""
    pass


class RateLimitError(APIError):
    """API rate limit exceeded (429)."""
    pass


class DecodeError(FetchSerpError):
    """Response declared JSON but the body could not be parsed."""

    def __init__(self, message: str, status_code: Optional[int] = None, text: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.text = text


class ConfigurationError(FetchSerpError, ValueError):
    """Invalid setting in the environment, config file or constructor."""
    pass
