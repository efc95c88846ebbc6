"""Errors raised by the Pipedrive connector."""

from typing import Optional


class PipedriveAPIError(RuntimeError):
    """The API reported a failure or returned a body the fetch loop cannot use."""

    def __init__(self, message: str, error_code: Optional[int] = None):
        self.error_code = error_code
        self.message = message
        if error_code is not None:
            super().__init__(f"Error {error_code}: {message}")
        else:
            super().__init__(message)


class RateLimitExceeded(PipedriveAPIError):
    """Rate limiting (429) persisted past the configured retry count."""
