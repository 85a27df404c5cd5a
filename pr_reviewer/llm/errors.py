"""Custom exceptions for LLM providers."""


class LLMProviderError(Exception):
    """Base exception for LLM provider errors."""

    pass


class ConfigurationError(LLMProviderError):
    """Raised when a session cannot be built from its configuration."""

    pass


class TransientProviderError(LLMProviderError):
    """Raised when a single exchange with the provider fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(TransientProviderError):
    """Raised when LLM API rate limit is exceeded."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class InvalidResponseError(TransientProviderError):
    """Raised when LLM returns an unparseable response."""

    def __init__(self, message: str, raw_response: str | None = None):
        super().__init__(message)
        self.raw_response = raw_response


class RetryExhaustedError(LLMProviderError):
    """Raised when every attempt of an operation has failed."""

    def __init__(self, attempts: int, last_exception: Exception):
        self.attempts = attempts
        self.last_exception = last_exception
        super().__init__(
            f"Retry exhausted after {attempts} attempts. "
            f"Last error: {last_exception}"
        )


class NotFoundError(KeyError):
    """Raised when a conversation key was never created in the store."""

    pass
