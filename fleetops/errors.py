"""Exception types raised by the fleet operations backend."""


class AIProviderError(Exception):
    """A third-party AI API call failed or returned nothing usable."""

    def __init__(
        self, message: str, provider: str = "unknown", status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class DocumentReadError(Exception):
    """A document could not be turned into text."""


class RepositoryError(Exception):
    """A hosted database operation failed."""


class FunctionError(Exception):
    """A serverless function failed with a specific HTTP status.

    Args:
        message: Message returned to the caller.
        status_code: HTTP status for the response.
        code: Machine-readable error code.
    """

    def __init__(
        self, message: str, status_code: int = 500, code: str = "FUNCTION_ERROR"
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
