from __future__ import annotations


class ConsoleError(RuntimeError):
    """Base for every failure the console reports on its status banner."""


class ValidationError(ConsoleError):
    """User input rejected before any network call."""


class InvalidResponseError(ConsoleError):
    """Successful HTTP response without the expected payload."""


class ApiClientError(ConsoleError):
    pass


class ApiError(ApiClientError):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(ApiClientError):
    pass
