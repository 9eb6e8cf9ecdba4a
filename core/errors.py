"""Error taxonomy for reads and control commands against the bot server."""

from typing import Optional


class BotMonitorError(Exception):
    """Base class for monitor errors."""


class FetchError(BotMonitorError):
    """A request to the Data or Control API failed."""

    def __init__(self, message: str, endpoint: str = ""):
        super().__init__(message)
        self.endpoint = endpoint

    def __str__(self) -> str:
        base = super().__str__()
        return f"{self.endpoint}: {base}" if self.endpoint else base


class NetworkError(FetchError):
    """Transport failure: connection refused, reset, timeout."""


class ServerError(FetchError):
    """The server answered with a non-success status."""

    def __init__(self, message: str, endpoint: str = "", status_code: Optional[int] = None):
        super().__init__(message, endpoint)
        self.status_code = status_code


class MalformedDataError(FetchError):
    """The response body could not be parsed into the expected shape."""
