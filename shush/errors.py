"""Exception types raised by shush and mapped to exit status by the CLI."""

from typing import Optional


class ShushError(Exception):
    """Base class for every error shush reports to the user."""


class ConfigurationError(ShushError):
    """Malformed command line or config file input."""


class SensuError(ShushError):
    """Transport failure, unexpected status, or malformed JSON from the Sensu API."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        msg = super().__str__()
        if self.body:
            return f"{msg}\nResponse: {self.body}"
        return msg


class NotFoundError(SensuError):
    """The API answered 404 for the requested endpoint."""

    def __init__(self, url: str):
        super().__init__(f"Not found: {url}", status=404)
        self.url = url


class NoTargetsError(ShushError):
    """Nothing left to silence or clear."""


class BatchAborted(ShushError):
    """A request in a batch failed; earlier requests stay applied on the server."""

    def __init__(self, issued: int, total: int, cause: SensuError):
        super().__init__(
            f"Request {issued + 1} of {total} failed, {issued} already applied: {cause}"
        )
        self.issued = issued
        self.total = total
        self.cause = cause
