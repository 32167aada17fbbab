class OCMError(Exception):
    """Base error of the upgrade-tracking service client."""


class AuthenticationError(OCMError):
    """Request was rejected as unauthorized or forbidden."""


class NotFoundError(OCMError):
    """Resource not found"""


class RequestError(OCMError):
    """The service answered with an unexpected error status."""

    def __init__(self, status: int, message: str = "") -> None:
        self.status = status
        self.message = message
        super().__init__(f"request failed with status {status}: {message}")
