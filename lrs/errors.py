"""Error types raised across the Learning Record Store.

Each error carries the HTTP status the server error handlers answer with.
"""


class LrsError(Exception):
    """Base error for the Learning Record Store."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnauthorizedError(LrsError):
    """No usable authorization cookie was present on an API request."""

    status_code = 401

    def __init__(self, message: str = "Incorrect cookie information present") -> None:
        super().__init__(message)


class UserLookupError(LrsError):
    """The user resolver failed to produce a user."""


class UserNotFoundError(UserLookupError):
    """The user id does not exist or is not a valid id."""

    status_code = 404


class CsrfError(LrsError):
    """A state-changing request arrived from a foreign referer."""

    status_code = 403

    def __init__(self, message: str = "CSRF attack detected") -> None:
        super().__init__(message)
