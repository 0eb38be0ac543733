"""Service-level errors.

Each error carries a stable machine-readable ``kind`` and the HTTP status the
API layer renders it with. Services raise these before touching storage.
"""


class ServiceError(Exception):
    """Base class for errors the API reports to the caller."""

    kind = "INTERNAL"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """A referenced goal or user does not exist."""

    kind = "NOT_FOUND"
    status_code = 404


class UnauthorizedError(ServiceError):
    """The actor fails an ownership or role check."""

    kind = "UNAUTHORIZED"
    status_code = 401


class BadRequestError(ServiceError):
    """A date, status or enumeration precondition does not hold."""

    kind = "BAD_REQUEST"
    status_code = 400
