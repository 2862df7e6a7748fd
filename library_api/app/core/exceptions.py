"""
Domain exceptions raised by the service layer.

Services raise these synchronously and never retry; the HTTP layer
maps them to status codes (``NotFoundError`` to 404,
``InvalidStateError`` to 400).  Storage failures are not wrapped and
surface as ``sqlite3.Error``.
"""


class LibraryError(Exception):
    """Base exception for library business-rule failures."""


class NotFoundError(LibraryError):
    """Referenced user does not exist."""


class InvalidStateError(LibraryError):
    """Loan or return violates the loan state rules."""
