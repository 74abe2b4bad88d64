"""
Catalog Exceptions

Business errors raised by the book service. Each carries the HTTP status
code it maps to, so a single exception handler in main.py can turn any of
them into a JSON response of the form {"message": "..."}.

Anything that is not a BookCatalogError (database outages, bugs) is left to
the application-wide handlers and becomes a generic 500.
"""

from fastapi import status


class BookCatalogError(Exception):
    """Base class for errors that map to a specific HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An internal error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookCatalogError):
    """The payload violates the book schema. Nothing was written."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid book data"


class ConflictError(BookCatalogError):
    """Another book already uses the ISBN. Nothing was written."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "ISBN already exists"


class NotFoundError(BookCatalogError):
    """The identifier does not resolve to a stored book."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Book not found"
