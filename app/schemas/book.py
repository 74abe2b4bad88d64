"""
Book Pydantic Schemas

Handles:
- The validation gate for incoming book payloads (create and update)
- ISBN format validation
- Book responses and the paginated list envelope

JSON field names are camelCase (publishedYear, totalBooks, ...) while the
Python attributes stay snake_case. The alias generator does the mapping in
both directions.
"""

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.exceptions import ValidationError

# Range of published_year, shared with the list filters
MIN_PUBLISHED_YEAR = 0
MAX_PUBLISHED_YEAR = 9999


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BookPayload(CamelModel):
    """
    Validated book fields coming from a create or update request.

    Both operations validate the full document: title, author and isbn
    are required in either case. Unknown keys are rejected.

    Example request body:
    {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "978-0451524935",
        "publishedYear": 1949
    }
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Book title",
        examples=["1984", "Pride and Prejudice"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Author name",
        examples=["George Orwell", "Jane Austen"],
    )

    isbn: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="ISBN-10 or ISBN-13, unique across the catalog",
        examples=["978-0451524935", "0-06-112008-1"],
    )

    published_year: int | None = Field(
        default=None,
        ge=MIN_PUBLISHED_YEAR,
        le=MAX_PUBLISHED_YEAR,
        description="Year of publication",
        examples=[1949, 2001],
    )

    genre: str | None = Field(
        default=None,
        max_length=100,
        description="Genre label",
        examples=["Dystopian"],
    )

    description: str | None = Field(
        default=None,
        max_length=5000,
        description="Book description or summary",
    )

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str) -> str:
        """
        Validate ISBN format.

        Accepts:
        - ISBN-10: 9 digits followed by a digit or X
        - ISBN-13: 13 digits

        Hyphens and spaces are ignored for the check; the value is stored
        exactly as submitted.
        """
        cleaned = re.sub(r"[-\s]", "", v)

        if len(cleaned) == 10:
            if not re.match(r"^\d{9}[\dXx]$", cleaned):
                raise ValueError("must be a valid ISBN-10")
        elif len(cleaned) == 13:
            if not cleaned.isdigit():
                raise ValueError("must be a valid ISBN-13")
        else:
            raise ValueError("must be either 10 or 13 characters (excluding hyphens)")

        return v

    @field_validator("title", "author")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cannot be empty or whitespace")
        return v


def format_validation_error(exc: PydanticValidationError) -> str:
    """
    Render the first error of a pydantic ValidationError as one line.

    Examples:
        "title" is required
        "price" is not allowed
        "publishedYear" Input should be a valid integer
        "isbn" must be a valid ISBN-13
    """
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "value"

    if error["type"] == "missing":
        return f'"{field}" is required'
    if error["type"] == "extra_forbidden":
        return f'"{field}" is not allowed'
    if error["type"] == "value_error":
        # Custom validators: use the raw ValueError text
        return f'"{field}" {error["ctx"]["error"]}'
    return f'"{field}" {error["msg"]}'


def validate_book(payload: Mapping[str, Any]) -> BookPayload:
    """
    Validation gate for book payloads.

    Args:
        payload: Untyped mapping taken from the request body

    Returns:
        Typed BookPayload

    Raises:
        ValidationError: With the first schema violation as message
    """
    if not isinstance(payload, Mapping):
        raise ValidationError('"value" must be an object')

    try:
        return BookPayload.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(format_validation_error(exc)) from exc


class BookResponse(CamelModel):
    """
    Schema for book responses.

    Includes the store-managed fields (id, version, timestamps).
    """

    id: str = Field(..., description="Unique identifier")
    title: str
    author: str
    isbn: str
    published_year: int | None = None
    genre: str | None = None
    description: str | None = None
    version: int = Field(..., description="Row version, bumped on every update")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "6f1c2b1e9a9f4f4e8e3c1d2a5b7c9e01",
                "title": "1984",
                "author": "George Orwell",
                "isbn": "9780451524935",
                "publishedYear": 1949,
                "genre": "Dystopian",
                "description": "A dystopian novel about totalitarianism",
                "version": 1,
                "createdAt": "2024-01-15T10:30:00Z",
                "updatedAt": "2024-01-15T10:30:00Z",
            }
        },
    )


class BookListResponse(CamelModel):
    """
    Schema for paginated book list responses.

    - totalBooks: Number of books matching the filter (all pages)
    - totalPages: ceil(totalBooks / limit)
    - currentPage: Page that was returned
    - books: The books on that page
    """

    total_books: int = Field(..., ge=0, description="Total number of matching books")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    current_page: int = Field(..., ge=1, description="Current page number")
    books: list[BookResponse] = Field(..., description="Books on this page")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "totalBooks": 25,
                "totalPages": 3,
                "currentPage": 2,
                "books": [],
            }
        },
    )


class MessageResponse(BaseModel):
    """Plain confirmation or error body."""

    message: str = Field(..., examples=["Book deleted successfully"])
