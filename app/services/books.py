"""
Book Service

Business logic for the catalog: the five book operations, plus the
list/search query construction.

Query Construction
==================
The list endpoint accepts loosely typed query strings. They are parsed
once into a BookQuery:

- search becomes a SearchTerm tagged "numeric" or "text". A numeric term
  also matches published_year exactly, so one search box can find
  "2001" as a year or as a piece of a title.
- author/title are case-insensitive substring filters, isbn and
  publishedYear are exact filters. All of them are ANDed with the
  search disjunction.
- page/limit are clamped into a usable range instead of being rejected.

Uniqueness
==========
create and update look up the ISBN before writing so the common
duplicate case gets a clean 409. Two racing requests can both pass that
check; the unique index then rejects the second write and the resulting
IntegrityError is reported as the same 409.
"""

import asyncio
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from sqlalchemy import ColumnElement, or_
from sqlalchemy.exc import IntegrityError

from app.config import get_settings
from app.exceptions import ConflictError, NotFoundError
from app.models import Book
from app.repository import BookRepository
from app.schemas import MAX_PUBLISHED_YEAR, MIN_PUBLISHED_YEAR, BookPayload, validate_book

logger = logging.getLogger(__name__)

# Keys a client may send back from a previous response but never write
IDENTITY_FIELDS = ("id", "_id", "version", "__v")

# Public sort names (camelCase and snake_case) -> model columns
SORT_FIELDS = {
    "title": Book.title,
    "author": Book.author,
    "isbn": Book.isbn,
    "genre": Book.genre,
    "publishedYear": Book.published_year,
    "published_year": Book.published_year,
    "createdAt": Book.created_at,
    "created_at": Book.created_at,
    "updatedAt": Book.updated_at,
    "updated_at": Book.updated_at,
}

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_int(value: str | None) -> int | None:
    """
    Parse an integer query parameter.

    Returns None for missing or non-integer input ("abc", "2.5", "").
    """
    if value is None:
        return None
    value = value.strip()
    if not _INTEGER_RE.match(value):
        return None
    return int(value)


def parse_year(value: str | None) -> int | None:
    """Parse an integer that can be a published_year, else None."""
    number = parse_int(value)
    if number is None or not MIN_PUBLISHED_YEAR <= number <= MAX_PUBLISHED_YEAR:
        return None
    return number


def strip_identity_fields(payload: Any) -> Any:
    """
    Copy a request payload without identifier and version keys.

    Anything that is not a mapping is returned unchanged; the validation
    gate rejects it.
    """
    if not isinstance(payload, Mapping):
        return payload
    return {key: value for key, value in payload.items() if key not in IDENTITY_FIELDS}


# =============================================================================
# Query Parsing
# =============================================================================
@dataclass(frozen=True)
class SearchTerm:
    """
    Free-text search value, tagged at parse time.

    kind is "numeric" when the whole value is an integer literal within
    the published_year range; number then holds its value. The original
    text is always kept because a numeric term still matches text fields.
    """

    kind: Literal["numeric", "text"]
    text: str
    number: int | None = None

    @classmethod
    def parse(cls, raw: str | None) -> "SearchTerm | None":
        if not raw:
            return None
        number = parse_year(raw)
        if number is not None:
            return cls(kind="numeric", text=raw, number=number)
        return cls(kind="text", text=raw)

    @property
    def is_numeric(self) -> bool:
        return self.kind == "numeric"


@dataclass(frozen=True)
class BookQuery:
    """
    Parsed list/search parameters.

    Build it with BookQuery.from_params() from raw query strings; the
    constructor expects already-clean values.
    """

    search: SearchTerm | None = None
    author: str | None = None
    title: str | None = None
    isbn: str | None = None
    published_year: int | None = None
    page: int = 1
    limit: int = 10
    sort_by: str = "title"
    descending: bool = False

    @classmethod
    def from_params(
        cls,
        search: str | None = None,
        author: str | None = None,
        title: str | None = None,
        isbn: str | None = None,
        published_year: str | None = None,
        page: str | None = None,
        limit: str | None = None,
        sort_by: str | None = None,
        order: str | None = None,
        *,
        default_limit: int | None = None,
        max_limit: int | None = None,
        max_page: int | None = None,
        default_sort: str | None = None,
    ) -> "BookQuery":
        """
        Parse raw query-string values.

        Rules:
        - Empty strings count as missing.
        - publishedYear is ignored unless it is an integer in 0..9999.
        - page: non-integer -> 1, clamped to [1, max_page].
        - limit: non-integer -> default_limit, clamped to [1, max_limit].
        - sortBy: unknown names fall back to default_sort.
        - order: "desc" (any case) sorts descending, anything else ascending.
        """
        settings = get_settings()
        default_limit = default_limit or settings.default_page_size
        max_limit = max_limit or settings.max_page_size
        max_page = max_page or settings.max_page
        default_sort = default_sort or settings.default_sort_field

        page_number = parse_int(page)
        if page_number is None or page_number < 1:
            page_number = 1
        page_number = min(page_number, max_page)

        limit_number = parse_int(limit)
        if limit_number is None:
            limit_number = default_limit
        limit_number = max(1, min(limit_number, max_limit))

        if not sort_by or sort_by not in SORT_FIELDS:
            if sort_by:
                logger.debug(f"Unknown sort field {sort_by!r}, using {default_sort!r}")
            sort_by = default_sort

        return cls(
            search=SearchTerm.parse(search),
            author=author or None,
            title=title or None,
            isbn=isbn or None,
            published_year=parse_year(published_year),
            page=page_number,
            limit=limit_number,
            sort_by=sort_by,
            descending=(order or "").lower() == "desc",
        )

    @property
    def skip(self) -> int:
        """
        Rows to skip before the requested page.

        Page 1 -> 0, page 2 -> limit, page 3 -> 2 * limit.
        """
        return (self.page - 1) * self.limit


def build_filter(query: BookQuery) -> list[ColumnElement[bool]]:
    """
    Translate a BookQuery into filter clauses (combined with AND).

    Substring matches escape LIKE wildcards, so "50%" matches the
    literal text "50%".
    """
    clauses: list[ColumnElement[bool]] = []

    if query.search is not None:
        term = query.search.text
        alternatives = [
            Book.title.icontains(term, autoescape=True),
            Book.author.icontains(term, autoescape=True),
            Book.isbn.icontains(term, autoescape=True),
        ]
        if query.search.is_numeric:
            alternatives.append(Book.published_year == query.search.number)
        clauses.append(or_(*alternatives))

    if query.author:
        clauses.append(Book.author.icontains(query.author, autoescape=True))
    if query.title:
        clauses.append(Book.title.icontains(query.title, autoescape=True))
    if query.isbn:
        clauses.append(Book.isbn == query.isbn)
    if query.published_year is not None:
        clauses.append(Book.published_year == query.published_year)

    return clauses


def build_order_by(query: BookQuery) -> list[Any]:
    """Single-field sort; id breaks ties so pages never overlap."""
    column = SORT_FIELDS[query.sort_by]
    if query.descending:
        return [column.desc(), Book.id.desc()]
    return [column.asc(), Book.id.asc()]


@dataclass
class BookPage:
    """One page of list results."""

    total_books: int
    total_pages: int
    current_page: int
    books: list[Book] = field(default_factory=list)


# =============================================================================
# Service
# =============================================================================
class BookService:
    """
    The catalog operations.

    Every method raises BookCatalogError subclasses for business failures
    (ValidationError, ConflictError, NotFoundError). Database errors are
    not caught here.
    """

    def __init__(self, repository: BookRepository) -> None:
        self.repository = repository

    async def create_book(self, payload: Mapping[str, Any]) -> Book:
        """
        Validate and insert a new book.

        Raises:
            ValidationError: Payload violates the schema
            ConflictError: ISBN already used
        """
        data = validate_book(strip_identity_fields(payload))

        existing = await self.repository.find_one([Book.isbn == data.isbn])
        if existing is not None:
            logger.info(f"Rejected create: ISBN {data.isbn} already used by {existing.id}")
            raise ConflictError()

        try:
            book = await self.repository.insert(data.model_dump())
        except IntegrityError as exc:
            await self._raise_if_isbn_taken(data, exc)
            raise

        logger.info(f"Created book {book.id} (ISBN {book.isbn})")
        return book

    async def update_book(self, book_id: str, payload: Mapping[str, Any]) -> Book:
        """
        Validate and apply an update to an existing book.

        Only the fields present in the payload are written. The ISBN
        uniqueness check runs only when the ISBN changes.

        Raises:
            ValidationError: Payload violates the schema
            NotFoundError: No book with that id
            ConflictError: New ISBN already used by another book
        """
        data = validate_book(strip_identity_fields(payload))

        existing = await self.repository.find_by_id(book_id)
        if existing is None:
            raise NotFoundError()

        if data.isbn != existing.isbn:
            duplicate = await self.repository.find_one(
                [Book.isbn == data.isbn, Book.id != book_id]
            )
            if duplicate is not None:
                logger.info(f"Rejected update of {book_id}: ISBN {data.isbn} used by {duplicate.id}")
                raise ConflictError()

        try:
            book = await self.repository.update_by_id(
                book_id, data.model_dump(exclude_unset=True)
            )
        except IntegrityError as exc:
            await self._raise_if_isbn_taken(data, exc, exclude_id=book_id)
            raise

        if book is None:
            # Deleted between the lookup and the write
            raise NotFoundError()

        logger.info(f"Updated book {book.id} (version {book.version})")
        return book

    async def list_books(self, query: BookQuery) -> BookPage:
        """
        Search, filter, sort and paginate books.

        The page query and the total count run concurrently over the
        same filter.
        """
        filters = build_filter(query)
        logger.debug(f"Listing books: {query}")

        books, total_books = await asyncio.gather(
            self.repository.find(
                filters,
                order_by=build_order_by(query),
                skip=query.skip,
                limit=query.limit,
            ),
            self.repository.count(filters),
        )

        return BookPage(
            total_books=total_books,
            total_pages=math.ceil(total_books / query.limit),
            current_page=query.page,
            books=books,
        )

    async def get_book(self, book_id: str) -> Book:
        book = await self.repository.find_by_id(book_id)
        if book is None:
            raise NotFoundError()
        return book

    async def delete_book(self, book_id: str) -> None:
        deleted = await self.repository.delete_by_id(book_id)
        if deleted is None:
            raise NotFoundError()
        logger.info(f"Deleted book {book_id}")

    async def _raise_if_isbn_taken(
        self,
        data: BookPayload,
        exc: IntegrityError,
        exclude_id: str | None = None,
    ) -> None:
        """
        Turn a unique-index violation into ConflictError.

        Only raises when another book really holds the ISBN; any other
        integrity failure is left for the caller to re-raise.
        """
        filters = [Book.isbn == data.isbn]
        if exclude_id is not None:
            filters.append(Book.id != exclude_id)

        if await self.repository.find_one(filters) is not None:
            logger.warning(f"ISBN {data.isbn} claimed by a concurrent write: {exc.orig}")
            raise ConflictError() from exc
