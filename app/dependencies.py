"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Wiring:
    get_session_factory -> get_book_repository -> get_book_service

Tests override get_session_factory to run against a temporary database;
everything above it is rebuilt per request.
"""

from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.database import get_session_factory
from app.repository import BookRepository
from app.services.books import BookQuery, BookService

settings = get_settings()


# =============================================================================
# Repository & Service
# =============================================================================
def get_book_repository(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> BookRepository:
    """Repository bound to the application's session factory."""
    return BookRepository(session_factory)


def get_book_service(
    repository: BookRepository = Depends(get_book_repository),
) -> BookService:
    return BookService(repository)


BookServiceDep = Annotated[BookService, Depends(get_book_service)]


# =============================================================================
# List/Search Parameters
# =============================================================================
class BookListParams:
    """
    Query parameters of GET /books.

    Every parameter is received as a raw string. Bad values are not
    rejected with 422: BookQuery.from_params() ignores or clamps them.

    Usage:
        GET /api/v1/books?search=orwell&page=2&limit=5
        GET /api/v1/books?author=austen&sortBy=publishedYear&order=desc
    """

    def __init__(
        self,
        search: str | None = Query(
            default=None,
            description="Free text matched against title, author and isbn; "
                        "integers also match publishedYear",
            examples=["orwell", "2001"],
        ),
        author: str | None = Query(
            default=None,
            description="Filter by author (partial match, case-insensitive)",
            examples=["austen"],
        ),
        title: str | None = Query(
            default=None,
            description="Filter by title (partial match, case-insensitive)",
            examples=["pride"],
        ),
        isbn: str | None = Query(
            default=None,
            description="Filter by exact ISBN",
            examples=["9780451524935"],
        ),
        published_year: str | None = Query(
            default=None,
            alias="publishedYear",
            description="Filter by exact publication year (ignored if not an integer)",
            examples=["1949"],
        ),
        page: str | None = Query(
            default=None,
            description="Page number (1-indexed, default 1)",
            examples=["1", "2"],
        ),
        limit: str | None = Query(
            default=None,
            description=f"Books per page (default {settings.default_page_size}, "
                        f"max {settings.max_page_size})",
            examples=["10", "25"],
        ),
        sort_by: str | None = Query(
            default=None,
            alias="sortBy",
            description="Sort field: title, author, isbn, genre, publishedYear, "
                        "createdAt, updatedAt (default title)",
            examples=["title", "publishedYear"],
        ),
        order: str | None = Query(
            default=None,
            description="Sort direction: asc (default) or desc",
            examples=["asc", "desc"],
        ),
    ) -> None:
        self.search = search
        self.author = author
        self.title = title
        self.isbn = isbn
        self.published_year = published_year
        self.page = page
        self.limit = limit
        self.sort_by = sort_by
        self.order = order

    def to_query(self) -> BookQuery:
        """Parse the raw values into a BookQuery."""
        return BookQuery.from_params(
            search=self.search,
            author=self.author,
            title=self.title,
            isbn=self.isbn,
            published_year=self.published_year,
            page=self.page,
            limit=self.limit,
            sort_by=self.sort_by,
            order=self.order,
        )


BookListFilters = Annotated[BookListParams, Depends()]
