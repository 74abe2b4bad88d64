"""
Book Repository

The persistence layer for books. Every method opens its own short-lived
AsyncSession, performs a single read or write and closes the session.
Because no session is shared between calls, two reads can be awaited
concurrently (see BookService.list_books).

Filters are sequences of SQLAlchemy boolean clauses and are combined
with AND. An empty filter matches every book.

Write methods commit before returning. Updates and deletes are single
statements keyed by id; a row that disappeared concurrently matches
nothing and is reported as None. A duplicate ISBN rejected by the
unique index surfaces as sqlalchemy.exc.IntegrityError; translating it is
the caller's job.
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import Book

logger = logging.getLogger(__name__)

BookFilter = Sequence[ColumnElement[bool]]


class BookRepository:
    """
    Async data access for the books table.

    Usage:
        repo = BookRepository(SessionLocal)
        book = await repo.find_one([Book.isbn == "9780451524935"])
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    async def find_one(self, filters: BookFilter) -> Book | None:
        """Return the first book matching the filter, or None."""
        stmt = select(Book).where(*filters).limit(1)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def find_by_id(self, book_id: str) -> Book | None:
        async with self._session_factory() as session:
            return await session.get(Book, book_id)

    async def find(
        self,
        filters: BookFilter,
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Book]:
        """
        Return books matching the filter, sorted and paginated.

        Args:
            filters: Clauses combined with AND
            order_by: ORDER BY expressions, applied in order
            skip: Number of rows to skip (OFFSET)
            limit: Maximum number of rows (LIMIT), None for no limit
        """
        stmt = select(Book).where(*filters).order_by(*order_by).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count(self, filters: BookFilter) -> int:
        """Count books matching the filter, ignoring pagination."""
        stmt = select(func.count()).select_from(Book).where(*filters)
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    async def insert(self, data: dict[str, Any]) -> Book:
        """
        Insert a new book and return it with its generated id.

        Raises:
            IntegrityError: If the ISBN violates the unique index
        """
        async with self._session_factory() as session:
            book = Book(**data)
            session.add(book)
            await session.commit()
            # Load server-side defaults (timestamps)
            await session.refresh(book)
            logger.debug(f"Inserted book {book.id}")
            return book

    async def update_by_id(self, book_id: str, data: dict[str, Any]) -> Book | None:
        """
        Apply field updates to a book and return the post-update record.

        The write is a single UPDATE ... WHERE id = :id that also bumps the
        version, so a book deleted by a concurrent request simply matches
        no rows.

        Returns:
            The updated Book, or None if no book has that id

        Raises:
            IntegrityError: If the new ISBN violates the unique index
        """
        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .values(**data, version=Book.version + 1)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            if result.rowcount == 0:
                return None

            book = await session.get(Book, book_id, populate_existing=True)
            if book is not None:
                logger.debug(f"Updated book {book.id} (version {book.version})")
            return book

    async def delete_by_id(self, book_id: str) -> Book | None:
        """
        Delete a book.

        Returns:
            The deleted Book, or None if nothing was deleted
        """
        stmt = (
            delete(Book)
            .where(Book.id == book_id)
            .execution_options(synchronize_session=False)
        )
        async with self._session_factory() as session:
            book = await session.get(Book, book_id)
            if book is None:
                return None

            result = await session.execute(stmt)
            await session.commit()
            if result.rowcount == 0:
                # Removed by a concurrent request after the lookup
                return None

            logger.debug(f"Deleted book {book_id}")
            return book
