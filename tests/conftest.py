"""
pytest Fixtures for Book Catalog API Tests

Shared fixtures used across all test files.

DATABASE STRATEGY:
==================
Each test gets its own SQLite file under pytest's tmp_path, accessed
through aiosqlite. NullPool is used so that no connection outlives the
event loop that opened it: fixtures seed data with asyncio.run() while
the TestClient runs the app on its own loop.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import asyncio
from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from app.database import create_session_factory, create_tables, get_session_factory
from app.main import app
from app.models import Book
from app.repository import BookRepository
from app.services.books import BookService


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture
def engine(tmp_path) -> Generator[AsyncEngine, None, None]:
    """
    Create a fresh SQLite database for one test.

    Tables are created with the same metadata the app uses, so the
    unique index on isbn is in place.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        poolclass=NullPool,
    )
    asyncio.run(create_tables(engine))

    yield engine

    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def repository(session_factory) -> BookRepository:
    return BookRepository(session_factory)


@pytest.fixture
def service(repository) -> BookService:
    return BookService(repository)


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """
    Create a test client bound to the test database.

    get_session_factory is overridden, so the repository and service
    dependencies are built on top of the temporary database.
    """
    app.dependency_overrides[get_session_factory] = lambda: session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def create_book(repository):
    """
    Factory fixture inserting a book directly through the repository.

    Usage:
        book = create_book(title="Dune", isbn="9780441172719")
    """
    counter = {"n": 0}

    def _create(**overrides: Any) -> Book:
        counter["n"] += 1
        data = {
            "title": f"Sample Book {counter['n']}",
            "author": "Sample Author",
            "isbn": f"97811111{counter['n']:05d}",
            "published_year": 1990,
        }
        data.update(overrides)
        return asyncio.run(repository.insert(data))

    return _create


@pytest.fixture
def sample_book(create_book) -> Book:
    """A single well-known book."""
    return create_book(
        title="1984",
        author="George Orwell",
        isbn="9780451524935",
        published_year=1949,
        genre="Dystopian",
    )


@pytest.fixture
def book_payload() -> dict[str, Any]:
    """Valid request body for POST /books."""
    return {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "isbn": "9780547928227",
        "publishedYear": 1937,
        "genre": "Fantasy",
    }
