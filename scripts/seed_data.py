#!/usr/bin/env python3
"""
Database Seed Script

Populates the catalog with sample books for development.

USAGE:
    # From the project root with venv activated
    python scripts/seed_data.py

    # Keep existing books, only add the missing samples
    python scripts/seed_data.py --keep

Books are created through BookService, so they go through the same
validation and ISBN checks as API requests. Samples whose ISBN already
exists are skipped.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete

from app.database import SessionLocal, create_tables, dispose_engine
from app.exceptions import ConflictError
from app.models import Book
from app.repository import BookRepository
from app.services.books import BookService

BOOKS_DATA = [
    {
        "title": "1984",
        "author": "George Orwell",
        "isbn": "9780451524935",
        "publishedYear": 1949,
        "genre": "Dystopian",
        "description": "A dystopian novel set in a totalitarian society.",
    },
    {
        "title": "Animal Farm",
        "author": "George Orwell",
        "isbn": "9780451526342",
        "publishedYear": 1945,
        "genre": "Satire",
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "isbn": "9780141439518",
        "publishedYear": 1813,
        "genre": "Romance",
    },
    {
        "title": "The Old Man and the Sea",
        "author": "Ernest Hemingway",
        "isbn": "9780684801223",
        "publishedYear": 1952,
        "genre": "Literary Fiction",
    },
    {
        "title": "Murder on the Orient Express",
        "author": "Agatha Christie",
        "isbn": "9780062693662",
        "publishedYear": 1934,
        "genre": "Mystery",
    },
    {
        "title": "Foundation",
        "author": "Isaac Asimov",
        "isbn": "9780553293357",
        "publishedYear": 1951,
        "genre": "Science Fiction",
    },
    {
        "title": "I, Robot",
        "author": "Isaac Asimov",
        "isbn": "9780553382563",
        "publishedYear": 1950,
        "genre": "Science Fiction",
    },
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "isbn": "9780547928227",
        "publishedYear": 1937,
        "genre": "Fantasy",
    },
    {
        "title": "2001: A Space Odyssey",
        "author": "Arthur C. Clarke",
        "isbn": "9780451457998",
        "publishedYear": 1968,
        "genre": "Science Fiction",
    },
    {
        "title": "Life of Pi",
        "author": "Yann Martel",
        "isbn": "9780156027328",
        "publishedYear": 2001,
        "genre": "Adventure",
    },
]


async def clear_data() -> None:
    """Delete every book."""
    print("Clearing existing data...")
    async with SessionLocal() as session:
        await session.execute(delete(Book))
        await session.commit()
    print("Data cleared.")


async def create_books(service: BookService) -> tuple[int, int]:
    """
    Create the sample books.

    Returns:
        (created, skipped) counts
    """
    print("Creating books...")
    created = skipped = 0
    for data in BOOKS_DATA:
        try:
            await service.create_book(data)
            created += 1
        except ConflictError:
            print(f"  - Skipping {data['title']!r}: ISBN {data['isbn']} already exists")
            skipped += 1
    print(f"Created {created} books.")
    return created, skipped


async def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing books before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    await create_tables()

    try:
        if clear_existing:
            await clear_data()

        service = BookService(BookRepository(SessionLocal))
        created, skipped = await create_books(service)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Created: {created}")
        print(f"  - Skipped: {skipped}")
        print("\nYou can now access the API at http://localhost:8001")
        print("API documentation at http://localhost:8001/docs")
    finally:
        await dispose_engine()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the book catalog with sample data")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing books instead of clearing the table first",
    )
    args = parser.parse_args()
    asyncio.run(seed_database(clear_existing=not args.keep))


if __name__ == "__main__":
    main()
