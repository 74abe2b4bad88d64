"""
SQLAlchemy Models Package

This package contains the database models for the Book Catalog API.

Import all models here to:
1. Make them available as: from app.models import Book
2. Ensure Alembic discovers them for migrations
"""

from app.models.book import Book, generate_book_id

__all__ = [
    "Book",
    "generate_book_id",
]
