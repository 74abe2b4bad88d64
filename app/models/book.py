"""
Book Model

The only model of the catalog, representing one book record.

Identity & Uniqueness
=====================
- id is an opaque 32-character hex string generated at insert time.
  Clients never choose it.
- isbn carries a UNIQUE index. The service checks for duplicates before
  writing, but the index is what actually guarantees uniqueness when two
  requests race for the same ISBN.
- version is SQLAlchemy's version counter (version_id_col). It is bumped
  on every UPDATE and is read-only for clients.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def generate_book_id() -> str:
    """Return a new opaque identifier."""
    return uuid.uuid4().hex


class Book(Base):
    """
    Book model representing records in the catalog.

    Table: books

    Fields:
    - title: Book title (required)
    - author: Author name as free text (required)
    - isbn: International Standard Book Number (required, unique)
    - published_year: Year of publication (optional)
    - genre, description: Descriptive pass-through data (optional)

    Indexes:
    - Primary key on id
    - isbn: Unique index
    - title, author, published_year: Indexes for sorting/filtering

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            isbn="9780451524935",
            published_year=1949,
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=generate_book_id,
    )

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    isbn: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
        comment="International Standard Book Number"
    )

    published_year: Mapped[int | None] = mapped_column(
        Integer,
        index=True,
        nullable=True,
        comment="Year of publication"
    )

    genre: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Genre label"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    # -------------------------------------------------------------------------
    # Store-managed Fields
    # -------------------------------------------------------------------------
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Row version, incremented on every update"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title='{self.title}', isbn='{self.isbn}')"
