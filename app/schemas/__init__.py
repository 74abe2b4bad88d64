"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

WHY Separate Schemas from SQLAlchemy Models?
============================================
1. Security: Control exactly what data is exposed in API responses
2. Validation: The request payload is checked before any database call
3. Decoupling: Database schema can evolve independently of API
4. Documentation: Schemas generate OpenAPI documentation
"""

from app.schemas.book import (
    MAX_PUBLISHED_YEAR,
    MIN_PUBLISHED_YEAR,
    BookListResponse,
    BookPayload,
    BookResponse,
    MessageResponse,
    format_validation_error,
    validate_book,
)

__all__ = [
    "MIN_PUBLISHED_YEAR",
    "MAX_PUBLISHED_YEAR",
    "BookPayload",
    "BookResponse",
    "BookListResponse",
    "MessageResponse",
    "format_validation_error",
    "validate_book",
]
