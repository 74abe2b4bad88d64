"""
Book Catalog API Application Package

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: Async SQLAlchemy engine and session factory
- exceptions.py: Business errors and their HTTP status codes
- repository.py: Data access for books
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas and the validation gate
- routers/: API route handlers
- services/: Business logic (book operations, rate limiting)
"""

__version__ = "0.1.0"
