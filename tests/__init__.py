"""
Test Suite for Book Catalog API

Test Organization:
- conftest.py: Shared fixtures (temporary database, client, sample data)
- test_books.py: CRUD endpoints and ISBN uniqueness
- test_search.py: Listing, search, filters, sorting and pagination
- test_book_query.py: Query parsing and filter construction (no database)
- test_validation.py: The book validation gate
- test_main.py: Health endpoints and error handlers

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_search.py

    # Run with verbose output
    pytest -v
"""
