"""
Services Package

Business logic kept separate from HTTP handling:
- books.py: Book operations and list/search query construction
- rate_limiter.py: Rate limiting with slowapi
"""
