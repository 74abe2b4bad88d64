"""
Books Router

CRUD and search endpoints for the catalog.

Handlers stay thin: they hand the raw payload or parameters to
BookService and serialize the result. Business errors raised by the
service (ValidationError, ConflictError, NotFoundError) are turned into
{"message": ...} responses by the exception handler in main.py.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status

from app.dependencies import BookListFilters, BookServiceDep
from app.schemas import BookListResponse, BookResponse, MessageResponse
from app.services.rate_limiter import READ_LIMIT, WRITE_LIMIT, limiter

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"model": MessageResponse, "description": "Book not found"},
    },
)

BookBody = Annotated[
    Any,
    Body(
        description="Book fields: title, author, isbn, publishedYear, genre, description",
        examples=[
            {
                "title": "1984",
                "author": "George Orwell",
                "isbn": "9780451524935",
                "publishedYear": 1949,
            }
        ],
    ),
]


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    responses={
        400: {"model": MessageResponse, "description": "Invalid book data"},
        409: {"model": MessageResponse, "description": "ISBN already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)
async def create_book(
    request: Request,
    payload: BookBody,
    service: BookServiceDep,
) -> BookResponse:
    """
    Create a new book.

    The payload is validated before anything is written; an ISBN already
    present in the catalog yields 409.
    """
    book = await service.create_book(payload)
    return BookResponse.model_validate(book)


@router.get(
    "",
    response_model=BookListResponse,
    summary="List and search books",
)
@limiter.limit(READ_LIMIT)
async def list_books(
    request: Request,
    params: BookListFilters,
    service: BookServiceDep,
) -> BookListResponse:
    """
    List books with search, filters, sorting and pagination.

    Examples:
        GET /api/v1/books?search=orwell
        GET /api/v1/books?search=2001
        GET /api/v1/books?author=tolkien&sortBy=publishedYear&order=desc
        GET /api/v1/books?page=2&limit=10
    """
    result = await service.list_books(params.to_query())

    return BookListResponse(
        total_books=result.total_books,
        total_pages=result.total_pages,
        current_page=result.current_page,
        books=[BookResponse.model_validate(book) for book in result.books],
    )


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
)
@limiter.limit(READ_LIMIT)
async def get_book(
    request: Request,
    book_id: str,
    service: BookServiceDep,
) -> BookResponse:
    book = await service.get_book(book_id)
    return BookResponse.model_validate(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="Update a book",
    responses={
        400: {"model": MessageResponse, "description": "Invalid book data"},
        409: {"model": MessageResponse, "description": "ISBN already exists"},
    },
)
@limiter.limit(WRITE_LIMIT)
async def update_book(
    request: Request,
    book_id: str,
    payload: BookBody,
    service: BookServiceDep,
) -> BookResponse:
    """
    Update an existing book.

    id and version keys in the body are ignored. The body is validated as
    a full book; fields left out keep their stored values.
    """
    book = await service.update_book(book_id, payload)
    return BookResponse.model_validate(book)


@router.delete(
    "/{book_id}",
    response_model=MessageResponse,
    summary="Delete a book",
)
@limiter.limit(WRITE_LIMIT)
async def delete_book(
    request: Request,
    book_id: str,
    service: BookServiceDep,
) -> MessageResponse:
    await service.delete_book(book_id)
    return MessageResponse(message="Book deleted successfully")
