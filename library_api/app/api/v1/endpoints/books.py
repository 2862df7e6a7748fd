"""
Book endpoints for API v1.

These routes save books, loan and return them and expose the lending
statistics.  They rely on the ``BookService`` for all database work
and business rules; this module only maps domain errors to HTTP
responses.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from library_api.app.api.deps import get_book_service
from library_api.app.core.exceptions import InvalidStateError, NotFoundError
from library_api.app.schemas.book import (
    Book,
    BookCreate,
    BookLoanRequest,
    BookReturnRequest,
    BookStatResponse,
)
from library_api.app.schemas.loan import LoanRecord
from library_api.app.services.book_service import BookService


router = APIRouter()


@router.post("", response_model=Book, status_code=status.HTTP_201_CREATED)
async def save_book(
    book: BookCreate,
    service: BookService = Depends(get_book_service),
) -> Book:
    """Add a book to the catalog.  Names do not have to be unique."""
    return await service.save_book(book.name, book.category)


@router.put("/loan", response_model=LoanRecord)
async def loan_book(
    request: BookLoanRequest,
    service: BookService = Depends(get_book_service),
) -> LoanRecord:
    """Loan a book to a user.

    Returns 404 if the user does not exist and 400 if the book is
    already on loan.
    """
    try:
        return await service.loan_book(request.user_name, request.book_name)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/return", response_model=LoanRecord)
async def return_book(
    request: BookReturnRequest,
    service: BookService = Depends(get_book_service),
) -> LoanRecord:
    try:
        return await service.return_book(request.user_name, request.book_name)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/loan", response_model=int)
async def count_loaned_book(service: BookService = Depends(get_book_service)) -> int:
    """Number of books currently on loan."""
    return await service.count_loaned_book()


@router.get("/stat", response_model=List[BookStatResponse])
async def get_book_statistics(
    service: BookService = Depends(get_book_service),
) -> List[BookStatResponse]:
    return await service.get_book_statistics()
