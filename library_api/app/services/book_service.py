"""
Business logic for books and loans.

The ``BookService`` saves catalog entries, loans and returns books and
computes the lending statistics.  Every method runs as one unit of
work: the reads that decide an outcome and the writes that follow
commit together or not at all.

The duplicate-loan guard in ``loan_book`` is a check-then-act
sequence.  It runs under ``BEGIN IMMEDIATE`` so concurrent writers are
serialized, and the ``ux_loan_records_on_loan_book`` index turns any
race that still gets through into the same ``InvalidStateError``.
"""

import logging
import sqlite3
from typing import List, Optional

from library_api.app.core.db import ConnectionFactory, unit_of_work
from library_api.app.core.exceptions import InvalidStateError, NotFoundError
from library_api.app.repositories import (
    BookRepository,
    LoanRecordRepository,
    UserRepository,
)
from library_api.app.schemas.book import Book, BookCategory, BookStatResponse
from library_api.app.schemas.loan import LoanRecord, LoanStatus

logger = logging.getLogger(__name__)


class BookService:
    """Service for the book catalog and the loan ledger."""

    def __init__(self, connect: Optional[ConnectionFactory] = None) -> None:
        self.connect = connect

    async def save_book(
        self, name: str, category: BookCategory = BookCategory.UNSPECIFIED
    ) -> Book:
        with unit_of_work(self.connect) as conn:
            book = BookRepository(conn).add(name, category)
        logger.info("Saved book %s (%s) as id %s", name, category.value, book.id)
        return book

    async def loan_book(self, user_name: str, book_name: str) -> LoanRecord:
        """Loan ``book_name`` to the user called ``user_name``.

        Raises ``NotFoundError`` if the user does not exist and
        ``InvalidStateError`` if the title is already on loan to anyone.
        The title does not have to be present in the catalog.
        """
        with unit_of_work(self.connect) as conn:
            user = UserRepository(conn).find_by_name(user_name)
            if user is None:
                raise NotFoundError(f"no such user: {user_name}")

            loans = LoanRecordRepository(conn)
            if loans.find_on_loan_by_book_name(book_name) is not None:
                logger.warning("Refused loan of %r to %s: already on loan", book_name, user_name)
                raise InvalidStateError(f"book already on loan: {book_name}")
            try:
                record = loans.create(user.id, book_name)
            except sqlite3.IntegrityError as e:
                raise InvalidStateError(f"book already on loan: {book_name}") from e
        logger.info("Loaned %r to %s (record %s)", book_name, user_name, record.id)
        return record

    async def return_book(self, user_name: str, book_name: str) -> LoanRecord:
        """Mark the user's active loan of ``book_name`` as returned.

        Raises ``NotFoundError`` if the user does not exist and
        ``InvalidStateError`` if the user holds no active loan of it.
        """
        with unit_of_work(self.connect) as conn:
            user = UserRepository(conn).find_by_name(user_name)
            if user is None:
                raise NotFoundError(f"no such user: {user_name}")

            loans = LoanRecordRepository(conn)
            record = loans.find_on_loan_by_user_and_book_name(user.id, book_name)
            if record is None:
                logger.warning("Refused return of %r by %s: no active loan", book_name, user_name)
                raise InvalidStateError(f"no matching active loan: {book_name} for user {user_name}")
            loans.mark_returned(record)
        logger.info("Returned %r from %s (record %s)", book_name, user_name, record.id)
        return record

    async def count_loaned_book(self) -> int:
        """Return the number of loan records currently on loan."""
        with unit_of_work(self.connect, readonly=True) as conn:
            return LoanRecordRepository(conn).count_by_status(LoanStatus.ON_LOAN)

    async def get_book_statistics(self) -> List[BookStatResponse]:
        """Return one ``(category, count)`` entry per category in the catalog."""
        with unit_of_work(self.connect, readonly=True) as conn:
            counts = BookRepository(conn).category_counts()
        return [
            BookStatResponse(category=category, count=count)
            for category, count in counts.items()
        ]
