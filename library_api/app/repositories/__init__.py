"""
Data access layer.

Each repository wraps the SQL for one table and is bound to an open
connection, so every repository used within a service call shares the
same unit of work.  Lookups that may miss return ``None``; deciding
whether a miss is an error is left to the caller.
"""

from .book_repository import BookRepository
from .loan_repository import LoanRecordRepository
from .user_repository import UserRepository

__all__ = [
    "BookRepository",
    "LoanRecordRepository",
    "UserRepository",
]
