"""
FastAPI dependencies shared by the endpoint modules.

Services are built per request from the default connection factory.
Tests swap in services bound to a temporary database through
``app.dependency_overrides``.
"""

from library_api.app.services.book_service import BookService
from library_api.app.services.user_service import UserService


def get_book_service() -> BookService:
    return BookService()


def get_user_service() -> UserService:
    return UserService()
