import os
import tempfile

# Point the default database at a scratch file before the application
# module reads its settings.
os.environ.setdefault(
    "DATABASE_URL", os.path.join(tempfile.gettempdir(), f"library_test_{os.getpid()}.db")
)

import pytest
from fastapi.testclient import TestClient

from library_api.app.api.deps import get_book_service, get_user_service
from library_api.app.core.db import connection_factory, init_db, unit_of_work
from library_api.app.main import app
from library_api.app.repositories import (
    BookRepository,
    LoanRecordRepository,
    UserRepository,
)
from library_api.app.services.book_service import BookService
from library_api.app.services.user_service import UserService


@pytest.fixture
def connect(tmp_path, request):
    """Connection factory for a fresh, migrated database per test."""
    db_file = str(tmp_path / f"test_{request.node.name}.db")
    factory = connection_factory(db_file)
    init_db(factory)
    yield factory
    with unit_of_work(factory) as conn:
        BookRepository(conn).delete_all()
        UserRepository(conn).delete_all(LoanRecordRepository(conn))


@pytest.fixture
def book_service(connect):
    return BookService(connect)


@pytest.fixture
def user_service(connect):
    return UserService(connect)


@pytest.fixture
def client(book_service, user_service):
    app.dependency_overrides[get_book_service] = lambda: book_service
    app.dependency_overrides[get_user_service] = lambda: user_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
