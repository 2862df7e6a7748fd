import sqlite3

import pytest

from library_api.app.core.db import unit_of_work
from library_api.app.core.exceptions import NotFoundError
from library_api.app.repositories import LoanRecordRepository, UserRepository
from library_api.app.schemas.loan import LoanStatus
from library_api.app.services.user_service import UserService


def _users(connect):
    with unit_of_work(connect, readonly=True) as conn:
        return UserRepository(conn).list_all()


@pytest.mark.asyncio
async def test_save_user(user_service, connect):
    await user_service.save_user("Jane")

    result = _users(connect)
    assert len(result) == 1
    assert result[0].name == "Jane"
    assert result[0].age is None


@pytest.mark.asyncio
async def test_get_users(user_service):
    await user_service.save_user("Jane", 32)
    await user_service.save_user("June", 33)

    result = await user_service.get_users()

    assert len(result) == 2
    assert sorted(u.name for u in result) == ["Jane", "June"]
    assert sorted(u.age for u in result) == [32, 33]


@pytest.mark.asyncio
async def test_update_user_name(user_service, connect):
    saved = await user_service.save_user("Jane")

    await user_service.update_user_name(saved.id, "B")

    assert _users(connect)[0].name == "B"


@pytest.mark.asyncio
async def test_update_unknown_user(user_service):
    with pytest.raises(NotFoundError):
        await user_service.update_user_name(999, "B")


@pytest.mark.asyncio
async def test_delete_user(user_service, connect):
    await user_service.save_user("Jane", 32)

    await user_service.delete_user("Jane")

    assert _users(connect) == []
    with pytest.raises(NotFoundError):
        await user_service.delete_user("Jane")


@pytest.mark.asyncio
async def test_delete_user_cascades_to_loan_records(user_service, book_service, connect):
    jane = await user_service.save_user("Jane", 32)
    june = await user_service.save_user("June", 33)
    await book_service.loan_book("Jane", "A")
    await book_service.loan_book("Jane", "B")
    await book_service.return_book("Jane", "B")
    await book_service.loan_book("June", "C")

    await user_service.delete_user("Jane")

    with unit_of_work(connect, readonly=True) as conn:
        loans = LoanRecordRepository(conn)
        assert loans.find_all_by_user(jane.id) == []
        assert [r.book_name for r in loans.list_all()] == ["C"]
        assert loans.find_all_by_user(june.id)[0].user_id == june.id
    assert [u.name for u in _users(connect)] == ["June"]
    assert await book_service.count_loaned_book() == 1


@pytest.mark.asyncio
async def test_loan_histories_include_users_without_loans(user_service):
    await user_service.save_user("Jane", 32)
    await user_service.save_user("June", 33)

    results = await user_service.get_user_loan_histories()

    assert len(results) == 2
    assert sorted(r.name for r in results) == ["Jane", "June"]
    assert all(r.books == [] for r in results)


@pytest.mark.asyncio
async def test_loan_histories_with_many_records(user_service, connect):
    saved = await user_service.save_user("Hyun")
    with unit_of_work(connect) as conn:
        loans = LoanRecordRepository(conn)
        loans.create(saved.id, "Book1")
        loans.create(saved.id, "Book2")
        loans.mark_returned(loans.create(saved.id, "Book3"))

    results = await user_service.get_user_loan_histories()

    assert len(results) == 1
    assert results[0].name == "Hyun"
    assert sorted((b.name, b.is_returned) for b in results[0].books) == [
        ("Book1", False),
        ("Book2", False),
        ("Book3", True),
    ]


@pytest.mark.asyncio
async def test_loan_histories_mixed_users(user_service, book_service):
    await user_service.save_user("Hyun")
    await user_service.save_user("Joon")
    await book_service.loan_book("Hyun", "Book1")

    results = {r.name: r.books for r in await user_service.get_user_loan_histories()}

    assert [b.name for b in results["Hyun"]] == ["Book1"]
    assert results["Joon"] == []
    assert results["Hyun"][0].is_returned is False


@pytest.mark.asyncio
@pytest.mark.skipif(
    not hasattr(sqlite3.Connection, "setlimit"), reason="Connection.setlimit needs Python 3.11"
)
async def test_loan_histories_with_more_users_than_sql_variables(connect):
    def limited_connect():
        conn = connect()
        conn.setlimit(sqlite3.SQLITE_LIMIT_VARIABLE_NUMBER, 10)
        return conn

    with unit_of_work(connect) as conn:
        users = UserRepository(conn)
        loans = LoanRecordRepository(conn)
        for i in range(50):
            user = users.add(f"user{i}", 20)
            if i % 2 == 0:
                loans.create(user.id, f"Book{i}")

    results = await UserService(limited_connect).get_user_loan_histories()

    assert len(results) == 50
    assert sum(len(r.books) for r in results) == 25
    assert sum(1 for r in results if r.books == []) == 25
