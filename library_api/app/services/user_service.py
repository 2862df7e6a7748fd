"""
Business logic for users.

The ``UserService`` registers, lists, renames and deletes users and
builds the loan-history view.  Deleting a user removes the loan
records it owns in the same transaction, before the user row.
"""

import logging
from typing import List, Optional

from library_api.app.core.db import ConnectionFactory, unit_of_work
from library_api.app.repositories import LoanRecordRepository, UserRepository
from library_api.app.schemas.user import (
    BookHistoryResponse,
    User,
    UserLoanHistoryResponse,
)

logger = logging.getLogger(__name__)


class UserService:
    """Service for the user directory."""

    def __init__(self, connect: Optional[ConnectionFactory] = None) -> None:
        self.connect = connect

    async def save_user(self, name: str, age: Optional[int] = None) -> User:
        with unit_of_work(self.connect) as conn:
            user = UserRepository(conn).add(name, age)
        logger.info("Registered user %s as id %s", name, user.id)
        return user

    async def get_users(self) -> List[User]:
        """Return all users.  Order is not guaranteed."""
        with unit_of_work(self.connect, readonly=True) as conn:
            return UserRepository(conn).list_all()

    async def update_user_name(self, user_id: int, new_name: str) -> User:
        """Rename a user.  Raises ``NotFoundError`` if the id is unknown."""
        with unit_of_work(self.connect) as conn:
            user = UserRepository(conn).update_name(user_id, new_name)
        logger.info("Renamed user %s to %s", user_id, new_name)
        return user

    async def delete_user(self, name: str) -> None:
        """Delete the user called ``name`` together with its loan records.

        Raises ``NotFoundError`` if no such user exists.
        """
        with unit_of_work(self.connect) as conn:
            loans = LoanRecordRepository(conn)
            user = UserRepository(conn).delete_by_name(name, loans)
        logger.info("Deleted user %s (id %s)", name, user.id)

    async def get_user_loan_histories(self) -> List[UserLoanHistoryResponse]:
        """List every user with ``(book name, returned?)`` for each loan record.

        Users who never borrowed anything are included with an empty
        ``books`` list.
        """
        with unit_of_work(self.connect, readonly=True) as conn:
            users = UserRepository(conn).list_all()
            records = LoanRecordRepository(conn).find_all_grouped_by_user()
        return [
            UserLoanHistoryResponse(
                name=user.name,
                books=[
                    BookHistoryResponse(name=record.book_name, is_returned=record.is_returned)
                    for record in records.get(user.id, [])
                ],
            )
            for user in users
        ]
