"""User directory storage."""

import sqlite3
from typing import List, Optional

from library_api.app.core.exceptions import NotFoundError
from library_api.app.schemas.user import User

from .loan_repository import LoanRecordRepository


def _row_to_user(row: sqlite3.Row) -> User:
    return User(id=row["id"], name=row["name"], age=row["age"])


class UserRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def add(self, name: str, age: Optional[int] = None) -> User:
        cursor = self.conn.execute(
            "INSERT INTO users (name, age) VALUES (?, ?)",
            (name, age),
        )
        return User(id=cursor.lastrowid, name=name, age=age)

    def list_all(self) -> List[User]:
        rows = self.conn.execute("SELECT id, name, age FROM users").fetchall()
        return [_row_to_user(row) for row in rows]

    def find_by_id(self, user_id: int) -> Optional[User]:
        row = self.conn.execute(
            "SELECT id, name, age FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return _row_to_user(row) if row else None

    def find_by_name(self, name: str) -> Optional[User]:
        # lowest id wins when several users share a name
        row = self.conn.execute(
            "SELECT id, name, age FROM users WHERE name = ? ORDER BY id LIMIT 1",
            (name,),
        ).fetchone()
        return _row_to_user(row) if row else None

    def update_name(self, user_id: int, new_name: str) -> User:
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError(f"no such user: id {user_id}")
        self.conn.execute("UPDATE users SET name = ? WHERE id = ?", (new_name, user_id))
        user.name = new_name
        return user

    def delete_by_name(self, name: str, loans: LoanRecordRepository) -> User:
        """Delete a user and, first, every loan record it owns.

        ``loans`` must be bound to the same connection so both deletes
        commit or roll back together.
        """
        user = self.find_by_name(name)
        if user is None:
            raise NotFoundError(f"no such user: {name}")
        loans.delete_by_user(user.id)
        self.conn.execute("DELETE FROM users WHERE id = ?", (user.id,))
        return user

    def delete_all(self, loans: LoanRecordRepository) -> None:
        # administrative reset, not routed
        loans.delete_all()
        self.conn.execute("DELETE FROM users")
