"""Book catalog storage."""

import sqlite3
from typing import Dict, List, Optional

from library_api.app.schemas.book import Book, BookCategory


def _row_to_book(row: sqlite3.Row) -> Book:
    return Book(id=row["id"], name=row["name"], category=BookCategory(row["category"]))


class BookRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def add(self, name: str, category: BookCategory = BookCategory.UNSPECIFIED) -> Book:
        cursor = self.conn.execute(
            "INSERT INTO books (name, category) VALUES (?, ?)",
            (name, category.value),
        )
        return Book(id=cursor.lastrowid, name=name, category=category)

    def find_by_name(self, name: str) -> Optional[Book]:
        """Return any book with the given name, or ``None``."""
        row = self.conn.execute(
            "SELECT id, name, category FROM books WHERE name = ? LIMIT 1",
            (name,),
        ).fetchone()
        return _row_to_book(row) if row else None

    def list_all(self) -> List[Book]:
        rows = self.conn.execute("SELECT id, name, category FROM books").fetchall()
        return [_row_to_book(row) for row in rows]

    def category_counts(self) -> Dict[BookCategory, int]:
        """Count books per category.  Only observed categories appear."""
        rows = self.conn.execute(
            "SELECT category, COUNT(*) AS count FROM books GROUP BY category"
        ).fetchall()
        return {BookCategory(row["category"]): row["count"] for row in rows}

    def delete_all(self) -> None:
        # administrative reset, not routed
        self.conn.execute("DELETE FROM books")
