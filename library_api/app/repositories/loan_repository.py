"""
Loan ledger storage.

The ledger stores ``LoanRecord`` rows and answers the queries the
services need.  It does not check the one-active-loan-per-book rule
itself: ``BookService.loan_book`` checks it before calling ``create``,
and the partial unique index ``ux_loan_records_on_loan_book`` rejects
any insert that slips past the check.
"""

import sqlite3
from collections import defaultdict
from typing import Dict, List, Optional

from library_api.app.core.exceptions import InvalidStateError
from library_api.app.schemas.loan import LoanRecord, LoanStatus

_COLUMNS = "id, user_id, book_name, status"


def _row_to_record(row: sqlite3.Row) -> LoanRecord:
    return LoanRecord(
        id=row["id"],
        user_id=row["user_id"],
        book_name=row["book_name"],
        status=LoanStatus(row["status"]),
    )


class LoanRecordRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def create(self, user_id: int, book_name: str) -> LoanRecord:
        """Insert a new ``ON_LOAN`` record.

        Raises ``sqlite3.IntegrityError`` if another record for
        ``book_name`` is still on loan.
        """
        cursor = self.conn.execute(
            "INSERT INTO loan_records (user_id, book_name, status) VALUES (?, ?, ?)",
            (user_id, book_name, LoanStatus.ON_LOAN.value),
        )
        return LoanRecord(
            id=cursor.lastrowid,
            user_id=user_id,
            book_name=book_name,
            status=LoanStatus.ON_LOAN,
        )

    def find_on_loan_by_book_name(self, book_name: str) -> Optional[LoanRecord]:
        row = self.conn.execute(
            f"SELECT {_COLUMNS} FROM loan_records WHERE book_name = ? AND status = ?",
            (book_name, LoanStatus.ON_LOAN.value),
        ).fetchone()
        return _row_to_record(row) if row else None

    def find_on_loan_by_user_and_book_name(
        self, user_id: int, book_name: str
    ) -> Optional[LoanRecord]:
        row = self.conn.execute(
            f"SELECT {_COLUMNS} FROM loan_records "
            "WHERE user_id = ? AND book_name = ? AND status = ?",
            (user_id, book_name, LoanStatus.ON_LOAN.value),
        ).fetchone()
        return _row_to_record(row) if row else None

    def count_by_status(self, status: LoanStatus) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) AS count FROM loan_records WHERE status = ?",
            (status.value,),
        ).fetchone()
        return row["count"]

    def find_all_by_user(self, user_id: int) -> List[LoanRecord]:
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM loan_records WHERE user_id = ? ORDER BY id",
            (user_id,),
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    def find_all_grouped_by_user(self) -> Dict[int, List[LoanRecord]]:
        """Return every record in one scan, grouped by user id.

        Users without records are absent from the result.
        """
        rows = self.conn.execute(
            f"SELECT {_COLUMNS} FROM loan_records ORDER BY id"
        ).fetchall()
        grouped: Dict[int, List[LoanRecord]] = defaultdict(list)
        for row in rows:
            grouped[row["user_id"]].append(_row_to_record(row))
        return dict(grouped)

    def mark_returned(self, record: LoanRecord) -> LoanRecord:
        """Move ``record`` from ``ON_LOAN`` to ``RETURNED``.

        The UPDATE only matches rows still on loan, so a returned record
        can never be written twice.  ``record`` is updated in place and
        returned.
        """
        if not record.status.can_transition_to(LoanStatus.RETURNED):
            raise InvalidStateError(f"loan record {record.id} is already {record.status.value}")
        cursor = self.conn.execute(
            "UPDATE loan_records SET status = ? WHERE id = ? AND status = ?",
            (LoanStatus.RETURNED.value, record.id, LoanStatus.ON_LOAN.value),
        )
        if cursor.rowcount != 1:
            raise InvalidStateError(f"loan record {record.id} is not on loan")
        record.status = LoanStatus.RETURNED
        return record

    def delete_by_user(self, user_id: int) -> int:
        cursor = self.conn.execute("DELETE FROM loan_records WHERE user_id = ?", (user_id,))
        return cursor.rowcount

    def list_all(self) -> List[LoanRecord]:
        rows = self.conn.execute(f"SELECT {_COLUMNS} FROM loan_records ORDER BY id").fetchall()
        return [_row_to_record(row) for row in rows]

    def delete_all(self) -> None:
        self.conn.execute("DELETE FROM loan_records")
