"""
Pydantic models for loan records.

A ``LoanRecord`` ties a user to a book name.  Its ``status`` follows a
two-state machine: a record is created ``ON_LOAN`` and moves once to
``RETURNED``, which is terminal.  Loaning the same title again after
a return creates a new record.
"""

from enum import Enum

from pydantic import BaseModel


class LoanStatus(str, Enum):
    ON_LOAN = "ON_LOAN"
    RETURNED = "RETURNED"

    def can_transition_to(self, target: "LoanStatus") -> bool:
        """Return True if ``self -> target`` is an allowed transition."""
        return self is LoanStatus.ON_LOAN and target is LoanStatus.RETURNED


class LoanRecord(BaseModel):
    id: int
    user_id: int
    book_name: str
    status: LoanStatus = LoanStatus.ON_LOAN

    model_config = {
        "from_attributes": True,
    }

    @property
    def is_returned(self) -> bool:
        return self.status is LoanStatus.RETURNED
