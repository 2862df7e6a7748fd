"""
Pydantic models for user data.

Defines schemas for creating, renaming and reading users, and the
loan-history view that lists every user with the books they have
borrowed.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    name: str
    age: Optional[int] = None

    model_config = {
        "from_attributes": True,
    }


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Jane"])
    age: Optional[int] = Field(None, ge=0, examples=[32])


class UserUpdate(BaseModel):
    """Schema for renaming a user.  Only the name is mutable."""

    id: int
    name: str = Field(..., min_length=1, examples=["June"])


class BookHistoryResponse(BaseModel):
    name: str
    is_returned: bool


class UserLoanHistoryResponse(BaseModel):
    """A user together with every loan record they own.

    ``books`` is empty, never missing, for users who have not borrowed
    anything yet.
    """

    name: str
    books: List[BookHistoryResponse] = Field(default_factory=list)
