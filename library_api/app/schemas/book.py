"""
Pydantic models for books.

Defines the ``BookCategory`` vocabulary, the stored ``Book`` entity
and the request/response bodies used by the book endpoints.  Category
values cross the API boundary verbatim.
"""

from enum import Enum

from pydantic import BaseModel, Field


class BookCategory(str, Enum):
    COMPUTER = "COMPUTER"
    ECONOMY = "ECONOMY"
    SOCIETY = "SOCIETY"
    LANGUAGE = "LANGUAGE"
    SCIENCE = "SCIENCE"
    ART = "ART"
    UNSPECIFIED = "UNSPECIFIED"


class Book(BaseModel):
    """A catalog entry.  Several rows may share the same ``name``."""

    id: int
    name: str
    category: BookCategory = BookCategory.UNSPECIFIED

    model_config = {
        "from_attributes": True,
    }


class BookCreate(BaseModel):
    name: str = Field(..., min_length=1, examples=["Alice in Wonderland"])
    category: BookCategory = Field(BookCategory.UNSPECIFIED, examples=["COMPUTER"])


class BookLoanRequest(BaseModel):
    """Body for loaning a book to a user, both referenced by name."""

    user_name: str = Field(..., min_length=1, examples=["Jane"])
    book_name: str = Field(..., min_length=1, examples=["Alice in Wonderland"])


class BookReturnRequest(BookLoanRequest):
    """Body for returning a book; same shape as a loan request."""


class BookStatResponse(BaseModel):
    category: BookCategory
    count: int = Field(..., ge=0)
