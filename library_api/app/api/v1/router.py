"""
Top‑level router for version 1 of the API.

This router aggregates the domain‑specific routers under a unified
prefix.  When new endpoints are added, update this file to include
their routers.
"""

from fastapi import APIRouter

from .endpoints import books, users

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])
router.include_router(users.router, prefix="/users", tags=["users"])
