"""
Pydantic schema definitions.

Each domain (books, users, loans) defines its own models for stored
entities and for request and response bodies.
"""
