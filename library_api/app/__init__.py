"""
Application package initializer.

The project is organised into layers: ``core`` (configuration,
database, logging, exceptions), ``schemas`` (pydantic models),
``repositories`` (SQL per table), ``services`` (business rules) and
``api`` (versioned FastAPI routers).
"""

from .main import app  # noqa: F401
