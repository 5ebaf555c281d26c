"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, database, entity store,
errors), ``schemas`` (pydantic models), ``services`` (business logic)
and ``api`` (FastAPI routers).
"""

from .main import app  # noqa: F401
