"""
Application package initializer.

The project is organised into layers: ``core`` holds configuration,
logging, errors and the SQLite handle; ``schemas`` holds the pydantic
request and response models; ``services`` holds the repository classes
that own the business rules for service tickets and inventory; and
``api`` exposes versioned routers built on top of them.
"""

from .main import app, create_app  # noqa: F401
