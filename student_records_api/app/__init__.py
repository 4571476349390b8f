"""
Application package initializer.

Importing this package builds the ASGI application so that it can be
served as ``student_records_api.app:app``.
"""

from .main import app  # noqa: F401
