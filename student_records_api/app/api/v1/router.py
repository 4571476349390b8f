"""
Top-level router for version 1 of the API.

Student routes are mounted at the application root (``/students``,
``/add-student`` ...) because the web client addresses them there.
New domains should be added here with their own prefix.
"""

from fastapi import APIRouter

from .endpoints import students

router = APIRouter()

router.include_router(students.router, tags=["students"])
