"""
FastAPI dependencies shared by the endpoint modules.
"""

from fastapi import Request

from student_records_api.app.services.student_store import StudentStore


def get_student_store(request: Request) -> StudentStore:
    """Return the store injected into the application by ``create_app``."""
    return request.app.state.student_store
