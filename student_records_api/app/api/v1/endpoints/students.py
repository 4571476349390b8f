"""
Student endpoints.

Each route is a thin wrapper around one ``StudentStore`` call.  Paths and
response bodies follow the contract the web client was written against:
every outcome other than the list itself is a ``{"message": ...}``
object, a missing record is a 404 and any storage failure is a 500 with
a fixed message.  Request bodies are not validated; absent fields are
stored as absent.

Handlers are plain functions so FastAPI runs them in its threadpool,
since the store drivers block.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from student_records_api.app.api.dependencies import get_student_store
from student_records_api.app.schemas.student import (
    MessageResponse,
    StudentCreate,
    StudentList,
    StudentUpdate,
    StudentUpdateResponse,
)
from student_records_api.app.services.student_store import (
    StorageFault,
    StudentNotFound,
    StudentStore,
)

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND_MESSAGE = "Student not found"
ADD_ERROR = "Error adding student"
LIST_ERROR = "Error fetching students"
UPDATE_ERROR = "Error updating student"
DELETE_ERROR = "Error deleting student"

_ERROR_MESSAGES = {"POST": ADD_ERROR, "GET": LIST_ERROR, "PUT": UPDATE_ERROR, "DELETE": DELETE_ERROR}

_ERROR_RESPONSES = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse},
}
_ERROR_RESPONSES_WITH_404 = {
    status.HTTP_404_NOT_FOUND: {"model": MessageResponse},
    **_ERROR_RESPONSES,
}


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post("/add-student", response_model=MessageResponse, responses=_ERROR_RESPONSES)
def add_student(
    student_in: Optional[StudentCreate] = None,
    store: StudentStore = Depends(get_student_store),
):
    """Create a student.  Duplicate submissions create duplicate records."""
    student_in = student_in or StudentCreate()
    try:
        store.insert(student_in.name, student_in.email, student_in.roll_no)
    except StorageFault:
        logger.exception("Error adding student")
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, ADD_ERROR)
    return {"message": "Student added successfully!"}


@router.get("/students", response_model=StudentList, responses=_ERROR_RESPONSES)
def list_students(store: StudentStore = Depends(get_student_store)):
    """Return every stored student."""
    try:
        return store.find_all()
    except StorageFault:
        logger.exception("Error fetching students")
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, LIST_ERROR)


@router.put(
    "/update-student/{student_id}",
    response_model=StudentUpdateResponse,
    responses=_ERROR_RESPONSES_WITH_404,
)
def update_student(
    student_id: str,
    student_in: Optional[StudentUpdate] = None,
    store: StudentStore = Depends(get_student_store),
):
    """Replace name, email and roll number of a student."""
    student_in = student_in or StudentUpdate()
    try:
        student = store.replace(student_id, student_in.name, student_in.email, student_in.roll_no)
    except StudentNotFound:
        return _message(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    except StorageFault:
        logger.exception("Error updating student %s", student_id)
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, UPDATE_ERROR)
    return {"message": "Student updated successfully!", "student": student}


@router.delete(
    "/delete-student/{student_id}",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES_WITH_404,
)
def delete_student(student_id: str, store: StudentStore = Depends(get_student_store)):
    """Delete a student."""
    try:
        store.delete(student_id)
    except StudentNotFound:
        return _message(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    except StorageFault:
        logger.exception("Error deleting student %s", student_id)
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, DELETE_ERROR)
    return {"message": "Student deleted successfully!"}


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer an unreadable request body with the route's fixed 500 message."""
    message = _ERROR_MESSAGES.get(request.method)
    if message is None:
        return await request_validation_exception_handler(request, exc)
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, message)
