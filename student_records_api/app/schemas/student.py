"""
Pydantic schemas for student records.

The web client speaks camelCase (``rollNo``) while Python code uses
``roll_no``; the alias bridges the two.  Request bodies are not
validated: any JSON value is accepted for each field and handed to the
store, which stores scalars as text and rejects anything else.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class StudentFields(BaseModel):
    """The three content fields shared by every student payload."""

    model_config = ConfigDict(populate_by_name=True)

    name: Any = Field(None, description="Student name")
    email: Any = Field(None, description="Contact email; format is not enforced")
    roll_no: Any = Field(None, alias="rollNo", description="Roll number; not unique")


class StudentCreate(StudentFields):
    """Body of ``POST /add-student``."""


class StudentUpdate(StudentFields):
    """Body of ``PUT /update-student/{id}``.

    All three fields are replaced; an omitted field is stored as absent.
    """


class StudentRead(BaseModel):
    """A stored student record as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    roll_no: Optional[str] = Field(None, alias="rollNo")


class MessageResponse(BaseModel):
    message: str


class StudentUpdateResponse(MessageResponse):
    student: StudentRead


StudentList = List[StudentRead]
