"""Student records API client.

This module provides a thin client around the student records HTTP API
and the state a form-based front end needs to drive it:

* :class:`StudentRecordsAPI` wraps the four endpoints
  (:meth:`~StudentRecordsAPI.list_students`,
  :meth:`~StudentRecordsAPI.add_student`,
  :meth:`~StudentRecordsAPI.update_student`,
  :meth:`~StudentRecordsAPI.delete_student`).  Every call returns a
  ``(data, error)`` tuple instead of raising.
* :class:`StudentListSnapshot` is an immutable view of the fetched list
  plus the form being edited.
* :class:`StudentRecordsController` implements the form flow: submit
  creates or updates, edit loads a record into the form, delete removes
  one.  After every mutation the full list is fetched again and a new
  snapshot replaces the old one.

The client uses the ``requests`` library.  The server location defaults
to ``STUDENT_RECORDS_BASE_URL`` (``http://localhost:5000``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"

Error = Dict[str, Any]


class StudentRecordsAPI:
    """Client for the student records API."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``http://localhost:5000``.
                Defaults to ``STUDENT_RECORDS_BASE_URL``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        base_url = base_url or os.getenv("STUDENT_RECORDS_BASE_URL", DEFAULT_BASE_URL)
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helper
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Returns:
            A tuple ``(data, error)``. ``data`` contains the parsed JSON
            response on success and ``error`` is ``None``. On failure,
            ``data`` is ``None`` and ``error`` is a dictionary with keys
            ``status_code`` and ``message``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                except ValueError:
                    message = exc.response.text
                else:
                    if isinstance(err_json, dict):
                        message = err_json.get("detail") or err_json.get("message") or str(err_json)
                    else:
                        message = str(err_json)
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _payload(name: Optional[str], email: Optional[str], roll_no: Optional[str]) -> Dict[str, Any]:
        return {"name": name, "email": email, "rollNo": roll_no}

    # ------------------------------------------------------------------
    # Student operations
    # ------------------------------------------------------------------
    def list_students(self) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve all students.

        Returns:
            A tuple ``(students, error)``. ``students`` is empty on failure.
        """
        data, error = self._request("GET", "/students")
        if error:
            return [], error
        if isinstance(data, list):
            return data, None
        return [], None

    def add_student(
        self, name: Optional[str], email: Optional[str], roll_no: Optional[str]
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a student.  Returns ``(confirmation, error)``."""
        return self._request("POST", "/add-student", json_body=self._payload(name, email, roll_no))

    def update_student(
        self,
        student_id: str,
        name: Optional[str],
        email: Optional[str],
        roll_no: Optional[str],
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Replace all fields of a student.

        Returns:
            A tuple ``(result, error)``; ``result`` carries ``message`` and
            the updated ``student``.
        """
        return self._request(
            "PUT",
            f"/update-student/{student_id}",
            json_body=self._payload(name, email, roll_no),
        )

    def delete_student(self, student_id: str) -> Tuple[bool, Optional[Error]]:
        """Delete a student.  Returns ``(success, error)``."""
        _, error = self._request("DELETE", f"/delete-student/{student_id}")
        if error:
            return False, error
        return True, None


@dataclass(frozen=True)
class StudentForm:
    """Values currently typed into the student form."""

    name: str = ""
    email: str = ""
    roll_no: str = ""


@dataclass(frozen=True)
class StudentListSnapshot:
    """The list shown to the user and the form being edited.

    Snapshots are never patched: each change produces a new instance and
    every mutation is followed by a full re-fetch.
    """

    students: Tuple[Dict[str, Any], ...] = ()
    form: StudentForm = field(default_factory=StudentForm)
    edit_id: Optional[str] = None

    @property
    def editing(self) -> bool:
        return self.edit_id is not None

    def with_students(self, students: List[Dict[str, Any]]) -> "StudentListSnapshot":
        return replace(self, students=tuple(students))

    def with_form(self, name: str, email: str, roll_no: str) -> "StudentListSnapshot":
        return replace(self, form=StudentForm(name=name, email=email, roll_no=roll_no))

    def begin_edit(self, student: Dict[str, Any]) -> "StudentListSnapshot":
        """Load ``student`` into the form and remember its id."""
        form = StudentForm(
            name=student.get("name") or "",
            email=student.get("email") or "",
            roll_no=student.get("rollNo") or "",
        )
        return replace(self, form=form, edit_id=student["id"])

    def clear_form(self) -> "StudentListSnapshot":
        return replace(self, form=StudentForm(), edit_id=None)


class StudentRecordsController:
    """Form workflow on top of :class:`StudentRecordsAPI`.

    ``snapshot`` always holds the latest state.  Operations return an
    error string suitable for an alert dialog, or ``None`` on success.
    """

    def __init__(self, api: StudentRecordsAPI) -> None:
        self.api = api
        self.snapshot = StudentListSnapshot()

    def refresh(self) -> Optional[str]:
        """Fetch the full list and replace the snapshot's students."""
        students, error = self.api.list_students()
        if error:
            # The previous list stays on screen when the fetch fails.
            logger.warning("Error fetching students: %s", error["message"])
            return "Error fetching students"
        self.snapshot = self.snapshot.with_students(students)
        return None

    def edit(self, student: Dict[str, Any]) -> None:
        self.snapshot = self.snapshot.begin_edit(student)

    def submit(self, name: str, email: str, roll_no: str) -> Optional[str]:
        """Create a student, or update the one being edited.

        The list is fetched again and the form cleared whatever the
        outcome.  On failure of an update the edit stays active.
        """
        result = None
        if self.snapshot.editing:
            _, error = self.api.update_student(self.snapshot.edit_id, name, email, roll_no)
            if error:
                result = "Error updating student"
            else:
                self.snapshot = self.snapshot.clear_form()
        else:
            _, error = self.api.add_student(name, email, roll_no)
            if error:
                result = "Error adding student"
        self.refresh()
        self.snapshot = replace(self.snapshot, form=StudentForm())
        return result

    def delete(self, student_id: str) -> Optional[str]:
        """Delete a student and re-fetch the list on success."""
        _, error = self.api.delete_student(student_id)
        if error:
            return "Error deleting student"
        self.refresh()
        return None
