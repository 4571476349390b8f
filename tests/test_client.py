"""
Tests for the API client and the form controller, run against the ASGI app.
"""

from unittest import mock

import pytest
import requests

from student_records_client import (
    StudentForm,
    StudentListSnapshot,
    StudentRecordsAPI,
    StudentRecordsController,
)


@pytest.fixture
def api(asgi_session):
    return StudentRecordsAPI(base_url="http://testserver/", session=asgi_session)


@pytest.fixture
def controller(api):
    return StudentRecordsController(api)


class TestStudentRecordsAPI:
    def test_base_url_trailing_slash_is_dropped(self, api, asgi_session):
        api.list_students()

        assert asgi_session.calls[-1][1] == "http://testserver/students"

    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("STUDENT_RECORDS_BASE_URL", "http://records.local:5000")

        assert StudentRecordsAPI().base_url == "http://records.local:5000"

    def test_add_and_list(self, api):
        confirmation, error = api.add_student("Alice", "a@x.com", "R1")

        assert error is None
        assert confirmation == {"message": "Student added successfully!"}
        students, error = api.list_students()
        assert error is None
        assert [(s["name"], s["email"], s["rollNo"]) for s in students] == [("Alice", "a@x.com", "R1")]

    def test_update_returns_student(self, api):
        api.add_student("Alice", "a@x.com", "R1")
        student_id = api.list_students()[0][0]["id"]

        result, error = api.update_student(student_id, "Alicia", "a@x.com", "R1")

        assert error is None
        assert result["student"]["name"] == "Alicia"

    def test_update_missing_reports_server_message(self, api):
        result, error = api.update_student("nope", "A", "B", "C")

        assert result is None
        assert error == {"status_code": 404, "message": "Student not found"}

    def test_delete(self, api):
        api.add_student("Alice", None, None)
        student_id = api.list_students()[0][0]["id"]

        assert api.delete_student(student_id) == (True, None)
        assert api.delete_student(student_id) == (False, {"status_code": 404, "message": "Student not found"})

    def test_connection_error_is_reported(self):
        session = mock.Mock()
        session.request.side_effect = requests.ConnectionError("refused")
        api = StudentRecordsAPI(base_url="http://localhost:5000", session=session)

        students, error = api.list_students()

        assert students == []
        assert error == {"status_code": None, "message": "refused"}

    @staticmethod
    def _error_response(status_code, content):
        response = requests.Response()
        response.status_code = status_code
        response._content = content
        response.url = "http://localhost:5000/students"
        return response

    @pytest.mark.parametrize(
        "content,message",
        [
            (b'{"detail": "Method Not Allowed"}', "Method Not Allowed"),
            (b'{"message": "Error fetching students"}', "Error fetching students"),
            (b'{"error": "boom"}', "{'error': 'boom'}"),
            (b'["boom"]', "['boom']"),
            (b"Internal Server Error", "Internal Server Error"),
        ],
    )
    def test_error_body_variants_are_reported(self, content, message):
        session = mock.Mock()
        session.request.return_value = self._error_response(500, content)
        api = StudentRecordsAPI(base_url="http://localhost:5000", session=session)

        students, error = api.list_students()

        assert students == []
        assert error == {"status_code": 500, "message": message}


class TestStudentListSnapshot:
    def test_snapshots_are_immutable(self):
        snapshot = StudentListSnapshot()

        with pytest.raises(AttributeError):
            snapshot.edit_id = "x"

    def test_begin_edit_loads_form(self):
        student = {"id": "i1", "name": "Alice", "email": None, "rollNo": "R1"}

        snapshot = StudentListSnapshot().begin_edit(student)

        assert snapshot.editing
        assert snapshot.edit_id == "i1"
        assert snapshot.form == StudentForm(name="Alice", email="", roll_no="R1")

    def test_clear_form_ends_edit(self):
        snapshot = StudentListSnapshot().with_form("A", "B", "C").begin_edit({"id": "i1"})

        cleared = snapshot.clear_form()

        assert not cleared.editing
        assert cleared.form == StudentForm()
        assert snapshot.editing

    def test_with_students_replaces_list(self):
        first = StudentListSnapshot().with_students([{"id": "1"}])
        second = first.with_students([{"id": "2"}])

        assert first.students == ({"id": "1"},)
        assert second.students == ({"id": "2"},)


class TestStudentRecordsController:
    def test_submit_creates_and_refreshes(self, controller):
        assert controller.submit("Alice", "a@x.com", "R1") is None

        assert [s["name"] for s in controller.snapshot.students] == ["Alice"]
        assert controller.snapshot.form == StudentForm()

    def test_edit_then_submit_updates(self, controller):
        controller.submit("Alice", "a@x.com", "R1")
        controller.edit(controller.snapshot.students[0])

        assert controller.submit("Alicia", "a@x.com", "R1") is None

        assert not controller.snapshot.editing
        assert [s["name"] for s in controller.snapshot.students] == ["Alicia"]

    def test_failed_update_keeps_edit(self, controller):
        controller.edit({"id": "gone", "name": "Ghost", "email": "", "rollNo": ""})

        assert controller.submit("Ghost", "", "") == "Error updating student"
        assert controller.snapshot.edit_id == "gone"
        assert controller.snapshot.form == StudentForm()

    def test_delete_refreshes(self, controller):
        controller.submit("Alice", "a@x.com", "R1")
        student_id = controller.snapshot.students[0]["id"]

        assert controller.delete(student_id) is None
        assert controller.snapshot.students == ()

    def test_delete_missing_reports_error(self, controller):
        assert controller.delete("gone") == "Error deleting student"

    def test_refresh_failure_keeps_previous_list(self, controller):
        controller.submit("Alice", None, None)
        before = controller.snapshot

        with mock.patch.object(
            controller.api, "list_students",
            return_value=([], {"status_code": 500, "message": "Error fetching students"}),
        ):
            assert controller.refresh() == "Error fetching students"

        assert controller.snapshot is before
