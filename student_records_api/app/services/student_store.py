"""
Record store for student records.

``StudentStore`` defines the four storage operations the API needs.
Two engines implement it:

* ``MongoStudentStore`` keeps one document per student in the
  ``students`` collection and uses the ``ObjectId`` as identifier;
* ``SQLiteStudentStore`` keeps one row per student in an embedded
  database and uses a random UUID as identifier.

Each operation is a single call against the engine.  No locking is
done here: concurrent writes to the same record are last-write-wins.
Every driver error is re-raised as ``StorageFault`` so the API layer
only has to know about this module's exceptions.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from student_records_api.app.core.db import (
    create_mongo_client,
    get_cursor,
    get_database_path,
    get_students_collection,
    init_db,
    is_mongo_url,
)
from student_records_api.app.schemas.student import StudentRead

logger = logging.getLogger(__name__)


class StudentRecordsError(Exception):
    """Base class for record store errors."""


class StudentNotFound(StudentRecordsError):
    """No record exists for the given identifier."""

    def __init__(self, student_id: str) -> None:
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class StorageFault(StudentRecordsError):
    """The storage engine failed to execute an operation."""


def as_text(value: Any) -> Optional[str]:
    """Cast a request value to the text stored for it.

    Strings and ``None`` pass through, booleans become ``"true"`` or
    ``"false"`` and numbers their decimal form.  Objects and arrays
    cannot be stored as text and raise ``StorageFault``.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise StorageFault(f"cannot store {type(value).__name__} value as text")


class StudentStore(ABC):
    """Key-addressed storage for student records.

    Field values may be any JSON value; engines store them through
    ``as_text``.
    """

    def init(self) -> None:
        """Prepare the engine for use.  Called once at application startup."""

    def close(self) -> None:
        """Release engine resources.  Called once at application shutdown."""

    @abstractmethod
    def insert(self, name: Any, email: Any, roll_no: Any) -> str:
        """Persist a new record and return its generated identifier."""

    @abstractmethod
    def find_all(self) -> List[StudentRead]:
        """Return every stored record in storage order."""

    @abstractmethod
    def replace(self, student_id: str, name: Any, email: Any, roll_no: Any) -> StudentRead:
        """Overwrite all three fields of a record and return the new version.

        Raises ``StudentNotFound`` if no record has ``student_id``.
        """

    @abstractmethod
    def delete(self, student_id: str) -> StudentRead:
        """Remove a record and return it.

        Raises ``StudentNotFound`` if no record has ``student_id``.
        """


class MongoStudentStore(StudentStore):
    """Student records stored as documents in a MongoDB collection."""

    def __init__(self, collection: Collection, client: Optional[MongoClient] = None) -> None:
        self.collection = collection
        self.client = client

    @classmethod
    def from_url(cls, database_url: str, db_name: str, timeout_ms: int = 5000) -> "MongoStudentStore":
        client = create_mongo_client(database_url, timeout_ms)
        return cls(get_students_collection(client, db_name), client=client)

    def init(self) -> None:
        if self.client is None:
            return
        try:
            self.client.admin.command("ping")
        except PyMongoError as exc:
            raise StorageFault("MongoDB is not reachable") from exc
        logger.info("MongoDB connected")

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")

    def insert(self, name: Any, email: Any, roll_no: Any) -> str:
        document = self._document(name, email, roll_no)
        try:
            result = self.collection.insert_one(document)
        except PyMongoError as exc:
            raise StorageFault("insert failed") from exc
        student_id = str(result.inserted_id)
        logger.info("Created student %s", student_id)
        return student_id

    def find_all(self) -> List[StudentRead]:
        try:
            return [self._to_student(doc) for doc in self.collection.find()]
        except PyMongoError as exc:
            raise StorageFault("find failed") from exc

    def replace(self, student_id: str, name: Any, email: Any, roll_no: Any) -> StudentRead:
        object_id = self._object_id(student_id)
        document = self._document(name, email, roll_no)
        try:
            doc = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": document},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StorageFault("update failed") from exc
        if doc is None:
            raise StudentNotFound(student_id)
        logger.info("Updated student %s", student_id)
        return self._to_student(doc)

    def delete(self, student_id: str) -> StudentRead:
        object_id = self._object_id(student_id)
        try:
            doc = self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as exc:
            raise StorageFault("delete failed") from exc
        if doc is None:
            raise StudentNotFound(student_id)
        logger.info("Deleted student %s", student_id)
        return self._to_student(doc)

    @staticmethod
    def _document(name: Any, email: Any, roll_no: Any) -> Dict[str, Optional[str]]:
        return {"name": as_text(name), "email": as_text(email), "rollNo": as_text(roll_no)}

    @staticmethod
    def _object_id(student_id: str) -> ObjectId:
        # A malformed id can never match a stored document.
        try:
            return ObjectId(student_id)
        except (InvalidId, TypeError) as exc:
            raise StudentNotFound(student_id) from exc

    @staticmethod
    def _to_student(doc: Dict[str, Any]) -> StudentRead:
        return StudentRead(
            id=str(doc["_id"]),
            name=doc.get("name"),
            email=doc.get("email"),
            roll_no=doc.get("rollNo"),
        )


class SQLiteStudentStore(StudentStore):
    """Student records stored in an embedded SQLite database.

    A new connection is opened for every call, so the store can be shared
    between the threads FastAPI runs synchronous handlers on.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def init(self) -> None:
        try:
            init_db(self.db_path)
        except sqlite3.Error as exc:
            raise StorageFault(f"cannot initialise {self.db_path}") from exc
        logger.info("SQLite database ready at %s", self.db_path)

    def insert(self, name: Any, email: Any, roll_no: Any) -> str:
        student_id = uuid.uuid4().hex
        values = (student_id, as_text(name), as_text(email), as_text(roll_no))
        try:
            with get_cursor(self.db_path) as cursor:
                cursor.execute(
                    "INSERT INTO students (id, name, email, roll_no) VALUES (?, ?, ?, ?)",
                    values,
                )
        except sqlite3.Error as exc:
            raise StorageFault("insert failed") from exc
        logger.info("Created student %s", student_id)
        return student_id

    def find_all(self) -> List[StudentRead]:
        try:
            with get_cursor(self.db_path) as cursor:
                rows = cursor.execute(
                    "SELECT id, name, email, roll_no FROM students ORDER BY seq"
                ).fetchall()
        except sqlite3.Error as exc:
            raise StorageFault("select failed") from exc
        return [self._row_to_student(row) for row in rows]

    def replace(self, student_id: str, name: Any, email: Any, roll_no: Any) -> StudentRead:
        name, email, roll_no = as_text(name), as_text(email), as_text(roll_no)
        try:
            with get_cursor(self.db_path) as cursor:
                cursor.execute(
                    "UPDATE students SET name = ?, email = ?, roll_no = ? WHERE id = ?",
                    (name, email, roll_no, student_id),
                )
                affected = cursor.rowcount
        except sqlite3.Error as exc:
            raise StorageFault("update failed") from exc
        if not affected:
            raise StudentNotFound(student_id)
        logger.info("Updated student %s", student_id)
        return StudentRead(id=student_id, name=name, email=email, roll_no=roll_no)

    def delete(self, student_id: str) -> StudentRead:
        # Only the DELETE that actually removed the row reports success, so
        # of two concurrent deletes of one id exactly one wins.
        try:
            with get_cursor(self.db_path) as cursor:
                row = cursor.execute(
                    "SELECT id, name, email, roll_no FROM students WHERE id = ?",
                    (student_id,),
                ).fetchone()
                affected = 0
                if row is not None:
                    cursor.execute("DELETE FROM students WHERE id = ?", (student_id,))
                    affected = cursor.rowcount
        except sqlite3.Error as exc:
            raise StorageFault("delete failed") from exc
        if not affected:
            raise StudentNotFound(student_id)
        logger.info("Deleted student %s", student_id)
        return self._row_to_student(row)

    @staticmethod
    def _row_to_student(row: sqlite3.Row) -> StudentRead:
        return StudentRead(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            roll_no=row["roll_no"],
        )


def create_student_store(
    database_url: str,
    mongo_db_name: str = "student_records",
    mongo_timeout_ms: int = 5000,
) -> StudentStore:
    """Select a storage engine from a single connection target."""
    if is_mongo_url(database_url):
        return MongoStudentStore.from_url(database_url, mongo_db_name, mongo_timeout_ms)
    return SQLiteStudentStore(get_database_path(database_url))
