"""
MongoDB student repository.

Each student is one document keyed by the student id; the placement state
(and its record, when placed) is embedded. Documents are stored in JSON
mode so dates round-trip as ISO strings.

Listing order is insertion order: every new document gets the next value
of a per-collection counter in `seq`, and updates never touch it.
"""

from typing import Iterable, List, Optional

from pymongo import ReturnDocument
from pymongo.collection import Collection

from app.db.mongodb import COLLECTIONS, get_collection
from app.repositories.base import StudentRepository
from app.schemas.schemas import Student


def to_document(student: Student) -> dict:
    doc = student.model_dump(mode="json")
    doc["_id"] = doc.pop("id")
    return doc


def from_document(doc: dict) -> Student:
    doc = dict(doc)
    doc.pop("seq", None)
    doc["id"] = str(doc.pop("_id"))
    return Student.model_validate(doc)


class MongoStudentRepository(StudentRepository):
    """Students collection, listed in insertion order."""

    def __init__(self, collection: Collection = None, counters: Collection = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["students"])
        self.counters: Collection = counters if counters is not None else get_collection(COLLECTIONS["counters"])

    def _reserve_seq(self, count: int) -> int:
        """Reserve `count` sequence numbers and return the first one."""
        counter = self.counters.find_one_and_update(
            {"_id": self.collection.name},
            {"$inc": {"value": count}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["value"] - count + 1

    def list_all(self) -> List[Student]:
        cursor = self.collection.find({}).sort("seq", 1)
        return [from_document(doc) for doc in cursor]

    def get(self, student_id: str) -> Optional[Student]:
        doc = self.collection.find_one({"_id": student_id})
        return from_document(doc) if doc else None

    def add(self, student: Student) -> Student:
        doc = to_document(student)
        doc["seq"] = self._reserve_seq(1)
        self.collection.insert_one(doc)
        return student

    def add_many(self, students: Iterable[Student]) -> int:
        docs = [to_document(s) for s in students]
        if not docs:
            return 0
        first = self._reserve_seq(len(docs))
        for offset, doc in enumerate(docs):
            doc["seq"] = first + offset
        result = self.collection.insert_many(docs, ordered=True)
        return len(result.inserted_ids)

    def save(self, student: Student) -> Student:
        doc = to_document(student)
        student_id = doc.pop("_id")
        result = self.collection.update_one({"_id": student_id}, {"$set": doc})
        if result.matched_count == 0:
            return self.add(student)
        return student

    def delete(self, student_id: str) -> bool:
        result = self.collection.delete_one({"_id": student_id})
        return result.deleted_count > 0
