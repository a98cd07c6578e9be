"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users              - Identities (name, email, password hash, role)
2. jobs               - Job postings, each owned by a recruiter
3. applications       - Student applications to jobs (unique per job+student)
4. student_profiles   - One per student user
5. recruiter_profiles - One per recruiter user

These classes only talk to MongoDB. Authorization and workflow rules live
in the domain services (auth_service, job_service, profile_service,
application_service).

Ids cross this layer as strings; references are stored as ObjectIds.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from jobportal.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPERS: ObjectId conversion and JSON serialization
# ============================================================

def to_object_id(value) -> ObjectId:
    """Convert a string id to ObjectId. Raises InvalidId/TypeError on garbage."""
    if isinstance(value, ObjectId):
        return value
    return ObjectId(value)


def parse_object_id(value) -> Optional[ObjectId]:
    """Like to_object_id, but returns None for values that are not valid ids."""
    try:
        return to_object_id(value)
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict (_id -> id, ObjectIds -> str)."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            doc[key] = str(value)
    return doc


def serialize_docs(docs: Iterable[dict]) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def _object_ids(ids: Iterable[str]) -> List[ObjectId]:
    return [oid for oid in (parse_object_id(i) for i in ids) if oid is not None]


# ============================================================
# USERS COLLECTION
# ============================================================

class UserCollection:
    """Identity records. email is unique (index)."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def insert(self, user: dict) -> dict:
        """Insert a user. DuplicateKeyError propagates on a taken email."""
        doc = dict(user, created_at=datetime.utcnow())
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def get_by_id(self, user_id: str) -> Optional[dict]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get_by_email(self, email: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"email": email}))

    def get_many(self, user_ids: Iterable[str], fields: Iterable[str] = ("name", "email")) -> List[dict]:
        """Batch fetch users by id, projecting only the given fields."""
        projection = {field: 1 for field in fields}
        cursor = self.collection.find({"_id": {"$in": _object_ids(user_ids)}}, projection)
        return serialize_docs(cursor)

    def email_taken_by_other(self, email: str, user_id: str) -> bool:
        """True if some other user already registered with this email."""
        doc = self.collection.find_one(
            {"email": email, "_id": {"$ne": to_object_id(user_id)}},
            {"_id": 1}
        )
        return doc is not None

    def update_contact(self, user_id: str, changes: Dict[str, str]) -> bool:
        """Set name/email on a user. DuplicateKeyError propagates on a taken email."""
        result = self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": changes}
        )
        return result.matched_count > 0


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobCollection:
    """Job postings. Append-only: no update or delete."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])

    def insert(self, recruiter_id: str, job: dict) -> dict:
        doc = dict(job, recruiter_id=to_object_id(recruiter_id), created_at=datetime.utcnow())
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def get_by_id(self, job_id: str) -> Optional[dict]:
        oid = parse_object_id(job_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get_many(self, job_ids: Iterable[str]) -> List[dict]:
        return serialize_docs(self.collection.find({"_id": {"$in": _object_ids(job_ids)}}))

    def list_all(self) -> List[dict]:
        """All jobs in insertion order."""
        return serialize_docs(self.collection.find().sort("_id", 1))

    def list_by_recruiter(self, recruiter_id: str) -> List[dict]:
        cursor = self.collection.find({"recruiter_id": to_object_id(recruiter_id)}).sort("_id", 1)
        return serialize_docs(cursor)


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

class ApplicationCollection:
    """
    Applications. (job_id, student_id) is unique (compound index), so
    insert() raises DuplicateKeyError for a second application to the same job.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])

    def insert(self, job_id: str, student_id: str, status: str, history_entry: dict) -> dict:
        now = history_entry["changed_at"]
        doc = {
            "job_id": to_object_id(job_id),
            "student_id": to_object_id(student_id),
            "status": status,
            "applied_at": now,
            "updated_at": now,
            "status_history": [history_entry]
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def find_for_pair(self, job_id: str, student_id: str) -> Optional[dict]:
        doc = self.collection.find_one({
            "job_id": to_object_id(job_id),
            "student_id": to_object_id(student_id)
        })
        return serialize_doc(doc)

    def get_by_id(self, application_id: str) -> Optional[dict]:
        oid = parse_object_id(application_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def list_by_student(self, student_id: str) -> List[dict]:
        cursor = self.collection.find({"student_id": to_object_id(student_id)}).sort("applied_at", -1)
        return serialize_docs(cursor)

    def list_by_job(self, job_id: str) -> List[dict]:
        cursor = self.collection.find({"job_id": to_object_id(job_id)}).sort("applied_at", 1)
        return serialize_docs(cursor)

    def set_status(self, application_id: str, status: str, history_entry: dict) -> Optional[dict]:
        """Set status and append to status_history. Returns the updated document."""
        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(application_id)},
            {
                "$set": {"status": status, "updated_at": history_entry["changed_at"]},
                "$push": {"status_history": history_entry}
            },
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)


# ============================================================
# STUDENT PROFILES COLLECTION
# ============================================================

class StudentProfileCollection:
    """Student profiles, keyed by user_id (unique)."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["student_profiles"])

    def get_by_user(self, user_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"user_id": to_object_id(user_id)}))

    def get_many_by_users(self, user_ids: Iterable[str]) -> List[dict]:
        cursor = self.collection.find({"user_id": {"$in": _object_ids(user_ids)}})
        return serialize_docs(cursor)

    def upsert(self, user_id: str, fields: Dict[str, Any], defaults: Dict[str, Any]) -> dict:
        """
        Atomic find-and-modify on user_id, creating the profile on first save.

        fields are always written; defaults only fill in the keys a new
        profile would otherwise be missing.
        """
        now = datetime.utcnow()
        on_insert = {k: v for k, v in defaults.items() if k not in fields}
        on_insert["created_at"] = now

        doc = self.collection.find_one_and_update(
            {"user_id": to_object_id(user_id)},
            {
                "$set": dict(fields, updated_at=now),
                "$setOnInsert": on_insert
            },
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)


# ============================================================
# RECRUITER PROFILES COLLECTION
# ============================================================

class RecruiterProfileCollection:
    """Recruiter profiles, keyed by user_id (unique). Soft-deleted via is_active."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["recruiter_profiles"])

    def get_by_user(self, user_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"user_id": to_object_id(user_id)}))

    def insert(self, user_id: str, profile: dict) -> dict:
        """Insert a profile. DuplicateKeyError propagates if the user already has one."""
        now = datetime.utcnow()
        doc = dict(profile, user_id=to_object_id(user_id), created_at=now, updated_at=now)
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def save(self, profile_id: str, changes: Dict[str, Any]) -> Optional[dict]:
        """Apply changes to an existing profile and return the saved document."""
        doc = self.collection.find_one_and_update(
            {"_id": to_object_id(profile_id)},
            {"$set": dict(changes, updated_at=datetime.utcnow())},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)

    def delete(self, profile_id: str) -> bool:
        """Hard delete. Only used to undo a create whose identity sync failed."""
        result = self.collection.delete_one({"_id": to_object_id(profile_id)})
        return result.deleted_count > 0
