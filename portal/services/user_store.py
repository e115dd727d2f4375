"""
User Store - CRUD operations for the users collection.

One document per identity (local or Google). Emails are normalized
(stripped, lower-cased) before every lookup and write, and a unique
index on email enforces one record per address.

save() is a full-document overwrite: two concurrent updates of the same
user race and the last write wins. There is no revision check.
"""

from datetime import datetime, timezone
from typing import Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from portal.core.errors import DuplicateIdentity, NotFound
from portal.db.mongodb import get_collection, COLLECTIONS
from portal.schemas.schemas import UserRecord


def normalize_email(email: str) -> str:
    """Emails are case-insensitive: stored and looked up lower-cased."""
    return email.strip().lower()


def to_record(doc: dict) -> Optional[UserRecord]:
    """Convert MongoDB document to a UserRecord."""
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    if doc.get("profile") is None:
        # Documents written before profiles were always present
        doc.pop("profile", None)
    return UserRecord(**doc)


def to_document(record: UserRecord) -> dict:
    """Convert a UserRecord to a MongoDB document (without _id)."""
    doc = record.model_dump(exclude={"id"})
    doc["email"] = normalize_email(record.email)
    return doc


class UserStore:
    """
    Handles identity record storage.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        doc = self.collection.find_one({"email": normalize_email(email)})
        return to_record(doc)

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Fetch a user by id. Malformed ids resolve to None."""
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        doc = self.collection.find_one({"_id": oid})
        return to_record(doc)

    def create(self, record: UserRecord) -> UserRecord:
        """
        Insert a new user.

        Raises:
            DuplicateIdentity: a user with this email already exists
        """
        now = datetime.now(timezone.utc)
        doc = to_document(record)
        doc["created_at"] = now
        doc["updated_at"] = now
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateIdentity() from exc
        return record.model_copy(update={
            "id": str(result.inserted_id),
            "email": doc["email"],
            "created_at": now,
            "updated_at": now,
        })

    def save(self, record: UserRecord) -> UserRecord:
        """
        Overwrite the stored document with this record (last writer wins).

        Raises:
            NotFound: the user no longer exists
            DuplicateIdentity: the new email belongs to another user
        """
        now = datetime.now(timezone.utc)
        oid = ObjectId(record.id)
        doc = to_document(record)
        doc["updated_at"] = now

        # The unique index still catches a concurrent writer taking the email
        if self.collection.find_one({"email": doc["email"], "_id": {"$ne": oid}}, {"_id": 1}):
            raise DuplicateIdentity("Email already in use")
        try:
            result = self.collection.replace_one({"_id": oid}, doc)
        except DuplicateKeyError as exc:
            raise DuplicateIdentity("Email already in use") from exc
        if result.matched_count == 0:
            raise NotFound()
        return record.model_copy(update={"email": doc["email"], "updated_at": now})
